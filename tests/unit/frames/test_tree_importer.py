#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for building frames from parsed syntax trees."""

import logging

import pytest
from syntax_trees import (
    assign,
    call,
    comparison,
    funcdef,
    if_stmt,
    import_name,
    name,
    node,
    number,
    op,
    program,
    return_stmt,
    simple,
    string,
    suite,
    tok,
)

from framecode.constants import MAIN_CONTAINER_ID
from framecode.events import EditorEvent
from framecode.exceptions import (
    MalformedSyntaxNodeError,
    TreeImportError,
    UnknownOperatorError,
    UnsupportedConstructError,
)
from framecode.frames import (
    CaretPosition,
    Cursor,
    FrameTreeStore,
    FrameType,
    SyntaxNode,
    TreeImporter,
    emit_program,
    render_slot,
)
from framecode.options import ImporterOptions


def _expression(expr: SyntaxNode) -> str:
    """Reduce an expression node and render it."""
    return render_slot(TreeImporter().to_slots(expr))


def _subscript(subscript: SyntaxNode) -> SyntaxNode:
    """Return ``x[...]`` around a subscript node."""
    return node("power", name("x"), node("trailer", op("["), subscript, op("]")))


def _build_kinds(tree: SyntaxNode, importer: TreeImporter | None = None) -> list[FrameType]:
    batch = (importer or TreeImporter()).build(tree)
    return [batch.frames[top_id].kind for top_id in batch.top_level_ids]


@pytest.mark.unit
class TestSyntaxNode:
    """Test the generic syntax tree node."""

    def test_is_token(self) -> None:
        """Test the token/production distinction."""
        assert name("x").is_token
        assert not node("expr_stmt").is_token

    def test_dict_round_trip(self, example_tree: SyntaxNode) -> None:
        """Test conversion to and from plain data."""
        assert SyntaxNode.from_dict(example_tree.to_dict()) == example_tree

    def test_to_dict_omits_empty_fields(self) -> None:
        """Test the compact data form."""
        assert name("x").to_dict() == {"kind": "NAME", "value": "x"}
        assert node("suite").to_dict() == {"kind": "suite"}

    def test_from_dict_requires_kind(self) -> None:
        """Test that a node without kind is malformed."""
        with pytest.raises(MalformedSyntaxNodeError):
            SyntaxNode.from_dict({"value": "x"})
        with pytest.raises(MalformedSyntaxNodeError):
            SyntaxNode.from_dict({"kind": "file_input", "children": [{"children": []}]})

    def test_tokens_skip_layout(self) -> None:
        """Test the token text of a subtree."""
        tree = if_stmt(name("c"), suite(simple(node("break_stmt", name("break")))))
        assert tree.tokens() == ["if", "c", ":", "break"]


@pytest.mark.unit
class TestSlotReduction:
    """Test reducing expression nodes to slot content."""

    def test_leaf_and_unwrap(self) -> None:
        """Test single tokens and single-child wrappers."""
        assert _expression(name("x")) == "x"
        assert _expression(node("atom", node("power", number("42")))) == "42"

    def test_binary_operation(self) -> None:
        """Test an operand/operator sequence."""
        assert _expression(comparison("x", ">", "0")) == "x > 0"
        arith = node("arith_expr", name("a"), op("+"), name("b"), op("-"), number("1"))
        assert _expression(arith) == "a + b - 1"

    def test_prefix_operations(self) -> None:
        """Test unary minus and not."""
        assert _expression(node("factor", op("-"), number("1"))) == "-1"
        assert _expression(node("not_test", name("not"), name("done"))) == "not done"

    def test_two_word_comparison(self) -> None:
        """Test ``not in`` given as a comp_op node."""
        expr = node("comparison", name("a"), node("comp_op", name("not"), name("in")), name("b"))
        assert _expression(expr) == "a not in b"

    def test_strings(self) -> None:
        """Test that quoted strings keep their delimiter separately."""
        content = TreeImporter().to_slots(string("'hi'"))
        assert content.fields[0].code == "hi"
        assert content.fields[0].quote == "'"
        assert _expression(string('"hi"')) == '"hi"'
        assert TreeImporter().to_slots(string('"""doc"""')).fields[0].quote == ""

    def test_call_and_attribute(self) -> None:
        """Test call and attribute trailers."""
        assert _expression(call("print", name("x"))) == "print(x)"
        assert _expression(call("f", name("a"), number("2"))) == "f(a, 2)"
        assert _expression(call("g")) == "g()"
        attribute = node("power", name("math"), node("trailer", op("."), name("pi")))
        assert _expression(attribute) == "math.pi"
        method = node("power", name("obj"), node("trailer", op("."), name("run")), node("trailer", op("("), op(")")))
        assert _expression(method) == "obj.run()"

    def test_brackets(self) -> None:
        """Test list, dict and parenthesised atoms."""
        items = node("atom", op("["), node("testlist_comp", number("1"), op(","), number("2")), op("]"))
        assert _expression(items) == "[1, 2]"
        assert _expression(node("atom", op("{"), op("}"))) == "{}"
        grouped = node("atom", op("("), node("arith_expr", name("a"), op("+"), name("b")), op(")"))
        assert _expression(grouped) == "(a + b)"

    def test_trailing_comma(self) -> None:
        """Test a tuple with a trailing comma."""
        assert _expression(node("testlist", number("1"), op(","))) == "1, "

    def test_open_ended_slices(self) -> None:
        """Test slices without a start or an end."""
        open_end = _subscript(node("subscript", number("1"), op(":")))
        assert _expression(open_end) == "x[1: ]"
        open_start = _subscript(node("subscript", op(":"), number("2")))
        assert _expression(open_start) == "x[: 2]"
        step_only = _subscript(node("subscript", op(":"), node("sliceop", op(":"), number("2"))))
        assert _expression(step_only) == "x[: : 2]"
        start_and_step = _subscript(node("subscript", number("1"), op(":"), node("sliceop", op(":"), number("2"))))
        assert _expression(start_and_step) == "x[1: : 2]"

    def test_unknown_operator(self) -> None:
        """Test that operators outside the vocabulary are rejected."""
        with pytest.raises(UnknownOperatorError) as exc_info:
            TreeImporter().to_slots(node("arith_expr", name("a"), op("$"), name("b")))
        assert exc_info.value.operator == "$"
        assert exc_info.value.node_kind == "arith_expr"

    def test_missing_operand(self) -> None:
        """Test an operator at the end of an expression."""
        with pytest.raises(MalformedSyntaxNodeError):
            TreeImporter().to_slots(node("arith_expr", name("a"), op("+")))

    def test_leaf_without_value(self) -> None:
        """Test a token node carrying no text."""
        with pytest.raises(MalformedSyntaxNodeError):
            TreeImporter().to_slots(SyntaxNode("NAME"))


@pytest.mark.unit
class TestStatements:
    """Test the statement handlers."""

    def test_example_program(self, example_tree: SyntaxNode) -> None:
        """Test the reference program's batch."""
        batch = TreeImporter().build(example_tree)
        assert len(batch.frames) == 3
        assign_frame, if_frame = (batch.frames[top_id] for top_id in batch.top_level_ids)
        assert assign_frame.kind is FrameType.VARASSIGN
        assert assign_frame.slot_code(0) == "x"
        assert assign_frame.slot_code(1) == "1"
        assert if_frame.kind is FrameType.IF
        assert if_frame.slot_code(0) == "x > 0"
        (return_id,) = if_frame.children_ids
        assert batch.frames[return_id].kind is FrameType.RETURN
        assert batch.frames[return_id].parent_id == if_frame.id
        assert min(batch.frames) == ImporterOptions().first_scratch_id

    def test_expression_and_augmented_assignment(self) -> None:
        """Test statements without a plain ``=``."""
        tree = program(
            simple(node("expr_stmt", call("print", name("x")))),
            simple(node("expr_stmt", name("x"), op("+="), number("1"))),
        )
        batch = TreeImporter().build(tree)
        frames = [batch.frames[top_id] for top_id in batch.top_level_ids]
        assert [f.kind for f in frames] == [FrameType.EXPRESSION, FrameType.EXPRESSION]
        assert frames[0].slot_code(0) == "print(x)"
        assert frames[1].slot_code(0) == "x += 1"

    def test_simple_statements(self) -> None:
        """Test the flow and scope statements."""
        tree = program(
            simple(node("pass_stmt", name("pass"))),
            simple(node("break_stmt", name("break"))),
            simple(node("continue_stmt", name("continue"))),
            simple(node("raise_stmt", name("raise"), call("ValueError"))),
            simple(node("global_stmt", name("global"), name("counter"))),
            return_stmt(),
        )
        batch = TreeImporter().build(tree)
        frames = [batch.frames[top_id] for top_id in batch.top_level_ids]
        assert [f.kind for f in frames] == [
            FrameType.BREAK,
            FrameType.CONTINUE,
            FrameType.RAISE,
            FrameType.GLOBAL,
            FrameType.RETURN,
        ]
        assert frames[2].slot_code(0) == "ValueError()"
        assert frames[3].slot_code(0) == "counter"
        assert frames[4].slot_code(0) == ""

    def test_raise_from(self) -> None:
        """Test that a chained raise keeps its cause in the slot."""
        tree = program(simple(node("raise_stmt", name("raise"), call("ValueError"), name("from"), name("e"))))
        batch = TreeImporter().build(tree)
        (frame,) = (batch.frames[top_id] for top_id in batch.top_level_ids)
        assert frame.kind is FrameType.RAISE
        assert frame.slot_code(0) == "ValueError() from e"

    def test_imports(self) -> None:
        """Test plain and relative from-imports."""
        dotted = node("dotted_name", name("a"), op("."), name("b"))
        from_import = node(
            "import_from",
            name("from"),
            op("."),
            node("dotted_name", name("pkg"), op("."), name("mod")),
            name("import"),
            node("import_as_names", name("x"), op(","), name("y")),
        )
        tree = program(simple(node("import_stmt", node("import_name", name("import"), dotted))), simple(from_import))
        batch = TreeImporter().build(tree)
        plain, relative = (batch.frames[top_id] for top_id in batch.top_level_ids)
        assert plain.kind is FrameType.IMPORT
        assert plain.slot_code(0) == "a.b"
        assert relative.kind is FrameType.FROM_IMPORT
        assert relative.slot_code(0) == ".pkg.mod"
        assert relative.slot_code(1) == "x, y"

    def test_from_import_without_keyword(self) -> None:
        """Test a malformed from-import."""
        with pytest.raises(MalformedSyntaxNodeError):
            TreeImporter().build(program(simple(node("import_from", name("from"), name("a")))))

    def test_if_elif_else(self) -> None:
        """Test that elif and else become joint continuations."""
        tree = program(
            if_stmt(
                name("a"),
                suite(simple(node("break_stmt", name("break")))),
                elifs=((name("b"), suite(simple(node("continue_stmt", name("continue"))))),),
                else_body=suite(return_stmt()),
            )
        )
        batch = TreeImporter().build(tree)
        (head_id,) = batch.top_level_ids
        head = batch.frames[head_id]
        elif_frame, else_frame = (batch.frames[joint_id] for joint_id in head.joint_frame_ids)
        assert elif_frame.kind is FrameType.ELIF
        assert elif_frame.slot_code(0) == "b"
        assert elif_frame.joint_parent_id == head_id
        assert elif_frame.parent_id == 0
        assert else_frame.kind is FrameType.ELSE
        assert batch.frames[else_frame.children_ids[0]].kind is FrameType.RETURN

    def test_for_else(self) -> None:
        """Test a for loop with an else continuation."""
        tree = program(
            node(
                "for_stmt",
                name("for"),
                name("i"),
                name("in"),
                call("range", number("3")),
                op(":"),
                suite(simple(node("break_stmt", name("break")))),
                name("else"),
                op(":"),
                suite(simple(node("pass_stmt", name("pass")))),
            )
        )
        store = FrameTreeStore.create_default()
        assert TreeImporter().import_tree(tree, store)
        assert emit_program(store).text == "for i in range(3) :\n    break\nelse :\n"

    def test_while_else_is_unsupported(self) -> None:
        """Test that a while/else is kept as a comment."""
        tree = program(
            node(
                "while_stmt",
                name("while"),
                name("c"),
                op(":"),
                suite(simple(node("break_stmt", name("break")))),
                name("else"),
                op(":"),
                suite(simple(node("pass_stmt", name("pass")))),
            )
        )
        batch = TreeImporter().build(tree)
        (comment_id,) = batch.top_level_ids
        assert batch.frames[comment_id].kind is FrameType.COMMENT
        assert batch.frames[comment_id].slot_code(0) == "while c : break else : pass"
        assert batch.unsupported_kinds == ["while_stmt"]

    def test_try_group(self) -> None:
        """Test try with typed and bare except clauses, else and finally."""
        body = suite(simple(node("pass_stmt", name("pass"))))
        tree = program(
            node(
                "try_stmt",
                name("try"),
                op(":"),
                suite(simple(node("expr_stmt", call("risky")))),
                node("except_clause", name("except"), name("ValueError")),
                op(":"),
                body,
                name("except"),
                op(":"),
                body,
                name("else"),
                op(":"),
                body,
                name("finally"),
                op(":"),
                body,
            )
        )
        batch = TreeImporter().build(tree)
        head = batch.frames[batch.top_level_ids[0]]
        joints = [batch.frames[joint_id] for joint_id in head.joint_frame_ids]
        assert [j.kind for j in joints] == [FrameType.EXCEPT, FrameType.EXCEPT, FrameType.ELSE, FrameType.FINALLY]
        assert joints[0].slot_code(0) == "ValueError"
        assert joints[1].slot_code(0) == ""
        assert len(head.children_ids) == 1

    def test_with(self) -> None:
        """Test with statements with and without a target."""
        with_as = node(
            "with_stmt",
            name("with"),
            node("with_item", call("open", name("f")), name("as"), name("fh")),
            op(":"),
            suite(simple(node("pass_stmt", name("pass")))),
        )
        with_plain = node("with_stmt", name("with"), name("lock"), op(":"), suite(simple(node("pass_stmt", name("pass")))))
        store = FrameTreeStore.create_default()
        assert TreeImporter().import_tree(program(with_as, with_plain), store)
        assert emit_program(store).text == "with open(f) as fh :\nwith lock :\n"

    def test_with_several_items_is_unsupported(self) -> None:
        """Test that multi-item with statements are kept as comments."""
        tree = program(
            node("with_stmt", name("with"), name("a"), op(","), name("b"), op(":"), suite(return_stmt()))
        )
        assert _build_kinds(tree) == [FrameType.COMMENT]

    def test_funcdef(self) -> None:
        """Test a function definition with parameters."""
        params = [node("typedargslist", name("a"), op(","), name("b"))]
        tree = program(funcdef("add", params, suite(return_stmt(node("arith_expr", name("a"), op("+"), name("b"))))))
        batch = TreeImporter().build(tree)
        frame = batch.frames[batch.top_level_ids[0]]
        assert frame.kind is FrameType.FUNCDEF
        assert frame.slot_code(0) == "add"
        assert frame.slot_code(1) == "a, b"
        assert batch.frames[frame.children_ids[0]].slot_code(0) == "a + b"

    def test_funcdef_without_parameters(self) -> None:
        """Test empty parentheses."""
        batch = TreeImporter().build(program(funcdef("main", [], suite(return_stmt()))))
        assert batch.frames[batch.top_level_ids[0]].slot_code(1) == ""

    def test_funcdef_with_annotation_is_unsupported(self) -> None:
        """Test that a return annotation has no frame equivalent."""
        tree = program(
            node(
                "funcdef",
                name("def"),
                name("f"),
                node("parameters", op("("), op(")")),
                op("->"),
                name("int"),
                op(":"),
                suite(return_stmt()),
            )
        )
        assert _build_kinds(tree) == [FrameType.COMMENT]

    def test_forbidden_nesting_aborts(self) -> None:
        """Test that a function definition inside a block fails the build."""
        tree = program(if_stmt(name("c"), suite(funcdef("inner", [], suite(return_stmt())))))
        with pytest.raises(TreeImportError):
            TreeImporter().build(tree)

    def test_nesting_checked_inside_joint_frames(self) -> None:
        """Test that a continuation body rejects import frames."""
        tree = program(if_stmt(name("c"), suite(return_stmt()), else_body=suite(import_name("os"))))
        with pytest.raises(TreeImportError):
            TreeImporter().build(tree)


@pytest.mark.unit
class TestUnsupportedPolicy:
    """Test the handling of statements without a frame equivalent."""

    @staticmethod
    def _class_tree() -> SyntaxNode:
        return program(
            node("classdef", name("class"), name("A"), op(":"), suite(simple(node("pass_stmt", name("pass"))))),
            assign("y", number("2")),
        )

    def test_comment_policy(self) -> None:
        """Test the default: keep the text in a comment and report it."""
        events: list[EditorEvent] = []
        store = FrameTreeStore.create_default()
        assert TreeImporter(event_callback=events.append).import_tree(self._class_tree(), store)
        assert emit_program(store).text == "# class A : pass \ny = 2 \n"
        assert [e.event_type for e in events] == ["unsupported_construct"]
        assert events[0].metadata == {"node_kind": "classdef"}
        assert events[0].message_key == "messageBannerMessage.unsupportedConstruct"

    def test_skip_policy(self) -> None:
        """Test dropping unsupported statements."""
        importer = TreeImporter(ImporterOptions(unsupported_constructs="skip"))
        assert _build_kinds(self._class_tree(), importer) == [FrameType.VARASSIGN]

    def test_error_policy(self) -> None:
        """Test aborting on unsupported statements."""
        importer = TreeImporter(ImporterOptions(unsupported_constructs="error"))
        with pytest.raises(UnsupportedConstructError) as exc_info:
            importer.build(self._class_tree())
        assert exc_info.value.node_kind == "classdef"


@pytest.mark.unit
class TestImportTree:
    """Test committing imported frames into a live tree."""

    def test_into_empty_program(self, empty_store: FrameTreeStore, example_tree: SyntaxNode) -> None:
        """Test the reference program end to end."""
        assert TreeImporter().import_tree(example_tree, empty_store)
        assert emit_program(empty_store).text == "x = 1 \nif x > 0 :\n    return x \n"
        assert empty_store.get_frame(MAIN_CONTAINER_ID).children_ids == [1, 2]
        assert empty_store.get_frame(2).children_ids == [3]
        assert empty_store.cursor == Cursor(2, CaretPosition.BELOW)
        assert empty_store.check_invariants() == []

    def test_below_existing_frame(self, example_store: FrameTreeStore) -> None:
        """Test pasting after the cursor frame."""
        example_store.set_cursor(Cursor(1, CaretPosition.BELOW))
        assert TreeImporter().import_tree(program(assign("y", number("2"))), example_store)
        assert example_store.get_frame(MAIN_CONTAINER_ID).children_ids == [1, 4, 2]
        assert example_store.cursor == Cursor(4, CaretPosition.BELOW)

    def test_into_block_body(self, example_store: FrameTreeStore) -> None:
        """Test pasting at the top of a body."""
        example_store.set_cursor(Cursor(2, CaretPosition.BODY))
        assert TreeImporter().import_tree(program(assign("y", number("2"))), example_store)
        assert example_store.get_frame(2).children_ids == [4, 3]
        assert example_store.get_frame(4).parent_id == 2

    def test_slice_assignment(self, empty_store: FrameTreeStore) -> None:
        """Test pasting a statement that takes an open-ended slice."""
        tree = program(assign("y", _subscript(node("subscript", number("1"), op(":")))))
        assert TreeImporter().import_tree(tree, empty_store)
        assert emit_program(empty_store).text == "y = x[1: ] \n"
        assert empty_store.check_invariants() == []

    def test_empty_tree(self, example_store: FrameTreeStore) -> None:
        """Test that a tree without statements imports nothing and succeeds."""
        cursor = example_store.cursor
        assert TreeImporter().import_tree(program(), example_store)
        assert len(example_store) == 7
        assert example_store.cursor == cursor

    def test_failure_leaves_tree_untouched(self, example_store: FrameTreeStore, caplog) -> None:
        """Test that a failing import changes nothing and reports once."""
        events: list[EditorEvent] = []
        before = emit_program(example_store)
        tree = program(
            assign("y", number("2")),
            simple(node("expr_stmt", name("z"), op("="), node("arith_expr", name("a"), op("$"), name("b")))),
        )

        with caplog.at_level(logging.ERROR, logger="framecode.frames.importer"):
            assert not TreeImporter(event_callback=events.append).import_tree(tree, example_store)

        assert emit_program(example_store) == before
        assert len(example_store) == 7
        assert example_store.next_id == 4
        assert [e.event_type for e in events] == ["import_failed"]
        assert events[0].metadata["node_kind"] == "arith_expr"
        assert "Unknown operator" in events[0].metadata["error"]
        assert any(record.levelno == logging.ERROR for record in caplog.records)

    def test_forbidden_top_level_frame(self, example_store: FrameTreeStore) -> None:
        """Test that an import statement cannot be pasted into the main code."""
        events: list[EditorEvent] = []
        assert not TreeImporter(event_callback=events.append).import_tree(program(import_name("os")), example_store)
        assert len(example_store) == 7
        assert events[0].event_type == "import_failed"

    def test_unexpected_error_is_wrapped(self, example_store: FrameTreeStore) -> None:
        """Test that a non-library error still yields a clean failure."""
        events: list[EditorEvent] = []
        broken = program(node("if_stmt", name("if"), name("c")))
        assert not TreeImporter(event_callback=events.append).import_tree(broken, example_store)
        assert events[0].metadata["error"].startswith("Unexpected error during import")

    def test_subset(self) -> None:
        """Test extracting part of a batch."""
        tree = program(
            import_name("os"),
            if_stmt(name("c"), suite(return_stmt())),
        )
        batch = TreeImporter().build(tree)
        import_id, if_id = batch.top_level_ids
        part = batch.subset([if_id])
        assert part.top_level_ids == [if_id]
        assert set(part.frames) == {if_id, *batch.frames[if_id].children_ids}
        assert import_id not in part.frames

    def test_layout_tokens_ignored(self) -> None:
        """Test that stray layout tokens produce no frames."""
        tree = program(tok("NEWLINE", "\n"), assign("a", number("1")))
        assert _build_kinds(tree) == [FrameType.VARASSIGN]
