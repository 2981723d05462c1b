#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the option dataclasses."""

from dataclasses import FrozenInstanceError

import pytest

from framecode.options import EditorOptions, EmitterOptions, ImporterOptions


@pytest.mark.unit
class TestEmitterOptions:
    """Test EmitterOptions."""

    def test_defaults(self) -> None:
        """Test the default indentation and delimiter."""
        options = EmitterOptions()
        assert options.indent == "    "
        assert options.disabled_block_delimiter == '"""'

    @pytest.mark.parametrize("indent", ["", "ab", " x"])
    def test_invalid_indent(self, indent: str) -> None:
        """Test indentation that is not whitespace."""
        with pytest.raises(ValueError, match="indent"):
            EmitterOptions(indent=indent)

    def test_invalid_delimiter(self) -> None:
        """Test a delimiter that is not a triple quote."""
        with pytest.raises(ValueError, match="disabled_block_delimiter"):
            EmitterOptions(disabled_block_delimiter="#")

    def test_frozen(self) -> None:
        """Test that options cannot be changed in place."""
        with pytest.raises(FrozenInstanceError):
            EmitterOptions().indent = "\t"


@pytest.mark.unit
class TestImporterOptions:
    """Test ImporterOptions."""

    def test_defaults(self) -> None:
        """Test the scratch id range and unsupported policy."""
        options = ImporterOptions()
        assert options.first_scratch_id == 1_000_000
        assert options.unsupported_constructs == "comment"

    def test_invalid_values(self) -> None:
        """Test out-of-range values."""
        with pytest.raises(ValueError):
            ImporterOptions(first_scratch_id=0)
        with pytest.raises(ValueError):
            ImporterOptions(unsupported_constructs="ignore")


@pytest.mark.unit
class TestEditorOptions:
    """Test EditorOptions and the shared mixin."""

    def test_nested_defaults(self) -> None:
        """Test that nested options get their own defaults."""
        options = EditorOptions()
        assert options.large_deletion_threshold == 3
        assert options.emitter == EmitterOptions()
        assert options.importer == ImporterOptions()

    def test_invalid_threshold(self) -> None:
        """Test a threshold below one."""
        with pytest.raises(ValueError):
            EditorOptions(large_deletion_threshold=0)

    def test_create_updated(self) -> None:
        """Test deriving a modified copy."""
        options = EditorOptions()
        updated = options.create_updated(large_deletion_threshold=5)
        assert updated.large_deletion_threshold == 5
        assert options.large_deletion_threshold == 3
        assert updated.emitter is options.emitter

    def test_create_updated_validates(self) -> None:
        """Test that derived copies are validated too."""
        with pytest.raises(ValueError):
            EmitterOptions().create_updated(indent="")

    def test_describe_fields(self) -> None:
        """Test the help text of every field."""
        descriptions = ImporterOptions.describe_fields()
        assert set(descriptions) == {"first_scratch_id", "unsupported_constructs"}
        assert all(descriptions.values())
