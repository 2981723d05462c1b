"""Pytest configuration and shared fixtures for the framecode test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging

import pytest
from syntax_trees import example_program_tree

from framecode.frames import CaretPosition, Cursor, FrameTreeStore, FrameType

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    # Register custom Hypothesis profiles
    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    import os

    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "property: Property-based tests driven by hypothesis")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo any ``configure_logging`` call so caplog sees framecode records."""
    yield
    package_logger = logging.getLogger("framecode")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def empty_store() -> FrameTreeStore:
    """Provide an empty program: the root and its three containers.

    Returns
    -------
    FrameTreeStore
        Fresh tree with the cursor in the main container's body.

    """
    return FrameTreeStore.create_default()


@pytest.fixture
def example_store() -> FrameTreeStore:
    """Provide the tree for ``x = 1`` followed by ``if x > 0 : return x``.

    Frame ids are 1 (varassign), 2 (if) and 3 (return); the cursor is left
    below the ``if`` frame.

    Returns
    -------
    FrameTreeStore
        Tree holding the example program.

    """
    store = FrameTreeStore.create_default()
    assign_id = store.insert(FrameType.VARASSIGN)
    store.set_slot_code(assign_id, 0, "x")
    store.set_slot_code(assign_id, 1, "1")
    if_id = store.insert(FrameType.IF)
    store.set_slot_code(if_id, 0, "x > 0")
    return_id = store.insert(FrameType.RETURN)
    store.set_slot_code(return_id, 0, "x")
    store.cursor = Cursor(if_id, CaretPosition.BELOW)
    return store


@pytest.fixture
def example_tree():
    """Provide the parsed syntax tree of the example program."""
    return example_program_tree()
