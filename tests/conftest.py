"""Shared fixtures for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Language, Parser
from tree_sitter_language_pack import get_language, get_parser

from rust_diagnostics.models import DiagnosticSpan

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def queries_dir() -> Path:
    """Return the path to the queries directory."""
    return _REPO_ROOT / "src" / "rust_diagnostics" / "queries"


@pytest.fixture
def rust_parser() -> Parser:
    """Return a tree-sitter parser for Rust."""
    return get_parser("rust")


@pytest.fixture
def rust_language() -> Language:
    """Return the tree-sitter Rust language."""
    return get_language("rust")


@pytest.fixture
def make_span() -> Callable[..., DiagnosticSpan]:
    def _make(
        start: int,
        end: int,
        rule_id: str = "clippy::unwrap_used",
        start_line: int = 1,
        end_line: int | None = None,
        **kwargs: object,
    ) -> DiagnosticSpan:
        return DiagnosticSpan(
            rule_id=rule_id,
            start_byte=start,
            end_byte=end,
            start_line=start_line,
            end_line=start_line if end_line is None else end_line,
            **kwargs,
        )

    return _make
