import logging
from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import cast

from tree_sitter import Query, QueryCursor, QueryError
from tree_sitter_language_pack import SupportedLanguage, get_language, get_parser

logger = logging.getLogger(__name__)

ITEM_CAPTURE = "item"

_LANGUAGE_ALIASES = {"rs": "rust", "rust": "rust"}


@dataclass(frozen=True)
class SourceItem:
    """A top-level syntactic unit: a view onto ``document[start_byte:end_byte]``."""

    document: bytes
    start_byte: int
    end_byte: int

    @property
    def content(self) -> memoryview:
        return memoryview(self.document)[self.start_byte : self.end_byte]

    def __len__(self) -> int:
        return self.end_byte - self.start_byte


ItemMap = dict[int, SourceItem]


def normalize_language(language: str) -> str:
    normalized = language.strip().lower()
    if normalized not in _LANGUAGE_ALIASES:
        raise ValueError(f"Unsupported language '{language}'. Supported: {sorted(set(_LANGUAGE_ALIASES.values()))}")
    return _LANGUAGE_ALIASES[normalized]


def _query_path(language: str) -> Path:
    return Path(__file__).parent.parent / "queries" / f"{language}_items.scm"


@cache
def load_item_query(language: str) -> Query:
    query_path = _query_path(language)
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language(cast(SupportedLanguage, language)), query_text)


def extract_items(document: bytes, language: str = "rust") -> ItemMap:
    """Map the start offset of every top-level item of *document* to its :class:`SourceItem`.

    A document that is not UTF-8, or a query that cannot be loaded, gives an
    empty mapping. Two captures at the same offset keep the later one.
    """
    try:
        document.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("Document is not valid UTF-8, no items extracted")
        return {}

    resolved = normalize_language(language)
    try:
        query = load_item_query(resolved)
    except (FileNotFoundError, QueryError) as exc:
        logger.warning("Item query for %s unavailable: %s", resolved, exc)
        return {}

    tree = get_parser(cast(SupportedLanguage, resolved)).parse(document)
    items: ItemMap = {}
    for _, captures in QueryCursor(query).matches(tree.root_node):
        for name, nodes in captures.items():
            if name != ITEM_CAPTURE:
                continue
            for node in nodes:
                items[node.start_byte] = SourceItem(document, node.start_byte, node.end_byte)
    return items
