import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from rust_diagnostics.core.align import align
from rust_diagnostics.core.items import extract_items
from rust_diagnostics.core.markup import marker_insertions, markup, markup_rules, source_offset
from rust_diagnostics.core.reconcile import Reconciliation, reconcile
from rust_diagnostics.models import DiagnosticSpan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformPair:
    offset: int
    before: bytes
    after: bytes


@dataclass
class FileTransform:
    path: str
    rule_id: str
    reconciliation: Reconciliation
    pairs: list[TransformPair] = field(default_factory=list)

    @property
    def lint_name(self) -> str:
        return self.rule_id.rsplit("::", 1)[-1]

    def pair_paths(self, pair: TransformPair) -> tuple[PurePosixPath, PurePosixPath]:
        """Relative output names ``<lint>/<dir>/<stem>/<offset>.2.rs`` and ``.3.rs`` for *pair*."""
        source = PurePosixPath(self.path)
        parent = PurePosixPath(*source.parent.parts[1:]) if source.is_absolute() else source.parent
        base = PurePosixPath(self.lint_name) / parent / source.stem
        suffix = source.suffix or ".rs"
        return base / f"{pair.offset}.2{suffix}", base / f"{pair.offset}.3{suffix}"


def transform_file(
    path: str,
    rule_id: str,
    original: bytes,
    fixed: bytes,
    warnings: Sequence[DiagnosticSpan],
    new_warnings: Sequence[DiagnosticSpan],
) -> FileTransform:
    """Pair the changed top-level items of *original* and *fixed*.

    Both texts are marked up first: the original with every warning of the
    rule, the fixed text with the warnings still reported after the fix.
    Each half of a pair is prefixed with the labels of the fixed warnings
    lying within the original item, measured in offsets of *original*.
    """
    result = FileTransform(path=path, rule_id=rule_id, reconciliation=reconcile(warnings, new_warnings))
    insertions = marker_insertions(original, warnings)
    original_items = extract_items(markup(original, warnings))
    fixed_items = extract_items(markup(fixed, result.reconciliation.remaining))
    for pair in align(original_items, fixed_items):
        start = source_offset(insertions, pair.offset)
        end = source_offset(insertions, pair.offset + len(pair.before))
        rules = markup_rules(start, end, result.reconciliation.fixed)
        result.pairs.append(TransformPair(pair.offset, rules + pair.before, rules + pair.after))
    logger.debug("%s: %d changed item(s) for %s", path, len(result.pairs), rule_id)
    return result
