import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from rust_diagnostics.core.patch import (
    HunksByFile,
    confirm,
    parse_unified_diff,
    render_patch_report,
    resolved_spans,
    touched,
)
from rust_diagnostics.core.ports.analyzer import DiagnosticSource
from rust_diagnostics.core.ports.repository import Repository
from rust_diagnostics.core.spans import SpansByFile, count_spans

logger = logging.getLogger(__name__)


@dataclass
class PatchReview:
    hunks_by_file: HunksByFile
    touched: SpansByFile = field(default_factory=dict)
    resolved: SpansByFile = field(default_factory=dict)
    confirmed: bool = False
    report: str = ""

    @property
    def touched_count(self) -> int:
        return count_spans(self.touched)

    @property
    def resolved_count(self) -> int:
        return count_spans(self.resolved)


def run_patch_review(
    repository: Repository,
    source: DiagnosticSource,
    revision: str,
    flags: Sequence[str],
    spans_by_file: SpansByFile,
    confirm_fixes: bool = False,
) -> PatchReview:
    """Relate the diagnostics of the checked-out revision to the diff towards *revision*.

    With *confirm_fixes*, *revision* is checked out and diagnosed as well,
    and only touched spans that no longer carry an overlapping diagnostic
    stay resolved. The original checkout is restored afterwards.
    """
    original_ref = repository.current_ref()
    hunks_by_file = parse_unified_diff(repository.diff(repository.head(), revision))
    review = PatchReview(hunks_by_file=hunks_by_file, touched=touched(spans_by_file, hunks_by_file))

    if confirm_fixes and review.touched:
        repository.checkout(revision)
        try:
            new_spans_by_file = source.diagnose(flags)
        finally:
            repository.checkout(original_ref)
        confirm(spans_by_file, new_spans_by_file)
        review.confirmed = True

    review.resolved = resolved_spans(spans_by_file)
    review.report = render_patch_report(hunks_by_file, spans_by_file, only_resolved=confirm_fixes)
    logger.info("%d touched span(s), %d resolved", review.touched_count, review.resolved_count)
    return review
