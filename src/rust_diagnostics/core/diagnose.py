import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from rust_diagnostics.core.markup import markup
from rust_diagnostics.core.ports.analyzer import DiagnosticSource
from rust_diagnostics.core.spans import SpansByFile, count_spans
from rust_diagnostics.models import DiagnosticSpan

logger = logging.getLogger(__name__)


@dataclass
class DiagnoseResult:
    spans_by_file: SpansByFile
    annotated: dict[str, bytes] = field(default_factory=dict)

    @property
    def warning_count(self) -> int:
        return count_spans(self.spans_by_file)

    @property
    def file_count(self) -> int:
        return len(self.spans_by_file)


def read_source(workdir: Path, path: str) -> bytes | None:
    """Return the bytes of *path* (relative to *workdir* unless absolute), or ``None`` when unreadable."""
    try:
        return (workdir / path).read_bytes()
    except OSError as exc:
        logger.warning("Skipping unreadable file %s: %s", path, exc)
        return None


def annotate_files(workdir: Path, spans_by_file: Mapping[str, Sequence[DiagnosticSpan]]) -> dict[str, bytes]:
    annotated: dict[str, bytes] = {}
    for path, spans in spans_by_file.items():
        source = read_source(workdir, path)
        if source is None:
            continue
        annotated[path] = markup(source, spans)
    return annotated


def run_diagnose(source: DiagnosticSource, flags: Sequence[str], workdir: Path) -> DiagnoseResult:
    """Run the analyzer once and mark up every file it reported on."""
    spans_by_file = source.diagnose(flags)
    result = DiagnoseResult(spans_by_file=spans_by_file, annotated=annotate_files(workdir, spans_by_file))
    logger.info("Collected %d warning(s) in %d file(s)", result.warning_count, result.file_count)
    return result
