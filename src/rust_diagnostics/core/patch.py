"""Correlate diagnostics with the hunks of a version-control diff."""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence

from rust_diagnostics.models import DiagnosticSpan, HunkLine, PatchHunk

logger = logging.getLogger(__name__)

HunksByFile = dict[str, list[PatchHunk]]

_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def _strip_prefix(path: str, prefix: str) -> str:
    path = path.split("\t", 1)[0].strip()
    return path[len(prefix) :] if path.startswith(prefix) else path


def parse_unified_diff(diff_text: str) -> HunksByFile:
    """Parse ``git diff`` output into hunks keyed by old-side file path.

    Files added by the diff (old side ``/dev/null``) are keyed by their new
    path. Text outside of hunks is ignored.
    """
    result: HunksByFile = {}
    old_path: str | None = None
    current_path: str | None = None
    hunk: PatchHunk | None = None
    old_left = new_left = 0

    for line in diff_text.splitlines(keepends=True):
        if hunk is not None and (old_left > 0 or new_left > 0 or line.startswith("\\")):
            origin = line[:1]
            if origin == "\\":
                hunk.lines.append(HunkLine(origin=origin, content=line[1:]))
                continue
            if origin in (" ", "-", "+"):
                hunk.lines.append(HunkLine(origin=origin, content=line[1:]))
                if origin != "+":
                    old_left -= 1
                if origin != "-":
                    new_left -= 1
                continue
            if origin in ("\n", "\r"):
                # an empty context line with its leading space trimmed
                hunk.lines.append(HunkLine(origin=" ", content=line))
                old_left -= 1
                new_left -= 1
                continue
        hunk = None
        if line.startswith("diff --git "):
            old_path = current_path = None
        elif line.startswith("--- "):
            old_path = _strip_prefix(line[4:], "a/")
        elif line.startswith("+++ "):
            new_path = _strip_prefix(line[4:], "b/")
            current_path = new_path if old_path in (None, "/dev/null") else old_path
        elif (match := _HUNK_HEADER_RE.match(line)) and current_path is not None:
            old_start, old_lines, new_start, new_lines = match.groups()
            hunk = PatchHunk(
                path=current_path,
                old_start=int(old_start),
                old_lines=int(old_lines) if old_lines is not None else 1,
                new_start=int(new_start),
                new_lines=int(new_lines) if new_lines is not None else 1,
                header=line,
            )
            old_left, new_left = hunk.old_lines, hunk.new_lines
            result.setdefault(current_path, []).append(hunk)
    return result


def touched(
    spans_by_file: Mapping[str, Sequence[DiagnosticSpan]],
    hunks_by_file: Mapping[str, Sequence[PatchHunk]],
) -> dict[str, list[DiagnosticSpan]]:
    """Return, per file, the spans whose line range meets a hunk of that file, marking each ``resolved``."""
    result: dict[str, list[DiagnosticSpan]] = {}
    for path, spans in spans_by_file.items():
        hunks = hunks_by_file.get(path, [])
        for span in spans:
            if any(hunk.overlaps(span) for hunk in hunks):
                span.resolved = True
                result.setdefault(path, []).append(span)
    logger.debug("%d span(s) touched by the patch", sum(len(spans) for spans in result.values()))
    return result


def confirm(
    spans_by_file: Mapping[str, Sequence[DiagnosticSpan]],
    new_spans_by_file: Mapping[str, Sequence[DiagnosticSpan]],
) -> None:
    """Withdraw ``resolved`` from every touched span still overlapped by a diagnostic of the patched revision.

    Any diagnostic counts, whatever its rule.
    """
    for path, spans in spans_by_file.items():
        new_spans = new_spans_by_file.get(path, [])
        for span in spans:
            if span.resolved and any(span.overlaps_lines(new) for new in new_spans):
                span.resolved = False


def resolved_spans(spans_by_file: Mapping[str, Sequence[DiagnosticSpan]]) -> dict[str, list[DiagnosticSpan]]:
    return {
        path: [span for span in spans if span.resolved]
        for path, spans in spans_by_file.items()
        if any(span.resolved for span in spans)
    }


def render_patch_report(
    hunks_by_file: Mapping[str, Sequence[PatchHunk]],
    spans_by_file: Mapping[str, Sequence[DiagnosticSpan]],
    only_resolved: bool = False,
) -> str:
    """Render every hunk that overlaps a span, each preceded by the labels of the spans it overlaps."""
    chunks: list[str] = []
    for path, hunks in hunks_by_file.items():
        spans = [s for s in spans_by_file.get(path, []) if s.resolved or not only_resolved]
        for hunk in hunks:
            related = _unique_labels(s for s in spans if hunk.overlaps(s))
            if not related:
                continue
            chunks.extend(f"{label}\n" for label in related)
            chunks.append(hunk.header if hunk.header.endswith("\n") else f"{hunk.header}\n")
            for line in hunk.lines:
                chunks.append(f"{line.origin}{line.content}")
    return "".join(chunks)


def _unique_labels(spans: Iterable[DiagnosticSpan]) -> list[str]:
    ordered = sorted(spans, key=lambda s: (s.start_line, s.start_byte))
    return list(dict.fromkeys(span.label for span in ordered))
