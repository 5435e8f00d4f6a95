"""Inline markup of diagnostic spans as Rust block comments.

Every span becomes an opening marker ``/*<label>*/`` placed before its first
byte and a closing marker ``/*\\n<label>[\\nsuggestion: ..][\\nnote: ..]*/``
placed before the byte at ``end_byte``. Markers are only ever inserted, so
removing them restores the original buffer unless it already held
marker-shaped comments.
"""

import re
from collections.abc import Iterable, Sequence

from rust_diagnostics.models import DiagnosticSpan

_LABEL = rb"#\[\w+\([^()\s]*\)"
_MARKER_RE = re.compile(rb"/\*" + _LABEL + rb"\*/|/\*\n" + _LABEL + rb"(?:\n.*?)?\*/", re.DOTALL)


def _clean(text: str) -> str:
    return text.replace("\\n", "\n").replace('"', "").replace("*/", "* /").replace("/*", "/ *")


def opening_marker(span: DiagnosticSpan) -> bytes:
    return f"/*{span.label}*/".encode()


def closing_marker(span: DiagnosticSpan) -> bytes:
    parts = [f"/*\n{span.label}"]
    if span.suggestion is not None:
        parts.append(f"\nsuggestion: {_clean(span.suggestion)}")
    if span.note is not None:
        parts.append(f"\nnote: {_clean(span.note)}")
    body = "".join(parts)
    # a trailing slash would open a nested comment with the closing "*/"
    if body.endswith("/"):
        body += " "
    return f"{body}*/".encode()


def marker_insertions(source: bytes, spans: Iterable[DiagnosticSpan]) -> list[tuple[int, bytes]]:
    """Return ``(position, markers)`` for every source position that receives markers, in order.

    Closing markers at a position precede opening markers at the same
    position; a zero-width span renders as its opening marker immediately
    followed by its closing marker. Spans reaching past the end of *source*
    are ignored.
    """
    size = len(source)
    opening: dict[int, list[DiagnosticSpan]] = {}
    closing: dict[int, list[DiagnosticSpan]] = {}
    for span in spans:
        if span.end_byte > size:
            continue
        opening.setdefault(span.start_byte, []).append(span)
        if span.end_byte > span.start_byte:
            closing.setdefault(span.end_byte, []).append(span)

    insertions: list[tuple[int, bytes]] = []
    for position in sorted(opening.keys() | closing.keys()):
        markers = bytearray()
        for span in closing.get(position, []):
            markers += closing_marker(span)
        for span in opening.get(position, []):
            markers += opening_marker(span)
            if span.end_byte == span.start_byte:
                markers += closing_marker(span)
        insertions.append((position, bytes(markers)))
    return insertions


def markup(source: bytes, spans: Iterable[DiagnosticSpan]) -> bytes:
    """Return *source* with an opening and a closing marker around every span."""
    output = bytearray()
    previous = 0
    for position, markers in marker_insertions(source, spans):
        output += source[previous:position]
        output += markers
        previous = position
    output += source[previous:]
    return bytes(output)


def source_offset(insertions: Sequence[tuple[int, bytes]], offset: int) -> int:
    """Map an *offset* into the marked-up text back onto the source.

    An offset inside a marker maps to the source position the marker was
    inserted at.
    """
    shift = 0
    for position, markers in insertions:
        if offset <= position + shift:
            break
        if offset < position + shift + len(markers):
            return position
        shift += len(markers)
    return offset - shift


def markup_rules(start: int, end: int, spans: Iterable[DiagnosticSpan]) -> bytes:
    """One ``/*<label>*/`` line per span lying entirely within ``[start, end]``."""
    return b"".join(
        opening_marker(span) + b"\n" for span in spans if start <= span.start_byte and span.end_byte <= end
    )


def strip_markers(annotated: bytes) -> bytes:
    """Remove every marker-shaped comment from *annotated*.

    Comments of the source that look like markers are removed too, so the
    result equals the source only when it held no such comments.
    """
    return _MARKER_RE.sub(b"", annotated)
