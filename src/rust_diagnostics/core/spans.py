import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from rust_diagnostics.models import DiagnosticSpan, Severity

logger = logging.getLogger(__name__)

SpansByFile = dict[str, list[DiagnosticSpan]]


def sub_messages(children: Sequence[Mapping[str, Any]]) -> str | None:
    """Join the nested child messages of a diagnostic, preferring ``message: rendered`` when rendered text exists."""
    parts: list[str] = []
    for child in children:
        message = str(child.get("message") or "")
        rendered = child.get("rendered")
        parts.append(f"{message}: {rendered}" if rendered else message)
    return "\n".join(parts) if parts else None


def spans_from_message(message: Mapping[str, Any]) -> list[tuple[str, DiagnosticSpan]]:
    """Turn one compiler message into ``(file_name, span)`` pairs; messages without a rule code yield nothing."""
    code = message.get("code")
    if not isinstance(code, Mapping) or not code.get("code"):
        return []
    rule_id = str(code["code"])
    severity = Severity.from_level(message.get("level"))
    note = sub_messages(message.get("children") or [])

    result: list[tuple[str, DiagnosticSpan]] = []
    for raw in message.get("spans") or []:
        file_name = raw.get("file_name")
        if not file_name:
            continue
        try:
            span = DiagnosticSpan(
                rule_id=rule_id,
                severity=severity,
                start_byte=raw["byte_start"],
                end_byte=raw["byte_end"],
                start_line=raw.get("line_start", 1),
                end_line=raw.get("line_end", raw.get("line_start", 1)),
                suggestion=raw.get("suggested_replacement"),
                note=note,
            )
        except (KeyError, TypeError, ValidationError) as exc:
            logger.debug("Skipping malformed span of %s in %s: %s", rule_id, file_name, exc)
            continue
        result.append((str(file_name), span))
    return result


def parse_diagnostic_stream(lines: Iterable[str | bytes]) -> SpansByFile:
    """Group the spans of a ``cargo --message-format=json`` stream by source file.

    Lines that are not JSON, records other than ``compiler-message``, and
    messages without a rule code are skipped.
    """
    spans_by_file: SpansByFile = {}
    for line in lines:
        text = line.decode("utf-8", errors="replace") if isinstance(line, bytes) else line
        text = text.strip()
        if not text:
            continue
        try:
            record = json.loads(text)
        except json.JSONDecodeError:
            logger.debug("Skipping non-JSON analyzer output: %.80s", text)
            continue
        if not isinstance(record, dict) or record.get("reason") != "compiler-message":
            continue
        message = record.get("message")
        if not isinstance(message, dict):
            continue
        for file_name, span in spans_from_message(message):
            spans_by_file.setdefault(file_name, []).append(span)
    return spans_by_file


def count_spans(spans_by_file: Mapping[str, Sequence[DiagnosticSpan]]) -> int:
    return sum(len(spans) for spans in spans_by_file.values())
