from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from rust_diagnostics.models import DiagnosticSpan, Severity

SpansByRule = dict[str, dict[str, list[DiagnosticSpan]]]


@dataclass
class Reconciliation:
    fixed: list[DiagnosticSpan] = field(default_factory=list)
    remaining: list[DiagnosticSpan] = field(default_factory=list)


def partition_by_rule(
    spans_by_file: Mapping[str, Sequence[DiagnosticSpan]],
    lint_names: Iterable[str] | None = None,
    severity: Severity | None = Severity.WARNING,
) -> SpansByRule:
    """Split one diagnostic pass into ``rule_id -> file -> spans``.

    Only spans of *severity* (any severity when ``None``) whose lint name is
    in *lint_names* (any lint when ``None``) are kept. Rules are ordered by
    first appearance.
    """
    wanted = set(lint_names) if lint_names is not None else None
    result: SpansByRule = {}
    for file_name, spans in spans_by_file.items():
        for span in spans:
            if severity is not None and span.severity is not severity:
                continue
            if wanted is not None and span.lint_name not in wanted:
                continue
            result.setdefault(span.rule_id, {}).setdefault(file_name, []).append(span)
    return result


def reconcile(warnings: Sequence[DiagnosticSpan], new_warnings: Sequence[DiagnosticSpan]) -> Reconciliation:
    """Separate *warnings* into those still reported after a fix and those that disappeared.

    Matching is by label only. A remaining warning is represented by the
    first new span carrying its label, so its offsets refer to the fixed text.
    """
    by_label: dict[str, DiagnosticSpan] = {}
    for span in new_warnings:
        by_label.setdefault(span.label, span)

    result = Reconciliation()
    for warning in warnings:
        match = by_label.get(warning.label)
        if match is None:
            result.fixed.append(warning)
        else:
            result.remaining.append(match)
    return result
