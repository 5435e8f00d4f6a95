import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from rust_diagnostics.core.diagnose import read_source
from rust_diagnostics.core.ports.analyzer import DiagnosticSource
from rust_diagnostics.core.reconcile import partition_by_rule
from rust_diagnostics.core.transform import FileTransform, transform_file
from rust_diagnostics.errors import AnalyzerError
from rust_diagnostics.models import DiagnosticSpan

logger = logging.getLogger(__name__)


def run_fix(
    source: DiagnosticSource,
    flags: Sequence[str],
    spans_by_file: Mapping[str, Sequence[DiagnosticSpan]],
    workdir: Path,
) -> list[FileTransform]:
    """For every rule with warnings, let the fixer rewrite the affected files and pair the changed items.

    Files are restored to their original content after each rule. A rule
    whose fixer run fails is skipped.
    """
    transforms: list[FileTransform] = []
    for rule_id, files in partition_by_rule(spans_by_file, flags).items():
        originals: dict[str, bytes] = {}
        for path in files:
            content = read_source(workdir, path)
            if content is not None:
                originals[path] = content
        if not originals:
            continue

        try:
            new_spans = source.fix([rule_id])
            for path, original in originals.items():
                fixed = read_source(workdir, path)
                if fixed is None:
                    continue
                transforms.append(
                    transform_file(path, rule_id, original, fixed, files[path], new_spans.get(path, []))
                )
        except AnalyzerError as exc:
            logger.warning("Skipping %s: %s", rule_id, exc)
        finally:
            for path, original in originals.items():
                (workdir / path).write_bytes(original)
    return transforms
