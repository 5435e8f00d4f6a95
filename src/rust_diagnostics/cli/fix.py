from rust_diagnostics.cli.options import FlagsOption, console, diagnose_or_exit, get_analyzer, get_settings
from rust_diagnostics.config import resolve_flags
from rust_diagnostics.core.fix import run_fix
from rust_diagnostics.writer import OutputWriter


def fix(flags: FlagsOption = None) -> None:
    """Let clippy fix each rule in turn and write the changed items under transform/."""
    settings = get_settings()
    lint_names = resolve_flags(flags)
    analyzer = get_analyzer(settings)
    writer = OutputWriter(settings.output_root)
    writer.clean()

    result = diagnose_or_exit(analyzer, lint_names, settings)
    for path, content in result.annotated.items():
        writer.write_annotated(path, content)

    for transform in run_fix(analyzer, lint_names, result.spans_by_file, settings.workdir):
        written = writer.write_transform(transform)
        fixed = len(transform.reconciliation.fixed)
        remaining = len(transform.reconciliation.remaining)
        console.print(
            f"{transform.path} ({transform.lint_name}): "
            f"[green]{fixed} fixed[/green], [yellow]{remaining} remaining[/yellow], "
            f"{len(written) // 2} item pair(s)"
        )
