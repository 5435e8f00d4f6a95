from typing import Annotated

import typer

from rust_diagnostics.cli.options import FlagsOption, console, diagnose_or_exit, get_analyzer, get_settings
from rust_diagnostics.config import resolve_flags
from rust_diagnostics.core.review import run_patch_review
from rust_diagnostics.errors import RustDiagnosticsError
from rust_diagnostics.tools.git import GitRepository


def patch(
    revision: Annotated[str, typer.Argument(help="Revision whose diff against HEAD may fix the warnings.")],
    flags: FlagsOption = None,
    confirm: Annotated[
        bool, typer.Option("--confirm", help="Check out the revision and keep only the warnings it really fixes.")
    ] = False,
) -> None:
    """Reduce the diff towards REVISION to the hunks that touch current warnings."""
    settings = get_settings()
    lint_names = resolve_flags(flags)
    analyzer = get_analyzer(settings)

    try:
        repository = GitRepository.discover(settings.workdir)
        revision_id = repository.resolve(revision)
    except RustDiagnosticsError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    result = diagnose_or_exit(analyzer, lint_names, settings)
    try:
        review = run_patch_review(
            repository, analyzer, revision_id, lint_names, result.spans_by_file, confirm_fixes=confirm
        )
    except RustDiagnosticsError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    console.out(review.report, end="", highlight=False)
    if review.confirmed:
        console.print(
            f"The patch fixes {review.resolved_count} of {review.touched_count} touched warnings"
            f" in {len(review.resolved)} files."
        )
