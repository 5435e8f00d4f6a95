from typing import Annotated

import typer
from rich.console import Console

from rust_diagnostics.config import Settings, load_settings
from rust_diagnostics.core.diagnose import DiagnoseResult, run_diagnose
from rust_diagnostics.errors import RustDiagnosticsError
from rust_diagnostics.tools.cargo import CargoClippy

console = Console()

FlagsOption = Annotated[
    list[str] | None,
    typer.Option("--flag", "-f", help="Clippy lint to enable (repeatable). Defaults to the built-in rule table."),
]


def get_settings() -> Settings:
    return load_settings()


def get_analyzer(settings: Settings) -> CargoClippy:
    return CargoClippy(settings.workdir, timeout=settings.timeout)


def diagnose_or_exit(analyzer: CargoClippy, flags: list[str], settings: Settings) -> DiagnoseResult:
    try:
        result = run_diagnose(analyzer, flags, settings.workdir)
    except RustDiagnosticsError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    console.print(f"There are {result.warning_count} warnings in {result.file_count} files.")
    return result
