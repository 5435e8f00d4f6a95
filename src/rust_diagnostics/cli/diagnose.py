from rust_diagnostics.cli.options import FlagsOption, console, diagnose_or_exit, get_analyzer, get_settings
from rust_diagnostics.config import resolve_flags
from rust_diagnostics.writer import OutputWriter


def diagnose(flags: FlagsOption = None) -> None:
    """Run clippy and write every reported file, marked up, under diagnostics/."""
    settings = get_settings()
    writer = OutputWriter(settings.output_root)
    writer.clean()
    result = diagnose_or_exit(get_analyzer(settings), resolve_flags(flags), settings)
    for path, content in result.annotated.items():
        target = writer.write_annotated(path, content)
        console.print(f"[green]Marked[/green] warning(s) into {target}")
