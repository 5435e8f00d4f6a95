import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from rust_diagnostics.cli.diagnose import diagnose
from rust_diagnostics.cli.fix import fix
from rust_diagnostics.cli.patch import patch

app = typer.Typer(
    name="rust-diagnostics",
    help="Rust diagnostics CLI: mark up clippy warnings and mine the fixes applied to them.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


app.command("diagnose")(diagnose)
app.command("fix")(fix)
app.command("patch")(patch)


def main() -> None:
    app()
