import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from rust_diagnostics.core.spans import SpansByFile, parse_diagnostic_stream
from rust_diagnostics.errors import AnalyzerError

logger = logging.getLogger(__name__)

_FIX_OPTIONS = ["--fix", "--allow-dirty", "--allow-no-vcs", "--broken-code"]


def lint_flag(name: str) -> str:
    """``unwrap_used`` -> ``-Wclippy::unwrap_used``; a name with a tool prefix keeps it."""
    return f"-W{name}" if "::" in name else f"-Wclippy::{name}"


class CargoClippy:
    """Runs ``cargo clippy`` in a workspace and parses its JSON message stream.

    Implements the ``DiagnosticSource`` protocol.
    """

    def __init__(self, workdir: str | Path = ".", timeout: float | None = 600.0, cargo: str = "cargo") -> None:
        self._workdir = Path(workdir)
        self._timeout = timeout
        self._cargo = cargo

    def command(self, flags: Sequence[str], fix: bool = False) -> list[str]:
        args = [self._cargo, "clippy", "--message-format=json"]
        if fix:
            args.extend(_FIX_OPTIONS)
        args.append("--")
        args.extend(lint_flag(flag) for flag in flags)
        return args

    def diagnose(self, flags: Sequence[str]) -> SpansByFile:
        return self._run(self.command(flags))

    def fix(self, flags: Sequence[str]) -> SpansByFile:
        return self._run(self.command(flags, fix=True))

    def _run(self, args: list[str]) -> SpansByFile:
        if shutil.which(self._cargo) is None:
            raise AnalyzerError(f"'{self._cargo}' is not installed or not in PATH.")
        logger.debug("Running %s in %s", " ".join(args), self._workdir)
        try:
            result = subprocess.run(
                args,
                cwd=self._workdir,
                check=False,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise AnalyzerError(f"cargo clippy timed out after {self._timeout}s") from exc
        if result.returncode != 0:
            logger.info("cargo clippy exited with status %d", result.returncode)
        return parse_diagnostic_stream(result.stdout.splitlines())
