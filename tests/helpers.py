"""Helpers shared by unit and integration tests."""

import shutil
import subprocess
from pathlib import Path

import pytest

from rust_diagnostics.models import DiagnosticSpan, Severity

UNWRAP_SOURCE = """
fn main() {
    let s = std::fs::read_to_string("Cargo.toml").unwrap();
    println!("{s}");
}
"""

UNWRAP_NOTE = (
    "if this value is an `Err`, it will panic\n"
    "for further information visit https://rust-lang.github.io/rust-clippy/master/index.html#unwrap_used\n"
    "requested on the command line with `-W clippy::unwrap-used`"
)

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def run_git(args: list[str], cwd: Path) -> str:
    result = subprocess.run(
        ["git", "-c", "user.name=Test Author", "-c", "user.email=author@example.com", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def unwrap_span(source: str, rule_id: str = "clippy::unwrap_used", note: str | None = UNWRAP_NOTE) -> DiagnosticSpan:
    """The span clippy reports for the first ``x = <expr>.unwrap()`` expression in *source*."""
    data = source.encode("utf-8")
    start = data.index(b" = ") + 3
    end = data.index(b".unwrap()", start) + len(b".unwrap()")
    line = data[:start].count(b"\n") + 1
    return DiagnosticSpan(
        rule_id=rule_id,
        severity=Severity.WARNING,
        start_byte=start,
        end_byte=end,
        start_line=line,
        end_line=line,
        note=note,
    )


class FakeClippy:
    """A ``DiagnosticSource`` that reports ``.unwrap()`` calls and 'fixes' them by text replacement."""

    def __init__(self, workdir: Path, fixes: dict[str, str] | None = None) -> None:
        self.workdir = workdir
        self.fixes = fixes or {}
        self.diagnose_calls: list[list[str]] = []
        self.fix_calls: list[list[str]] = []

    def _scan(self) -> dict[str, list[DiagnosticSpan]]:
        result: dict[str, list[DiagnosticSpan]] = {}
        for path in sorted(self.workdir.rglob("*.rs")):
            text = path.read_text(encoding="utf-8")
            if ".unwrap()" in text and " = " in text:
                result[path.relative_to(self.workdir).as_posix()] = [unwrap_span(text, note=None)]
        return result

    def diagnose(self, flags: list[str]) -> dict[str, list[DiagnosticSpan]]:
        self.diagnose_calls.append(list(flags))
        return self._scan()

    def fix(self, flags: list[str]) -> dict[str, list[DiagnosticSpan]]:
        self.fix_calls.append(list(flags))
        for name, content in self.fixes.items():
            (self.workdir / name).write_text(content, encoding="utf-8")
        return self._scan()
