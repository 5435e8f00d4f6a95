from collections.abc import Sequence
from typing import Protocol

from rust_diagnostics.models import DiagnosticSpan


class DiagnosticSource(Protocol):
    def diagnose(self, flags: Sequence[str]) -> dict[str, list[DiagnosticSpan]]: ...

    def fix(self, flags: Sequence[str]) -> dict[str, list[DiagnosticSpan]]: ...
