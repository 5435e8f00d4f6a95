from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Severity(str, Enum):
    ERROR = "Error"
    WARNING = "Warning"
    NOTE = "Note"
    HELP = "Help"
    FAILURE_NOTE = "FailureNote"
    ICE = "Ice"

    @classmethod
    def from_level(cls, level: str | None) -> "Severity":
        """Map a rustc JSON ``level`` string onto a severity, defaulting to ``WARNING``."""
        return _LEVELS.get((level or "").strip().lower(), cls.WARNING)


_LEVELS = {
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
    "note": Severity.NOTE,
    "help": Severity.HELP,
    "failure-note": Severity.FAILURE_NOTE,
    "error: internal compiler error": Severity.ICE,
}


class DiagnosticSpan(BaseModel):
    """One analyzer finding anchored to a byte range and a line range of a source file."""

    rule_id: str = Field(min_length=1)
    severity: Severity = Severity.WARNING
    start_byte: int = Field(ge=0)
    end_byte: int = Field(ge=0)
    start_line: int = Field(default=1, ge=0)
    end_line: int = Field(default=1, ge=0)
    suggestion: str | None = None
    note: str | None = None
    resolved: bool = False

    @model_validator(mode="after")
    def _check_ranges(self) -> "DiagnosticSpan":
        if self.end_byte < self.start_byte:
            raise ValueError(f"end_byte {self.end_byte} precedes start_byte {self.start_byte}")
        if self.end_line < self.start_line:
            raise ValueError(f"end_line {self.end_line} precedes start_line {self.start_line}")
        return self

    @property
    def label(self) -> str:
        return f"#[{self.severity.value}({self.rule_id})"

    @property
    def lint_name(self) -> str:
        """The rule id without its tool namespace, e.g. ``unwrap_used``."""
        return self.rule_id.rsplit("::", 1)[-1]

    def overlaps_lines(self, other: "DiagnosticSpan") -> bool:
        return self.start_line <= other.end_line and self.end_line >= other.start_line

    def _key(self) -> tuple[str, int, int]:
        return (self.rule_id, self.start_byte, self.end_byte)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiagnosticSpan):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class HunkLine(BaseModel):
    origin: str
    content: str


class PatchHunk(BaseModel):
    path: str
    old_start: int = Field(ge=0)
    old_lines: int = Field(ge=0)
    new_start: int = Field(default=0, ge=0)
    new_lines: int = Field(default=0, ge=0)
    header: str = ""
    lines: list[HunkLine] = Field(default_factory=list)

    def overlaps(self, span: DiagnosticSpan) -> bool:
        """Half-open test: the hunk covers old lines ``[old_start, old_start + old_lines)``."""
        return self.old_start <= span.end_line and self.old_start + self.old_lines > span.start_line
