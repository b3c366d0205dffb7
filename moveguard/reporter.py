"""Human-readable, optionally coloured, report of analysis errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from moveguard.model import Location, Severity

_BOLD = "1"
_RED = "31"
_GREEN = "32"
_YELLOW = "33"
_BLUE = "34"
_RESET = "\x1b[0m"


@dataclass
class AnalysisError:
    """One problem to report."""

    severity: Severity
    location: Location
    message: str
    suggested_fix: Optional[str] = None


class ErrorReporter:
    """Collects analysis errors and renders them as text."""

    def __init__(self, color: bool = True) -> None:
        self.errors: list[AnalysisError] = []
        self.color = color

    def add_error(self, error: AnalysisError) -> None:
        self.errors.append(error)

    def report(self) -> str:
        if not self.errors:
            return self._paint("No issues found", _BOLD, _GREEN) + "\n"

        lines: list[str] = []
        for error in self.errors:
            lines.append(self._header(error))
            lines.append(self._paint(error.message, _BOLD))
            if error.suggested_fix is not None:
                lines.append(f"Suggested fix: {self._paint(error.suggested_fix, _BLUE)}")
            lines.append("")
        return "\n".join(lines) + "\n"

    def _header(self, error: AnalysisError) -> str:
        where = f"{error.location.file}:{error.location.line}:{error.location.column}"
        if error.severity is Severity.CRITICAL:
            return self._paint(f"Critical Error at {where}", _BOLD, _RED)
        if error.severity is Severity.HIGH:
            return self._paint(f"Error at {where}", _BOLD, _YELLOW)
        return f"Warning at {where}"

    def _paint(self, text: str, *codes: str) -> str:
        if not self.color:
            return text
        return f"\x1b[{';'.join(codes)}m{text}{_RESET}"