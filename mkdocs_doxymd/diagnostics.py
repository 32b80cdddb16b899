"""
Diagnostics reported when a doc comment cannot be turned into Markdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiagnosticKind(Enum):
    UNSUPPORTED = "unsupported"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    command: str
    line: int
    message: str

    def __str__(self):
        return f"line {self.line}: {self.kind.value} command '{self.command}': {self.message}"


class TransformError(Exception):
    """Raised by :func:`transform` with the diagnostic that stopped it."""

    def __init__(self, diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic


def unsupported(command, line):
    return TransformError(
        Diagnostic(
            DiagnosticKind.UNSUPPORTED,
            command,
            line,
            "grouping commands are not supported",
        )
    )


def malformed(command, line, message):
    return TransformError(Diagnostic(DiagnosticKind.MALFORMED, command, line, message))
