from __future__ import annotations

"""Diagnostics emitted while parsing a resource document.

The parser never raises for a malformed ``<sheet>`` or ``<sprite>``; it
reports a :class:`Diagnostic` to a sink and moves on to the next element.
"""

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

__all__ = [
    "Severity",
    "Diagnostic",
    "DiagnosticsSink",
    "LoggingSink",
    "DiagnosticCollector",
]


class Severity(enum.Enum):
    """How bad a reported problem is.

    ERROR and WARNING mean the element was discarded, INFO means an
    unrecognised tag or attribute was ignored.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.INFO: logging.INFO,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single problem found in a resource document.

    Attributes
    ----------
    severity
        See :class:`Severity`.
    message
        Human readable description.
    tag
        Lower-cased tag name of the element the problem was found on.
    name
        Value of the element's ``name`` attribute, when it had one.
    """

    severity: Severity
    message: str
    tag: str = ""
    name: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.severity.name.capitalize()}: {self.message}"


@runtime_checkable
class DiagnosticsSink(Protocol):
    """Anything diagnostics can be reported to."""

    def report(self, diagnostic: Diagnostic) -> None:
        ...


class LoggingSink:
    """Forward diagnostics to :mod:`logging` at the matching level."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def report(self, diagnostic: Diagnostic) -> None:
        self._log.log(diagnostic.severity.log_level, "%s", diagnostic.message)


class DiagnosticCollector:
    """Keep every reported diagnostic so callers can inspect them.

    When *forward_to* is given, each diagnostic is also passed on to that
    sink (typically a :class:`LoggingSink`).
    """

    def __init__(self, forward_to: Optional[DiagnosticsSink] = None) -> None:
        self.diagnostics: List[Diagnostic] = []
        self._forward_to = forward_to

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self._forward_to is not None:
            self._forward_to.report(diagnostic)

    def of_severity(self, severity: Severity) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is severity]

    @property
    def errors(self) -> List[Diagnostic]:
        return self.of_severity(Severity.ERROR)

    @property
    def warnings(self) -> List[Diagnostic]:
        return self.of_severity(Severity.WARNING)

    @property
    def infos(self) -> List[Diagnostic]:
        return self.of_severity(Severity.INFO)

    def clear(self) -> None:
        self.diagnostics.clear()

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)
