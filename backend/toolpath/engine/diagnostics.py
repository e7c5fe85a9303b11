"""Diagnostics sink injected into a conversion.

Neither severity aborts the conversion. The default sink forwards to the
module logger; CollectingDiagnostics additionally keeps every diagnostic so
callers (and tests) can inspect them.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class Severity(str, enum.Enum):
    # invalid numeric values, unsupported features, missing geometry
    WARNING = "warning"
    # unrecognized tags
    INFO = "info"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str
    tag: str = ""


class DiagnosticsSink(Protocol):
    def emit(self, diagnostic: Diagnostic) -> None: ...


class LoggingDiagnostics:
    def emit(self, diagnostic: Diagnostic) -> None:
        level = logging.WARNING if diagnostic.severity is Severity.WARNING else logging.INFO
        logger.log(level, "%s", diagnostic.message)


class CollectingDiagnostics(LoggingDiagnostics):
    def __init__(self) -> None:
        self.items: list[Diagnostic] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)
        super().emit(diagnostic)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity is Severity.WARNING]

    @property
    def infos(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity is Severity.INFO]

    def messages(self) -> list[str]:
        return [d.message for d in self.items]


def warn(sink: DiagnosticsSink, message: str, tag: str = "") -> None:
    sink.emit(Diagnostic(Severity.WARNING, message, tag))


def info(sink: DiagnosticsSink, message: str, tag: str = "") -> None:
    sink.emit(Diagnostic(Severity.INFO, message, tag))
