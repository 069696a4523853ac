"""Diagnostics collaborator shared by the transform engines.

Three severities are supported:

- fatal: logged, then raised as FatalTransformError (the run cannot go on)
- warning: non-blocking data-quality note
- error: recoverable; the operation that reported it leaves its data unchanged
"""

from dataclasses import dataclass, field
from typing import Any, Literal, NoReturn

from gifxform.exceptions import FatalTransformError
from gifxform.logging_config import get_logger

logger = get_logger(__name__)

Severity = Literal["fatal", "warning", "error"]


@dataclass
class Diagnostic:
    """A single reported condition."""

    severity: Severity
    message: str

    def __str__(self) -> str:
        return f"{self.severity}: {self.message}"


@dataclass
class Diagnostics:
    """Collects and logs diagnostics emitted while transforming a stream.

    Attributes:
        records: Every diagnostic reported, in order
    """

    records: list[Diagnostic] = field(default_factory=list)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.records if d.severity == "warning"]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.records if d.severity == "error"]

    @property
    def has_errors(self) -> bool:
        return any(d.severity != "warning" for d in self.records)

    def warning(self, message: str, *args: Any) -> None:
        """Report a non-blocking data-quality note."""
        text = message % args if args else message
        self.records.append(Diagnostic("warning", text))
        logger.warning("%s", text)

    def error(self, message: str, *args: Any) -> None:
        """Report a recoverable error."""
        text = message % args if args else message
        self.records.append(Diagnostic("error", text))
        logger.error("%s", text)

    def fatal(self, message: str, *args: Any, context: dict[str, Any] | None = None) -> NoReturn:
        """Report a fatal condition and abort by raising FatalTransformError."""
        text = message % args if args else message
        self.records.append(Diagnostic("fatal", text))
        logger.error("%s", text)
        raise FatalTransformError(text, context=context)


def ensure_diagnostics(diagnostics: Diagnostics | None) -> Diagnostics:
    """Return the given collaborator, or a fresh one that only logs."""
    return diagnostics if diagnostics is not None else Diagnostics()
