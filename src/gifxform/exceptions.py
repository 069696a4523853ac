"""Unified exception hierarchy for gifxform.

All gifxform exceptions inherit from GifXformError, enabling:
- Catching all gifxform errors with `except GifXformError`
- Error context preservation via the `context` attribute
- Causality chains via `raise ... from e` patterns

Recoverable problems (a failing color filter command, mismatched color
counts) are not exceptions; they are reported through
`gifxform.diagnostics.Diagnostics` and the operation becomes a no-op.
"""

from typing import Any


class GifXformError(Exception):
    """Base exception for all gifxform errors.

    Args:
        message: Human-readable error description
        context: Optional dict of contextual information (frame, step, etc.)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} [{details}]"
        return base


class ConfigError(GifXformError):
    """Raised when a transform plan is invalid or cannot be loaded."""


class TransformError(GifXformError):
    """Raised when a transform receives input it cannot work on."""


class FatalTransformError(GifXformError):
    """Raised for conditions that abort the whole run.

    Examples are scaled dimensions beyond the representable range, a
    temporary file that cannot be created, or a color filter command that
    cannot be launched.
    """


class ColormapFileError(GifXformError):
    """Raised when a colormap file cannot be read."""
