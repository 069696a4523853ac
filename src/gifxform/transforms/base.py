"""Base types for the transform package.

A color transform pipeline is an ordered list of ``ColorTransform`` nodes.
Each node carries a kind from a closed set and the typed payload for that
kind; the kind selects the transformer function through the registry.

Plan steps are wrapped by ``BaseStep`` handlers, registered per step type and
applied to a whole stream by the executor.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from gifxform.diagnostics import Diagnostics
from gifxform.model import Color, Colormap, Stream

if TYPE_CHECKING:
    from gifxform.config import Settings, Transform


class ColorTransformKind(str, Enum):
    """Kinds of color transform."""

    RECOLOR = "recolor"  # Replace specific colors or colormap slots
    PIPE = "pipe"  # Filter the colormap through an external command


@dataclass
class ColorChange:
    """One requested replacement: ``old_color`` (by RGB or by pinned slot) -> ``new_color``."""

    old_color: Color
    new_color: Color


@dataclass
class RecolorPayload:
    """Ordered color changes; the first matching change wins."""

    changes: list[ColorChange] = field(default_factory=list)


@dataclass
class PipePayload:
    """External filter command.

    A string runs through the shell; a list is executed directly.
    """

    command: str | list[str]


ColorTransformPayload = RecolorPayload | PipePayload


@dataclass
class ColorTransform:
    """One node of a color transform pipeline."""

    kind: ColorTransformKind
    payload: ColorTransformPayload

    def describe(self) -> str:
        """Return a short description for dry-run output."""
        if isinstance(self.payload, RecolorPayload):
            return f"recolor ({len(self.payload.changes)} change(s))"
        if isinstance(self.payload, PipePayload):
            command = self.payload.command
            if isinstance(command, list):
                command = " ".join(command)
            return f"pipe colormap through '{command}'"
        return self.kind.value


class ColorTransformer(Protocol):
    """Callable applying one kind of color transform to a colormap in place."""

    def __call__(
        self,
        colormap: Colormap,
        payload: ColorTransformPayload,
        diagnostics: Diagnostics,
    ) -> None: ...


@dataclass
class StepContext:
    """State shared by the steps of one plan run.

    Attributes:
        settings: Plan settings
        diagnostics: Collaborator receiving warnings and errors
        color_transforms: Color pipeline collected from recolor and pipe
            steps, applied once the geometric steps are done
    """

    settings: "Settings"
    diagnostics: Diagnostics
    color_transforms: list[ColorTransform] = field(default_factory=list)


class BaseStep(ABC):
    """Abstract base class for plan steps.

    Each step class wraps its config dataclass and applies it to a whole
    stream.
    """

    # The step type this handler is registered for
    # Set by @register_step decorator
    name: str = ""

    @abstractmethod
    def apply(self, stream: Stream, context: StepContext) -> None:
        """Apply this step to the stream, in place."""

    @abstractmethod
    def describe(self) -> str:
        """Return a short description for logs and dry runs."""

    @classmethod
    @abstractmethod
    def from_config(cls, transform: "Transform") -> "BaseStep":
        """Create a step from a parsed Transform config object."""
