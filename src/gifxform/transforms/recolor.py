"""Recolor transform: replace specific colors or colormap slots."""

from gifxform.config import RecolorTransform as RecolorConfig, Transform, TransformType
from gifxform.diagnostics import Diagnostics
from gifxform.model import Color, Colormap, Stream
from gifxform.transforms.base import (
    BaseStep,
    ColorChange,
    ColorTransform,
    ColorTransformKind,
    RecolorPayload,
    StepContext,
)
from gifxform.transforms.colormap import append_color_transform
from gifxform.transforms.registry import register_color_transform, register_step
from gifxform.transforms._utils import require_step_config


def _matches(change: ColorChange, colormap: Colormap, index: int) -> bool:
    old = change.old_color
    if old.has_pixel:
        return old.pixel == index
    return old.same_rgb(colormap[index])


@register_color_transform(ColorTransformKind.RECOLOR)
def color_change_transformer(
    colormap: Colormap,
    payload: RecolorPayload,
    diagnostics: Diagnostics,
) -> None:
    """
    Replace colormap entries named by a change list.

    For each entry the changes are scanned in order and the first match
    replaces the entry; later changes for the same entry are ignored.
    """
    for index in range(colormap.ncol):
        for change in payload.changes:
            if _matches(change, colormap, index):
                colormap[index] = change.new_color
                break


def append_color_change(
    transforms: list[ColorTransform] | None,
    old_color: Color,
    new_color: Color,
) -> list[ColorTransform]:
    """
    Register a color change on a pipeline.

    Consecutive changes share one recolor transform: when the last transform
    of the pipeline is a recolor, the change joins its list, otherwise a new
    recolor transform is appended.

    Args:
        transforms: Existing pipeline (None for an empty one)
        old_color: Color to replace; a color with a pinned pixel matches that slot
        new_color: Replacement color

    Returns:
        The pipeline
    """
    change = ColorChange(old_color=old_color, new_color=new_color)

    if transforms and transforms[-1].kind == ColorTransformKind.RECOLOR:
        transforms[-1].payload.changes.append(change)
        return transforms

    return append_color_transform(
        transforms, ColorTransformKind.RECOLOR, RecolorPayload(changes=[change])
    )


@register_step(TransformType.RECOLOR)
class RecolorStep(BaseStep):
    """Handler for recolor steps.

    The change joins the run's color pipeline; colormaps are rewritten once
    every geometric step is done.
    """

    def __init__(self, config: RecolorConfig):
        self.config = config

    @classmethod
    def from_config(cls, transform: Transform) -> "RecolorStep":
        return cls(require_step_config(transform.recolor, "recolor"))

    def apply(self, stream: Stream, context: StepContext) -> None:
        append_color_change(context.color_transforms, self.config.old_color, self.config.new_color)

    def describe(self) -> str:
        return f"recolor {self.config.old_color} -> {self.config.new_color}"
