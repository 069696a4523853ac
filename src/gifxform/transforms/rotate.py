"""Rotate transform for gifxform."""

import numpy as np

from gifxform.config import RotateTransform as RotateConfig, Transform, TransformType
from gifxform.constants import ROTATE_90, ROTATE_270
from gifxform.diagnostics import Diagnostics, ensure_diagnostics
from gifxform.model import Frame, Stream
from gifxform.transforms.base import BaseStep, StepContext
from gifxform.transforms.flip import flip_stream
from gifxform.transforms.registry import register_step
from gifxform.transforms._utils import install_pixels, require_pixels, require_step_config, uncompress_frames


def rotate_image(
    frame: Frame,
    screen_width: int,
    screen_height: int,
    rotation: int,
    diagnostics: Diagnostics | None = None,
) -> None:
    """
    Rotate a frame clockwise by 90 or 270 degrees.

    The rotated pixels are written to a new contiguous buffer; the frame's
    compressed representation becomes invalid.

    Args:
        frame: The frame to rotate (mutated in place)
        screen_width: Width of the stream's screen before rotation
        screen_height: Height of the stream's screen before rotation
        rotation: Quarter turns, 1 (90 degrees) or 3 (270 degrees)
        diagnostics: Collaborator used to report an unsupported rotation

    Raises:
        FatalTransformError: If rotation is not 1 or 3
    """
    if rotation not in (ROTATE_90, ROTATE_270):
        ensure_diagnostics(diagnostics).fatal(
            "can only rotate by 90 or 270 degrees, got %d quarter turn(s)", rotation
        )

    pixels = require_pixels(frame, "rotate")
    old_left, old_top = frame.left, frame.top

    if rotation == ROTATE_90:
        # Source columns left to right, each read bottom to top
        rotated = np.rot90(pixels, k=-1).copy()
        frame.left = screen_height - (old_top + frame.height)
        frame.top = old_left
    else:
        # Source columns right to left, each read top to bottom
        rotated = np.rot90(pixels, k=1).copy()
        frame.top = screen_width - (old_left + frame.width)
        frame.left = old_top

    install_pixels(frame, rotated)


@register_step(TransformType.ROTATE)
class RotateStep(BaseStep):
    """Handler for rotate steps.

    A half turn is a horizontal flip followed by a vertical flip; quarter
    turns swap the screen dimensions.
    """

    def __init__(self, config: RotateConfig):
        self.config = config

    @classmethod
    def from_config(cls, transform: Transform) -> "RotateStep":
        return cls(require_step_config(transform.rotate, "rotate"))

    def apply(self, stream: Stream, context: StepContext) -> None:
        if self.config.angle == 180:
            flip_stream(stream, vertical=False)
            flip_stream(stream, vertical=True)
            return

        uncompress_frames(stream)
        stream.calculate_screen_size()
        rotation = ROTATE_90 if self.config.angle == 90 else ROTATE_270
        for frame in stream.frames:
            rotate_image(frame, stream.screen_width, stream.screen_height, rotation, context.diagnostics)
        stream.screen_width, stream.screen_height = stream.screen_height, stream.screen_width

    def describe(self) -> str:
        return f"rotate {self.config.angle}"
