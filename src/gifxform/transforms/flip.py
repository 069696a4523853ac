"""Flip transform for gifxform."""

import numpy as np

from gifxform.config import FlipDirection, FlipTransform as FlipConfig, Transform, TransformType
from gifxform.model import Frame, Stream
from gifxform.transforms.base import BaseStep, StepContext
from gifxform.transforms.registry import register_step
from gifxform.transforms._utils import install_pixels, require_pixels, require_step_config, uncompress_frames


def flip_image(frame: Frame, screen_width: int, screen_height: int, vertical: bool) -> None:
    """
    Mirror a frame and its placement on the screen.

    A horizontal flip reverses each row in place. A vertical flip only
    reverses the row order: the frame gets a view onto the same storage, so
    no pixels are copied.

    Args:
        frame: The frame to flip (mutated in place)
        screen_width: Width of the stream's screen
        screen_height: Height of the stream's screen
        vertical: Flip top-to-bottom instead of left-to-right
    """
    pixels = require_pixels(frame, "flip")

    if not vertical:
        scratch = np.empty(frame.width, dtype=np.uint8)
        for row in pixels:
            scratch[:] = row
            row[:] = scratch[::-1]
        frame.compressed = None
        frame.left = screen_width - (frame.left + frame.width)
    else:
        install_pixels(frame, pixels[::-1])
        frame.top = screen_height - (frame.top + frame.height)


def flip_stream(stream: Stream, vertical: bool) -> None:
    """Flip every frame of a stream against its screen."""
    uncompress_frames(stream)
    stream.calculate_screen_size()
    for frame in stream.frames:
        flip_image(frame, stream.screen_width, stream.screen_height, vertical)


@register_step(TransformType.FLIP)
class FlipStep(BaseStep):
    """Handler for flip steps."""

    def __init__(self, config: FlipConfig):
        self.config = config

    @classmethod
    def from_config(cls, transform: Transform) -> "FlipStep":
        return cls(require_step_config(transform.flip, "flip"))

    def apply(self, stream: Stream, context: StepContext) -> None:
        flip_stream(stream, self.config.direction == FlipDirection.VERTICAL)

    def describe(self) -> str:
        return f"flip {self.config.direction.value}"
