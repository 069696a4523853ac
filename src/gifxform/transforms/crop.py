"""Crop transform for gifxform."""

from dataclasses import dataclass

from gifxform.config import CropTransform as CropConfig, Transform, TransformType
from gifxform.logging_config import get_logger
from gifxform.model import Frame, Stream
from gifxform.transforms.base import BaseStep, StepContext
from gifxform.transforms.registry import register_step
from gifxform.transforms._utils import install_pixels, require_pixels, require_step_config, uncompress_frames

logger = get_logger(__name__)


@dataclass
class CropRect:
    """A crop rectangle.

    Attributes:
        x, y, width, height: The rectangle; screen coordinates for a requested
            crop, frame-local coordinates after ``combine_crop``
        left_offset, top_offset: Screen point that becomes the new origin
            of a cropped frame's offset
    """

    x: int
    y: int
    width: int
    height: int
    left_offset: int = 0
    top_offset: int = 0

    @classmethod
    def anchored(cls, x: int, y: int, width: int, height: int) -> "CropRect":
        """A crop whose own top-left corner becomes the new screen origin."""
        return cls(x, y, width, height, left_offset=x, top_offset=y)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def combine_crop(crop: CropRect, frame: Frame) -> CropRect:
    """
    Intersect a requested crop with a frame.

    Args:
        crop: Requested rectangle in screen coordinates
        frame: The frame being cropped

    Returns:
        The overlap in frame-local coordinates. A width or height of zero or
        less means the rectangle misses the frame.
    """
    x = crop.x - frame.left
    y = crop.y - frame.top
    width = crop.width
    height = crop.height

    if x < 0:
        width += x
        x = 0
    if y < 0:
        height += y
        y = 0
    if x + width > frame.width:
        width = frame.width - x
    if y + height > frame.height:
        height = frame.height - y

    return CropRect(x, y, width, height, crop.left_offset, crop.top_offset)


def crop_image(frame: Frame, crop: CropRect, preserve_empty: bool = False) -> bool:
    """
    Crop a frame to a rectangle.

    The kept region is a view into the frame's existing pixel storage; no
    pixels are copied.

    Args:
        frame: The frame to crop (mutated in place)
        crop: Requested rectangle in screen coordinates
        preserve_empty: If the rectangle misses the frame, keep a single
            transparent pixel instead of emptying the frame

    Returns:
        True if the frame still has pixels
    """
    pixels = require_pixels(frame, "crop")
    c = combine_crop(crop, frame)

    if not c.is_empty:
        install_pixels(frame, pixels[c.y : c.y + c.height, c.x : c.x + c.width])
        frame.left += c.x - crop.left_offset
        frame.top += c.y - crop.top_offset
    elif preserve_empty and pixels.size > 0:
        # An invisible 1x1 frame for formats that need at least one pixel
        install_pixels(frame, pixels[0:1, 0:1])
        frame.transparent = int(pixels[0, 0])
        logger.debug("Crop missed frame; kept one transparent pixel")
    else:
        install_pixels(frame, None)
        logger.debug("Crop missed frame; frame is now empty")

    return frame.pixels is not None


@register_step(TransformType.CROP)
class CropStep(BaseStep):
    """Crop every frame; the crop's corner becomes the screen origin.

    Frames the crop leaves empty are dropped unless the plan preserves them.
    """

    def __init__(self, config: CropConfig):
        self.config = config

    @classmethod
    def from_config(cls, transform: Transform) -> "CropStep":
        return cls(require_step_config(transform.crop, "crop"))

    def apply(self, stream: Stream, context: StepContext) -> None:
        c = self.config
        uncompress_frames(stream)
        stream.calculate_screen_size()
        rect = CropRect.anchored(c.x, c.y, c.width, c.height)

        kept = []
        for index, frame in enumerate(stream.frames):
            if frame.has_pixels and crop_image(frame, rect, context.settings.preserve_empty_frames):
                kept.append(frame)
            else:
                logger.debug("Dropping frame %d: crop left no pixels", index)
        stream.frames = kept

        stream.screen_width = max(0, min(c.width, stream.screen_width - c.x))
        stream.screen_height = max(0, min(c.height, stream.screen_height - c.y))

    def describe(self) -> str:
        c = self.config
        return f"crop {c.width}x{c.height} at ({c.x}, {c.y})"
