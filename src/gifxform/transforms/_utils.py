"""Shared utilities for the geometric transforms."""

import numpy as np

from gifxform.codec import uncompress_frame
from gifxform.exceptions import ConfigError, TransformError
from gifxform.model import Frame, Stream


def require_pixels(frame: Frame, operation: str) -> np.ndarray:
    """Return the frame's raw pixel array.

    Raises:
        TransformError: If the frame only holds compressed data (or nothing)
    """
    if frame.pixels is None:
        raise TransformError(
            f"{operation} needs raw pixels; uncompress the frame first",
            context={"width": frame.width, "height": frame.height},
        )
    return frame.pixels


def install_pixels(frame: Frame, pixels: np.ndarray | None) -> None:
    """Replace the frame's pixels and invalidate its compressed form.

    ``None`` leaves an empty 0x0 frame.
    """
    frame.compressed = None
    if pixels is None:
        frame.pixels = None
        frame.width = frame.height = 0
    else:
        frame.set_pixels(pixels)


def uncompress_frames(stream: Stream) -> None:
    """Decode every compressed-only frame of a stream with its codec."""
    for frame in stream.frames:
        if frame.is_compressed_only:
            uncompress_frame(frame, stream.codec)


def require_step_config(config, step_type: str):
    """Return a step's config section.

    Raises:
        ConfigError: If the plan step carries no options for its type
    """
    if config is None:
        raise ConfigError(f"{step_type.capitalize()} transform missing {step_type} config")
    return config
