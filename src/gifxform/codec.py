"""Pixel codec interface.

The engines never encode or decode image data themselves. When a frame holds
only its compressed representation they go through a ``FrameCodec``, normally
the one attached to the stream.
"""

from __future__ import annotations

import zlib
from typing import Any, Protocol

import numpy as np

from gifxform.exceptions import TransformError
from gifxform.logging_config import get_logger
from gifxform.model import Frame

logger = get_logger(__name__)


class FrameCodec(Protocol):
    """Converts a frame between raw pixels and its compressed form."""

    def decompress(self, frame: Frame) -> np.ndarray:
        """Return the (height, width) uint8 pixel array for ``frame.compressed``."""
        ...

    def compress(self, frame: Frame, hints: dict[str, Any]) -> bytes:
        """Return compressed data for ``frame.pixels``."""
        ...


class ZlibFrameCodec:
    """Reference codec storing pixel planes as zlib-deflated bytes.

    This is a storage codec for library use and testing, not a GIF LZW
    encoder.
    """

    def __init__(self, level: int = 6):
        self.level = level

    def decompress(self, frame: Frame) -> np.ndarray:
        if frame.compressed is None:
            raise TransformError("Frame has no compressed data to decompress")
        try:
            raw = zlib.decompress(frame.compressed)
        except zlib.error as e:
            raise TransformError(f"Corrupt compressed frame: {e}") from e

        expected = frame.width * frame.height
        if len(raw) != expected:
            raise TransformError(
                f"Compressed frame holds {len(raw)} bytes, expected {expected}",
                context={"width": frame.width, "height": frame.height},
            )
        # frombuffer is read-only; in-place engines need a writable block
        return np.frombuffer(raw, dtype=np.uint8).reshape(frame.height, frame.width).copy()

    def compress(self, frame: Frame, hints: dict[str, Any]) -> bytes:
        if frame.pixels is None:
            raise TransformError("Frame has no pixels to compress")
        level = hints.get("level", self.level)
        return zlib.compress(np.ascontiguousarray(frame.pixels).tobytes(), level)


def uncompress_frame(frame: Frame, codec: FrameCodec | None) -> None:
    """Decode a compressed-only frame into raw pixels.

    Raises:
        TransformError: If the frame has no pixels and no codec is available
    """
    if frame.pixels is not None:
        return
    if frame.compressed is None:
        raise TransformError("Frame has neither raw nor compressed pixels")
    if codec is None:
        raise TransformError("Frame is compressed and no codec is available")
    frame.set_pixels(codec.decompress(frame))
    logger.debug("Uncompressed %dx%d frame", frame.width, frame.height)


def compress_frame(frame: Frame, codec: FrameCodec | None, hints: dict[str, Any] | None = None) -> None:
    """Encode raw pixels into the frame's compressed representation."""
    if codec is None:
        raise TransformError("No codec available to compress frame")
    frame.compressed = codec.compress(frame, hints if hints is not None else frame.codec_hints)


def release_uncompressed(frame: Frame) -> None:
    """Drop the raw pixel array, keeping width/height."""
    frame.pixels = None


def release_compressed(frame: Frame) -> None:
    """Drop (invalidate) the compressed representation."""
    frame.compressed = None
