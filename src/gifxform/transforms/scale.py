"""Scale transform for gifxform.

Scaling uses 10-bit fixed point so every frame of an animation rounds the
same way. A frame's new geometry comes from its four screen-relative edges,
each scaled independently, rather than from width * factor: frames that
touch or overlap before scaling still do afterwards.

Scan conversion walks the source rows and columns, accumulating the
fixed-point destination position. Each time the position crosses destination
boundaries, the current source pixel is replicated into every destination
row/column crossed. The last row and column snap to the computed bottom and
right edges.
"""

from dataclasses import dataclass

import numpy as np

from gifxform.codec import compress_frame, release_uncompressed, uncompress_frame
from gifxform.diagnostics import Diagnostics, ensure_diagnostics
from gifxform.exceptions import TransformError
from gifxform.logging_config import get_logger
from gifxform.model import Frame, Stream
from gifxform.transforms._utils import install_pixels

logger = get_logger(__name__)

SCALE_BITS = 10
SCALE_FACTOR = 1 << SCALE_BITS

# Largest dimension whose scaled value still fits a signed 32-bit integer
MAX_DIMENSION = (2**31 - 1) >> SCALE_BITS


def scale(value: int) -> int:
    return value << SCALE_BITS


def unscale_noround(value: int) -> int:
    return value >> SCALE_BITS


def unscale(value: int) -> int:
    """Unscale, rounding to nearest (halves round up)."""
    return unscale_noround(value + (1 << (SCALE_BITS - 1)))


def scaled_step(factor: float) -> int:
    """Fixed-point step for a scale factor."""
    return int(SCALE_FACTOR * factor + 0.5)


@dataclass
class ScaledGeometry:
    """New edges of a scaled frame, in screen coordinates."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top


def scaled_geometry(frame: Frame, xstep: int, ystep: int) -> ScaledGeometry:
    """
    Compute a frame's scaled edges.

    Width and height are at least 1; a frame never scales away.
    """
    geometry = ScaledGeometry(
        left=unscale(xstep * frame.left),
        top=unscale(ystep * frame.top),
        right=unscale(xstep * (frame.left + frame.width)),
        bottom=unscale(ystep * (frame.top + frame.height)),
    )
    if geometry.width <= 0:
        geometry.right = geometry.left + 1
    if geometry.height <= 0:
        geometry.bottom = geometry.top + 1
    return geometry


def _column_counts(frame: Frame, xstep: int, geometry: ScaledGeometry) -> list[int]:
    """How many destination columns each source column fills."""
    counts = []
    new_x = geometry.left
    scaled_x = xstep * frame.left
    for i in range(frame.width):
        scaled_x += xstep
        if i == frame.width - 1:
            scaled_x = scale(geometry.right)

        delta = unscale(scaled_x - scale(new_x))
        if delta > 0:
            counts.append(delta)
            new_x += delta
        else:
            counts.append(0)
    return counts


def _row_counts(frame: Frame, ystep: int, geometry: ScaledGeometry) -> list[int]:
    """How many destination rows each source row fills.

    A row is only emitted once the position has passed the next destination
    row boundary.
    """
    counts = []
    new_y = geometry.top
    scaled_y = ystep * frame.top
    for j in range(frame.height):
        scaled_y += ystep
        if j == frame.height - 1:
            scaled_y = scale(geometry.bottom)

        if scaled_y < scale(new_y + 1):
            counts.append(0)
            continue
        delta = unscale(scaled_y - scale(new_y))
        counts.append(delta)
        new_y += delta
    return counts


def scale_image(
    stream: Stream,
    frame: Frame,
    xfactor: float,
    yfactor: float,
    diagnostics: Diagnostics | None = None,
) -> None:
    """
    Scale a frame and its placement by screen-relative factors.

    A frame that only holds compressed data is uncompressed with the stream's
    codec and recompressed afterwards.

    Args:
        stream: Stream owning the frame (supplies the codec)
        frame: The frame to scale (mutated in place)
        xfactor: Horizontal factor, new screen width / old screen width
        yfactor: Vertical factor, new screen height / old screen height
        diagnostics: Collaborator used to report fatal size overflows

    Raises:
        TransformError: If a factor is not positive
        FatalTransformError: If the scaled frame would be too large
    """
    diagnostics = ensure_diagnostics(diagnostics)
    if xfactor <= 0 or yfactor <= 0:
        raise TransformError(
            f"Scale factors must be positive, got {xfactor} x {yfactor}",
            context={"xfactor": xfactor, "yfactor": yfactor},
        )
    if frame.is_empty:
        logger.debug("Skipping scale of empty frame")
        return

    xstep = scaled_step(xfactor)
    ystep = scaled_step(yfactor)
    geometry = scaled_geometry(frame, xstep, ystep)

    if geometry.width > MAX_DIMENSION or geometry.height > MAX_DIMENSION:
        diagnostics.fatal(
            "new image size is too big for me to handle",
            context={"width": geometry.width, "height": geometry.height},
        )

    was_compressed = frame.pixels is None
    if was_compressed:
        uncompress_frame(frame, stream.codec)

    row_counts = _row_counts(frame, ystep, geometry)
    column_counts = _column_counts(frame, xstep, geometry)
    scaled = np.repeat(np.repeat(frame.pixels, row_counts, axis=0), column_counts, axis=1)

    install_pixels(frame, np.ascontiguousarray(scaled))
    frame.left = geometry.left
    frame.top = geometry.top

    if was_compressed:
        compress_frame(frame, stream.codec)
        release_uncompressed(frame)
