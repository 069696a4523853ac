"""Stream, frame and colormap structures.

Pixel data is held as a 2-D ``uint8`` numpy array of palette indices. numpy
arrays share their byte block between views, which is how crop and vertical
flip keep aliasing the original storage without copying pixels: the block is
released once no array references it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from gifxform.constants import DEFAULT_SCREEN_HEIGHT, DEFAULT_SCREEN_WIDTH, MAX_COLOR_COMPONENT
from gifxform.exceptions import TransformError

if TYPE_CHECKING:
    from gifxform.codec import FrameCodec


@dataclass(frozen=True)
class Color:
    """A colormap entry.

    Attributes:
        red, green, blue: Components in 0..255
        pixel: Colormap index this color is pinned to, or None
    """

    red: int
    green: int
    blue: int
    pixel: int | None = None

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if not 0 <= value <= MAX_COLOR_COMPONENT:
                raise TransformError(
                    f"Color component {name} out of range: {value}",
                    context={"component": name},
                )

    def __str__(self) -> str:
        if self.pixel is not None:
            return f"index {self.pixel}"
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    @property
    def has_pixel(self) -> bool:
        return self.pixel is not None

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def same_rgb(self, other: Color) -> bool:
        """Compare colors by RGB only, ignoring any pinned pixel."""
        return self.rgb == other.rgb


@dataclass
class Colormap:
    """An ordered palette. Transforms replace entries but never change the count."""

    colors: list[Color] = field(default_factory=list)

    @classmethod
    def from_rgb(cls, triples: list[tuple[int, int, int]]) -> Colormap:
        return cls([Color(r, g, b) for r, g, b in triples])

    @property
    def ncol(self) -> int:
        return len(self.colors)

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, index: int) -> Color:
        return self.colors[index]

    def __setitem__(self, index: int, color: Color) -> None:
        self.colors[index] = color

    def rgb_list(self) -> list[tuple[int, int, int]]:
        return [c.rgb for c in self.colors]

    def copy(self) -> Colormap:
        return Colormap(list(self.colors))


@dataclass
class Frame:
    """One image of a stream, placed on the stream's screen.

    Attributes:
        pixels: (height, width) uint8 array of palette indices, or None when the
            frame only holds its compressed representation (or is empty)
        width, height: Frame size; derived from ``pixels`` when it is given
        left, top: Offset of the frame on the screen
        local_colormap: Palette overriding the stream's global one
        transparent: Transparent palette index, or None
        compressed: Compressed pixel data, or None
        codec_hints: Opaque options handed to the codec when recompressing
    """

    pixels: np.ndarray | None = None
    width: int = 0
    height: int = 0
    left: int = 0
    top: int = 0
    local_colormap: Colormap | None = None
    transparent: int | None = None
    compressed: bytes | None = None
    codec_hints: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.pixels is not None:
            self.set_pixels(self.pixels)

    @classmethod
    def from_rows(cls, rows: list[list[int]], **kwargs: Any) -> Frame:
        """Build a frame from nested lists of palette indices."""
        return cls(pixels=np.array(rows, dtype=np.uint8), **kwargs)

    def set_pixels(self, pixels: np.ndarray) -> None:
        """Install a new pixel array and update width/height from its shape."""
        pixels = np.asarray(pixels)
        if pixels.ndim != 2:
            raise TransformError(f"Frame pixels must be 2-D, got {pixels.ndim}-D")
        if pixels.dtype != np.uint8:
            pixels = pixels.astype(np.uint8)
        elif not pixels.flags.writeable:
            # In-place engines (horizontal flip) write through the array
            pixels = pixels.copy()
        self.pixels = pixels
        self.height, self.width = pixels.shape

    @property
    def has_pixels(self) -> bool:
        return self.pixels is not None

    @property
    def is_compressed_only(self) -> bool:
        return self.pixels is None and self.compressed is not None

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def rows(self) -> list[list[int]]:
        """Pixel rows as nested lists (empty for a frame without pixels)."""
        if self.pixels is None:
            return []
        return self.pixels.tolist()


@dataclass
class Stream:
    """A multi-frame image: frames placed on a logical screen.

    Attributes:
        screen_width, screen_height: Logical canvas size
        frames: Frames in display order
        global_colormap: Palette used by frames without a local one
        codec: Codec used when frames must be (de)compressed
    """

    screen_width: int = 0
    screen_height: int = 0
    frames: list[Frame] = field(default_factory=list)
    global_colormap: Colormap | None = None
    codec: FrameCodec | None = None

    @property
    def nframes(self) -> int:
        return len(self.frames)

    def colormaps(self) -> list[Colormap]:
        """Global colormap first, then local colormaps in frame order."""
        result = []
        if self.global_colormap is not None:
            result.append(self.global_colormap)
        result.extend(f.local_colormap for f in self.frames if f.local_colormap is not None)
        return result

    def calculate_screen_size(self, force: bool = False) -> None:
        """Recompute the screen so it covers every frame placement.

        Without ``force`` the screen only grows; with ``force`` it is set to
        the exact extent. An empty extent falls back to 640x480 when the
        screen is unset or ``force`` is given.
        """
        screen_width = 0
        screen_height = 0
        for frame in self.frames:
            screen_width = max(screen_width, frame.right)
            screen_height = max(screen_height, frame.bottom)

        if screen_width == 0 and (self.screen_width == 0 or force):
            screen_width = DEFAULT_SCREEN_WIDTH
        if screen_height == 0 and (self.screen_height == 0 or force):
            screen_height = DEFAULT_SCREEN_HEIGHT

        if self.screen_width < screen_width or force:
            self.screen_width = screen_width
        if self.screen_height < screen_height or force:
            self.screen_height = screen_height
