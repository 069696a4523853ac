"""Color specifications and text colormap files.

A colormap file holds one color per line, either as three decimal components
("255 0 0", "255,0,0") or as hex ("#ff0000", "#f00"). Blank lines and lines
starting with ";" or a "#" that is not a hex color are comments.
"""

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import TextIO

from gifxform.constants import MAX_COLOR_COMPONENT
from gifxform.diagnostics import Diagnostics, ensure_diagnostics
from gifxform.exceptions import ColormapFileError, TransformError
from gifxform.logging_config import get_logger
from gifxform.model import Color, Colormap

logger = get_logger(__name__)

_TRIPLE_RE = re.compile(r"^(\d+)\s*[,\s]\s*(\d+)\s*[,\s]\s*(\d+)$")
_HEX6_RE = re.compile(r"^#([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$")
_HEX3_RE = re.compile(r"^#([0-9a-f])([0-9a-f])([0-9a-f])$")


def _parse_rgb_text(text: str) -> tuple[int, int, int] | None:
    """Parse "r g b", "r,g,b", "#rrggbb" or "#rgb"; None if it is none of those."""
    text = text.strip().lower()

    match = _TRIPLE_RE.match(text)
    if match:
        return int(match.group(1)), int(match.group(2)), int(match.group(3))

    match = _HEX6_RE.match(text)
    if match:
        return tuple(int(g, 16) for g in match.groups())  # type: ignore[return-value]

    match = _HEX3_RE.match(text)
    if match:
        return tuple(int(g * 2, 16) for g in match.groups())  # type: ignore[return-value]

    return None


def _check_range(rgb: tuple[int, int, int], source: str) -> None:
    if any(c > MAX_COLOR_COMPONENT for c in rgb):
        raise TransformError(f"Color component out of range in '{source}'")


def parse_color(value: int | str | list[int] | tuple[int, ...] | Color) -> Color:
    """
    Parse a color specification.

    Supports:
      - An integer (or a string of digits): a colormap index, giving a color
        pinned to that pixel slot
      - "#rrggbb" or "#rgb"
      - "r,g,b" or "r g b"
      - A sequence of three integers

    Args:
        value: The color specification

    Returns:
        The parsed Color

    Raises:
        TransformError: If the specification is invalid
    """
    if isinstance(value, Color):
        return value

    if isinstance(value, bool):
        raise TransformError(f"Invalid color: {value!r}")

    if isinstance(value, int):
        if value < 0:
            raise TransformError(f"Colormap index must not be negative, got {value}")
        return Color(0, 0, 0, pixel=value)

    if isinstance(value, (list, tuple)):
        if len(value) != 3 or not all(isinstance(c, int) and not isinstance(c, bool) for c in value):
            raise TransformError(f"Color must have three integer components, got {value!r}")
        rgb = (value[0], value[1], value[2])
        if any(c < 0 for c in rgb):
            raise TransformError(f"Color component out of range in {value!r}")
        _check_range(rgb, str(value))
        return Color(*rgb)

    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return Color(0, 0, 0, pixel=int(text))
        rgb = _parse_rgb_text(text)
        if rgb is None:
            raise TransformError(
                f"Invalid color: '{value}'. Use a format like '#ff0000', '255,0,0' or a colormap index"
            )
        _check_range(rgb, text)
        return Color(*rgb)

    raise TransformError(f"Invalid color: {value!r}")


def read_colormap_text(
    stream: TextIO,
    name: str = "<colormap>",
    diagnostics: Diagnostics | None = None,
) -> Colormap | None:
    """
    Read colors, one per line, from a text stream.

    Malformed lines are reported as warnings and skipped.

    Args:
        stream: Text stream to read
        name: Source name used in diagnostics
        diagnostics: Collaborator receiving warnings

    Returns:
        The colormap, or None if the stream contained no colors
    """
    diagnostics = ensure_diagnostics(diagnostics)
    colors: list[Color] = []

    for lineno, line in enumerate(stream, start=1):
        text = line.strip()
        if not text or text.startswith(";"):
            continue

        rgb = _parse_rgb_text(text)
        if rgb is None:
            if text.startswith("#"):
                continue  # comment
            diagnostics.warning("%s:%d: syntax error in colormap line", name, lineno)
            continue
        if any(c > MAX_COLOR_COMPONENT for c in rgb):
            diagnostics.warning("%s:%d: color component out of range", name, lineno)
            continue
        colors.append(Color(*rgb))

    if not colors:
        return None
    logger.debug("Read %d colors from %s", len(colors), name)
    return Colormap(colors)


def read_colormap_file(
    source: Path | str | TextIO,
    diagnostics: Diagnostics | None = None,
    name: str | None = None,
) -> Colormap | None:
    """
    Read a colormap file from a path or an open text stream.

    Raises:
        ColormapFileError: If the file cannot be opened or decoded
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return read_colormap_text(f, name or str(path), diagnostics)
        except (OSError, UnicodeDecodeError) as e:
            raise ColormapFileError(f"Cannot read colormap file: {e}", context={"path": str(path)}) from e
    return read_colormap_text(source, name or "<colormap>", diagnostics)


def write_colormap_text(colormap: Colormap) -> str:
    """Render a colormap as "R G B" lines, the format fed to color filters."""
    out = io.StringIO()
    for color in colormap.colors:
        out.write(f"{color.red} {color.green} {color.blue}\n")
    return out.getvalue()
