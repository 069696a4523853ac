"""Transform plan loading and validation for gifxform."""

import re
import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from gifxform.colormap_file import parse_color
from gifxform.constants import ROTATE_ANGLES
from gifxform.exceptions import ConfigError, TransformError
from gifxform.model import Color


# ============================================================================
# Enums for constrained string values
# ============================================================================


class FlipDirection(str, Enum):
    """Valid flip directions."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class TransformType(str, Enum):
    """Transform step types."""

    CROP = "crop"
    FLIP = "flip"
    ROTATE = "rotate"
    RESIZE = "resize"
    RECOLOR = "recolor"
    PIPE = "pipe"


def _parse_enum(
    enum_class: type[Enum],
    value: Any,
    transform_idx: int | None = None,
    field: str | None = None,
) -> Enum:
    """Parse a string value into an enum with validation.

    Raises:
        ConfigError: If the value is not a valid enum member.
    """
    try:
        return enum_class(str(value).lower())
    except ValueError:
        valid = ", ".join(e.value for e in enum_class)
        raise ConfigError(
            f"Invalid value '{value}'. Valid values are: {valid}",
            context=_context(transform_idx, field),
        )


def _context(transform_idx: int | None, field: str | None) -> dict[str, Any]:
    context: dict[str, Any] = {}
    if transform_idx is not None:
        context["transform"] = transform_idx + 1
    if field:
        context["field"] = field
    return context


def _parse_int(value: Any, transform_idx: int, field: str, minimum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"Expected an integer, got {value!r}", context=_context(transform_idx, field))
    if minimum is not None and value < minimum:
        raise ConfigError(f"Must be at least {minimum}, got {value}", context=_context(transform_idx, field))
    return value


def _parse_color(value: Any, transform_idx: int, field: str) -> Color:
    try:
        return parse_color(value)
    except TransformError as e:
        raise ConfigError(str(e), context=_context(transform_idx, field)) from e


# ============================================================================
# Transform steps
# ============================================================================


@dataclass
class CropTransform:
    """Crop to a rectangle in screen coordinates.

    The rectangle's top-left corner becomes the new screen origin.
    """
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass
class FlipTransform:
    """Mirror every frame on the screen."""
    direction: FlipDirection = FlipDirection.HORIZONTAL


@dataclass
class RotateTransform:
    """Rotate clockwise by 90, 180 or 270 degrees."""
    angle: int = 90


@dataclass
class ResizeTransform:
    """Resize the screen; a missing dimension keeps the aspect ratio."""
    width: int | None = None
    height: int | None = None
    fit: bool = False  # Shrink to fit within width x height, never enlarge


@dataclass
class RecolorTransform:
    """Replace a color (or a colormap index) with another color."""
    old_color: Color = field(default_factory=lambda: Color(0, 0, 0))
    new_color: Color = field(default_factory=lambda: Color(0, 0, 0))


@dataclass
class PipeTransform:
    """Filter colormaps through an external command."""
    command: str | list[str] = ""


@dataclass
class Transform:
    """A single transformation step."""
    type: TransformType
    crop: CropTransform | None = None
    flip: FlipTransform | None = None
    rotate: RotateTransform | None = None
    resize: ResizeTransform | None = None
    recolor: RecolorTransform | None = None
    pipe: PipeTransform | None = None
    enabled: bool = True  # Set to False to skip this transform


@dataclass
class Settings:
    """Global settings for a transform plan."""
    preserve_empty_frames: bool = False  # Keep frames a crop misses as 1x1 transparent frames


@dataclass
class Config:
    """Root configuration object."""
    version: int = 1
    settings: Settings = field(default_factory=Settings)
    transforms: list[Transform] = field(default_factory=list)


# ============================================================================
# Parsing
# ============================================================================

_RESIZE_RE = re.compile(r"^\s*(\d+|_)\s*x\s*(\d+|_)\s*$", re.IGNORECASE)


def split_command(command: str) -> list[str]:
    """Split a command string into arguments for running without a shell."""
    return shlex.split(command)


def _parse_crop(value: Any, idx: int) -> CropTransform:
    if isinstance(value, (list, tuple)):
        if len(value) != 4:
            raise ConfigError("Crop needs [x, y, width, height]", context=_context(idx, "crop"))
        value = dict(zip(("x", "y", "width", "height"), value))
    if not isinstance(value, dict):
        raise ConfigError(f"Invalid crop: {value!r}", context=_context(idx, "crop"))
    return CropTransform(
        x=_parse_int(value.get("x", 0), idx, "crop.x", minimum=0),
        y=_parse_int(value.get("y", 0), idx, "crop.y", minimum=0),
        width=_parse_int(value.get("width"), idx, "crop.width", minimum=1),
        height=_parse_int(value.get("height"), idx, "crop.height", minimum=1),
    )


def _parse_flip(value: Any, idx: int) -> FlipTransform:
    if isinstance(value, dict):
        value = value.get("direction", "horizontal")
    return FlipTransform(direction=_parse_enum(FlipDirection, value, idx, "flip"))


def _parse_rotate(value: Any, idx: int) -> RotateTransform:
    if isinstance(value, dict):
        value = value.get("angle", 90)
    angle = _parse_int(value, idx, "rotate")
    if angle not in ROTATE_ANGLES:
        raise ConfigError(
            f"Rotation angle must be 90, 180, or 270, got {angle}",
            context=_context(idx, "rotate"),
        )
    return RotateTransform(angle=angle)


def _parse_dimension(value: Any, idx: int, field: str) -> int | None:
    if value is None or value == "_":
        return None
    return _parse_int(value, idx, field, minimum=1)


def _parse_resize(value: Any, idx: int) -> ResizeTransform:
    if isinstance(value, str):
        # "WxH" where either side may be "_"
        match = _RESIZE_RE.match(value)
        if not match:
            raise ConfigError(
                f"Invalid resize '{value}'. Use a format like '200x100', '200x_' or '_x100'",
                context=_context(idx, "resize"),
            )
        value = {
            "width": None if match.group(1) == "_" else int(match.group(1)),
            "height": None if match.group(2) == "_" else int(match.group(2)),
        }
    if not isinstance(value, dict):
        raise ConfigError(f"Invalid resize: {value!r}", context=_context(idx, "resize"))

    resize = ResizeTransform(
        width=_parse_dimension(value.get("width"), idx, "resize.width"),
        height=_parse_dimension(value.get("height"), idx, "resize.height"),
        fit=bool(value.get("fit", False)),
    )
    if resize.width is None and resize.height is None:
        raise ConfigError("Resize needs a width or a height", context=_context(idx, "resize"))
    return resize


def _parse_recolor(value: Any, idx: int) -> RecolorTransform:
    if not isinstance(value, dict) or "from" not in value or "to" not in value:
        raise ConfigError("Recolor needs 'from' and 'to' colors", context=_context(idx, "recolor"))
    new_color = _parse_color(value["to"], idx, "recolor.to")
    if new_color.has_pixel:
        raise ConfigError(
            "Recolor target must be a color, not a colormap index",
            context=_context(idx, "recolor.to"),
        )
    return RecolorTransform(
        old_color=_parse_color(value["from"], idx, "recolor.from"),
        new_color=new_color,
    )


def _parse_pipe(value: Any, idx: int) -> PipeTransform:
    shell = True
    if isinstance(value, dict):
        shell = bool(value.get("shell", True))
        value = value.get("command")
    if isinstance(value, list):
        if not value or not all(isinstance(v, str) for v in value):
            raise ConfigError("Pipe command list must hold strings", context=_context(idx, "pipe"))
        return PipeTransform(command=[str(v) for v in value])
    if not isinstance(value, str) or not value.strip():
        raise ConfigError("Pipe needs a command", context=_context(idx, "pipe"))
    if not shell:
        return PipeTransform(command=split_command(value))
    return PipeTransform(command=value)


def parse_transform(transform_data: dict[str, Any], idx: int = 0) -> Transform:
    """Parse a single transform step from config data."""
    if not isinstance(transform_data, dict):
        raise ConfigError(f"Transform must be a mapping, got {transform_data!r}", context=_context(idx, None))
    enabled = bool(transform_data.get("enabled", True))

    if "crop" in transform_data:
        return Transform(type=TransformType.CROP, crop=_parse_crop(transform_data["crop"], idx), enabled=enabled)
    elif "flip" in transform_data:
        return Transform(type=TransformType.FLIP, flip=_parse_flip(transform_data["flip"], idx), enabled=enabled)
    elif "rotate" in transform_data:
        return Transform(
            type=TransformType.ROTATE, rotate=_parse_rotate(transform_data["rotate"], idx), enabled=enabled
        )
    elif "resize" in transform_data:
        return Transform(
            type=TransformType.RESIZE, resize=_parse_resize(transform_data["resize"], idx), enabled=enabled
        )
    elif "recolor" in transform_data:
        return Transform(
            type=TransformType.RECOLOR, recolor=_parse_recolor(transform_data["recolor"], idx), enabled=enabled
        )
    elif "pipe" in transform_data:
        return Transform(type=TransformType.PIPE, pipe=_parse_pipe(transform_data["pipe"], idx), enabled=enabled)

    raise ConfigError(f"Unknown transform type: {transform_data}", context=_context(idx, None))


def parse_config(data: Any) -> Config:
    """Build a Config from already-loaded YAML data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML dictionary")

    settings = Settings()
    if "settings" in data:
        s = data["settings"] or {}
        settings = Settings(preserve_empty_frames=bool(s.get("preserve_empty_frames", False)))

    if "transforms" not in data:
        raise ConfigError("Configuration must contain 'transforms' section")
    raw_transforms = data["transforms"] or []
    if not isinstance(raw_transforms, list):
        raise ConfigError("'transforms' must be a list")

    transforms = [parse_transform(t, idx) for idx, t in enumerate(raw_transforms)]

    return Config(
        version=data.get("version", 1),
        settings=settings,
        transforms=transforms,
    )


def load_config(config_path: Path) -> Config:
    """Load and validate a transform plan file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", context={"path": str(config_path)}) from e

    return parse_config(data)

