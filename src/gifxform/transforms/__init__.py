"""Transform package for gifxform.

Geometric transforms work on one frame at a time (``resize_stream`` on a
whole stream); color transforms form an ordered pipeline applied to every
colormap of a stream. Plan steps are handler classes registered per step
type; the executor looks them up with ``get_step``.

Usage:
    from gifxform.transforms import append_color_change, apply_color_transforms

    transforms = append_color_change(None, parse_color("#ff0000"), parse_color("#0000ff"))
    apply_color_transforms(transforms, stream)
"""

# Import transform modules to trigger registration
from gifxform.transforms import crop, flip, pipe, recolor, resize, rotate

from gifxform.transforms.base import (
    BaseStep,
    ColorChange,
    ColorTransform,
    ColorTransformKind,
    PipePayload,
    RecolorPayload,
    StepContext,
)
from gifxform.transforms.colormap import (
    append_color_transform,
    apply_color_transforms,
    delete_color_transforms,
)
from gifxform.transforms.crop import CropRect, CropStep, combine_crop, crop_image
from gifxform.transforms.flip import FlipStep, flip_image, flip_stream
from gifxform.transforms.pipe import PipeStep, append_pipe_transform, pipe_color_transformer
from gifxform.transforms.recolor import RecolorStep, append_color_change, color_change_transformer
from gifxform.transforms.registry import (
    ColorTransformRegistry,
    StepRegistry,
    get_color_transformer,
    get_step,
    register_color_transform,
    register_step,
)
from gifxform.transforms.resize import ResizeStep, resize_stream
from gifxform.transforms.rotate import RotateStep, rotate_image
from gifxform.transforms.scale import scale_image

__all__ = [
    # Color transform types
    "ColorChange",
    "ColorTransform",
    "ColorTransformKind",
    "PipePayload",
    "RecolorPayload",
    # Registries
    "ColorTransformRegistry",
    "get_color_transformer",
    "register_color_transform",
    "StepRegistry",
    "get_step",
    "register_step",
    # Plan steps
    "BaseStep",
    "StepContext",
    "CropStep",
    "FlipStep",
    "RotateStep",
    "ResizeStep",
    "RecolorStep",
    "PipeStep",
    # Color pipeline
    "append_color_transform",
    "apply_color_transforms",
    "delete_color_transforms",
    "append_color_change",
    "append_pipe_transform",
    "color_change_transformer",
    "pipe_color_transformer",
    # Geometry
    "CropRect",
    "combine_crop",
    "crop_image",
    "flip_image",
    "flip_stream",
    "rotate_image",
    "scale_image",
    "resize_stream",
]
