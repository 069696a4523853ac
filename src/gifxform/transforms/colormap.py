"""Color transform pipeline.

Transforms run in the order they were appended. Each one is applied to the
stream's global colormap first, then to every frame's local colormap in frame
order.
"""

from gifxform.diagnostics import Diagnostics, ensure_diagnostics
from gifxform.logging_config import get_logger
from gifxform.model import Stream
from gifxform.transforms.base import ColorTransform, ColorTransformKind, ColorTransformPayload
from gifxform.transforms.registry import get_color_transformer

logger = get_logger(__name__)


def append_color_transform(
    transforms: list[ColorTransform] | None,
    kind: ColorTransformKind,
    payload: ColorTransformPayload,
) -> list[ColorTransform]:
    """
    Append a transform at the tail of a pipeline.

    Args:
        transforms: Existing pipeline (None for an empty one)
        kind: Transform kind
        payload: Payload for that kind

    Returns:
        The pipeline (the same list when one was given)
    """
    if transforms is None:
        transforms = []
    transforms.append(ColorTransform(kind=kind, payload=payload))
    return transforms


def delete_color_transforms(
    transforms: list[ColorTransform] | None,
    kind: ColorTransformKind,
) -> list[ColorTransform]:
    """
    Remove every transform of the given kind, keeping the others in order.

    Matching is by kind only, never by payload.

    Returns:
        The pipeline (possibly empty)
    """
    if transforms is None:
        return []
    transforms[:] = [t for t in transforms if t.kind != kind]
    return transforms


def apply_color_transforms(
    transforms: list[ColorTransform] | None,
    stream: Stream,
    diagnostics: Diagnostics | None = None,
) -> None:
    """
    Apply a pipeline to every colormap of a stream, in place.

    Args:
        transforms: Pipeline to run
        stream: Stream whose colormaps are transformed
        diagnostics: Collaborator receiving warnings and recoverable errors
    """
    if not transforms:
        return
    diagnostics = ensure_diagnostics(diagnostics)

    for transform in transforms:
        transformer = get_color_transformer(transform.kind)
        logger.debug("Applying %s", transform.describe())

        for colormap in stream.colormaps():
            transformer(colormap, transform.payload, diagnostics)
