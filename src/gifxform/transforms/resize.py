"""Stream resize for gifxform."""

from gifxform.config import ResizeTransform as ResizeConfig, Transform, TransformType
from gifxform.diagnostics import Diagnostics
from gifxform.logging_config import get_logger
from gifxform.model import Stream
from gifxform.transforms.base import BaseStep, StepContext
from gifxform.transforms.registry import register_step
from gifxform.transforms.scale import scale_image
from gifxform.transforms._utils import require_step_config

logger = get_logger(__name__)


def _is_set(value: int | None) -> bool:
    return value is not None and value > 0


def resize_stream(
    stream: Stream,
    new_width: int | None,
    new_height: int | None,
    fit: bool = False,
    diagnostics: Diagnostics | None = None,
) -> None:
    """
    Resize every frame of a stream to a new screen size.

    One pair of factors is computed from the screen size and used for every
    frame, so the frames keep their relative placement.

    Args:
        stream: The stream to resize (mutated in place)
        new_width: Target screen width; None or <= 0 derives it from the height
        new_height: Target screen height; None or <= 0 derives it from the width
        fit: Treat the target as a bounding box: keep the aspect ratio and
            never enlarge
        diagnostics: Collaborator passed on to the scale engine
    """
    width_set = _is_set(new_width)
    height_set = _is_set(new_height)
    if not width_set and not height_set:
        return

    stream.calculate_screen_size()
    screen_width = stream.screen_width
    screen_height = stream.screen_height

    xfactor = new_width / screen_width if width_set else 0.0
    yfactor = new_height / screen_height if height_set else 0.0

    if not width_set:
        xfactor = yfactor
        new_width = int(screen_width * xfactor + 0.5)
    elif not height_set:
        yfactor = xfactor
        new_height = int(screen_height * yfactor + 0.5)

    if fit and new_width >= screen_width and new_height >= screen_height:
        logger.debug("Stream already fits within %dx%d", new_width, new_height)
        return
    elif fit and xfactor < yfactor:
        yfactor = xfactor
        new_height = int(screen_height * yfactor + 0.5)
    elif fit and yfactor < xfactor:
        xfactor = yfactor
        new_width = int(screen_width * xfactor + 0.5)

    logger.debug(
        "Resizing %dx%d screen to %dx%d (factors %.4f x %.4f)",
        screen_width,
        screen_height,
        new_width,
        new_height,
        xfactor,
        yfactor,
    )
    for frame in stream.frames:
        scale_image(stream, frame, xfactor, yfactor, diagnostics)

    stream.screen_width = new_width
    stream.screen_height = new_height


@register_step(TransformType.RESIZE)
class ResizeStep(BaseStep):
    """Handler for resize steps."""

    def __init__(self, config: ResizeConfig):
        self.config = config

    @classmethod
    def from_config(cls, transform: Transform) -> "ResizeStep":
        return cls(require_step_config(transform.resize, "resize"))

    def apply(self, stream: Stream, context: StepContext) -> None:
        r = self.config
        resize_stream(stream, r.width, r.height, r.fit, context.diagnostics)

    def describe(self) -> str:
        r = self.config
        width = r.width if r.width is not None else "_"
        height = r.height if r.height is not None else "_"
        return f"resize {width}x{height}{' (fit)' if r.fit else ''}"
