"""Pipe transform: filter a colormap through an external command.

The command reads "R G B" lines on standard input and writes replacement
colors, in colormap file format, on standard output. The call blocks until
the command exits; there is no timeout.
"""

import os
import subprocess
import tempfile

from gifxform.colormap_file import read_colormap_file, write_colormap_text
from gifxform.config import PipeTransform as PipeConfig, Transform, TransformType
from gifxform.constants import TEMP_FILE_PREFIX
from gifxform.diagnostics import Diagnostics
from gifxform.exceptions import ColormapFileError
from gifxform.logging_config import get_logger
from gifxform.model import Colormap, Stream
from gifxform.transforms.base import BaseStep, ColorTransform, ColorTransformKind, PipePayload, StepContext
from gifxform.transforms.colormap import append_color_transform
from gifxform.transforms.registry import register_color_transform, register_step
from gifxform.transforms._utils import require_step_config

logger = get_logger(__name__)

OUTPUT_NAME = "<color transformation>"


def _run_filter(command: str | list[str], colormap: Colormap, output_fd: int, diagnostics: Diagnostics) -> int:
    """Run the filter with stdout redirected to ``output_fd``; return its exit status."""
    try:
        process = subprocess.Popen(
            command,
            shell=isinstance(command, str),
            stdin=subprocess.PIPE,
            stdout=output_fd,
            text=True,
        )
    except OSError as e:
        diagnostics.fatal("can't run color transformation command: %s", e, context={"command": command})

    # communicate() closes stdin and tolerates a filter that exits without reading it
    process.communicate(input=write_colormap_text(colormap))
    return process.returncode


@register_color_transform(ColorTransformKind.PIPE)
def pipe_color_transformer(
    colormap: Colormap,
    payload: PipePayload,
    diagnostics: Diagnostics,
) -> None:
    """
    Replace a colormap's colors with the output of an external command.

    A failing command, or one producing no usable colors, is reported as a
    recoverable error and leaves the colormap unchanged. A result with a
    different number of colors is applied as far as it goes, with a warning.

    Raises:
        FatalTransformError: If the temporary file cannot be created or the
            command cannot be launched
    """
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=TEMP_FILE_PREFIX)
    except OSError as e:
        diagnostics.fatal("can't create temporary file: %s", e)

    try:
        with os.fdopen(fd, "wb") as output:
            status = _run_filter(payload.command, colormap, output.fileno(), diagnostics)

        if status != 0:
            diagnostics.error("color transformation command failed (exit status %d)", status)
            return

        if os.path.getsize(tmp_path) == 0:
            diagnostics.error("color transformation command generated no output")
            return

        try:
            new_colormap = read_colormap_file(tmp_path, diagnostics, name=OUTPUT_NAME)
        except ColormapFileError as e:
            diagnostics.error("color transformation output unreadable: %s", e)
            return

        if new_colormap is None:
            diagnostics.error("color transformation command generated no colors")
            return

        if new_colormap.ncol < colormap.ncol:
            diagnostics.warning("too few colors in color transformation results")
        elif new_colormap.ncol > colormap.ncol:
            diagnostics.warning("too many colors in color transformation results")

        for index in range(min(new_colormap.ncol, colormap.ncol)):
            colormap[index] = new_colormap[index]
        logger.debug("Color transformation replaced %d colors", min(new_colormap.ncol, colormap.ncol))
    finally:
        try:
            os.remove(tmp_path)
        except FileNotFoundError:
            pass


def append_pipe_transform(
    transforms: list[ColorTransform] | None,
    command: str | list[str],
) -> list[ColorTransform]:
    """Append a pipe transform running ``command`` to a pipeline."""
    return append_color_transform(transforms, ColorTransformKind.PIPE, PipePayload(command=command))


@register_step(TransformType.PIPE)
class PipeStep(BaseStep):
    """Handler for pipe steps; the filter joins the run's color pipeline."""

    def __init__(self, config: PipeConfig):
        self.config = config

    @classmethod
    def from_config(cls, transform: Transform) -> "PipeStep":
        return cls(require_step_config(transform.pipe, "pipe"))

    def apply(self, stream: Stream, context: StepContext) -> None:
        append_pipe_transform(context.color_transforms, self.config.command)

    def describe(self) -> str:
        return f"pipe colormaps through {self.config.command}"
