"""Transform plan execution for gifxform."""

from gifxform.config import Config, Settings, Transform
from gifxform.diagnostics import Diagnostics, ensure_diagnostics
from gifxform.logging_config import get_logger
from gifxform.model import Stream
from gifxform.transforms import StepContext, apply_color_transforms, get_step

logger = get_logger(__name__)


class TransformExecutor:
    """Applies a transform plan to a stream.

    Geometric steps run in plan order. Color steps are collected into one
    color transform pipeline, consecutive recolors merged, and applied to
    every colormap once the geometric steps are done.
    """

    def apply_config(
        self,
        stream: Stream,
        config: Config,
        dry_run: bool = False,
        diagnostics: Diagnostics | None = None,
    ) -> Stream:
        """Apply a loaded plan to a stream."""
        return self.apply(stream, config.transforms, config.settings, dry_run, diagnostics)

    def apply(
        self,
        stream: Stream,
        transforms: list[Transform],
        settings: Settings | None = None,
        dry_run: bool = False,
        diagnostics: Diagnostics | None = None,
    ) -> Stream:
        """
        Apply transform steps to a stream.

        Args:
            stream: The stream to transform (mutated in place)
            transforms: Steps to apply
            settings: Plan settings
            dry_run: If True, only describe what would be done
            diagnostics: Collaborator receiving warnings and errors

        Returns:
            The transformed stream
        """
        context = StepContext(
            settings=settings or Settings(),
            diagnostics=ensure_diagnostics(diagnostics),
        )

        for transform in transforms:
            # Skip disabled transforms
            if not transform.enabled:
                continue

            # Get handler from registry
            step = get_step(transform)
            step_desc = step.describe()

            if dry_run:
                logger.info("    [dry-run] %s", step_desc)
            else:
                step.apply(stream, context)
                logger.debug("Applied: %s", step_desc)

        if not dry_run:
            apply_color_transforms(context.color_transforms, stream, context.diagnostics)
        return stream
