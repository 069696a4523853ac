"""Registries for kind-based color transform and plan step dispatch."""

from typing import TYPE_CHECKING, Callable

from gifxform.exceptions import ConfigError, TransformError

if TYPE_CHECKING:
    from gifxform.config import Transform, TransformType
    from gifxform.transforms.base import BaseStep, ColorTransformer, ColorTransformKind


class ColorTransformRegistry:
    """Registry mapping each ColorTransformKind to its transformer function.

    Usage:
        # Register a transformer (typically via decorator)
        @register_color_transform(ColorTransformKind.RECOLOR)
        def color_change_transformer(colormap, payload, diagnostics):
            ...

        # Get transformer by kind
        transformer = ColorTransformRegistry.get(ColorTransformKind.RECOLOR)
    """

    _transformers: dict["ColorTransformKind", "ColorTransformer"] = {}

    @classmethod
    def register(cls, kind: "ColorTransformKind", transformer: "ColorTransformer") -> None:
        """Register the transformer for a kind, replacing any previous one."""
        cls._transformers[kind] = transformer

    @classmethod
    def get(cls, kind: "ColorTransformKind") -> "ColorTransformer":
        """Get the transformer for a kind.

        Raises:
            TransformError: If no transformer is registered for the kind
        """
        if kind not in cls._transformers:
            available = ", ".join(k.value for k in cls.all_kinds())
            raise TransformError(
                f"No transformer registered for color transform '{kind}'. Available: {available}",
                context={"kind": str(kind)},
            )
        return cls._transformers[kind]

    @classmethod
    def all_kinds(cls) -> list["ColorTransformKind"]:
        """Get all registered kinds, sorted by name."""
        return sorted(cls._transformers, key=lambda k: k.value)


class StepRegistry:
    """Registry mapping each plan step type to its handler class.

    Provides centralized dispatch for plan steps, replacing hardcoded
    if/elif chains in the executor.

    Usage:
        @register_step(TransformType.FLIP)
        class FlipStep(BaseStep):
            ...

        step = get_step(transform)
        step.apply(stream, context)
    """

    _steps: dict["TransformType", type["BaseStep"]] = {}

    @classmethod
    def register(cls, step_type: "TransformType", step_class: type["BaseStep"]) -> None:
        cls._steps[step_type] = step_class

    @classmethod
    def get(cls, step_type: "TransformType") -> type["BaseStep"]:
        """Get the handler class for a step type.

        Raises:
            ConfigError: If no handler is registered for the type
        """
        if step_type not in cls._steps:
            available = ", ".join(cls.all_names())
            raise ConfigError(
                f"Unknown transform type: '{step_type}'. Available: {available}",
                context={"transform_type": str(step_type)},
            )
        return cls._steps[step_type]

    @classmethod
    def all_names(cls) -> list[str]:
        """Get all registered step type names, sorted."""
        return sorted(t.value for t in cls._steps)


def register_color_transform(kind: "ColorTransformKind") -> Callable[["ColorTransformer"], "ColorTransformer"]:
    """Decorator registering a transformer function for ``kind``."""

    def decorator(func: "ColorTransformer") -> "ColorTransformer":
        ColorTransformRegistry.register(kind, func)
        return func

    return decorator


def get_color_transformer(kind: "ColorTransformKind") -> "ColorTransformer":
    """Get the transformer function for ``kind``."""
    return ColorTransformRegistry.get(kind)


def register_step(step_type: "TransformType") -> Callable[[type["BaseStep"]], type["BaseStep"]]:
    """Decorator registering a step handler class for ``step_type``."""

    def decorator(step_class: type["BaseStep"]) -> type["BaseStep"]:
        step_class.name = step_type.value
        StepRegistry.register(step_type, step_class)
        return step_class

    return decorator


def get_step(transform: "Transform") -> "BaseStep":
    """Build the registered step handler for a parsed plan step."""
    return StepRegistry.get(transform.type).from_config(transform)
