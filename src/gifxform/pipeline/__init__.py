"""Pipeline package for gifxform.

Usage:
    from gifxform.config import load_config
    from gifxform.pipeline import TransformExecutor

    executor = TransformExecutor()
    executor.apply_config(stream, load_config(Path("plan.yaml")))
"""

from gifxform.pipeline.transforms import TransformExecutor

__all__ = [
    "TransformExecutor",
]
