"""Shared fixtures for gifxform tests."""

import shutil
import tempfile
from pathlib import Path

import numpy as np
import pytest
import yaml

from gifxform.codec import ZlibFrameCodec
from gifxform.diagnostics import Diagnostics
from gifxform.model import Colormap, Frame, Stream


# === Path/Directory Fixtures ===

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


# === Colormap Fixtures ===

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


@pytest.fixture
def rgbw_colormap():
    """Four-entry colormap: red, green, blue, white."""
    return Colormap.from_rgb([RED, GREEN, BLUE, WHITE])


@pytest.fixture
def diagnostics():
    """Fresh diagnostics collaborator."""
    return Diagnostics()


# === Frame/Stream Fixtures ===

def numbered_frame(width, height, left=0, top=0, **kwargs):
    """Frame whose pixel at (x, y) is y * width + x (mod 256)."""
    pixels = (np.arange(width * height, dtype=np.int64) % 256).astype(np.uint8).reshape(height, width)
    return Frame(pixels=pixels, left=left, top=top, **kwargs)


@pytest.fixture
def make_frame():
    """Factory for frames with distinct, position-derived pixel values."""
    return numbered_frame


@pytest.fixture
def small_frame():
    """3x2 frame at (1, 2)::

        0 1 2
        3 4 5
    """
    return Frame.from_rows([[0, 1, 2], [3, 4, 5]], left=1, top=2)


@pytest.fixture
def single_frame_stream():
    """100x100 screen with one full-screen frame."""
    return Stream(
        screen_width=100,
        screen_height=100,
        frames=[numbered_frame(100, 100)],
        global_colormap=Colormap.from_rgb([RED, GREEN, BLUE, WHITE]),
    )


@pytest.fixture
def animation_stream():
    """Three-frame animation on a 10x8 screen with local colormaps on two frames."""
    frames = [
        numbered_frame(10, 8),
        numbered_frame(4, 3, left=2, top=1, local_colormap=Colormap.from_rgb([RED, WHITE])),
        numbered_frame(3, 5, left=6, top=3, local_colormap=Colormap.from_rgb([GREEN, RED])),
    ]
    return Stream(
        screen_width=10,
        screen_height=8,
        frames=frames,
        global_colormap=Colormap.from_rgb([RED, GREEN, BLUE, WHITE]),
        codec=ZlibFrameCodec(),
    )


# === Config Fixtures ===

@pytest.fixture
def minimal_config_dict():
    """Minimal valid plan dictionary."""
    return {
        "version": 1,
        "transforms": [],
    }


@pytest.fixture
def full_config_dict():
    """Plan dictionary using every transform type."""
    return {
        "version": 1,
        "settings": {
            "preserve_empty_frames": True,
        },
        "transforms": [
            {"crop": {"x": 1, "y": 1, "width": 8, "height": 6}},
            {"flip": "horizontal"},
            {"rotate": 90},
            {"resize": {"width": 12, "fit": False}},
            {"recolor": {"from": "#ff0000", "to": "#0000ff"}},
            {"pipe": "cat"},
        ],
    }


@pytest.fixture
def temp_config_file(temp_dir, minimal_config_dict):
    """Create a temporary plan file."""
    config_path = temp_dir / "plan.yaml"
    with open(config_path, "w") as f:
        yaml.dump(minimal_config_dict, f)
    return config_path


@pytest.fixture
def full_config_file(temp_dir, full_config_dict):
    """Create a temporary full plan file."""
    config_path = temp_dir / "full_plan.yaml"
    with open(config_path, "w") as f:
        yaml.dump(full_config_dict, f)
    return config_path
