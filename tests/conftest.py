"""Shared fixtures: a coordinate-coded source image and a captured run log."""

import io
from pathlib import Path

import numpy as np
import pytest
from canvas_slicer.core.log import Log
from PIL import Image


def coordinate_image(width: int, height: int) -> Image.Image:
    """RGB image where red = x and green = y of each pixel (sizes up to 256)."""
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :, 0] = np.arange(width, dtype=np.uint8)[np.newaxis, :]
    arr[:, :, 1] = np.arange(height, dtype=np.uint8)[:, np.newaxis]
    arr[:, :, 2] = 255
    return Image.fromarray(arr)


@pytest.fixture
def source_image(tmp_path: Path):
    """Factory: write a coordinate-coded PNG of the given size, return its path."""

    def _make(width: int = 30, height: int = 30, name: str = 'canvas.png') -> Path:
        path = tmp_path / name
        coordinate_image(width, height).save(path)
        return path

    return _make


@pytest.fixture
def log() -> Log:
    return Log(out=io.StringIO(), err=io.StringIO())
