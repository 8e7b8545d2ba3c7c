"""Small helpers shared by the test modules."""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image


def leftover_files(directory: Path) -> list[Path]:
    """Everything still present in the staging directory."""
    return list(directory.iterdir()) if directory.exists() else []


def make_image_bytes(fmt: str = "PNG", mode: str = "RGBA", size: tuple[int, int] = (64, 48)) -> bytes:
    color = {"RGBA": (200, 30, 30, 128), "L": 128}.get(mode, (200, 30, 30))
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()
