"""Lossy re-encoding of uploaded images with Pillow."""

from __future__ import annotations

import io
import logging
import uuid
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from ..exceptions import ConversionFailed, InvalidInput
from ..models.job import ConversionJob, StrategyName
from ..utils.envelope import encode
from ..utils.storage import TemporaryStorage
from .base import ConversionStrategy

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {"image/jpeg", "image/png", "image/webp"}
JPEG_QUALITY = 70


def compress_to_jpeg(path: Path, quality: int = JPEG_QUALITY) -> bytes:
    """Re-encode the image at ``path`` as JPEG, whatever its source format."""
    with Image.open(path) as img:
        img.load()
        if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
            # JPEG has no alpha channel; flatten onto white.
            rgba = img.convert("RGBA")
            flattened = Image.new("RGB", rgba.size, (255, 255, 255))
            flattened.paste(rgba, mask=rgba.split()[3])
            img = flattened
        elif img.mode != "RGB":
            img = img.convert("RGB")
        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


class ImageCompressionStrategy(ConversionStrategy):
    name = StrategyName.IMAGE_COMPRESS
    failure_message = "Image compression failed"

    def validate(self, job: ConversionJob) -> None:
        if job.upload.content_type not in ALLOWED_MIME_TYPES:
            raise InvalidInput("Only JPEG, PNG, or WebP images are allowed")

    async def execute(self, job: ConversionJob, storage: TemporaryStorage) -> BaseModel:
        staged = job.input
        try:
            compressed = await run_in_threadpool(compress_to_jpeg, staged.path)
        except (UnidentifiedImageError, OSError) as exc:
            raise ConversionFailed(self.failure_message, str(exc)) from exc

        original_size = staged.size
        compressed_size = len(compressed)
        logger.info(
            "Compressed '%s' from %d to %d bytes", staged.original_name, original_size, compressed_size
        )
        return encode(
            compressed,
            "image/jpeg",
            f"{uuid.uuid4()}.jpg",
            originalSize=original_size,
            compressedSize=compressed_size,
            compressionRatio=compressed_size / original_size if original_size else 0.0,
        )
