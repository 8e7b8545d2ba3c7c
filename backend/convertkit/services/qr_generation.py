"""URL -> QR code PNG."""

from __future__ import annotations

import io

import qrcode
from PIL import Image
from pydantic import BaseModel, ValidationError
from qrcode.constants import ERROR_CORRECT_M
from starlette.concurrency import run_in_threadpool

from ..exceptions import InvalidInput
from ..models.job import ConversionJob, StrategyName
from ..models.requests import QrRequest
from ..utils.envelope import encode
from ..utils.storage import TemporaryStorage
from .base import ConversionStrategy

QR_SIZE = 300
QR_MARGIN = 2
QR_FILE_NAME = "qr-code.png"


def render_qr_png(text: str, size: int = QR_SIZE, margin: int = QR_MARGIN) -> bytes:
    """Render ``text`` as a square ``size`` x ``size`` PNG.  Deterministic.

    Modules are drawn at the largest whole pixel width that fits and the
    symbol is centred on a white canvas, so every module has the same width.
    Only symbols with more modules than ``size`` pixels are scaled down.
    """
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=1, border=margin)
    qr.add_data(text)
    qr.make(fit=True)
    qr.box_size = max(1, size // (qr.modules_count + 2 * margin))
    img = qr.make_image(fill_color="black", back_color="white").get_image().convert("RGB")

    if img.width > size:
        img = img.resize((size, size), Image.Resampling.NEAREST)
    elif img.width < size:
        canvas = Image.new("RGB", (size, size), "white")
        offset = (size - img.width) // 2
        canvas.paste(img, (offset, offset))
        img = canvas
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


class QrGenerationStrategy(ConversionStrategy):
    name = StrategyName.QR_GENERATE
    requires_upload = False
    failure_message = "QR code generation failed"

    def validate(self, job: ConversionJob) -> None:
        try:
            job.params = QrRequest.model_validate(job.payload or {})
        except ValidationError as exc:
            raise InvalidInput("URL is required") from exc

    async def execute(self, job: ConversionJob, storage: TemporaryStorage) -> BaseModel:
        url = job.params.url
        png = await run_in_threadpool(render_qr_png, url)
        return encode(png, "image/png", QR_FILE_NAME, originalUrl=url)
