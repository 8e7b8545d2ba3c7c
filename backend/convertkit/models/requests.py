"""Validated request parameters, one model per strategy."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class DocumentDirection(str, Enum):
    DOCX_TO_PDF = "docx-to-pdf"
    PDF_TO_DOCX = "pdf-to-docx"

    @property
    def source_extension(self) -> str:
        return ".docx" if self is DocumentDirection.DOCX_TO_PDF else ".pdf"

    @property
    def target_extension(self) -> str:
        return ".pdf" if self is DocumentDirection.DOCX_TO_PDF else ".docx"


class DocumentConvertParams(BaseModel):
    direction: DocumentDirection


class AudioConvertParams(BaseModel):
    target_format: str = "mp3"
    # Forwarded verbatim to ffmpeg; ignored for wav.
    bitrate: str = "192k"


class QrRequest(BaseModel):
    url: StrictStr = Field(min_length=1)


class BmiRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    heightCm: float = Field(gt=0)
    weightKg: float = Field(gt=0)
