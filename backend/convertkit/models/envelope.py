"""Response models returned by the conversion endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TransportEnvelope(BaseModel):
    """Base64-embedded result plus strategy specific metadata.

    Metadata (``originalSize``, ``targetFormat`` …) is stored as extra fields
    so it serializes at the top level next to ``dataUrl``.
    """

    model_config = ConfigDict(extra="allow")

    fileName: str
    mimeType: str
    dataUrl: str


class BmiResult(BaseModel):
    bmi: float
    category: str
    message: str
    ranges: dict[str, str]


class ErrorBody(BaseModel):
    error: str
    details: str | None = None
