"""Data-URL envelope encoding."""

from __future__ import annotations

import base64
from typing import Any

from ..models.envelope import TransportEnvelope


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def encode(data: bytes, mime_type: str, file_name: str, **extra: Any) -> TransportEnvelope:
    """Embed ``data`` in a ``data:`` URL and merge ``extra`` metadata keys.

    No size cap is applied; large outputs simply make large responses.
    """
    return TransportEnvelope(
        fileName=file_name,
        mimeType=mime_type,
        dataUrl=to_data_url(data, mime_type),
        **extra,
    )


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 ``data:`` URL back into ``(mime_type, payload)``."""
    header, sep, encoded = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URL")
    mime_type = header[len("data:") : -len(";base64")]
    return mime_type, base64.b64decode(encoded, validate=True)
