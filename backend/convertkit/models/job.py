"""In-flight conversion job & the staged files it owns.

Only lives for the duration of a single request; nothing here is persisted.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from fastapi import UploadFile
from pydantic import BaseModel


class StrategyName(str, Enum):
    """Identifier used by the registry to pick a conversion behaviour."""

    DOC_CONVERT = "doc-convert"
    IMAGE_COMPRESS = "image-compress"
    QR_GENERATE = "qr-generate"
    AUDIO_TRANSCODE = "audio-transcode"
    BMI_CALCULATE = "bmi-calculate"


class JobState(str, Enum):
    """Lifecycle of a request inside the pipeline."""

    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    DISPATCHED = "DISPATCHED"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CLEANED = "CLEANED"


@dataclass
class UploadedFile:
    """A client-submitted file after it has been written to the staging directory."""

    path: Path
    original_name: str
    content_type: Optional[str]
    size: int

    @property
    def extension(self) -> str:
        return Path(self.original_name).suffix.lower()


@dataclass
class ConversionJob:
    """The unit of work for one request.

    ``upload`` and ``payload`` are what the client sent, ``params`` is the
    validated, typed view of them built by the strategy.  ``inputs`` and
    ``outputs`` are every path the pipeline must release once the job ends.
    """

    strategy: StrategyName
    upload: Optional[UploadFile] = None
    payload: Any = None
    params: Optional[BaseModel] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: JobState = JobState.RECEIVED
    inputs: list[UploadedFile] = field(default_factory=list)
    outputs: list[Path] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def input(self) -> UploadedFile:
        """The single staged input of file-bearing strategies."""
        return self.inputs[0]

    def staged_paths(self) -> list[Path]:
        return [staged.path for staged in self.inputs] + list(self.outputs)
