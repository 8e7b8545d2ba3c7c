# Namespace for Pydantic models & in-flight job structures.
from .envelope import BmiResult, ErrorBody, TransportEnvelope
from .job import ConversionJob, JobState, StrategyName, UploadedFile
from .requests import (
    AudioConvertParams,
    BmiRequest,
    DocumentConvertParams,
    DocumentDirection,
    QrRequest,
)

__all__ = [
    "AudioConvertParams",
    "BmiRequest",
    "BmiResult",
    "ConversionJob",
    "DocumentConvertParams",
    "DocumentDirection",
    "ErrorBody",
    "JobState",
    "QrRequest",
    "StrategyName",
    "TransportEnvelope",
    "UploadedFile",
]
