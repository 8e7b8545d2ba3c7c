"""Audio-related REST endpoints.

1. `POST /audio/convert` – Receive multipart/form-data with the source track
   plus ``targetFormat``/``bitrate`` form fields and return the transcoded
   track inline.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from ..models.envelope import ErrorBody, TransportEnvelope
from ..models.job import StrategyName
from ..pipeline import ConversionPipeline
from .deps import get_pipeline

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/convert",
    response_model=TransportEnvelope,
    responses={400: {"model": ErrorBody}, 413: {"model": ErrorBody}, 500: {"model": ErrorBody}},
)
async def convert_audio(
    request: Request,
    file: Optional[UploadFile] = File(None),
    pipeline: ConversionPipeline = Depends(get_pipeline),
):
    """Transcode an uploaded track to mp3, aac, wav or ogg.

    ``targetFormat`` and ``bitrate`` are read from the raw form: FastAPI maps
    an empty form value to the field default, and an empty string must reach
    validation as-is.
    """
    form = await request.form()
    targetFormat = form.get("targetFormat")
    bitrate = form.get("bitrate")
    logger.info(
        "convert_audio called. file=%s targetFormat=%s bitrate=%s",
        file.filename if file else None,
        targetFormat,
        bitrate,
    )
    return await pipeline.run(
        StrategyName.AUDIO_TRANSCODE,
        upload=file,
        payload={"targetFormat": targetFormat, "bitrate": bitrate},
    )
