"""Image endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ..models.envelope import ErrorBody, TransportEnvelope
from ..models.job import StrategyName
from ..pipeline import ConversionPipeline
from .deps import get_pipeline

router = APIRouter()


@router.post(
    "/compress",
    response_model=TransportEnvelope,
    responses={400: {"model": ErrorBody}, 413: {"model": ErrorBody}, 500: {"model": ErrorBody}},
)
async def compress_image(
    file: Optional[UploadFile] = File(None),
    pipeline: ConversionPipeline = Depends(get_pipeline),
):
    """Re-encode a JPEG/PNG/WebP upload as a quality-70 JPEG."""
    return await pipeline.run(StrategyName.IMAGE_COMPRESS, upload=file)
