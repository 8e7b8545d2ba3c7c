"""URL utilities."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ..models.envelope import ErrorBody, TransportEnvelope
from ..models.job import StrategyName
from ..pipeline import ConversionPipeline
from .deps import get_pipeline

router = APIRouter()


@router.post(
    "/qr",
    response_model=TransportEnvelope,
    responses={400: {"model": ErrorBody}, 500: {"model": ErrorBody}},
)
async def url_to_qr(
    payload: Any = Body(None),
    pipeline: ConversionPipeline = Depends(get_pipeline),
):
    # The body is validated by the strategy so a bad ``url`` yields 400, not 422.
    return await pipeline.run(StrategyName.QR_GENERATE, payload=payload)
