"""Document conversion endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ..models.envelope import ErrorBody, TransportEnvelope
from ..models.job import StrategyName
from ..models.requests import DocumentDirection
from ..pipeline import ConversionPipeline
from .deps import get_pipeline

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorBody}, 413: {"model": ErrorBody}, 500: {"model": ErrorBody}}


@router.post("/docx-to-pdf", response_model=TransportEnvelope, responses=ERROR_RESPONSES)
async def docx_to_pdf(
    file: Optional[UploadFile] = File(None),
    pipeline: ConversionPipeline = Depends(get_pipeline),
):
    return await pipeline.run(
        StrategyName.DOC_CONVERT,
        upload=file,
        payload={"direction": DocumentDirection.DOCX_TO_PDF},
    )


@router.post("/pdf-to-docx", response_model=TransportEnvelope, responses=ERROR_RESPONSES)
async def pdf_to_docx(
    file: Optional[UploadFile] = File(None),
    pipeline: ConversionPipeline = Depends(get_pipeline),
):
    return await pipeline.run(
        StrategyName.DOC_CONVERT,
        upload=file,
        payload={"direction": DocumentDirection.PDF_TO_DOCX},
    )
