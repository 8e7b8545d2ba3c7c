"""Calculators."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ..models.envelope import BmiResult, ErrorBody
from ..models.job import StrategyName
from ..pipeline import ConversionPipeline
from .deps import get_pipeline

router = APIRouter()


@router.post("/bmi", response_model=BmiResult, responses={400: {"model": ErrorBody}})
async def calculate_bmi(
    payload: Any = Body(None),
    pipeline: ConversionPipeline = Depends(get_pipeline),
):
    return await pipeline.run(StrategyName.BMI_CALCULATE, payload=payload)
