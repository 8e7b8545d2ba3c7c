"""Body-mass-index calculator.  No file I/O."""

from __future__ import annotations

import math

from pydantic import BaseModel, ValidationError

from ..exceptions import InvalidInput
from ..models.envelope import BmiResult
from ..models.job import ConversionJob, StrategyName
from ..models.requests import BmiRequest
from ..utils.storage import TemporaryStorage
from .base import ConversionStrategy

# (upper bound, category, message); lower bounds are inclusive.
CATEGORIES = (
    (18.5, "Underweight", "Your BMI is below the normal range. Consider consulting a nutritionist or doctor."),
    (25.0, "Normal", "Your BMI is in the normal range. Keep maintaining a healthy lifestyle."),
    (30.0, "Overweight", "Your BMI is slightly above the normal range. You may want to review diet and activity."),
    (float("inf"), "Obesity", "Your BMI is in the obesity range. Please consider consulting a healthcare professional."),
)

RANGES = {
    "Underweight": "< 18.5",
    "Normal": "18.5 – 24.9",
    "Overweight": "25 – 29.9",
    "Obesity": "≥ 30",
}


def categorize(bmi: float) -> tuple[str, str]:
    for upper, category, message in CATEGORIES:
        if bmi < upper:
            return category, message
    return CATEGORIES[-1][1], CATEGORIES[-1][2]


def bmi_value(height_cm: float, weight_kg: float) -> float:
    """Raw BMI, or ``inf`` when the squared height underflows to zero."""
    height_m = height_cm / 100
    squared = height_m * height_m
    if squared == 0:
        return math.inf
    return weight_kg / squared


def calculate_bmi(height_cm: float, weight_kg: float) -> BmiResult:
    bmi = bmi_value(height_cm, weight_kg)
    category, message = categorize(bmi)
    return BmiResult(bmi=round(bmi, 2), category=category, message=message, ranges=dict(RANGES))


class BmiStrategy(ConversionStrategy):
    name = StrategyName.BMI_CALCULATE
    requires_upload = False

    def validate(self, job: ConversionJob) -> None:
        try:
            job.params = BmiRequest.model_validate(job.payload or {})
        except ValidationError as exc:
            raise InvalidInput("heightCm and weightKg must be positive numbers") from exc
        if not math.isfinite(bmi_value(job.params.heightCm, job.params.weightKg)):
            raise InvalidInput("heightCm and weightKg must be positive numbers")

    async def execute(self, job: ConversionJob, storage: TemporaryStorage) -> BaseModel:
        params: BmiRequest = job.params
        return calculate_bmi(params.heightCm, params.weightKg)
