import math

import pytest

from convertkit.config import Settings
from convertkit.exceptions import InvalidInput
from convertkit.models.job import ConversionJob, StrategyName
from convertkit.services.bmi import RANGES, BmiStrategy, bmi_value, calculate_bmi, categorize


def test_calculate_bmi_normal_adult():
    result = calculate_bmi(180, 75)

    assert result.bmi == 23.15
    assert result.category == "Normal"
    assert result.ranges == RANGES


@pytest.mark.parametrize(
    "bmi, category",
    [
        (18.49, "Underweight"),
        (18.5, "Normal"),
        (24.99, "Normal"),
        (25.0, "Overweight"),
        (29.99, "Overweight"),
        (30.0, "Obesity"),
        (55.0, "Obesity"),
    ],
)
def test_categorize_boundaries(bmi, category):
    assert categorize(bmi)[0] == category


@pytest.mark.parametrize(
    "weight, category",
    [(18.5, "Normal"), (25, "Overweight"), (30, "Obesity")],
)
def test_exact_boundaries_from_height_and_weight(weight, category):
    # A 100 cm height makes the BMI equal to the weight exactly.
    result = calculate_bmi(100, weight)
    assert result.bmi == weight
    assert result.category == category


def test_each_category_has_its_own_message():
    messages = {categorize(value)[1] for value in (10, 20, 27, 40)}
    assert len(messages) == 4


def test_ranges_are_echoed_for_every_category():
    assert calculate_bmi(150, 30).ranges == calculate_bmi(150, 120).ranges == RANGES


def test_bmi_value_is_infinite_when_height_underflows():
    assert bmi_value(1e-200, 70) == math.inf


@pytest.mark.parametrize(
    "payload",
    [{"heightCm": 1e-200, "weightKg": 70}, {"heightCm": 1, "weightKg": 1e308}],
)
def test_validate_rejects_non_finite_results(tmp_path, payload):
    strategy = BmiStrategy(Settings(STAGING_DIR=tmp_path))
    job = ConversionJob(strategy=StrategyName.BMI_CALCULATE, payload=payload)

    with pytest.raises(InvalidInput, match="must be positive numbers"):
        strategy.validate(job)
