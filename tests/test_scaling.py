"""Tests for template scaling."""

import math

import pytest

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.models import FoodTemplate, MacroProfile, UnitBasis, WeightBasis
from nutriplan.domain.scaling import parse_quantity, round_calories, round_macro, scale

CHICKEN = FoodTemplate(
    id="chicken",
    name="Chicken Breast",
    calories=165,
    protein_g=31,
    carbs_g=0,
    fats_g=3.6,
    basis=WeightBasis(),
)

APPLE = FoodTemplate(
    id="apple",
    name="Apple",
    calories=95,
    protein_g=0.5,
    carbs_g=25,
    fats_g=0.3,
    basis=UnitBasis(unit_label="apple"),
)


def test_scale_weight_template_per_100g() -> None:
    result = scale(CHICKEN, 150)

    assert result == MacroProfile(calories=248, protein_g=46.5, carbs_g=0, fats_g=5.4)


def test_scale_unit_template_per_item() -> None:
    result = scale(APPLE, 2)

    assert result == MacroProfile(calories=190, protein_g=1, carbs_g=50, fats_g=0.6)


def test_scale_is_deterministic() -> None:
    assert scale(CHICKEN, 137) == scale(CHICKEN, 137)


def test_scale_rounds_calories_to_integers_and_macros_to_tenths() -> None:
    template = FoodTemplate(
        id="oats",
        name="Oats",
        calories=389,
        protein_g=16.9,
        carbs_g=66.3,
        fats_g=6.9,
    )
    for grams in (1, 7, 33, 45.5, 123, 250):
        result = scale(template, grams)
        assert isinstance(result.calories, int)
        for value in (result.protein_g, result.carbs_g, result.fats_g):
            assert math.isclose(value * 10, round(value * 10), abs_tol=1e-9)


def test_rounding_takes_halves_up() -> None:
    assert round_calories(246.5) == 247
    assert round_calories(247.5) == 248
    assert round_macro(0.25) == 0.3


def test_parse_quantity_accepts_numeric_strings() -> None:
    assert parse_quantity("150") == 150.0
    assert parse_quantity(" 2.5 ") == 2.5


@pytest.mark.parametrize(
    "value", [-5, 0, "abc", "", None, True, float("nan"), float("inf"), [1]]
)
def test_scale_rejects_invalid_quantity(value: object) -> None:
    with pytest.raises(ValidationError) as excinfo:
        scale(CHICKEN, value)

    assert excinfo.value.message == "Please enter a valid amount"
    assert excinfo.value.field == "quantity"


def test_scale_rejects_quantity_that_overflows_nutrition() -> None:
    with pytest.raises(ValidationError) as excinfo:
        scale(CHICKEN, 1e308)

    assert excinfo.value.message == "Please enter a valid amount"
    assert excinfo.value.field == "quantity"


def test_scale_accepts_large_finite_portion() -> None:
    result = scale(APPLE, 1e6)

    assert result.calories == 95_000_000
    assert result.carbs_g == 25_000_000
