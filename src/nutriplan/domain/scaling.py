"""Scaling of library templates into concrete portions.

Template values are either per 100 g (``WeightBasis``) or per unit
(``UnitBasis``). A portion multiplies every value by the basis factor, then
rounds calories to a whole number and macros to one decimal place. Halves
round up, matching what users see in the web client.
"""

import math

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.models import FoodTemplate, MacroProfile

INVALID_AMOUNT_MESSAGE = "Please enter a valid amount"


def round_calories(value: float) -> int:
    """Round to the nearest integer, halves up."""
    return math.floor(value + 0.5)


def round_macro(value: float) -> float:
    """Round to one decimal place, halves up."""
    return math.floor(value * 10 + 0.5) / 10


def parse_quantity(value: object) -> float:
    """Return ``value`` as a positive finite quantity or raise ``ValidationError``."""
    if isinstance(value, bool):
        raise ValidationError(INVALID_AMOUNT_MESSAGE, field="quantity")
    if isinstance(value, int | float):
        quantity = float(value)
    elif isinstance(value, str):
        try:
            quantity = float(value.strip())
        except ValueError:
            raise ValidationError(INVALID_AMOUNT_MESSAGE, field="quantity") from None
    else:
        raise ValidationError(INVALID_AMOUNT_MESSAGE, field="quantity")
    if not math.isfinite(quantity) or quantity <= 0:
        raise ValidationError(INVALID_AMOUNT_MESSAGE, field="quantity")
    return quantity


def scale(template: FoodTemplate, quantity: object) -> MacroProfile:
    """Return the nutrition of ``quantity`` grams or units of ``template``."""
    factor = template.basis.factor(parse_quantity(quantity))
    calories = template.calories * factor
    macros = [
        template.protein_g * factor,
        template.carbs_g * factor,
        template.fats_g * factor,
    ]
    # round_macro works on tenths, so value * 10 has to stay finite as well.
    if not all(math.isfinite(value * 10) for value in (calories, *macros)):
        raise ValidationError(INVALID_AMOUNT_MESSAGE, field="quantity")
    protein_g, carbs_g, fats_g = (round_macro(value) for value in macros)
    return MacroProfile(
        calories=round_calories(calories),
        protein_g=protein_g,
        carbs_g=carbs_g,
        fats_g=fats_g,
    )
