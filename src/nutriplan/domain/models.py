"""Domain models for the nutrition tracker."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from uuid import uuid4


class Meal(StrEnum):
    """Fixed buckets an entry is filed under, in display order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    PRE_WORKOUT = "pre-workout"
    DINNER = "dinner"

    @property
    def display_name(self) -> str:
        """Capitalized name used in user-facing messages."""
        return self.value[:1].upper() + self.value[1:]


@dataclass(frozen=True)
class MacroProfile:
    """Calories and macronutrients for a food or a set of foods."""

    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float


@dataclass(frozen=True)
class Goals:
    """Daily calorie and macro targets."""

    calories: float = 2000
    protein_g: float = 150
    carbs_g: float = 200
    fats_g: float = 60


@dataclass(frozen=True)
class WeightBasis:
    """Nutrition expressed per 100 grams."""

    measure_type = "weight"

    def factor(self, quantity: float) -> float:
        """Return the multiplier for a quantity in grams."""
        return quantity / 100

    @property
    def label(self) -> str:
        return "100g"


@dataclass(frozen=True)
class UnitBasis:
    """Nutrition expressed per countable unit (an apple, a slice)."""

    unit_label: str = "unit"
    measure_type = "unit"

    def factor(self, quantity: float) -> float:
        """Return the multiplier for a count of units."""
        return quantity

    @property
    def label(self) -> str:
        return self.unit_label


MeasureBasis = WeightBasis | UnitBasis


@dataclass(frozen=True)
class FoodTemplate:
    """Reusable food definition stored in the library."""

    id: str
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float
    basis: MeasureBasis = WeightBasis()

    @property
    def measure_type(self) -> str:
        return self.basis.measure_type

    @property
    def unit_label(self) -> str | None:
        if isinstance(self.basis, UnitBasis):
            return self.basis.unit_label
        return None


@dataclass(frozen=True)
class LogEntry:
    """A concrete, already-scaled food record on one date."""

    id: str
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float
    meal: Meal
    consumed: bool = False
    template_id: str | None = None
    quantity: float | None = None

    @property
    def macros(self) -> MacroProfile:
        return MacroProfile(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fats_g=self.fats_g,
        )


@dataclass(frozen=True)
class DayMarker:
    """Calendar strip cell: a date and whether anything is logged on it."""

    day: date
    has_entries: bool


def new_entity_id() -> str:
    """Return a fresh identifier for an entry or template."""
    return uuid4().hex
