"""Quick-add flow: pick a library food, enter an amount, log it."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.models import FoodTemplate, MacroProfile, Meal
from nutriplan.domain.scaling import parse_quantity, scale
from nutriplan.services.ledger import LedgerService
from nutriplan.services.state import Outcome


class QuickAddStage(StrEnum):
    """Where the user is in the quick-add flow."""

    IDLE = "idle"
    TEMPLATE_SELECTED = "template-selected"
    QUANTITY_ENTERED = "quantity-entered"


@dataclass
class QuickAddFlow:
    """Selection state behind the add-food dialog.

    An entry can only be confirmed once a template is selected and a valid
    positive quantity has been entered. Confirming or clearing returns the
    flow to ``IDLE``.
    """

    ledger: LedgerService
    meal: Meal | None = None
    template: FoodTemplate | None = None
    quantity: float | None = None

    def __post_init__(self) -> None:
        if self.meal is None:
            self.meal = self.ledger.default_meal

    @property
    def stage(self) -> QuickAddStage:
        if self.template is None:
            return QuickAddStage.IDLE
        if self.quantity is None:
            return QuickAddStage.TEMPLATE_SELECTED
        return QuickAddStage.QUANTITY_ENTERED

    def open(self, meal: Meal) -> None:
        """Start a fresh flow for ``meal``."""
        self.meal = meal
        self.clear()

    def select(self, template: FoodTemplate) -> None:
        """Select a template; any previously entered amount is discarded."""
        self.template = template
        self.quantity = None

    def enter_quantity(self, raw: object) -> MacroProfile | None:
        """Record an amount and return the preview, or None if it is invalid."""
        if self.template is None:
            return None
        self.quantity = None
        try:
            preview = scale(self.template, raw)
        except ValidationError:
            return None
        self.quantity = parse_quantity(raw)
        return preview

    def preview(self) -> MacroProfile | None:
        """Nutrition of the current selection, once fully specified."""
        if self.template is None or self.quantity is None:
            return None
        return scale(self.template, self.quantity)

    def clear(self) -> None:
        """Drop the selection and go back to ``IDLE``."""
        self.template = None
        self.quantity = None

    def confirm(self, day: date, quantity: object | None = None) -> Outcome:
        """Log the selected template on ``day``.

        ``quantity`` replaces the entered amount when given. Raises
        ``ValidationError`` unless the flow is fully specified.
        """
        if self.template is None:
            raise ValidationError("Please select a food first", field="template_id")
        if quantity is not None:
            self.quantity = parse_quantity(quantity)
        nutrition = self.preview()
        if nutrition is None or self.quantity is None:
            raise ValidationError("Please enter a valid amount", field="quantity")
        outcome = self.ledger.add_entry(
            day,
            {
                "name": self.template.name,
                "meal": self.meal,
                "calories": nutrition.calories,
                "protein_g": nutrition.protein_g,
                "carbs_g": nutrition.carbs_g,
                "fats_g": nutrition.fats_g,
                "quantity": self.quantity,
                "template_id": self.template.id,
            },
        )
        self.clear()
        return outcome
