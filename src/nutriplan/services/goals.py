"""Daily goals and progress against them."""

from dataclasses import dataclass
from datetime import date

from nutriplan.domain.fields import coerce_amount
from nutriplan.domain.models import Goals, MacroProfile
from nutriplan.services.ledger import LedgerService
from nutriplan.services.state import Outcome, StateStore

MAX_PERCENT = 100.0


@dataclass(frozen=True)
class GoalProgress:
    """Consumed totals compared with the daily goals."""

    goals: Goals
    consumed: MacroProfile
    remaining_calories: float
    calories_pct: float
    protein_pct: float
    carbs_pct: float
    fats_pct: float


@dataclass
class GoalsService:
    """Service for reading and updating daily goals."""

    store: StateStore
    ledger: LedgerService

    def get_goals(self) -> Goals:
        return self.store.state.goals

    def update_goals(self, payload: dict[str, object]) -> Outcome:
        """Replace the daily goals."""
        current = self.store.state.goals
        values = {
            name: coerce_amount(payload.get(name), name, default=getattr(current, name))
            for name in ("calories", "protein_g", "carbs_g", "fats_g")
        }
        self.store.state.goals = Goals(**values)
        return self.store.commit("Goals updated!", value=self.store.state.goals)

    def progress(self, day: date) -> GoalProgress:
        """Return consumed totals and progress percentages for ``day``."""
        goals = self.store.state.goals
        consumed = self.ledger.daily_totals(day)
        return GoalProgress(
            goals=goals,
            consumed=consumed,
            remaining_calories=goals.calories - consumed.calories,
            calories_pct=_percent(consumed.calories, goals.calories),
            protein_pct=_percent(consumed.protein_g, goals.protein_g),
            carbs_pct=_percent(consumed.carbs_g, goals.carbs_g),
            fats_pct=_percent(consumed.fats_g, goals.fats_g),
        )


def _percent(value: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return min(value / goal * 100, MAX_PERCENT)
