"""Application state owned by the running process."""

from dataclasses import dataclass, field
from datetime import date

from nutriplan.domain.models import FoodTemplate, Goals, LogEntry


def day_key(day: date) -> str:
    """Return the ledger key for a calendar date."""
    return day.isoformat()


@dataclass
class AppState:
    """Goals, the per-day ledger and the food library."""

    goals: Goals = field(default_factory=Goals)
    ledger: dict[str, list[LogEntry]] = field(default_factory=dict)
    library: list[FoodTemplate] = field(default_factory=list)

    def day(self, day: date) -> list[LogEntry]:
        """Return the mutable entry list for ``day``, creating it on first access."""
        return self.ledger.setdefault(day_key(day), [])

    def peek_day(self, day: date) -> list[LogEntry]:
        """Return the entries for ``day`` without creating a bucket."""
        return self.ledger.get(day_key(day), [])
