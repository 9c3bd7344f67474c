"""Daily food log: entries per date, totals and copying between days."""

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.fields import (
    coerce_amount,
    coerce_consumed,
    coerce_meal,
    coerce_name,
)
from nutriplan.domain.models import (
    DayMarker,
    FoodTemplate,
    LogEntry,
    MacroProfile,
    Meal,
    new_entity_id,
)
from nutriplan.domain.scaling import parse_quantity, round_macro, scale
from nutriplan.services.state import ERROR, Outcome, StateStore

_logger = logging.getLogger(__name__)

_NUMERIC_FIELDS = ("calories", "protein_g", "carbs_g", "fats_g")
_UPDATABLE_FIELDS = frozenset(
    {*_NUMERIC_FIELDS, "name", "meal", "consumed", "template_id", "quantity"}
)


@dataclass
class LedgerService:
    """Operations on the per-day food log."""

    store: StateStore
    default_meal: Meal = Meal.PRE_WORKOUT

    def entries(self, day: date) -> list[LogEntry]:
        """Return the entries logged on ``day`` in display order."""
        return list(self.store.state.peek_day(day))

    def get_entry(self, day: date, entry_id: str) -> LogEntry | None:
        """Return an entry by id, if present."""
        for entry in self.store.state.peek_day(day):
            if entry.id == entry_id:
                return entry
        return None

    def add_entry(
        self,
        day: date,
        payload: dict[str, object],
        meal_context: Meal | str | None = None,
    ) -> Outcome:
        """Log a new entry, filing it under ``meal_context`` when it has no meal."""
        meal_value = payload.get("meal") or meal_context or self.default_meal
        quantity = payload.get("quantity")
        entry = LogEntry(
            id=new_entity_id(),
            name=coerce_name(payload.get("name")),
            calories=coerce_amount(payload.get("calories"), "calories"),
            protein_g=coerce_amount(payload.get("protein_g"), "protein_g"),
            carbs_g=coerce_amount(payload.get("carbs_g"), "carbs_g"),
            fats_g=coerce_amount(payload.get("fats_g"), "fats_g"),
            meal=coerce_meal(meal_value),
            consumed=False,
            template_id=_optional_str(payload.get("template_id")),
            quantity=parse_quantity(quantity) if quantity is not None else None,
        )
        self.store.state.day(day).append(entry)
        return self.store.commit(
            f"{entry.name} added to {entry.meal.display_name}!", value=entry
        )

    def update_entry(
        self,
        day: date,
        entry_id: str,
        fields: dict[str, object],
        template: FoodTemplate | None = None,
    ) -> Outcome:
        """Merge ``fields`` into an entry.

        When ``template`` is given, ``fields["quantity"]`` is required and the
        entry's nutrition is recomputed from the template, overriding any
        nutrition values in ``fields``.
        """
        changes = _parse_changes(fields)
        if template is not None:
            quantity = parse_quantity(fields.get("quantity"))
            nutrition = scale(template, quantity)
            changes.update(
                calories=nutrition.calories,
                protein_g=nutrition.protein_g,
                carbs_g=nutrition.carbs_g,
                fats_g=nutrition.fats_g,
                quantity=quantity,
                template_id=template.id,
            )
        entries = self.store.state.peek_day(day)
        index = _find_index(entries, entry_id)
        if index is None:
            _logger.warning("Update skipped, no entry %s on %s", entry_id, day)
            return Outcome.unchanged()
        entries[index] = replace(entries[index], **changes)
        return self.store.commit("Entry updated!", value=entries[index])

    def rescale_entry(
        self, day: date, entry_id: str, template: FoodTemplate, quantity: object
    ) -> Outcome:
        """Recompute an entry's nutrition for a new quantity of ``template``."""
        return self.update_entry(day, entry_id, {"quantity": quantity}, template)

    def toggle_consumed(self, day: date, entry_id: str) -> Outcome:
        """Flip whether an entry counts toward the day's totals."""
        entries = self.store.state.peek_day(day)
        index = _find_index(entries, entry_id)
        if index is None:
            _logger.warning("Toggle skipped, no entry %s on %s", entry_id, day)
            return Outcome.unchanged()
        entries[index] = replace(entries[index], consumed=not entries[index].consumed)
        return self.store.commit(value=entries[index])

    def delete_entry(self, day: date, entry_id: str) -> Outcome:
        """Remove an entry by id."""
        entries = self.store.state.peek_day(day)
        index = _find_index(entries, entry_id)
        if index is None:
            _logger.warning("Delete skipped, no entry %s on %s", entry_id, day)
            return Outcome.unchanged()
        removed = entries.pop(index)
        return self.store.commit("Item removed", value=removed)

    def daily_totals(self, day: date) -> MacroProfile:
        """Sum nutrition over consumed entries only."""
        consumed = [e for e in self.store.state.peek_day(day) if e.consumed]
        return MacroProfile(
            calories=sum(e.calories for e in consumed),
            protein_g=round_macro(sum(e.protein_g for e in consumed)),
            carbs_g=round_macro(sum(e.carbs_g for e in consumed)),
            fats_g=round_macro(sum(e.fats_g for e in consumed)),
        )

    def meal_calories(self, day: date) -> dict[Meal, float]:
        """Return logged calories per meal, consumed or not."""
        totals: dict[Meal, float] = {meal: 0 for meal in Meal}
        for entry in self.store.state.peek_day(day):
            totals[entry.meal] += entry.calories
        return totals

    def copy_day(self, source: date, target: date) -> Outcome:
        """Append fresh, unconsumed copies of ``source`` entries to ``target``."""
        return self._copy(
            source,
            target,
            success_message=f"Meals copied from {source.isoformat()}!",
            empty_message=f"No meals found on {source.isoformat()}.",
        )

    def copy_previous_day(self, day: date) -> Outcome:
        """Copy yesterday's entries onto ``day``."""
        return self._copy(
            day - timedelta(days=1),
            day,
            success_message="Meals copied from yesterday!",
            empty_message="No meals found on the previous day.",
        )

    def week_overview(self, day: date) -> list[DayMarker]:
        """Return the Sunday-started week containing ``day``."""
        start = day - timedelta(days=(day.weekday() + 1) % 7)
        week = [start + timedelta(days=offset) for offset in range(7)]
        return [
            DayMarker(day=d, has_entries=bool(self.store.state.peek_day(d)))
            for d in week
        ]

    def _copy(
        self, source: date, target: date, *, success_message: str, empty_message: str
    ) -> Outcome:
        source_entries = self.store.state.peek_day(source)
        if not source_entries:
            return Outcome.unchanged(empty_message, level=ERROR)
        copies = [
            replace(entry, id=new_entity_id(), consumed=False)
            for entry in source_entries
        ]
        self.store.state.day(target).extend(copies)
        return self.store.commit(success_message, value=copies)


def _find_index(entries: list[LogEntry], entry_id: str) -> int | None:
    for index, entry in enumerate(entries):
        if entry.id == entry_id:
            return index
    return None


def _parse_changes(fields: dict[str, object]) -> dict[str, object]:
    unknown = set(fields) - _UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(
            f"Cannot update fields: {', '.join(sorted(unknown))}",
            field=sorted(unknown)[0],
        )
    changes: dict[str, object] = {}
    for key, value in fields.items():
        if key in _NUMERIC_FIELDS:
            changes[key] = coerce_amount(value, key)
        elif key == "name":
            changes[key] = coerce_name(value)
        elif key == "meal":
            changes[key] = coerce_meal(value)
        elif key == "consumed":
            changes[key] = coerce_consumed(value)
        elif key == "template_id":
            changes[key] = _optional_str(value)
        elif key == "quantity":
            changes[key] = parse_quantity(value) if value is not None else None
    return changes


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
