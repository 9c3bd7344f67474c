"""Conversion between application state and the stored JSON blob.

The blob keeps the field names used by the web client so existing data
round-trips unchanged::

    {"goals": {"calories", "protein", "carbs", "fats"},
     "dietData": {"YYYY-MM-DD": [{"id", "name", "cals", "p", "c", "f",
                                   "consumed", "meal", "myFoodId"?, "grams"?}]},
     "myFoods": [{"id", "name", "cals", "protein", "carbs", "fats",
                  "measureType", "unitLabel"}]}
"""

from nutriplan.domain.models import (
    FoodTemplate,
    Goals,
    LogEntry,
    Meal,
    UnitBasis,
    WeightBasis,
    new_entity_id,
)
from nutriplan.domain.state import AppState

BLOB_KEYS = ("goals", "dietData", "myFoods")


def dump_state(state: AppState) -> dict[str, object]:
    """Serialize state into the stored blob."""
    return {
        "goals": _dump_goals(state.goals),
        "dietData": {
            day: [_dump_entry(entry) for entry in entries]
            for day, entries in state.ledger.items()
        },
        "myFoods": [_dump_template(template) for template in state.library],
    }


def load_state(blob: dict[str, object]) -> AppState:
    """Parse a stored blob; missing keys fall back to defaults."""
    goals_raw = blob.get("goals")
    diet_raw = blob.get("dietData")
    foods_raw = blob.get("myFoods")
    return AppState(
        goals=_parse_goals(goals_raw) if isinstance(goals_raw, dict) else Goals(),
        ledger={
            str(day): [_parse_entry(row) for row in rows if isinstance(row, dict)]
            for day, rows in (diet_raw.items() if isinstance(diet_raw, dict) else [])
            if isinstance(rows, list)
        },
        library=[
            _parse_template(row)
            for row in (foods_raw if isinstance(foods_raw, list) else [])
            if isinstance(row, dict)
        ],
    )


def _dump_goals(goals: Goals) -> dict[str, object]:
    return {
        "calories": goals.calories,
        "protein": goals.protein_g,
        "carbs": goals.carbs_g,
        "fats": goals.fats_g,
    }


def _dump_entry(entry: LogEntry) -> dict[str, object]:
    row: dict[str, object] = {
        "id": entry.id,
        "name": entry.name,
        "cals": entry.calories,
        "p": entry.protein_g,
        "c": entry.carbs_g,
        "f": entry.fats_g,
        "consumed": entry.consumed,
        "meal": entry.meal.value,
    }
    if entry.template_id is not None:
        row["myFoodId"] = entry.template_id
    if entry.quantity is not None:
        row["grams"] = entry.quantity
    return row


def _dump_template(template: FoodTemplate) -> dict[str, object]:
    return {
        "id": template.id,
        "name": template.name,
        "cals": template.calories,
        "protein": template.protein_g,
        "carbs": template.carbs_g,
        "fats": template.fats_g,
        "measureType": template.measure_type,
        "unitLabel": template.unit_label or "",
    }


def _parse_goals(row: dict[str, object]) -> Goals:
    defaults = Goals()
    return Goals(
        calories=_number(row.get("calories"), defaults.calories),
        protein_g=_number(row.get("protein"), defaults.protein_g),
        carbs_g=_number(row.get("carbs"), defaults.carbs_g),
        fats_g=_number(row.get("fats"), defaults.fats_g),
    )


def _parse_entry(row: dict[str, object]) -> LogEntry:
    try:
        meal = Meal(str(row.get("meal") or Meal.PRE_WORKOUT))
    except ValueError:
        meal = Meal.PRE_WORKOUT
    quantity = row.get("grams") or row.get("qty")
    template_id = row.get("myFoodId")
    return LogEntry(
        id=str(row.get("id") or new_entity_id()),
        name=str(row.get("name", "")),
        calories=_number(row.get("cals")),
        protein_g=_number(row.get("p")),
        carbs_g=_number(row.get("c")),
        fats_g=_number(row.get("f")),
        meal=meal,
        consumed=bool(row.get("consumed", False)),
        template_id=str(template_id) if template_id else None,
        quantity=_number(quantity) if quantity else None,
    )


def _parse_template(row: dict[str, object]) -> FoodTemplate:
    if row.get("measureType") == "unit":
        basis: WeightBasis | UnitBasis = UnitBasis(
            unit_label=str(row.get("unitLabel") or "unit")
        )
    else:
        basis = WeightBasis()
    return FoodTemplate(
        id=str(row.get("id") or new_entity_id()),
        name=str(row.get("name", "")),
        calories=_number(row.get("cals")),
        protein_g=_number(row.get("protein")),
        carbs_g=_number(row.get("carbs")),
        fats_g=_number(row.get("fats")),
        basis=basis,
    )


def _number(value: object, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default
    return default
