"""Services for managing the "My Foods" template library."""

import logging
from dataclasses import dataclass

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.fields import coerce_amount, coerce_name
from nutriplan.domain.models import (
    FoodTemplate,
    MeasureBasis,
    UnitBasis,
    WeightBasis,
    new_entity_id,
)
from nutriplan.services.state import Outcome, StateStore

_logger = logging.getLogger(__name__)


@dataclass
class LibraryService:
    """Application service for library operations."""

    store: StateStore
    preview_limit: int = 10

    def get_template(self, template_id: str) -> FoodTemplate | None:
        """Return a template by id, if present."""
        for template in self.store.state.library:
            if template.id == template_id:
                return template
        return None

    def list_templates(self, name_filter: str | None = None) -> list[FoodTemplate]:
        """Return the library, optionally filtered by name."""
        if not name_filter:
            return list(self.store.state.library)
        return _match(self.store.state.library, name_filter)

    def search_templates(self, query: str | None) -> list[FoodTemplate]:
        """Search by name, falling back to a short preview when query is empty."""
        if not query:
            return self.store.state.library[: self.preview_limit]
        return _match(self.store.state.library, query)

    def add_template(self, payload: dict[str, object]) -> Outcome:
        """Create a template and save it to the library."""
        template = _build_template(new_entity_id(), payload)
        self.store.state.library.append(template)
        return self.store.commit(f"{template.name} saved to library!", value=template)

    def update_template(self, template_id: str, payload: dict[str, object]) -> Outcome:
        """Merge ``payload`` into an existing template."""
        library = self.store.state.library
        index = next(
            (i for i, item in enumerate(library) if item.id == template_id), None
        )
        if index is None:
            _logger.warning("Update skipped, no template %s", template_id)
            return Outcome.unchanged()
        merged = {**_template_payload(library[index]), **payload}
        library[index] = _build_template(template_id, merged)
        return self.store.commit("Food updated in library!", value=library[index])

    def delete_template(self, template_id: str) -> Outcome:
        """Remove a template; logged entries keep their own copies of its values."""
        library = self.store.state.library
        remaining = [item for item in library if item.id != template_id]
        if len(remaining) == len(library):
            _logger.warning("Delete skipped, no template %s", template_id)
            return Outcome.unchanged()
        self.store.state.library = remaining
        return self.store.commit("Removed from library")


def _match(templates: list[FoodTemplate], query: str) -> list[FoodTemplate]:
    needle = query.lower()
    return [item for item in templates if needle in item.name.lower()]


def _build_template(template_id: str, payload: dict[str, object]) -> FoodTemplate:
    return FoodTemplate(
        id=template_id,
        name=coerce_name(payload.get("name")),
        calories=coerce_amount(payload.get("calories"), "calories"),
        protein_g=coerce_amount(payload.get("protein_g"), "protein_g"),
        carbs_g=coerce_amount(payload.get("carbs_g"), "carbs_g"),
        fats_g=coerce_amount(payload.get("fats_g"), "fats_g"),
        basis=_parse_basis(payload.get("measure_type"), payload.get("unit_label")),
    )


def _parse_basis(measure_type: object, unit_label: object) -> MeasureBasis:
    kind = str(measure_type or "weight")
    if kind == "weight":
        return WeightBasis()
    if kind == "unit":
        return UnitBasis(unit_label=str(unit_label or "").strip() or "unit")
    raise ValidationError(f"Unknown measure type: {kind}", field="measure_type")


def _template_payload(template: FoodTemplate) -> dict[str, object]:
    return {
        "name": template.name,
        "calories": template.calories,
        "protein_g": template.protein_g,
        "carbs_g": template.carbs_g,
        "fats_g": template.fats_g,
        "measure_type": template.measure_type,
        "unit_label": template.unit_label,
    }
