"""Pydantic request models for the HTTP API."""

from pydantic import BaseModel, Field


class EntryCreate(BaseModel):
    """Manually entered food."""

    name: str
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fats_g: float | None = None
    meal: str | None = None


class EntryFromTemplate(BaseModel):
    """Quick add of a library food."""

    template_id: str
    quantity: float | str | None = None
    meal: str | None = None


class EntryUpdate(BaseModel):
    """Partial update of a logged entry."""

    name: str | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fats_g: float | None = None
    meal: str | None = None
    quantity: float | str | None = None


class TemplatePayload(BaseModel):
    """Library food definition; values are per 100g or per unit."""

    name: str | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fats_g: float | None = None
    measure_type: str | None = Field(default=None, pattern="^(weight|unit)$")
    unit_label: str | None = None


class GoalsPayload(BaseModel):
    """Daily goals."""

    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fats_g: float | None = None


class StateBlob(BaseModel):
    """Bulk state as exchanged with the web client."""

    goals: dict[str, object] | None = None
    dietData: dict[str, list[dict[str, object]]] | None = None  # noqa: N815
    myFoods: list[dict[str, object]] | None = None  # noqa: N815
