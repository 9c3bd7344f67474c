"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from nutriplan.adapters.state_blob import dump_state, load_state
from nutriplan.api.models import (
    EntryCreate,
    EntryFromTemplate,
    EntryUpdate,
    GoalsPayload,
    StateBlob,
    TemplatePayload,
)
from nutriplan.app_logging import configure_logging
from nutriplan.containers import AppContainer
from nutriplan.domain.errors import ValidationError
from nutriplan.domain.fields import coerce_meal
from nutriplan.domain.models import FoodTemplate, Goals, LogEntry
from nutriplan.services.goals import GoalProgress
from nutriplan.services.quick_add import QuickAddFlow
from nutriplan.services.state import Outcome


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"level": "error", **exc.to_dict()},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/data")
    async def load_data(request: Request) -> dict[str, object]:
        """Return goals, the whole ledger and the library in one blob."""
        state_container: AppContainer = request.app.state.container
        return dump_state(state_container.store.state)

    @app.post("/api/data", response_model=None)
    async def save_data(
        blob: StateBlob, request: Request
    ) -> dict[str, bool] | JSONResponse:
        """Replace the keys present in the blob and save everything."""
        state_container: AppContainer = request.app.state.container
        store = state_container.store
        merged = {
            **dump_state(store.state),
            **blob.model_dump(exclude_none=True),
        }
        store.state = load_state(merged)
        outcome = store.commit()
        if not outcome.persisted:
            logger.error("Bulk save was not persisted")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Failed to save data"},
            )
        return {"success": True}

    @app.get("/api/days/{day}")
    async def get_day(day: date, request: Request) -> dict[str, object]:
        """Return a day's entries with totals and goal progress."""
        state_container: AppContainer = request.app.state.container
        ledger = state_container.ledger_service
        return {
            "day": day.isoformat(),
            "entries": [_entry_view(entry) for entry in ledger.entries(day)],
            "meal_calories": {
                meal.value: calories
                for meal, calories in ledger.meal_calories(day).items()
            },
            "progress": _progress_view(state_container.goals_service.progress(day)),
        }

    @app.get("/api/days/{day}/week")
    async def get_week(day: date, request: Request) -> dict[str, object]:
        """Return the calendar strip for the week containing ``day``."""
        state_container: AppContainer = request.app.state.container
        week = state_container.ledger_service.week_overview(day)
        return {
            "days": [
                {"day": marker.day.isoformat(), "has_entries": marker.has_entries}
                for marker in week
            ]
        }

    @app.post("/api/days/{day}/entries", status_code=status.HTTP_201_CREATED)
    async def add_entry(
        day: date, body: EntryCreate, request: Request
    ) -> dict[str, object]:
        """Log a manually entered food."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.ledger_service.add_entry(
            day, body.model_dump(exclude_none=True)
        )
        return _outcome_view(outcome, _entry_view)

    @app.post(
        "/api/days/{day}/entries/from-template", status_code=status.HTTP_201_CREATED
    )
    async def add_entry_from_template(
        day: date, body: EntryFromTemplate, request: Request
    ) -> dict[str, object]:
        """Log a portion of a library food."""
        state_container: AppContainer = request.app.state.container
        template = state_container.library_service.get_template(body.template_id)
        if template is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        ledger = state_container.ledger_service
        flow = QuickAddFlow(ledger)
        flow.open(coerce_meal(body.meal) if body.meal else ledger.default_meal)
        flow.select(template)
        outcome = flow.confirm(day, quantity=body.quantity)
        return _outcome_view(outcome, _entry_view)

    @app.patch("/api/days/{day}/entries/{entry_id}")
    async def update_entry(
        day: date, entry_id: str, body: EntryUpdate, request: Request
    ) -> dict[str, object]:
        """Edit an entry; a new quantity rescales library-based entries."""
        state_container: AppContainer = request.app.state.container
        ledger = state_container.ledger_service
        fields = body.model_dump(exclude_none=True)
        entry = ledger.get_entry(day, entry_id)
        template = None
        if "quantity" in fields and entry is not None and entry.template_id:
            template = state_container.library_service.get_template(
                entry.template_id
            )
        if template is None:
            fields.pop("quantity", None)
        outcome = ledger.update_entry(day, entry_id, fields, template)
        return _outcome_view(outcome, _entry_view)

    @app.post("/api/days/{day}/entries/{entry_id}/toggle")
    async def toggle_entry(
        day: date, entry_id: str, request: Request
    ) -> dict[str, object]:
        """Flip an entry's consumed flag."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.ledger_service.toggle_consumed(day, entry_id)
        return _outcome_view(outcome, _entry_view)

    @app.delete("/api/days/{day}/entries/{entry_id}")
    async def delete_entry(
        day: date, entry_id: str, request: Request
    ) -> dict[str, object]:
        """Remove an entry."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.ledger_service.delete_entry(day, entry_id)
        return _outcome_view(outcome, _entry_view)

    @app.post("/api/days/{day}/copy-previous")
    async def copy_previous_day(day: date, request: Request) -> dict[str, object]:
        """Copy yesterday's entries onto ``day``."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.ledger_service.copy_previous_day(day)
        return _outcome_view(
            outcome, lambda entries: [_entry_view(entry) for entry in entries]
        )

    @app.get("/api/foods")
    async def list_foods(request: Request, q: str | None = None) -> dict[str, object]:
        """Return the library, filtered by name when ``q`` is given."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.library_service.list_templates(q)
        return {"foods": [_template_view(food) for food in foods]}

    @app.get("/api/foods/search")
    async def search_foods(
        request: Request, q: str | None = None
    ) -> dict[str, object]:
        """Quick-add search; an empty query returns a short preview."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.library_service.search_templates(q)
        return {"foods": [_template_view(food) for food in foods]}

    @app.post("/api/foods", status_code=status.HTTP_201_CREATED)
    async def add_food(body: TemplatePayload, request: Request) -> dict[str, object]:
        """Save a food to the library."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.library_service.add_template(
            body.model_dump(exclude_none=True)
        )
        return _outcome_view(outcome, _template_view)

    @app.put("/api/foods/{template_id}")
    async def update_food(
        template_id: str, body: TemplatePayload, request: Request
    ) -> dict[str, object]:
        """Edit a library food."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.library_service.update_template(
            template_id, body.model_dump(exclude_none=True)
        )
        return _outcome_view(outcome, _template_view)

    @app.delete("/api/foods/{template_id}")
    async def delete_food(template_id: str, request: Request) -> dict[str, object]:
        """Remove a library food; logged entries are left as they are."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.library_service.delete_template(template_id)
        return _outcome_view(outcome, _template_view)

    @app.get("/api/goals")
    async def get_goals(request: Request) -> dict[str, object]:
        """Return the daily goals."""
        state_container: AppContainer = request.app.state.container
        return _goals_view(state_container.goals_service.get_goals())

    @app.put("/api/goals")
    async def update_goals(body: GoalsPayload, request: Request) -> dict[str, object]:
        """Replace the daily goals."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.goals_service.update_goals(
            body.model_dump(exclude_none=True)
        )
        return _outcome_view(outcome, _goals_view)

    return app


def _outcome_view(
    outcome: Outcome, render: Callable[[object], object]
) -> dict[str, object]:
    """Format an action outcome for the client."""
    return {
        "changed": outcome.changed,
        "persisted": outcome.persisted,
        "message": outcome.message,
        "level": outcome.level,
        "item": render(outcome.value) if outcome.value is not None else None,
    }


def _entry_view(entry: LogEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "name": entry.name,
        "calories": entry.calories,
        "protein_g": entry.protein_g,
        "carbs_g": entry.carbs_g,
        "fats_g": entry.fats_g,
        "meal": entry.meal.value,
        "consumed": entry.consumed,
        "template_id": entry.template_id,
        "quantity": entry.quantity,
    }


def _template_view(template: FoodTemplate) -> dict[str, object]:
    return {
        "id": template.id,
        "name": template.name,
        "calories": template.calories,
        "protein_g": template.protein_g,
        "carbs_g": template.carbs_g,
        "fats_g": template.fats_g,
        "measure_type": template.measure_type,
        "unit_label": template.unit_label,
        "per": template.basis.label,
    }


def _goals_view(goals: Goals) -> dict[str, object]:
    return {
        "calories": goals.calories,
        "protein_g": goals.protein_g,
        "carbs_g": goals.carbs_g,
        "fats_g": goals.fats_g,
    }


def _progress_view(progress: GoalProgress) -> dict[str, object]:
    consumed = progress.consumed
    return {
        "goals": _goals_view(progress.goals),
        "consumed": {
            "calories": consumed.calories,
            "protein_g": consumed.protein_g,
            "carbs_g": consumed.carbs_g,
            "fats_g": consumed.fats_g,
        },
        "remaining_calories": progress.remaining_calories,
        "percent": {
            "calories": progress.calories_pct,
            "protein_g": progress.protein_pct,
            "carbs_g": progress.carbs_pct,
            "fats_g": progress.fats_pct,
        },
    }
