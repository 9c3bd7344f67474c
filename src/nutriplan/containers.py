"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass

from supabase import create_client

from nutriplan.adapters.json_file_state_repository import JsonFileStateRepository
from nutriplan.adapters.supabase_state_repository import SupabaseStateRepository
from nutriplan.config import Settings
from nutriplan.domain.fields import coerce_meal
from nutriplan.services.goals import GoalsService
from nutriplan.services.ledger import LedgerService
from nutriplan.services.library import LibraryService
from nutriplan.services.state import StateRepository, StateStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: StateStore
    ledger_service: LedgerService
    library_service: LibraryService
    goals_service: GoalsService
    close_resources: Callable[[], None]


def build_state_repository(settings: Settings) -> StateRepository:
    """Pick Supabase when configured, otherwise a local JSON file."""
    if settings.uses_supabase:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseStateRepository(client, table=settings.state_table)
    return JsonFileStateRepository(settings.data_file)


def build_container(
    settings: Settings | None = None, repository: StateRepository | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = StateStore.load(repository or build_state_repository(resolved_settings))
    ledger_service = LedgerService(
        store, default_meal=coerce_meal(resolved_settings.default_meal)
    )
    library_service = LibraryService(
        store, preview_limit=resolved_settings.search_preview_limit
    )
    goals_service = GoalsService(store, ledger_service)

    def close_resources() -> None:
        store.save()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        ledger_service=ledger_service,
        library_service=library_service,
        goals_service=goals_service,
        close_resources=close_resources,
    )
