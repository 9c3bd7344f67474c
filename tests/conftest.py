"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date

import pytest

from nutriplan.adapters.state_blob import dump_state, load_state
from nutriplan.config import Settings
from nutriplan.containers import AppContainer, build_container
from nutriplan.domain.errors import PersistenceError
from nutriplan.domain.state import AppState
from nutriplan.services.goals import GoalsService
from nutriplan.services.ledger import LedgerService
from nutriplan.services.library import LibraryService
from nutriplan.services.state import StateRepository, StateStore

TODAY = date(2026, 3, 10)
YESTERDAY = date(2026, 3, 9)

CHICKEN = {
    "name": "Chicken Breast",
    "calories": 165,
    "protein_g": 31,
    "carbs_g": 0,
    "fats_g": 3.6,
    "measure_type": "weight",
}

APPLE = {
    "name": "Apple",
    "calories": 95,
    "protein_g": 0.5,
    "carbs_g": 25,
    "fats_g": 0.3,
    "measure_type": "unit",
    "unit_label": "apple",
}


@dataclass
class InMemoryStateRepository(StateRepository):
    """In-memory state repository that keeps every saved blob."""

    initial: dict[str, object] = field(default_factory=dict)
    saves: list[dict[str, object]] = field(default_factory=list)
    fail_on_load: bool = False
    fail_on_save: bool = False

    def load_all(self) -> AppState:
        if self.fail_on_load:
            raise PersistenceError("load failed")
        return load_state(self.initial)

    def save_all(self, state: AppState) -> None:
        if self.fail_on_save:
            raise PersistenceError("save failed")
        self.saves.append(dump_state(state))


@pytest.fixture(autouse=True)
def reset_app_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("nutriplan")
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_file=tmp_path / "nutriplan.json")


@pytest.fixture
def repository() -> InMemoryStateRepository:
    return InMemoryStateRepository()


@pytest.fixture
def store(repository: InMemoryStateRepository) -> StateStore:
    return StateStore.load(repository)


@pytest.fixture
def ledger(store: StateStore) -> LedgerService:
    return LedgerService(store)


@pytest.fixture
def library(store: StateStore) -> LibraryService:
    return LibraryService(store)


@pytest.fixture
def goals_service(store: StateStore, ledger: LedgerService) -> GoalsService:
    return GoalsService(store, ledger)


@pytest.fixture
def container(
    settings: Settings, repository: InMemoryStateRepository
) -> AppContainer:
    return build_container(settings, repository=repository)
