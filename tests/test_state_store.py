"""Tests for the state store."""

import logging

from nutriplan.domain.models import Goals
from nutriplan.services.ledger import LedgerService
from nutriplan.services.state import StateStore
from tests.conftest import TODAY, InMemoryStateRepository


def test_load_falls_back_to_defaults_on_error(caplog) -> None:
    repository = InMemoryStateRepository(fail_on_load=True)

    with caplog.at_level(logging.ERROR):
        store = StateStore.load(repository)

    assert store.state.goals == Goals()
    assert store.state.ledger == {}
    assert store.state.library == []
    assert "Failed to load data" in caplog.text


def test_save_failure_keeps_in_memory_change(caplog) -> None:
    repository = InMemoryStateRepository(fail_on_save=True)
    store = StateStore.load(repository)
    ledger = LedgerService(store)

    with caplog.at_level(logging.ERROR):
        outcome = ledger.add_entry(TODAY, {"name": "Banana", "calories": 105})

    assert outcome.changed
    assert not outcome.persisted
    assert [entry.name for entry in ledger.entries(TODAY)] == ["Banana"]
    assert "Failed to save data" in caplog.text


def test_every_mutation_saves_full_state(
    repository: InMemoryStateRepository, ledger: LedgerService
) -> None:
    ledger.add_entry(TODAY, {"name": "Banana", "calories": 105})
    ledger.store.state.goals = Goals(calories=1800)
    entry = ledger.add_entry(TODAY, {"name": "Kiwi", "calories": 42}).value
    ledger.toggle_consumed(TODAY, entry.id)

    last = repository.saves[-1]
    assert len(repository.saves) == 3
    assert last["goals"]["calories"] == 1800
    assert [row["name"] for row in last["dietData"][TODAY.isoformat()]] == [
        "Banana",
        "Kiwi",
    ]


def test_listeners_are_notified_until_unsubscribed(
    store: StateStore, ledger: LedgerService
) -> None:
    calls: list[str] = []
    unsubscribe = store.subscribe(lambda: calls.append("changed"))

    ledger.add_entry(TODAY, {"name": "Banana"})
    ledger.delete_entry(TODAY, "missing")
    unsubscribe()
    ledger.add_entry(TODAY, {"name": "Kiwi"})

    assert calls == ["changed"]
