"""State store: owns the application state and persists it after each change."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from nutriplan.domain.errors import PersistenceError
from nutriplan.domain.state import AppState

_logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"


class StateRepository(Protocol):
    """Bulk persistence for the whole application state."""

    def load_all(self) -> AppState:
        """Return the last saved state, or defaults on first run."""

    def save_all(self, state: AppState) -> None:
        """Persist goals, ledger and library, raising ``PersistenceError``."""


@dataclass(frozen=True)
class Outcome:
    """Result of a user action for the presentation layer."""

    changed: bool
    message: str | None = None
    level: str = SUCCESS
    persisted: bool = False
    value: object | None = None

    @classmethod
    def unchanged(cls, message: str | None = None, level: str = SUCCESS) -> "Outcome":
        return cls(changed=False, message=message, level=level)


@dataclass
class StateStore:
    """Holds the in-memory state and writes it through the repository."""

    repository: StateRepository
    state: AppState = field(default_factory=AppState)
    _listeners: list[Callable[[], None]] = field(default_factory=list)

    @classmethod
    def load(cls, repository: StateRepository) -> "StateStore":
        """Build a store from the repository, falling back to defaults."""
        try:
            state = repository.load_all()
        except PersistenceError:
            _logger.exception("Failed to load data")
            state = AppState()
        return cls(repository=repository, state=state)

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def save(self) -> bool:
        """Write the full state; failures are logged and reported as False."""
        try:
            self.repository.save_all(self.state)
        except PersistenceError:
            _logger.exception("Failed to save data")
            return False
        return True

    def commit(
        self,
        message: str | None = None,
        *,
        level: str = SUCCESS,
        value: object | None = None,
    ) -> Outcome:
        """Persist after a mutation, notify listeners and describe the result."""
        persisted = self.save()
        for listener in list(self._listeners):
            listener()
        return Outcome(
            changed=True,
            message=message,
            level=level,
            persisted=persisted,
            value=value,
        )
