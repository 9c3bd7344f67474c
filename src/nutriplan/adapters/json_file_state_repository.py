"""Local JSON file repository, used when Supabase is not configured."""

import json
from dataclasses import dataclass
from pathlib import Path

from nutriplan.adapters.state_blob import dump_state, load_state
from nutriplan.domain.errors import PersistenceError
from nutriplan.domain.state import AppState
from nutriplan.services.state import StateRepository


@dataclass
class JsonFileStateRepository(StateRepository):
    """Keeps the whole state blob in a single JSON file."""

    path: Path

    def load_all(self) -> AppState:
        if not self.path.exists():
            return AppState()
        try:
            blob = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to read {self.path}") from exc
        if not isinstance(blob, dict):
            raise PersistenceError(f"Unexpected data in {self.path}")
        return load_state(blob)

    def save_all(self, state: AppState) -> None:
        payload = json.dumps(dump_state(state), ensure_ascii=False, indent=2)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            raise PersistenceError(f"Failed to write {self.path}") from exc
