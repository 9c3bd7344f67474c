"""Supabase key-value repository for the application state."""

import json
from dataclasses import dataclass

from supabase import Client

from nutriplan.adapters.state_blob import BLOB_KEYS, dump_state, load_state
from nutriplan.domain.errors import PersistenceError
from nutriplan.domain.state import AppState
from nutriplan.services.state import StateRepository


@dataclass
class SupabaseStateRepository(StateRepository):
    """Stores goals, ledger and library as JSON values in a ``key``/``value`` table."""

    client: Client
    table: str = "user_data"

    def load_all(self) -> AppState:
        """Return the stored state, or defaults for keys never saved."""
        try:
            response = (
                self.client.table(self.table)
                .select("key, value")
                .in_("key", list(BLOB_KEYS))
                .execute()
            )
            stored = {
                str(row["key"]): json.loads(row["value"])
                for row in response.data or []
            }
        except Exception as exc:
            raise PersistenceError("Failed to load data") from exc
        return load_state(stored)

    def save_all(self, state: AppState) -> None:
        """Upsert all three keys."""
        blob = dump_state(state)
        rows = [{"key": key, "value": json.dumps(blob[key])} for key in BLOB_KEYS]
        try:
            self.client.table(self.table).upsert(rows, on_conflict="key").execute()
        except Exception as exc:
            raise PersistenceError("Failed to save data") from exc
