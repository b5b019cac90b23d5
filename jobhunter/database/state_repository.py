"""Repository for the persisted tracker state and settings blobs."""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from jobhunter.database.kv_store import KeyValueStore
from jobhunter.models.constants import SETTINGS_KEY, STORAGE_KEY
from jobhunter.models.state import AppState, Settings

logger = logging.getLogger(__name__)


class StateRepository:
    """Reads and writes the JSON blobs through a key-value store.

    Unparsable blobs are treated exactly like missing ones: the caller gets
    ``None`` (or default settings) and a warning is logged.
    """

    def __init__(self, store: KeyValueStore, state_key: str = STORAGE_KEY, settings_key: str = SETTINGS_KEY):
        self.store = store
        self.state_key = state_key
        self.settings_key = settings_key

    def _load_json(self, key: str) -> Optional[dict]:
        raw = self.store.get(key)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring unparsable {key}: {type(e).__name__}: {str(e)}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Ignoring {key}: expected a JSON object, got {type(data).__name__}")
            return None
        return data

    def load_state(self) -> Optional[AppState]:
        """Return the persisted state, or None when absent or malformed."""
        data = self._load_json(self.state_key)
        if data is None:
            return None
        try:
            return AppState.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid {self.state_key}: {e.error_count()} validation errors")
            return None

    def save_state(self, state: AppState) -> None:
        """Overwrite the whole state blob."""
        self.store.set(self.state_key, json.dumps(state.to_blob()))

    def clear_state(self) -> None:
        self.store.delete(self.state_key)

    def load_settings(self) -> Settings:
        data = self._load_json(self.settings_key)
        if data is None:
            return Settings()
        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid {self.settings_key}: {e.error_count()} validation errors")
            return Settings()

    def save_settings(self, settings: Settings) -> None:
        self.store.set(self.settings_key, json.dumps(settings.model_dump(mode="json", by_alias=True)))
