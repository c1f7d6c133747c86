"""API key, favorites, recents and templates on top of a property store."""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from datasetiq_sheets.data.inputs import normalize_optional_string
from datasetiq_sheets.data.store import PropertyStore
from datasetiq_sheets.exceptions import MissingApiKey


logger = logging.getLogger(__name__)

API_KEY_PROP = "DATASETIQ_API_KEY"
FAVORITES_PROP = "DATASETIQ_FAVORITES"
RECENT_PROP = "DATASETIQ_RECENT"
TEMPLATES_PROP = "DATASETIQ_TEMPLATES"

MAX_FAVORITES = 50
MAX_RECENT = 20
MAX_TEMPLATES = 20


class UserPreferences:
    """Reads and writes one user's panel state."""

    def __init__(self, store: PropertyStore) -> None:
        self.store = store

    def _load_list(self, key: str) -> list:
        stored = self.store.get(key)
        if not stored:
            return []
        try:
            value = json.loads(stored)
        except ValueError:
            logger.warning(f"Discarding unreadable {key} value")
            return []
        return value if isinstance(value, list) else []

    def _save_list(self, key: str, values: list) -> None:
        self.store.set(key, json.dumps(values))

    # API key

    def get_api_key(self) -> str | None:
        return self.store.get(API_KEY_PROP) or None

    def save_api_key(self, key: Any) -> None:
        trimmed = normalize_optional_string(key)
        if not trimmed:
            raise MissingApiKey()
        self.store.set(API_KEY_PROP, trimmed)

    def clear_api_key(self) -> None:
        self.store.delete(API_KEY_PROP)

    # Favorites

    def get_favorites(self) -> list[str]:
        return self._load_list(FAVORITES_PROP)

    def add_favorite(self, series_id: str) -> None:
        favorites = self.get_favorites()
        if series_id not in favorites:
            favorites.insert(0, series_id)
            self._save_list(FAVORITES_PROP, favorites[:MAX_FAVORITES])

    def remove_favorite(self, series_id: str) -> None:
        favorites = [fav for fav in self.get_favorites() if fav != series_id]
        self._save_list(FAVORITES_PROP, favorites)

    # Recent series

    def get_recent(self) -> list[str]:
        return self._load_list(RECENT_PROP)

    def add_to_recent(self, series_id: str) -> None:
        recent = [sid for sid in self.get_recent() if sid != series_id]
        recent.insert(0, series_id)
        self._save_list(RECENT_PROP, recent[:MAX_RECENT])

    # Templates

    def get_templates(self) -> list[dict]:
        return self._load_list(TEMPLATES_PROP)

    def get_template(self, template_id: str) -> dict | None:
        for template in self.get_templates():
            if isinstance(template, dict) and template.get("id") == template_id:
                return template
        return None

    def save_template(self, name: str, formulas: list[dict[str, str]]) -> dict:
        """Store a named set of cell formulas, newest first."""
        templates = self.get_templates()
        template = {
            "id": uuid.uuid4().hex,
            "name": name,
            "formulas": formulas,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        templates.insert(0, template)
        self._save_list(TEMPLATES_PROP, templates[:MAX_TEMPLATES])
        return template

    def delete_template(self, template_id: str) -> None:
        templates = [
            t for t in self.get_templates()
            if not (isinstance(t, dict) and t.get("id") == template_id)
        ]
        self._save_list(TEMPLATES_PROP, templates)
