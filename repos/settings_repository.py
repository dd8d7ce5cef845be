import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from models import Settings, Theme

logger = logging.getLogger(__name__)

SETTINGS_KEY = "player-performance-settings"
DEFAULT_TITLE = "Player Performance PDF Generator"


class SettingsRepository:
    """Stores theme and company branding in a local JSON file under SETTINGS_KEY."""

    def __init__(self, path: str):
        self._path = Path(path)

    def load(self) -> Settings:
        if not self._path.exists():
            return Settings()
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                stored = json.load(f)
            return Settings.from_dict(stored.get(SETTINGS_KEY) or {})
        except (OSError, ValueError, AttributeError) as err:
            # A broken settings file must not keep the app from starting.
            logger.error("Failed to load settings from %s: %s", self._path, err)
            return Settings()

    def update(self, **changes: Any) -> Settings:
        """Merge a partial update (theme, company_logo, company_name) and persist it."""
        unknown = set(changes) - {"theme", "company_logo", "company_name"}
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        settings = self.load()
        if "theme" in changes:
            settings.theme = Theme(changes["theme"])
        if "company_logo" in changes:
            settings.company_logo = changes["company_logo"] or None
        if "company_name" in changes:
            settings.company_name = changes["company_name"] or None
        self._save(settings)
        return settings

    def _save(self, settings: Settings) -> None:
        stored: Dict[str, Any] = {}
        if self._path.exists():
            try:
                with open(self._path, "r", encoding="utf-8") as f:
                    stored = json.load(f)
            except (OSError, ValueError):
                stored = {}
            if not isinstance(stored, dict):
                stored = {}
        stored[SETTINGS_KEY] = settings.to_dict()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(stored, f, indent=2, ensure_ascii=False)


def resolve_dark_mode(settings: Settings, system_scheme: Optional[str]) -> bool:
    if settings.theme is Theme.DARK:
        return True
    if settings.theme is Theme.LIGHT:
        return False
    return system_scheme == "dark"


def display_title(settings: Settings) -> str:
    return settings.company_name or DEFAULT_TITLE
