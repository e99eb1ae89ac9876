"""Settings service: load and save ~/.config/celestia-i18n/settings.json."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

_SETTINGS_FILE = Path(
    os.environ.get(
        "CELESTIA_I18N_SETTINGS",
        Path.home() / ".config" / "celestia-i18n" / "settings.json",
    )
)

DEFAULTS: dict[str, Any] = {
    # Writer
    "line_width": 50,

    # Translator
    "opencc_config": "s2twp",

    # Logging
    "log_level": "WARNING",
}


class Settings:
    """Tool settings backed by a JSON file."""

    _instance: Settings | None = None

    def __init__(self):
        self._data: dict[str, Any] = dict(DEFAULTS)
        self._load()

    @classmethod
    def get(cls) -> Settings:
        if cls._instance is None:
            cls._instance = Settings()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        cls._instance = None

    # ── Public API ────────────────────────────────────────────────

    def __getitem__(self, key: str) -> Any:
        return self._data.get(key, DEFAULTS.get(key))

    def __setitem__(self, key: str, value: Any):
        self._data[key] = value

    def get_value(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default if default is not None else DEFAULTS.get(key))

    @property
    def line_width(self) -> int:
        try:
            return int(self["line_width"])
        except (TypeError, ValueError):
            log.warning("Ignoring invalid line_width %r", self["line_width"])
            return DEFAULTS["line_width"]

    @property
    def log_level(self) -> int:
        level = logging.getLevelName(str(self["log_level"]).upper())
        return level if isinstance(level, int) else logging.WARNING

    def save(self):
        _SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
        _SETTINGS_FILE.write_text(
            json.dumps(self._data, ensure_ascii=False, indent=2), "utf-8"
        )

    # ── Private ───────────────────────────────────────────────────

    def _load(self):
        if not _SETTINGS_FILE.exists():
            return
        try:
            stored = json.loads(_SETTINGS_FILE.read_text("utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Ignoring unreadable settings file %s: %s", _SETTINGS_FILE, e)
            return
        if isinstance(stored, dict):
            self._data.update(stored)
        else:
            log.warning("Ignoring settings file %s: not a JSON object", _SETTINGS_FILE)
