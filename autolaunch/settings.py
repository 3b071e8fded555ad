"""Application settings and their persistence in a JSON file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir

log = logging.getLogger(__name__)

APP_NAME = "autolaunch"


class IsolationMode(str, Enum):
    """How projects are isolated when they are started."""

    SANDBOX = "Sandbox"
    DIRECT = "Direct"


class Theme(str, Enum):
    """Colour theme of the user interface."""

    LIGHT = "Light"
    DARK = "Dark"
    SYSTEM = "System"


def default_snapshots_path() -> str:
    """Return the default directory in which project snapshots are kept."""
    base = Path(user_data_dir(APP_NAME, appauthor=False, roaming=True))
    return str(base / "snapshots")


def default_config_path() -> Path:
    """Return the default location of the settings file."""
    base = Path(user_config_dir(APP_NAME, appauthor=False, roaming=True))
    return base / "settings.json"


def _field(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _bool_field(data: dict[str, Any], key: str) -> bool:
    value = _field(data, key)
    if not isinstance(value, bool):
        raise ValueError(f"field `{key}` must be a boolean, got {value!r}")
    return value


@dataclass
class AppSettings:
    """User-adjustable application settings."""

    default_isolation_mode: IsolationMode = IsolationMode.SANDBOX
    snapshots_path: str = field(default_factory=default_snapshots_path)
    theme: Theme = Theme.DARK
    auto_cleanup: bool = True
    max_snapshot_age_days: int = 30
    enable_logging: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Return the settings as a JSON-ready mapping."""
        return {
            "default_isolation_mode": self.default_isolation_mode.value,
            "snapshots_path": self.snapshots_path,
            "theme": self.theme.value,
            "auto_cleanup": self.auto_cleanup,
            "max_snapshot_age_days": self.max_snapshot_age_days,
            "enable_logging": self.enable_logging,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppSettings:
        """Build settings from a mapping; raise ValueError if it is malformed."""
        if not isinstance(data, dict):
            raise ValueError("settings must be a JSON object")
        snapshots_path = _field(data, "snapshots_path")
        if not isinstance(snapshots_path, str):
            raise ValueError("field `snapshots_path` must be a string")
        age = _field(data, "max_snapshot_age_days")
        if isinstance(age, bool) or not isinstance(age, int) or age < 0:
            raise ValueError(
                f"field `max_snapshot_age_days` must be a non-negative integer, got {age!r}"
            )
        return cls(
            default_isolation_mode=IsolationMode(_field(data, "default_isolation_mode")),
            snapshots_path=snapshots_path,
            theme=Theme(_field(data, "theme")),
            auto_cleanup=_bool_field(data, "auto_cleanup"),
            max_snapshot_age_days=age,
            enable_logging=_bool_field(data, "enable_logging"),
        )


def load_settings(path: str | Path) -> AppSettings:
    """Read settings from a JSON file."""
    path = Path(path)
    settings = AppSettings.from_dict(json.loads(path.read_text(encoding="utf-8")))
    log.info("Settings loaded from %s", path)
    return settings


def save_settings(path: str | Path, settings: AppSettings) -> None:
    """Write settings to a JSON file."""
    path = Path(path)
    path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
    log.info("Settings saved to %s", path)


def _ensure_parent(path_text: str) -> None:
    parent = Path(path_text).parent
    if not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)


class SettingsManager:
    """Keeps the application settings in memory and on disk in step."""

    def __init__(self, config_path: str | Path | None = None) -> None:
        self.config_path = Path(config_path) if config_path is not None else default_config_path()
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        if self.config_path.exists():
            self._settings = load_settings(self.config_path)
        else:
            self._settings = AppSettings()
            save_settings(self.config_path, self._settings)
        log.info("Settings manager initialised: %s", self.config_path)

    @property
    def settings(self) -> AppSettings:
        """The settings currently in effect."""
        return self._settings

    def _persist(self) -> None:
        save_settings(self.config_path, self._settings)

    def update_settings(self, new_settings: AppSettings) -> None:
        """Replace all settings, save them and apply them at once."""
        log.info("Updating application settings")
        if new_settings.snapshots_path:
            _ensure_parent(new_settings.snapshots_path)
        save_settings(self.config_path, new_settings)
        self._settings = replace(new_settings)
        log.info("Settings updated and applied")

    def set_default_isolation_mode(self, mode: IsolationMode) -> None:
        """Change the isolation mode used by default."""
        log.info("Changing default isolation mode: %s", mode.value)
        self._settings.default_isolation_mode = IsolationMode(mode)
        self._persist()

    def set_snapshots_path(self, path: str) -> None:
        """Change where snapshots are stored, creating its parent directory."""
        log.info("Changing snapshots path: %s", path)
        _ensure_parent(path)
        self._settings.snapshots_path = path
        self._persist()

    def set_theme(self, theme: Theme) -> None:
        """Change the colour theme."""
        log.info("Changing theme: %s", theme.value)
        self._settings.theme = Theme(theme)
        self._persist()

    def set_auto_cleanup(self, enabled: bool) -> None:
        """Turn automatic cleanup of temporary files on or off."""
        log.info("Changing auto cleanup: %s", enabled)
        self._settings.auto_cleanup = enabled
        self._persist()

    def reset_to_defaults(self) -> None:
        """Restore and save the default settings."""
        log.info("Resetting settings to defaults")
        self._settings = AppSettings()
        self._persist()