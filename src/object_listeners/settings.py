from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from platformdirs import user_config_dir
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SettingsError

logger = logging.getLogger(__name__)

APP_NAME = "object-listeners"
SETTINGS_FILE_NAME = "settings.yaml"

_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


def _as_bool(value: Any) -> bool:
    """Interpret common truthy/falsey spellings into a bool.

    Accepts: True/False, 1/0, "true"/"false", "yes"/"no", "on"/"off" (case-insensitive).
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "y", "on"}:
            return True
        if v in {"0", "false", "no", "n", "off"}:
            return False
    raise ValueError(f"not a boolean: {value!r}")


def _as_level(value: Any) -> str:
    name = str(value).strip().upper()
    if name not in _LEVELS:
        raise ValueError(f"unknown log level: {value!r}")
    return name


class SettingsFile(BaseModel):
    """Schema of the YAML settings file. Every key is optional."""

    model_config = ConfigDict(extra="forbid")

    propagate_errors: Optional[bool] = Field(default=None, description="Re-raise listener exceptions from trigger")
    warn_on_unhandled: Optional[bool] = Field(default=None, description="Log unmatched triggers/removals as warnings")
    log_level: Optional[str] = Field(default=None, description="Root log level used by configure_logging")

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _as_level(v)


@dataclass
class Settings:
    """Runtime behaviour of listener registries.

    Built from (lowest to highest precedence): dataclass defaults, a YAML file
    (``OL_SETTINGS_FILE`` or ``settings.yaml`` in the user config dir), and
    environment variables prefixed ``OL_``.
    """

    propagate_errors: bool = True
    warn_on_unhandled: bool = False
    log_level: str = "WARNING"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "propagate_errors": self.propagate_errors,
            "warn_on_unhandled": self.warn_on_unhandled,
            "log_level": self.log_level,
        }

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if env is None else env
        mapping = {
            "OL_PROPAGATE_ERRORS": ("propagate_errors", _as_bool),
            "OL_WARN_ON_UNHANDLED": ("warn_on_unhandled", _as_bool),
            "OL_LOG_LEVEL": ("log_level", _as_level),
        }
        out: Dict[str, Any] = {}
        for env_key, (field_name, caster) in mapping.items():
            if env.get(env_key, "") != "":
                try:
                    out[field_name] = caster(env[env_key])
                except ValueError as exc:
                    logger.error("Invalid env for %s=%r: %s", env_key, env[env_key], exc)
        return out

    @classmethod
    def from_yaml_file(cls, path: Path) -> Dict[str, Any]:
        """Read and validate a YAML settings file.

        Raises:
            SettingsError: if the file is unreadable, not a mapping, or fails validation.
        """
        try:
            with path.open("r", encoding="utf-8") as f:
                doc = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise SettingsError(f"Failed to read settings file {path}: {exc}") from exc
        if not isinstance(doc, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")
        try:
            parsed = SettingsFile.model_validate(doc)
        except ValidationError as exc:
            raise SettingsError(f"Invalid settings file {path}: {exc}") from exc
        logger.info("Loaded settings from %s", path)
        return parsed.model_dump(exclude_none=True)

    @classmethod
    def discover_config_path(cls, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        env = os.environ if env is None else env
        env_path = env.get("OL_SETTINGS_FILE")
        if env_path:
            return Path(env_path).expanduser().resolve()
        default_path = Path(user_config_dir(appname=APP_NAME)) / SETTINGS_FILE_NAME
        if default_path.exists():
            return default_path
        return None

    @classmethod
    def from_sources(
        cls,
        *,
        env: Optional[Mapping[str, str]] = None,
        file_path: Optional[Path | str] = None,
    ) -> "Settings":
        data: Dict[str, Any] = {}
        if file_path is not None:
            chosen_path: Optional[Path] = Path(file_path).expanduser().resolve()
        else:
            chosen_path = cls.discover_config_path(env)
        if chosen_path is not None:
            if chosen_path.exists():
                data.update(cls.from_yaml_file(chosen_path))
            else:
                logger.warning("Settings file not found: %s", chosen_path)
        data.update(cls.from_env(env))
        settings = cls(**data)
        logger.debug("Settings resolved: %s", settings)
        return settings


_lock = threading.Lock()
_default: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, building them from sources on first use.

    An unreadable or invalid settings file is logged and skipped; defaults plus
    environment overrides are used instead.
    """
    global _default
    with _lock:
        if _default is None:
            try:
                _default = Settings.from_sources()
            except SettingsError as exc:
                logger.error("%s; falling back to defaults", exc)
                _default = Settings(**Settings.from_env())
        return _default


def set_settings(settings: Optional[Settings]) -> None:
    """Replace the process-wide settings. ``None`` forces a rebuild on next access."""
    global _default
    with _lock:
        _default = settings


__all__ = [
    "Settings",
    "SettingsFile",
    "get_settings",
    "set_settings",
]
