from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises all declarative settings (editor behaviour, toolbar
layout, logging). It loads YAML files packaged with *scribe_toolkit* and
merges them with user overrides.

On Windows: ``%LOCALAPPDATA%\\ScribeToolkit\\config\\*.yml``
On Unix: ``~/.scribe_toolkit/*.yml``
Either location can be replaced with the ``SCRIBE_CONFIG_DIR`` environment
variable.

User values are merged key by key into the packaged mappings, so an override
file only needs the settings it changes.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager", "get_user_config_dir", "get_user_data_dir"]


def get_user_config_dir() -> Path:
    """Get the user configuration directory."""
    override = os.environ.get("SCRIBE_CONFIG_DIR")
    if override:
        return Path(override)
    if os.name == 'nt':  # Windows
        local_appdata = os.environ.get('LOCALAPPDATA')
        if local_appdata:
            return Path(local_appdata) / "ScribeToolkit" / "config"
        return Path.home() / "AppData" / "Local" / "ScribeToolkit" / "config"
    return Path.home() / ".scribe_toolkit"


def get_user_data_dir() -> Path:
    """Directory holding the saved document store."""
    override = os.environ.get("SCRIBE_DATA_DIR")
    if override:
        return Path(override)
    if os.name == 'nt':
        local_appdata = os.environ.get('LOCALAPPDATA')
        base = Path(local_appdata) if local_appdata else Path.home() / "AppData" / "Local"
        return base / "ScribeToolkit" / "data"
    return Path.home() / ".scribe_toolkit" / "data"


def _read_packaged(filename: str) -> str:
    return pkg_resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")


def _ensure_user_configs_exist(user_config_dir: Path, default_filenames: Dict[str, str]) -> None:
    """Copy default config files to user directory if they don't exist."""
    try:
        user_config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Could not create user config directory %s: %s", user_config_dir, e)
        return

    for filename in default_filenames.values():
        user_config_path = user_config_dir / filename
        if user_config_path.exists():
            continue
        try:
            user_config_path.write_text(_read_packaged(filename), encoding='utf-8')
            logger.info("Created user config: %s", user_config_path)
        except (FileNotFoundError, OSError) as e:
            logger.warning("Could not copy default config %s: %s", filename, e)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):  # type: ignore[no-self-use]
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance

    def reset(cls) -> None:
        """Drop the cached instance so the next call reloads every file."""
        cls._instance = None


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "logging": "logging.yml",
        "editor": "editor.yml",
        "toolbar": "toolbar.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    def get_editor_config(self) -> Dict[str, Any]:
        return self._data.get("editor", {})

    def get_toolbar_config(self) -> Dict[str, Any]:
        return self._data.get("toolbar", {})

    def get_section(self, name: str, key: str, default: Any = None) -> Any:
        """Return ``editor[name][key]``-style nested values with a default."""
        section = self.get_editor_config().get(name) or {}
        if not isinstance(section, dict):
            return default
        value = section.get(key)
        return default if value is None else value

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []

        user_config_dir = get_user_config_dir()
        _ensure_user_configs_exist(user_config_dir, self._DEFAULT_FILENAMES)

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. load packaged default
            try:
                packaged_data = yaml.safe_load(_read_packaged(filename)) or {}
                merged_cfg.update(packaged_data)
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    if isinstance(user_data, dict):
                        merged_cfg = _deep_merge(merged_cfg, user_data)
                        if status == "loaded":
                            status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))
