from __future__ import annotations

"""Configuration loading and access helpers.

Loads the YAML files packaged with *atlas_toolkit* and merges them with
user overrides found in the user configuration directory:

``$ATLAS_CONFIG_DIR/*.yml`` when the variable is set, otherwise
``~/.atlas_toolkit/*.yml``.
"""

import importlib.resources as pkg_resources
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager", "LoaderSettings"]


def _get_user_config_dir() -> Path:
    """Get the user configuration directory."""
    override = os.environ.get("ATLAS_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".atlas_toolkit"


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):  # type: ignore[no-self-use]
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "logging": "logging.yml",
        "loader": "loader.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance so the next call reloads from disk."""
        cls._instance = None

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    def get_loader_config(self) -> Dict[str, Any]:
        return self._data.get("loader", {})

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []
        user_config_dir = _get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. load packaged default
            try:
                resource = pkg_resources.files(__package__).joinpath(filename)
                with resource.open("r", encoding="utf-8") as fh:
                    packaged_data = yaml.safe_load(fh) or {}
                    merged_cfg.update(packaged_data)
                    status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
                status = "missing"
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.debug("Config startup: %s", " | ".join(startup_summary))


@dataclass(frozen=True)
class LoaderSettings:
    """Tunables of :class:`~atlas_toolkit.core.handler.ResourceHandler`.

    Attributes
    ----------
    chunk_size
        Number of characters fed to the XML tokenizer at a time.
    report_unknown_attributes
        Report undeclared attributes on ``sheet``/``sprite`` as INFO
        diagnostics instead of ignoring them silently.
    huge_tree
        Lift libxml2's safety limits on very deep or large documents.
    """

    chunk_size: int = 64 * 1024
    report_unknown_attributes: bool = False
    huge_tree: bool = False

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "LoaderSettings":
        if config is None:
            config = ConfigManager().get_loader_config()
        defaults = cls()
        chunk_size = int(config.get("chunk_size", defaults.chunk_size))
        if chunk_size <= 0:
            logger.warning("Ignoring non-positive chunk_size %s", chunk_size)
            chunk_size = defaults.chunk_size
        return cls(
            chunk_size=chunk_size,
            report_unknown_attributes=bool(
                config.get("report_unknown_attributes", defaults.report_unknown_attributes)
            ),
            huge_tree=bool(config.get("huge_tree", defaults.huge_tree)),
        )
