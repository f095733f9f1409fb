from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Optional

import yaml

from .engine.scheduler import CadenceConfig
from .exceptions import CatalogError
from .utils.numbers import whole_number

logger = logging.getLogger(__name__)


@dataclass
class WindowSettings:
    width: int = 960
    height: int = 640
    title: str = "Soul Reaper"


@dataclass
class UISettings:
    toast_seconds: float = 2.5


@dataclass
class Settings:
    scheduler: CadenceConfig = field(default_factory=CadenceConfig)
    window: WindowSettings = field(default_factory=WindowSettings)
    ui: UISettings = field(default_factory=UISettings)

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise CatalogError(f"Cannot read settings {path}: {e}") from e
        except yaml.YAMLError as e:
            raise CatalogError(f"Malformed settings YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise CatalogError(f"Settings in {path} must be a mapping")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        try:
            scheduler = CadenceConfig(**{k: whole_number(v, f"scheduler.{k}") for k, v in (data.get("scheduler") or {}).items()})
            window = WindowSettings(**(data.get("window") or {}))
            ui = UISettings(**(data.get("ui") or {}))
        except (TypeError, ValueError) as e:
            raise CatalogError(f"Invalid settings: {e}") from e
        if ui.toast_seconds <= 0:
            raise CatalogError(f"ui.toast_seconds must be > 0, got {ui.toast_seconds}")
        return Settings(scheduler=scheduler, window=window, ui=ui)

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "Settings":
        """Load settings from built-in defaults and optional user override file.

        If user_path is provided and exists, overlay values onto defaults.
        """
        try:
            with resources.files("soul_reaper.config").joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = dataclasses.asdict(Settings())
        except yaml.YAMLError as e:
            raise CatalogError(f"Malformed packaged settings YAML: {e}") from e

        user_data = {}
        if user_path is not None:
            user_path = Path(user_path)
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        merged = cls._deep_merge(default_data, user_data)
        settings = cls._from_dict(merged)
        logger.debug("Settings merged: %s", settings)
        return settings
