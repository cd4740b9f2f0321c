"""User configuration helpers for settings persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from cursedfarm.core.types import DIFFICULTIES
from cursedfarm.domain.state import DEFAULT_CURSE_CLOCK_INTERVAL

logger = logging.getLogger(__name__)

_DEFAULT_DIFFICULTY = "default"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "CursedFarm"
        return Path.home() / "CursedFarm"
    return Path.home() / ".config" / "cursed_farm"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    """Return the per-user save directory."""
    return get_user_data_dir() / "saves"


def default_config() -> Dict[str, Any]:
    return {"difficulty": _DEFAULT_DIFFICULTY, "curse_clock_interval": DEFAULT_CURSE_CLOCK_INTERVAL}


def _normalize_difficulty(value: object) -> str:
    return value if value in DIFFICULTIES else _DEFAULT_DIFFICULTY


def _normalize_interval(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return DEFAULT_CURSE_CLOCK_INTERVAL


def normalize_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "difficulty": _normalize_difficulty(raw.get("difficulty")),
        "curse_clock_interval": _normalize_interval(raw.get("curse_clock_interval")),
    }


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return normalize_config(raw)


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = normalize_config(config)
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
