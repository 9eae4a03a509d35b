from __future__ import annotations

"""Configuration loading and validation for geoquiz.

This module loads YAML configuration, applies defaults, and validates
that enumerations and numbers are sane before a session starts.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..errors import ConfigError
from ..quiz.models import Difficulty

log = logging.getLogger(__name__)

ALLOWED_DIFFICULTIES = {d.value for d in Difficulty}
ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        return _load_yaml(Path(path))
    return _load_yaml(Path(__file__).with_name("defaults.yml"))


def _coerce_int(section: Dict[str, Any], key: str, default: int, minimum: int) -> None:
    try:
        value = int(section.get(key, default))
    except (TypeError, ValueError):
        log.warning("Invalid %s %r, using %d.", key, section.get(key), default)
        value = default
    if value < minimum:
        log.warning("%s must be >= %d, got %d; using %d.", key, minimum, value, default)
        value = default
    section[key] = value


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Unknown enum values fall back to their defaults with a warning rather
    than aborting.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    cfg.setdefault("session", {})
    cfg.setdefault("storage", {})
    cfg.setdefault("logging", {})

    session = cfg["session"]
    storage = cfg["storage"]
    logging_cfg = cfg["logging"]

    session.setdefault("difficulty", "easy")
    session.setdefault("total_time_s", 120)
    session.setdefault("advance_delay_ms", 1400)
    session.setdefault("seed", None)

    storage.setdefault("data_dir", "storage/data")
    storage.setdefault("high_score_path", "storage/data/high_score.json")
    storage.setdefault("record_history", True)

    logging_cfg.setdefault("level", "INFO")

    difficulty = str(session.get("difficulty")).lower()
    if difficulty not in ALLOWED_DIFFICULTIES:
        log.warning("Unsupported difficulty '%s', using 'easy'.", session.get("difficulty"))
        difficulty = "easy"
    session["difficulty"] = difficulty

    _coerce_int(session, "total_time_s", 120, 1)
    _coerce_int(session, "advance_delay_ms", 1400, 0)

    if session["seed"] is not None:
        try:
            session["seed"] = int(session["seed"])
        except (TypeError, ValueError):
            log.warning("Ignoring non-integer seed %r.", session["seed"])
            session["seed"] = None

    level = str(logging_cfg.get("level", "INFO")).upper()
    if level not in ALLOWED_LOG_LEVELS:
        log.warning("Unsupported logging level '%s', using 'INFO'.", level)
        level = "INFO"
    logging_cfg["level"] = level

    storage["record_history"] = bool(storage.get("record_history", True))
    return cfg
