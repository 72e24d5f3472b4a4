"""Configuration file loading and overrides for CLI runs.

Precedence, highest first:
1) explicit CLI flags
2) ``--set KEY=VALUE`` overrides
3) the ``--config`` file (YAML, or JSON by extension)
4) argparse defaults
"""

from __future__ import annotations

import copy
import json
import logging
import os
from typing import Any, Dict, Iterable, Optional

import yaml

logger = logging.getLogger(__name__)

# config dot-path -> argparse dest
CONFIG_KEYS = {
    "scan.exe": "EXE",
    "scan.user_site": "USER_SITE",
    "scan.max_workers": "MAX_WORKERS",
    "validate.bound": "BOUND",
    "validate.subset": "SUBSET",
    "validate.superset": "SUPERSET",
    "validate.exit_code": "EXIT_CODE",
}


class ConfigError(ValueError):
    """Raised when a configuration value has the wrong type."""


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file.

    Missing, unreadable or non-mapping documents yield an empty dict and a
    warning rather than aborting the run.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.warning("Failed to load config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config %s is not a mapping; ignoring it", path)
        return {}
    return data


def _coerce_value(text: str) -> Any:
    """Best-effort convert string to JSON/number/bool, else raw string."""
    s = str(text).strip()
    try:
        return json.loads(s)
    except ValueError:
        sl = s.lower()
        if sl in ("true", "yes", "on"):
            return True
        if sl in ("false", "no", "off"):
            return False
        return s


def _apply_dot_path(dct: Dict[str, Any], dot_path: str, value: Any) -> None:
    parts = [p for p in dot_path.split(".") if p]
    cur = dct
    for key in parts[:-1]:
        if key not in cur or not isinstance(cur[key], dict):
            cur[key] = {}
        cur = cur[key]
    if parts:
        cur[parts[-1]] = value


def collect_overrides(pairs: Iterable[str]) -> Dict[str, Any]:
    """Parse ``KEY=VALUE`` strings into a nested dict keyed by dotted path."""
    overrides: Dict[str, Any] = {}
    for item in pairs or []:
        if not isinstance(item, str) or "=" not in item:
            logger.warning("Ignoring malformed --set override (expected KEY=VALUE): %s", item)
            continue
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            logger.warning("Ignoring --set override with empty key: %s", item)
            continue
        _apply_dot_path(overrides, key, _coerce_value(value))
    return overrides


def deep_merge(dest: Dict[str, Any], src: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in src.items():
        if isinstance(value, dict) and isinstance(dest.get(key), dict):
            deep_merge(dest[key], value)
        else:
            dest[key] = value
    return dest


def _lookup(cfg: Dict[str, Any], dot_path: str) -> Any:
    cur: Any = cfg
    for part in dot_path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _check_type(dot_path: str, value: Any) -> Any:
    if dot_path == "scan.exe":
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{dot_path} must be a path or a list of paths")
    elif dot_path in ("scan.user_site", "validate.subset", "validate.superset"):
        if not isinstance(value, bool):
            raise ConfigError(f"{dot_path} must be a boolean")
    elif dot_path in ("scan.max_workers", "validate.exit_code"):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{dot_path} must be an integer")
        if dot_path == "scan.max_workers" and value < 1:
            raise ConfigError(f"{dot_path} must be at least 1")
    elif dot_path == "validate.bound":
        if not isinstance(value, str):
            raise ConfigError(f"{dot_path} must be a path")
    return value


def apply_config(args, config: Dict[str, Any]) -> None:
    """Fill CLI args that were not given explicitly from config and ``--set`` overrides.

    Raises:
        ConfigError: If a recognized key holds a value of the wrong type.
    """
    merged = deep_merge(copy.deepcopy(config or {}), collect_overrides(getattr(args, "CONFIG_SET", [])))
    for dot_path, dest in CONFIG_KEYS.items():
        value = _lookup(merged, dot_path)
        if value is None:
            continue
        if getattr(args, dest, None) is not None:
            continue
        setattr(args, dest, _check_type(dot_path, value))
        logger.debug("Config %s applied to %s", dot_path, dest)
