"""Configuration loading from an optional YAML file and environment variables."""

import logging
import os
from dataclasses import dataclass, fields

import yaml

from eventlog.dispatch import DISPATCHER_KINDS

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Config:
    name: str = "default"
    enabled: bool = True
    mirror_to_console: bool = False
    dispatcher: str = "thread"          # "thread" or "immediate"
    console_logger: str = "eventlog.console"
    viewer_host: str = "127.0.0.1"
    viewer_port: int = 8080


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError:
        logger.warning("Invalid YAML in %s, using defaults", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return data


def _as_bool(raw, default: bool, key: str) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    logger.warning("Invalid boolean %r for %s, using %s", raw, key, default)
    return default


def _as_int(raw, default: int, key: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer %r for %s, using %d", raw, key, default)
        return default


def load_config(yaml_data: dict | None = None) -> Config:
    """Build Config from env vars over YAML data over defaults."""
    merged = {}
    known = {f.name for f in fields(Config)}
    for key, value in (yaml_data or {}).items():
        if key in known:
            merged[key] = value
        else:
            logger.warning("Ignoring unknown config key %r", key)
    for key in known:
        env_value = os.environ.get(f"EVENTLOG_{key.upper()}")
        if env_value is not None:
            merged[key] = env_value

    dispatcher = str(merged.get("dispatcher", Config.dispatcher))
    if dispatcher not in DISPATCHER_KINDS:
        logger.warning("Unknown dispatcher %r, using %r", dispatcher, Config.dispatcher)
        dispatcher = Config.dispatcher

    return Config(
        name=str(merged.get("name", Config.name)),
        enabled=_as_bool(merged.get("enabled", Config.enabled), Config.enabled, "enabled"),
        mirror_to_console=_as_bool(merged.get("mirror_to_console", Config.mirror_to_console),
                                   Config.mirror_to_console, "mirror_to_console"),
        dispatcher=dispatcher,
        console_logger=str(merged.get("console_logger", Config.console_logger)),
        viewer_host=str(merged.get("viewer_host", Config.viewer_host)),
        viewer_port=_as_int(merged.get("viewer_port", Config.viewer_port),
                            Config.viewer_port, "viewer_port"),
    )
