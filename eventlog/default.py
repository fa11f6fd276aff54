"""Process-wide default store, created lazily on first access."""

import logging
import os
import threading

from eventlog.config import Config, load_config, load_yaml_config
from eventlog.dispatch import build_dispatcher
from eventlog.store import EventStore, logger_sink

logger = logging.getLogger(__name__)

_default: EventStore | None = None
_default_lock = threading.Lock()


def default_store(config: Config | None = None) -> EventStore:
    """Return the shared store, building it on the first call.

    *config* only matters for that first call; without one the settings
    come from ``EVENTLOG_CONFIG`` (a YAML file) and ``EVENTLOG_*`` variables.
    """
    global _default
    with _default_lock:
        if _default is None:
            if config is None:
                config = load_config(load_yaml_config(os.environ.get("EVENTLOG_CONFIG")))
            _default = EventStore(
                name=config.name,
                mirror_to_console=config.mirror_to_console,
                enabled=config.enabled,
                dispatcher=build_dispatcher(config.dispatcher, name=f"eventlog-{config.name}"),
                sink=logger_sink(config.console_logger),
            )
            logger.info("Created default event store %r (dispatcher=%s)",
                        config.name, config.dispatcher)
        elif config is not None:
            logger.debug("Default event store already exists, ignoring config")
        return _default


def reset_default_store():
    """Close and forget the shared store; the next access builds a new one."""
    global _default
    with _default_lock:
        store, _default = _default, None
    if store is not None:
        store.close()
