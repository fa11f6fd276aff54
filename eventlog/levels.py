"""Severity levels for log events and their display attributes."""

import logging
from enum import IntEnum


class Level(IntEnum):
    SUCCESS = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4

    @property
    def color(self) -> str:
        """Display color identifier used by presentation adapters."""
        return _DISPLAY[self][0]

    @property
    def symbol(self) -> str:
        """Single-character marker used in export and console lines."""
        return _DISPLAY[self][1]

    @property
    def logging_level(self) -> int:
        """Matching stdlib logging level for the console mirror."""
        return _DISPLAY[self][2]


_DISPLAY = {
    Level.SUCCESS: ("green", "\U0001F7E2", logging.INFO),
    Level.INFO: ("blue", "\U0001F535", logging.INFO),
    Level.WARNING: ("yellow", "\U0001F7E1", logging.WARNING),
    Level.ERROR: ("red", "\U0001F534", logging.ERROR),
    Level.FATAL: ("purple", "\U0001F7E3", logging.CRITICAL),
}
