"""Immutable log event model."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from eventlog.levels import Level
from eventlog.source import resolve_location
from eventlog.tags import Tag, tag_value

# Fixed pattern, independent of the user's locale, so exports stay parseable.
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_datetime(value: datetime) -> str:
    return value.strftime(DATETIME_FORMAT)


@dataclass(frozen=True)
class Metadata:
    file: str
    line: int
    tags: tuple[Tag, ...] = ()

    @property
    def tag_values(self) -> tuple[str, ...]:
        return tuple(tag_value(t) for t in self.tags)

    @property
    def location(self) -> str:
        return f"{self.file}@{self.line}"


@dataclass(frozen=True)
class Event:
    """One recorded log occurrence. Never modified after construction."""

    level: Level
    message: str
    metadata: Metadata
    error: BaseException | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(cls, level: Level, message: str, error: BaseException | None = None,
               tags: Iterable[Tag] = (), *, source_file: str | None = None,
               source_line: int | None = None, stacklevel: int = 1) -> "Event":
        """Build an event, capturing the caller's file and line when not given."""
        file, line = resolve_location(source_file, source_line, stacklevel)
        return cls(
            level=level,
            message=message,
            error=error,
            metadata=Metadata(file=file, line=line, tags=tuple(tags)),
        )

    @property
    def timestamp(self) -> str:
        return format_datetime(self.created_at)

    @property
    def error_description(self) -> str | None:
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__

    def has_any_tag(self, values) -> bool:
        """True if at least one attached tag's value is in *values*."""
        return any(v in values for v in self.metadata.tag_values)

    def summary(self) -> str:
        """One-line form written to the console mirror."""
        return f"{self.timestamp} {self.level.symbol}: {self.message}"

    def describe(self) -> str:
        """One-line form used by the text export."""
        line = f"{self.summary()} (File: {self.metadata.location})"
        if self.error is None:
            return line
        return f"{line}(Error: {self.error_description})"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "timestamp": self.timestamp,
            "level": self.level.name.lower(),
            "color": self.level.color,
            "symbol": self.level.symbol,
            "message": self.message,
            "error": self.error_description,
            "file": self.metadata.file,
            "line": self.metadata.line,
            "tags": list(self.metadata.tag_values),
        }
