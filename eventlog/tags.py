"""Tags classify events for filtering.

A tag is anything with a string ``value``: members of a ``str``-valued
``Enum``, the ``StrTag`` dataclass below, or any other type exposing that
attribute. Plain strings are accepted too and stand for themselves.
Filtering compares string values only, never concrete types.
"""

from dataclasses import dataclass
from typing import Iterable, Protocol, Union, runtime_checkable


@runtime_checkable
class Tagging(Protocol):
    @property
    def value(self) -> str: ...


Tag = Union[str, Tagging]


@dataclass(frozen=True)
class StrTag:
    value: str

    def __str__(self) -> str:
        return self.value


def tag_value(tag: Tag) -> str:
    """Return the string identity of a tag."""
    if isinstance(tag, str) and not hasattr(tag, "value"):
        return tag
    return str(tag.value)


def unique_values(tags: Iterable[Tag]) -> tuple[str, ...]:
    """Tag values in first-seen order with duplicates dropped."""
    return tuple(dict.fromkeys(tag_value(t) for t in tags))
