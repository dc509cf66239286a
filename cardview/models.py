"""Data models for backend records and normalized cards."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Literal, Mapping, get_args

# Valid sort methods for a view
SortMethod = Literal[
    "mtime-desc",
    "mtime-asc",
    "ctime-desc",
    "ctime-asc",
    "title",
    "size",
    "random",
]

SORT_METHODS: tuple[str, ...] = get_args(SortMethod)

ViewMode = Literal["card", "masonry", "list"]

VIEW_MODES: tuple[str, ...] = get_args(ViewMode)

Backend = Literal["bases", "datacore"]

BACKENDS: tuple[str, ...] = get_args(Backend)


# --- Bases value objects (Variant A) ---


@dataclass(frozen=True)
class DateValue:
    """A date or datetime property as exposed by the Bases backend."""

    date: datetime


@dataclass(frozen=True)
class DataValue:
    """A text, number, checkbox, or list property as exposed by the Bases backend."""

    data: Any


# --- Datacore value objects (Variant B) ---


@dataclass(frozen=True)
class Link:
    """A link object inside a Datacore list property."""

    path: str
    display: str | None = None


@dataclass(frozen=True)
class DateTimeValue:
    """A Datacore date value; only exposes millisecond conversion."""

    moment: datetime

    def to_millis(self) -> int:
        return int(self.moment.timestamp() * 1000)


def _empty_properties() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class BasesRecord:
    """A note as returned by a Bases query.

    Properties are wrapped: ``DateValue`` for date-likes, ``DataValue`` for
    everything else. A missing property is ``None``.
    """

    path: str
    name: str  # file name without extension
    tags: tuple[str, ...] = ()
    ctime: int | None = None  # epoch ms
    mtime: int | None = None  # epoch ms
    size: int = 0
    content: str | None = None
    properties: Mapping[str, DateValue | DataValue] = field(default_factory=_empty_properties)

    kind: Literal["bases"] = field(default="bases", init=False)

    def get(self, prop: str) -> DateValue | DataValue | None:
        return self.properties.get(prop)


@dataclass(frozen=True)
class DatacoreRecord:
    """A note as returned by a Datacore query.

    Properties are raw values. Links inside lists are ``Link`` objects and
    dates are ``DateTimeValue``.
    """

    path: str
    name: str
    tags: tuple[str, ...] = ()
    ctime: int | None = None
    mtime: int | None = None
    size: int = 0
    content: str | None = None
    properties: Mapping[str, Any] = field(default_factory=_empty_properties)

    kind: Literal["datacore"] = field(default="datacore", init=False)

    def get(self, prop: str) -> Any:
        return self.properties.get(prop)


Record = BasesRecord | DatacoreRecord


@dataclass(frozen=True)
class CardModel:
    """A normalized, presentation-ready note."""

    path: str
    name: str
    title: str
    timestamp: int | None  # epoch ms, None when nothing resolved
    tags: tuple[str, ...]
    folder: str
    images: tuple[str, ...] = ()
    preview: str | None = None
    sort_key: Any = None
    properties: Mapping[str, str] = field(default_factory=_empty_properties)
