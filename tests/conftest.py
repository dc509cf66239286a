"""Pytest configuration and fixtures."""

from datetime import datetime
from pathlib import Path
from types import MappingProxyType

import pytest

from cardview.models import BasesRecord, DatacoreRecord, DataValue, DateTimeValue, DateValue, Link
from cardview.settings.schema import EffectiveSettings

# 2024-03-15 12:00 local time
NOW_MS = int(datetime(2024, 3, 15, 12, 0).timestamp() * 1000)
HOUR_MS = 3_600_000
DAY_MS = 86_400_000


def bases_record(path: str, props: dict | None = None, **kwargs) -> BasesRecord:
    name = kwargs.pop("name", path.rsplit("/", 1)[-1].removesuffix(".md"))
    return BasesRecord(path=path, name=name, properties=MappingProxyType(props or {}), **kwargs)


def datacore_record(path: str, props: dict | None = None, **kwargs) -> DatacoreRecord:
    name = kwargs.pop("name", path.rsplit("/", 1)[-1].removesuffix(".md"))
    return DatacoreRecord(path=path, name=name, properties=MappingProxyType(props or {}), **kwargs)


@pytest.fixture
def settings() -> EffectiveSettings:
    """Built-in defaults."""
    return EffectiveSettings()


@pytest.fixture
def note_bases() -> BasesRecord:
    """A Bases record with wrapped properties."""
    return bases_record(
        "projects/alpha/Kickoff.md",
        {
            "title": DataValue("Project Kickoff"),
            "summary": DataValue("Agenda and owners"),
            "cover": DataValue(["img/a.png", "  ", "img/b.jpg"]),
            "banner": DataValue("img/banner.webp"),
            "published": DateValue(datetime(2024, 3, 1, 9, 30)),
            "status": DataValue("active"),
        },
        tags=("#project", "#kickoff"),
        ctime=NOW_MS - 10 * DAY_MS,
        mtime=NOW_MS - 2 * HOUR_MS,
        size=2048,
        content="# Project Kickoff\n\nFirst real line.\nSecond line.\n",
    )


@pytest.fixture
def note_datacore() -> DatacoreRecord:
    """The same note as a Datacore record with raw properties."""
    return datacore_record(
        "projects/alpha/Kickoff.md",
        {
            "title": "Project Kickoff",
            "summary": "Agenda and owners",
            "cover": [Link(path="img/a.png"), "  ", "img/b.jpg"],
            "banner": "img/banner.webp",
            "published": DateTimeValue(datetime(2024, 3, 1, 9, 30)),
            "status": "active",
        },
        tags=("#project", "#kickoff"),
        ctime=NOW_MS - 10 * DAY_MS,
        mtime=NOW_MS - 2 * HOUR_MS,
        size=2048,
        content="# Project Kickoff\n\nFirst real line.\nSecond line.\n",
    )


def write_note(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
