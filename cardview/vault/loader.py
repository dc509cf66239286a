"""Load vault notes as backend records.

This stands in for the host's query backends: the same markdown file is
exposed either as a Bases record (wrapped values) or a Datacore record
(raw values, ``Link`` objects, ``DateTimeValue`` dates).
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from pathlib import Path
from types import MappingProxyType
from typing import Any

import frontmatter

from ..models import BACKENDS, Backend, BasesRecord, DatacoreRecord, DataValue, DateTimeValue, DateValue, Link, Record
from ..settings.load import ConfigError
from .parser import extract_inline_tags, parse_wikilink

logger = logging.getLogger(__name__)

def _as_datetime(value: date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _bases_value(value: Any) -> DateValue | DataValue | None:
    if value is None:
        return None
    if isinstance(value, date):
        return DateValue(date=_as_datetime(value))
    return DataValue(data=value)


def _datacore_value(value: Any) -> Any:
    if isinstance(value, date):
        return DateTimeValue(moment=_as_datetime(value))
    if isinstance(value, str):
        target = parse_wikilink(value)
        return Link(path=target) if target else value
    if isinstance(value, list):
        return [_datacore_value(item) for item in value]
    return value


def collect_tags(metadata: dict, content: str) -> tuple[str, ...]:
    """Frontmatter tags followed by inline tags, ``#``-prefixed, first occurrence kept."""
    raw = metadata.get("tags") or []
    if isinstance(raw, str):
        raw = [t for t in raw.replace(",", " ").split() if t]
    tags: list[str] = []
    for tag in raw:
        if tag is None:
            continue
        text = str(tag).strip()
        if not text:
            continue
        text = text if text.startswith("#") else f"#{text}"
        if text not in tags:
            tags.append(text)
    for tag in extract_inline_tags(content):
        if tag not in tags:
            tags.append(tag)
    return tuple(tags)


def _file_times(path: Path) -> tuple[int, int, int]:
    stat = path.stat()
    created = getattr(stat, "st_birthtime", None) or stat.st_ctime
    return int(created * 1000), int(stat.st_mtime * 1000), stat.st_size


def load_record(path: Path, vault_path: Path, backend: Backend = "bases") -> Record:
    """Load a single markdown file as a record of the given backend."""
    post = frontmatter.load(path)
    content = post.content
    metadata = post.metadata

    rel = path.relative_to(vault_path).as_posix()
    ctime, mtime, size = _file_times(path)
    tags = collect_tags(metadata, content)

    if backend == "bases":
        props = {k: v for k, v in ((k, _bases_value(v)) for k, v in metadata.items()) if v is not None}
        return BasesRecord(
            path=rel,
            name=path.stem,
            tags=tags,
            ctime=ctime,
            mtime=mtime,
            size=size,
            content=content,
            properties=MappingProxyType(props),
        )

    props = {k: _datacore_value(v) for k, v in metadata.items() if v is not None}
    return DatacoreRecord(
        path=rel,
        name=path.stem,
        tags=tags,
        ctime=ctime,
        mtime=mtime,
        size=size,
        content=content,
        properties=MappingProxyType(props),
    )


def load_records(vault_path: Path, backend: Backend = "bases") -> list[Record]:
    """Load all markdown notes under ``vault_path`` in path order.

    Args:
        vault_path: Path to the vault directory
        backend: Record shape to produce ("bases" or "datacore")

    Returns:
        Records for every note that could be parsed
    """
    if backend not in BACKENDS:
        raise ConfigError(f"unknown backend {backend!r}; expected one of {', '.join(BACKENDS)}")

    records: list[Record] = []
    for md_file in sorted(vault_path.rglob("*.md")):
        # Skip hidden files and directories
        if any(part.startswith(".") for part in md_file.relative_to(vault_path).parts):
            continue
        try:
            records.append(load_record(md_file, vault_path, backend))
        except Exception as e:
            # Log error but continue loading
            logger.warning("Failed to load %s: %s", md_file, e)
    return records
