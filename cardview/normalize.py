"""Turn one backend record into a card."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Callable, Iterable

from .models import CardModel, Record
from .resolve.property import (
    date_millis,
    resolve_first,
    resolve_first_date,
    resolve_first_images,
    stringify,
    unwrap,
)
from .settings.schema import EffectiveSettings
from .slots import property_choices, timestamp_source
from .vault.parser import EMBED_PATTERN, WIKILINK_PATTERN, extract_embeds

IMAGE_EXTENSIONS = (".avif", ".bmp", ".gif", ".jpeg", ".jpg", ".png", ".svg", ".webp")

PREVIEW_MAX_CHARS = 500

EmbedDetector = Callable[[str | None], Iterable[str]]

_MD_LINK = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_LINE_PREFIX = re.compile(r"^\s*(?:#{1,6}\s+|>\s*|[-*+]\s+(?:\[.\]\s+)?|\d+[.)]\s+)")
_PAIRED = re.compile(r"(\*\*|__|~~|==)(.+?)\1")
_EMPHASIS = re.compile(r"(?<!\w)([*_])(\S.*?)\1(?!\w)")
_CODE = re.compile(r"`([^`]+)`")


def folder_of(path: str) -> str:
    """Path without its final segment; empty for notes at the vault root."""
    return path.rsplit("/", 1)[0] if "/" in path else ""


def _clean_line(line: str) -> str:
    line = EMBED_PATTERN.sub("", line)
    line = WIKILINK_PATTERN.sub(lambda m: m.group("display") or m.group("target"), line)
    line = _MD_LINK.sub(r"\1", line)
    line = _LINE_PREFIX.sub("", line)
    line = _CODE.sub(r"\1", line)
    line = _PAIRED.sub(r"\2", line)
    line = _EMPHASIS.sub(r"\2", line)
    return " ".join(line.split())


def preview_from_content(
    content: str | None,
    title: str,
    name: str,
    omit_first_line: bool = False,
) -> str | None:
    """Preview text from a note body.

    Takes the non-empty lines, drops a leading line that repeats the title or
    file name, then drops one more line when ``omit_first_line`` is set.
    """
    if not content:
        return None

    lines = []
    in_fence = False
    for raw in content.splitlines():
        if raw.lstrip().startswith(("```", "~~~")):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        line = _clean_line(raw)
        if line:
            lines.append(line)

    if lines and lines[0].casefold() in (title.casefold(), name.casefold()):
        lines = lines[1:]
    if omit_first_line and lines:
        lines = lines[1:]

    text = " ".join(lines)
    if len(text) > PREVIEW_MAX_CHARS:
        text = text[:PREVIEW_MAX_CHARS].rstrip()
    return text or None


def first_embedded_image(targets: Iterable[str]) -> str | None:
    """First embed whose extension is an accepted image type."""
    for target in targets:
        bare = target.split("?", 1)[0].split("#", 1)[0].lower()
        if bare.endswith(IMAGE_EXTENSIONS):
            return target
    return None


def _title(record: Record, settings: EffectiveSettings) -> str:
    raw = unwrap(resolve_first(record, settings.title_property))
    if isinstance(raw, (list, tuple)):
        raw = raw[0] if raw else None
    return stringify(raw) or record.name


def _time(record: Record, settings: EffectiveSettings, source: str) -> tuple[int | None, int | None]:
    """(property time, file time) for ``source`` ("ctime" or "mtime")."""
    prop_list = settings.created_property if source == "ctime" else settings.modified_property
    resolved = date_millis(resolve_first_date(record, prop_list))
    file_time = record.ctime if source == "ctime" else record.mtime
    return resolved, file_time


def _sort_key(record: Record, settings: EffectiveSettings, title: str):
    method = settings.sort_method
    if method.startswith(("ctime", "mtime")):
        resolved, file_time = _time(record, settings, method[:5])
        return resolved if resolved is not None else file_time
    if method == "title":
        return title.casefold()
    if method == "size":
        return record.size
    return None  # random: assigned by the pipeline


def normalize(
    record: Record,
    settings: EffectiveSettings,
    *,
    embeds: EmbedDetector = extract_embeds,
) -> CardModel | None:
    """Normalize a record into a card, or None when it has no path."""
    if not record.path:
        return None

    name = record.name or record.path.rsplit("/", 1)[-1].rsplit(".", 1)[0]
    title = _title(record, settings)

    source = timestamp_source(settings)
    resolved, file_time = _time(record, settings, source)
    fallback = settings.fallback_to_ctime if source == "ctime" else settings.fallback_to_mtime
    if resolved is not None:
        timestamp = resolved
    elif fallback:
        timestamp = file_time
    else:
        timestamp = None

    preview = None
    if settings.show_text_preview:
        preview = stringify(resolve_first(record, settings.description_property)) or None
        if preview is None and settings.fallback_to_content:
            preview = preview_from_content(record.content, title, name, settings.omits_first_line)

    images: list[str] = []
    if settings.show_thumbnails:
        images = resolve_first_images(record, settings.image_property)
        if not images and settings.fallback_to_embeds:
            found = first_embedded_image(embeds(record.content))
            if found:
                images = [found]

    properties = {}
    for prop in property_choices(settings):
        text = stringify(resolve_first(record, prop))
        if text:
            properties[prop] = text

    return CardModel(
        path=record.path,
        name=name,
        title=title,
        timestamp=timestamp,
        tags=tuple(dict.fromkeys(record.tags)),
        folder=folder_of(record.path),
        images=tuple(images),
        preview=preview,
        sort_key=_sort_key(record, settings, title),
        properties=MappingProxyType(properties),
    )
