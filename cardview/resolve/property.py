"""Resolve comma-separated property lists against backend records.

Text and date lookups stop at the first present property. Image lookups
collect from every listed property, since a note may carry several covers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ..models import DataValue, DateValue, Record


def parse_property_list(text: str | None) -> list[str]:
    """Split a property list on commas, trimming and dropping empty names."""
    if not text or not text.strip():
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def _is_bases_date(value: Any) -> bool:
    return isinstance(value, DateValue) and isinstance(value.date, datetime)


def _is_datacore_date(value: Any) -> bool:
    return value is not None and callable(getattr(value, "to_millis", None))


def _is_present(record: Record, value: Any) -> bool:
    if record.kind == "bases":
        return _is_bases_date(value) or isinstance(value, DataValue)
    return value is not None


def resolve_first(record: Record, property_list: str | None) -> Any:
    """Return the first present property value, or None.

    Bases values are returned still wrapped; use ``unwrap`` to get at the data.
    """
    for prop in parse_property_list(property_list):
        value = record.get(prop)
        if _is_present(record, value):
            return value
    return None


def resolve_first_date(record: Record, property_list: str | None) -> Any:
    """Return the first property that carries a real date, skipping others."""
    is_date = _is_bases_date if record.kind == "bases" else _is_datacore_date
    for prop in parse_property_list(property_list):
        value = record.get(prop)
        if is_date(value):
            return value
    return None


def _link_path(item: Any) -> Any:
    if isinstance(item, dict) and "path" in item:
        return item["path"]
    if not isinstance(item, (str, bytes)) and hasattr(item, "path"):
        return item.path
    return item


def _image_entries(data: Any) -> list[str]:
    items = data if isinstance(data, (list, tuple)) else [data]
    found = []
    for item in items:
        item = _link_path(item)
        if item is None:
            continue
        text = str(item).strip()
        if text:
            found.append(text)
    return found


def resolve_first_images(record: Record, property_list: str | None) -> list[str]:
    """Collect image paths/URLs from every listed property, in list order.

    List properties are flattened and link objects unwrap to their path.
    Always returns a list.
    """
    images: list[str] = []
    for prop in parse_property_list(property_list):
        value = record.get(prop)
        if record.kind == "bases":
            # Only text and list properties can hold image references
            if not isinstance(value, DataValue):
                continue
            data = value.data
        else:
            if value is None:
                continue
            data = value
        images.extend(_image_entries(data))
    return images


def unwrap(value: Any) -> Any:
    """Strip the Bases wrapper from a resolved value."""
    if isinstance(value, DataValue):
        return value.data
    if isinstance(value, DateValue):
        return value.date
    return value


def date_millis(value: Any) -> int | None:
    """Epoch milliseconds from either backend's date shape."""
    if _is_bases_date(value):
        return int(value.date.timestamp() * 1000)
    if _is_datacore_date(value):
        return int(value.to_millis())
    return None


def stringify(value: Any) -> str:
    """Render a resolved value as display text."""
    value = unwrap(value)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(s for s in (stringify(v) for v in value) if s)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    if _is_datacore_date(value):
        return value.moment.isoformat() if hasattr(value, "moment") else str(value.to_millis())
    value = _link_path(value)
    return str(value).strip()
