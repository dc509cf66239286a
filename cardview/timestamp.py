"""Short, locale-stable timestamp formatting."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Literal

DAY_MS = 86_400_000


def now_millis() -> int:
    return int(time.time() * 1000)


def format_timestamp(epoch_ms: int, now_ms: int | None = None) -> str:
    """Format epoch milliseconds in the local timezone.

    Timestamps less than 24 hours old include hours and minutes
    (``YYYY-MM-DD HH:mm``); older ones are date only (``YYYY-MM-DD``).
    """
    if now_ms is None:
        now_ms = now_millis()

    moment = datetime.fromtimestamp(epoch_ms / 1000)
    if now_ms - epoch_ms < DAY_MS:
        return moment.strftime("%Y-%m-%d %H:%M")
    return moment.strftime("%Y-%m-%d")


def timestamp_icon(sort_method: str) -> Literal["calendar", "clock"]:
    """Icon shown beside the timestamp: calendar for created-time sorts."""
    return "calendar" if sort_method.startswith("ctime") else "clock"
