"""Metadata slot assignment and slot content.

Two layouts coexist: the legacy left/right pair and four slots arranged as
two pairs, (1, 2) and (3, 4). Within a pair the earlier slot wins a tie.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from .timestamp import format_timestamp

if TYPE_CHECKING:
    from .models import CardModel
    from .settings.schema import EffectiveSettings

TAG_CHOICES = ("tags", "file tags")
PATH_CHOICES = ("path", "file path")
BUILTIN_CHOICES = ("none", "timestamp") + TAG_CHOICES + PATH_CHOICES


@dataclass(frozen=True)
class TwoSlots:
    left: str
    right: str


@dataclass(frozen=True)
class FourSlots:
    slot1: str
    slot2: str
    slot3: str
    slot4: str
    pair12: bool  # slots 1 and 2 side by side
    pair34: bool

    @property
    def choices(self) -> tuple[str, str, str, str]:
        return (self.slot1, self.slot2, self.slot3, self.slot4)


def suppress_duplicate(first: str, second: str) -> tuple[str, str]:
    """Blank the second slot when it repeats the first non-empty choice."""
    if first != "none" and first == second:
        return first, "none"
    return first, second


def resolve_slots(settings: "EffectiveSettings | TwoSlots") -> TwoSlots:
    """Legacy two-slot layout."""
    if isinstance(settings, TwoSlots):
        left, right = settings.left, settings.right
    else:
        left, right = settings.metadata_display_left, settings.metadata_display_right
    return TwoSlots(*suppress_duplicate(left, right))


def resolve_four_slots(settings: "EffectiveSettings") -> FourSlots:
    """Four-slot layout; cross-pair duplicates are left alone."""
    slot1, slot2 = suppress_duplicate(settings.metadata_display1, settings.metadata_display2)
    slot3, slot4 = suppress_duplicate(settings.metadata_display3, settings.metadata_display4)
    return FourSlots(
        slot1=slot1,
        slot2=slot2,
        slot3=slot3,
        slot4=slot4,
        pair12=settings.metadata_layout12_side_by_side,
        pair34=settings.metadata_layout34_side_by_side,
    )


def property_choices(settings: "EffectiveSettings") -> list[str]:
    """Arbitrary property names named by any metadata slot, deduplicated."""
    names = []
    for choice in (
        settings.metadata_display_left,
        settings.metadata_display_right,
        *resolve_four_slots(settings).choices,
    ):
        if choice not in BUILTIN_CHOICES and choice not in names:
            names.append(choice)
    return names


def timestamp_source(settings: "EffectiveSettings", sort_method: str | None = None) -> Literal["ctime", "mtime"]:
    """Which file time the timestamp slot shows."""
    if settings.timestamp_display in ("ctime", "mtime"):
        return settings.timestamp_display  # type: ignore[return-value]
    method = sort_method or settings.sort_method
    if method.startswith("ctime"):
        return "ctime"
    return "mtime"


def slot_content(choice: str, card: "CardModel", now_ms: int | None = None) -> Any:
    """What the renderer prints for one slot, or None for an empty slot."""
    if choice == "none":
        return None
    if choice in TAG_CHOICES:
        tags = [tag[1:] if tag.startswith("#") else tag for tag in card.tags]
        return tags or None
    if choice in PATH_CHOICES:
        return card.folder or None
    if choice == "timestamp":
        if card.timestamp is None:
            return None
        return format_timestamp(card.timestamp, now_ms)
    return card.properties.get(choice) or None
