"""Order, shuffle, and limit normalized cards.

The shuffle state belongs to the caller (one per visible view) and is passed
in explicitly, so two views never share an order.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Sequence

from .models import CardModel, Record
from .normalize import EmbedDetector, normalize
from .settings.schema import EffectiveSettings
from .vault.parser import extract_embeds

RandomSource = Callable[[], float]


@dataclass
class ShuffleState:
    """Per-view shuffle flag plus the orders needed to undo it."""

    is_shuffled: bool = False
    unshuffled: list[str] | None = None  # paths in sort order before shuffling
    shuffled: list[str] | None = None  # paths in the order last shown


def toggle_shuffle(state: ShuffleState) -> bool:
    """Flip the shuffle flag; the next build applies or reverts it."""
    state.is_shuffled = not state.is_shuffled
    return state.is_shuffled


def shuffle_in_place(items: list, rng: RandomSource = random.random) -> list:
    """Fisher-Yates shuffle. Mutates and returns ``items``."""
    for i in range(len(items) - 1, 0, -1):
        j = math.floor(rng() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def _by_key(cards: Sequence[CardModel], *, descending: bool) -> list[CardModel]:
    keyed = [c for c in cards if c.sort_key is not None]
    missing = [c for c in cards if c.sort_key is None]
    # sorted() stays stable with reverse=True
    return sorted(keyed, key=lambda c: c.sort_key, reverse=descending) + missing


def sort_cards(
    cards: Sequence[CardModel],
    method: str,
    rng: RandomSource = random.random,
) -> list[CardModel]:
    """Stable sort by method; cards must have been normalized for ``method``."""
    if method == "random":
        keyed = [replace(card, sort_key=rng()) for card in cards]
        return sorted(keyed, key=lambda c: c.sort_key)
    if method in ("mtime-desc", "ctime-desc", "size"):
        return _by_key(cards, descending=True)
    if method in ("mtime-asc", "ctime-asc", "title"):
        return _by_key(cards, descending=False)
    raise ValueError(f"unknown sort method: {method!r}")


def _take_in_order(cards: Sequence[CardModel], paths: Iterable[str]) -> list[CardModel]:
    pending: dict[str, list[CardModel]] = {}
    for card in cards:
        pending.setdefault(card.path, []).append(card)
    result = []
    for path in paths:
        bucket = pending.get(path)
        if bucket:
            result.append(bucket.pop(0))
    for bucket in pending.values():
        result.extend(bucket)
    return result


def _apply_shuffle(ordered: list[CardModel], state: ShuffleState, rng: RandomSource) -> list[CardModel]:
    if not state.is_shuffled:
        state.unshuffled = None
        state.shuffled = None
        return ordered

    paths = [c.path for c in ordered]
    if state.shuffled is not None and sorted(state.shuffled) == sorted(paths):
        return _take_in_order(ordered, state.shuffled)

    # First shuffle, or the note set changed underneath the view
    state.unshuffled = paths
    shuffled = shuffle_in_place(list(ordered), rng)
    state.shuffled = [c.path for c in shuffled]
    return shuffled


def restore_order(cards: Sequence[CardModel], state: ShuffleState) -> list[CardModel]:
    """Put cards back in the order they had before the shuffle."""
    if state.unshuffled is None:
        return list(cards)
    return _take_in_order(cards, state.unshuffled)


def build(
    records: Iterable[Record],
    settings: EffectiveSettings,
    shuffle: ShuffleState | None = None,
    *,
    rng: RandomSource = random.random,
    embeds: EmbedDetector = extract_embeds,
) -> list[CardModel]:
    """Normalize, order, optionally shuffle, then cut to ``displayed_count``."""
    cards = [card for card in (normalize(r, settings, embeds=embeds) for r in records) if card is not None]
    ordered = sort_cards(cards, settings.sort_method, rng)
    if shuffle is not None:
        ordered = _apply_shuffle(ordered, shuffle, rng)
    return ordered[: max(settings.displayed_count, 0)]


def pick_random(cards: Sequence[CardModel], rng: RandomSource = random.random) -> CardModel | None:
    """One card chosen uniformly, or None for an empty view."""
    if not cards:
        return None
    return cards[math.floor(rng() * len(cards))]
