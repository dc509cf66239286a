"""Cards command implementation - build and print a view's cards."""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..models import CardModel
from ..pipeline import ShuffleState, build, pick_random
from ..settings.load import ConfigSources, load_config_file, read_config
from ..settings.schema import EffectiveSettings
from ..slots import resolve_four_slots, resolve_slots, slot_content
from ..timestamp import format_timestamp, timestamp_icon
from ..vault.loader import load_records

ICON_GLYPHS = {"calendar": "\U0001f4c5", "clock": "\U0001f552"}


def load_settings(
    config: Path | None,
    overrides: dict[str, Any] | None = None,
) -> EffectiveSettings:
    """Resolve settings from a config file plus per-invocation overrides.

    Overrides land on the instance layer, so they beat view defaults but
    never global-only fields.
    """
    sources = load_config_file(config) if config else ConfigSources({}, {}, {})
    view = dict(sources.view)
    view.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return read_config(view, sources.global_settings, sources.view_defaults)


def _rng(seed: int | None):
    return random.Random(seed).random if seed is not None else random.random


def _slot_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(f"#{v}" for v in value)
    return str(value)


def card_slots(
    card: CardModel,
    settings: EffectiveSettings,
    now_ms: int | None = None,
    icon: str | None = None,
) -> list[str]:
    """Printed metadata for a card; list rows use the two-slot layout."""
    if settings.view_mode == "list":
        two = resolve_slots(settings)
        choices = [two.left, two.right]
    else:
        choices = list(resolve_four_slots(settings).choices)
    texts = []
    for choice in choices:
        text = _slot_text(slot_content(choice, card, now_ms))
        if icon and text and choice == "timestamp":
            text = f"{ICON_GLYPHS.get(icon, icon)} {text}"
        texts.append(text)
    return texts


def card_payload(card: CardModel, settings: EffectiveSettings, now_ms: int | None = None) -> dict[str, Any]:
    return {
        "path": card.path,
        "title": card.title,
        "timestamp": card.timestamp,
        "formatted_timestamp": format_timestamp(card.timestamp, now_ms) if card.timestamp is not None else None,
        "tags": list(card.tags),
        "folder": card.folder,
        "images": list(card.images),
        "preview": card.preview,
        "slots": card_slots(card, settings, now_ms),
    }


def _print_table(cards: list[CardModel], settings: EffectiveSettings, console: Console) -> None:
    icon = timestamp_icon(settings.sort_method) if settings.show_timestamp_icon else None
    table = Table(title=f"{settings.view_mode} view ({settings.sort_method})", show_lines=settings.view_mode != "list")
    marker = settings.list_marker if settings.view_mode == "list" else "none"
    if marker != "none":
        table.add_column("", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Metadata")
    if settings.view_mode != "list":
        table.add_column("Preview", overflow="fold")
        table.add_column("Image", style="cyan")

    for index, card in enumerate(cards, start=1):
        meta = [s for s in card_slots(card, settings, icon=icon) if s]
        row = []
        if marker == "bullet":
            row.append("•")
        elif marker == "number":
            row.append(f"{index}.")
        row.extend([escape(card.title), escape("\n".join(meta))])
        if settings.view_mode != "list":
            row.extend([escape(card.preview or ""), escape(card.images[0] if card.images else "")])
        table.add_row(*row)

    console.print(table)


def run_cards(
    vault_path: Path,
    *,
    config: Path | None = None,
    backend: str = "bases",
    sort: str | None = None,
    limit: int | None = None,
    view: str | None = None,
    shuffle: bool = False,
    seed: int | None = None,
    output_json: bool = False,
) -> int:
    """Build the cards for a vault and print them.

    Returns:
        Exit code (0 = success, 1 = no cards to show)
    """
    console = Console(stderr=True)

    settings = load_settings(config, {"sortMethod": sort, "displayedCount": limit, "viewMode": view})
    records = load_records(vault_path, backend)
    cards = build(records, settings, ShuffleState(is_shuffled=shuffle), rng=_rng(seed))

    if output_json:
        print(json.dumps([card_payload(c, settings) for c in cards], indent=2))
    elif cards:
        _print_table(cards, settings, Console())

    if not cards:
        console.print("No notes to show", style="yellow")
        return 1
    return 0


def run_randomize(
    vault_path: Path,
    *,
    config: Path | None = None,
    backend: str = "bases",
    seed: int | None = None,
) -> int:
    """Run the configured randomize action: shuffle the view or pick one note."""
    console = Console(stderr=True)
    settings = load_settings(config)

    if settings.randomize_action == "shuffle":
        return run_cards(vault_path, config=config, backend=backend, shuffle=True, seed=seed)

    records = load_records(vault_path, backend)
    rng = _rng(seed)
    card = pick_random(build(records, settings, rng=rng), rng)
    if card is None:
        console.print("No files in current view", style="yellow")
        return 1

    pane = "new pane" if settings.open_random_in_new_pane else "current pane"
    console.print(f"Opened: {card.title} ({pane})", style="green")
    print(card.path)
    return 0
