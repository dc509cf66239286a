"""Settings command implementation - show effective settings for a view."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..settings.schema import FIELDS
from ..slots import resolve_four_slots, resolve_slots
from .cards import load_settings


def run_settings(config: Path | None = None, output_json: bool = False) -> int:
    """Print the effective settings after layering and migration.

    Returns:
        Exit code (always 0; unusable config raises before printing)
    """
    settings = load_settings(config)
    raw = settings.to_raw()

    if output_json:
        print(json.dumps(raw, indent=2, sort_keys=True))
        return 0

    console = Console()
    table = Table(title="Effective settings")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_column("Scope", style="dim")
    for spec in FIELDS:
        table.add_row(spec.key, repr(raw[spec.key]), "global" if spec.global_only else "view")
    console.print(table)

    two = resolve_slots(settings)
    four = resolve_four_slots(settings)
    console.print(f"Two-slot layout: left={two.left} right={two.right}", style="dim")
    console.print(
        f"Four-slot layout: {' | '.join(four.choices)} (1+2 paired: {four.pair12}, 3+4 paired: {four.pair34})",
        style="dim",
    )
    return 0
