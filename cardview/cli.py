"""CLI entrypoint for cardview."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .models import BACKENDS, SORT_METHODS, VIEW_MODES
from .settings.load import ConfigError


def _auto_detect_vault(start: Path) -> Path | None:
    """Find an Obsidian vault (a folder holding .obsidian) by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / ".obsidian").is_dir():
            return p
    return None


_config_option = click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with [global], [view_defaults] and [view] tables",
)

_backend_option = click.option(
    "--backend",
    type=click.Choice(BACKENDS),
    default="bases",
    help="Record shape to load notes as",
)


@click.group()
@click.version_option(__version__, prog_name="cardview")
@click.option(
    "--vault",
    "-v",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to vault directory (defaults to the enclosing Obsidian vault, then the current directory)",
)
@click.option("--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, verbose: bool) -> None:
    """cardview - Render vault notes as cards, masonry tiles, or list rows."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    if vault is None:
        vault = _auto_detect_vault(Path.cwd()) or Path.cwd()

    if not vault.exists() or not vault.is_dir():
        raise click.BadParameter(f"Directory '{vault}' does not exist.", param_hint="--vault / -v")

    ctx.obj["vault"] = vault.resolve()


@cli.command()
@_config_option
@_backend_option
@click.option("--sort", type=click.Choice(SORT_METHODS), default=None, help="Sort method (overrides config)")
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Number of cards to display")
@click.option("--view", type=click.Choice(VIEW_MODES), default=None, help="View mode")
@click.option("--shuffle", is_flag=True, help="Shuffle the sorted cards")
@click.option("--seed", type=int, default=None, help="Seed for random sort and shuffle")
@click.option("--json", "output_json", is_flag=True, help="Output cards as JSON")
@click.pass_context
def cards(
    ctx: click.Context,
    config: Path | None,
    backend: str,
    sort: str | None,
    limit: int | None,
    view: str | None,
    shuffle: bool,
    seed: int | None,
    output_json: bool,
) -> None:
    """Build and print the cards for every note in the vault.

    Examples:

        cardview cards --sort title --limit 20

        cardview cards --view list --backend datacore --json
    """
    from .commands.cards import run_cards

    try:
        exit_code = run_cards(
            ctx.obj["vault"],
            config=config,
            backend=backend,
            sort=sort,
            limit=limit,
            view=view,
            shuffle=shuffle,
            seed=seed,
            output_json=output_json,
        )
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(exit_code)


@cli.command()
@_config_option
@click.option("--json", "output_json", is_flag=True, help="Output settings as JSON")
def settings(config: Path | None, output_json: bool) -> None:
    """Show effective settings after layering and legacy key migration."""
    from .commands.settings_cmd import run_settings

    try:
        exit_code = run_settings(config, output_json)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(exit_code)


@cli.command()
@_config_option
@_backend_option
@click.option("--seed", type=int, default=None, help="Seed for the random choice")
@click.pass_context
def randomize(ctx: click.Context, config: Path | None, backend: str, seed: int | None) -> None:
    """Shuffle the view or pick a random note, per the randomizeAction setting."""
    from .commands.cards import run_randomize

    try:
        exit_code = run_randomize(ctx.obj["vault"], config=config, backend=backend, seed=seed)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
