from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .schema import (
    FIELDS,
    FIELDS_BY_KEY,
    LEGACY_BOTTOM_CHOICES,
    LEGACY_BOTTOM_DISPLAY,
    LEGACY_SHOW_TIMESTAMP,
    EffectiveSettings,
    coerce,
)

logger = logging.getLogger(__name__)

_SLOT_PAIRS = (
    ("metadataDisplayLeft", "metadataDisplayRight"),
    ("metadataDisplay1", "metadataDisplay2"),
    ("metadataDisplay3", "metadataDisplay4"),
)
_FOUR_SLOT_KEYS = ("metadataDisplay1", "metadataDisplay2", "metadataDisplay3", "metadataDisplay4")
_KNOWN_KEYS = tuple(spec.key for spec in FIELDS) + (LEGACY_SHOW_TIMESTAMP, LEGACY_BOTTOM_DISPLAY)


class ConfigError(ValueError):
    """A configuration source that cannot be used at all."""


@dataclass(frozen=True)
class ConfigSources:
    """The three raw layers a view's settings are resolved from."""

    global_settings: dict[str, Any]
    view_defaults: dict[str, Any]
    view: dict[str, Any]


def _get(source: Any, key: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(key)
    getter = getattr(source, "get", None)
    return getter(key) if callable(getter) else None


def _snapshot(source: Any) -> dict[str, Any]:
    """Copy the keys this schema knows about into a plain dict."""
    data: dict[str, Any] = {}
    for key in _KNOWN_KEYS:
        value = _get(source, key)
        if value is not None:
            data[key] = value
    return data


def _valid(data: Mapping[str, Any], key: str) -> Any:
    return coerce(FIELDS_BY_KEY[key], data.get(key))


def migrate_metadata_keys(source: Any, *, label: str = "view") -> dict[str, Any]:
    """Bring one raw config layer up to the current metadata schema.

    - Both left/right keys absent: derive them from ``showTimestamp`` and
      ``cardBottomDisplay`` when either deprecated key is present.
    - Left/right present but no four-slot keys: slot 1 and 2 take left and
      right as a side-by-side pair.
    - Same-pair duplicates are corrected, keeping the earlier slot. The
      correction is logged only for layers that still carried legacy keys.

    Returns a new dict; layers already in the current shape pass through.
    """
    data = _snapshot(source)
    legacy = LEGACY_SHOW_TIMESTAMP in data or LEGACY_BOTTOM_DISPLAY in data

    if _valid(data, "metadataDisplayLeft") is None and _valid(data, "metadataDisplayRight") is None:
        show = data.get(LEGACY_SHOW_TIMESTAMP)
        bottom = data.get(LEGACY_BOTTOM_DISPLAY)
        show_ok = isinstance(show, bool)
        bottom_ok = isinstance(bottom, str) and bottom in LEGACY_BOTTOM_CHOICES
        if show_ok or bottom_ok:
            data["metadataDisplayLeft"] = "timestamp" if (show if show_ok else True) else "none"
            data["metadataDisplayRight"] = bottom if bottom_ok else "tags"

    left = _valid(data, "metadataDisplayLeft")
    right = _valid(data, "metadataDisplayRight")
    if left is not None and right is not None and all(_valid(data, k) is None for k in _FOUR_SLOT_KEYS):
        data["metadataDisplay1"] = left
        data["metadataDisplay2"] = right
        data["metadataDisplay3"] = "none"
        data["metadataDisplay4"] = "none"
        data["metadataLayout12SideBySide"] = True

    for first_key, second_key in _SLOT_PAIRS:
        first = _valid(data, first_key)
        second = _valid(data, second_key)
        if first is not None and first != "none" and first == second:
            if legacy:
                logger.warning(
                    "%s config: %s and %s both show %r after migrating legacy keys; keeping %s",
                    label,
                    first_key,
                    second_key,
                    first,
                    first_key,
                )
            data[second_key] = "none"

    data.pop(LEGACY_SHOW_TIMESTAMP, None)
    data.pop(LEGACY_BOTTOM_DISPLAY, None)
    return data


def _first_valid(key: str, layers: tuple[Mapping[str, Any], ...]) -> Any:
    spec = FIELDS_BY_KEY[key]
    for layer in layers:
        value = coerce(spec, layer.get(key))
        if value is not None:
            return value
    return spec.default


def read_config(
    raw: Any,
    global_defaults: Any = None,
    view_defaults: Any = None,
) -> EffectiveSettings:
    """Resolve a view instance's effective settings.

    Precedence: instance value, then view-type default, then global setting,
    then built-in default. Global-only fields read the global layer alone.
    A value of the wrong type counts as absent.
    """
    instance = migrate_metadata_keys(raw, label="view")
    views = migrate_metadata_keys(view_defaults, label="view defaults")
    globals_ = migrate_metadata_keys(global_defaults, label="global")

    values: dict[str, Any] = {}
    for spec in FIELDS:
        layers = (globals_,) if spec.global_only else (instance, views, globals_)
        values[spec.attr] = _first_valid(spec.key, layers)

    # Layers can disagree on each side of a pair
    if values["metadata_display_left"] != "none" and values["metadata_display_left"] == values["metadata_display_right"]:
        values["metadata_display_right"] = "none"
    if values["metadata_display1"] != "none" and values["metadata_display1"] == values["metadata_display2"]:
        values["metadata_display2"] = "none"
    if values["metadata_display3"] != "none" and values["metadata_display3"] == values["metadata_display4"]:
        values["metadata_display4"] = "none"

    return EffectiveSettings(**values)


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def load_config_file(path: Path) -> ConfigSources:
    """Load raw config layers from TOML.

    Expected tables: ``[global]``, ``[view_defaults]``, ``[view]``. Missing
    tables are empty layers.
    """
    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"config file {path} is not valid UTF-8: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {path}: {e}") from e

    for table in ("global", "view_defaults", "view"):
        if table in data and not isinstance(data[table], dict):
            raise ConfigError(f"[{table}] must be a table in {path}")

    return ConfigSources(
        global_settings=_coerce_dict(data.get("global")),
        view_defaults=_coerce_dict(data.get("view_defaults")),
        view=_coerce_dict(data.get("view")),
    )
