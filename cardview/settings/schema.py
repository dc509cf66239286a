from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Literal

from ..models import SORT_METHODS, VIEW_MODES, SortMethod, ViewMode

FieldKind = Literal["str", "bool", "int", "enum", "slot", "plist"]


@dataclass(frozen=True)
class FieldSpec:
    key: str  # camelCase key in persisted config
    attr: str  # EffectiveSettings attribute
    kind: FieldKind
    default: Any
    choices: tuple[str, ...] = ()
    global_only: bool = False


FIELDS: tuple[FieldSpec, ...] = (
    # Per-view fields: instance -> view-type default -> global -> built-in
    FieldSpec("titleProperty", "title_property", "plist", ""),
    FieldSpec("descriptionProperty", "description_property", "plist", ""),
    FieldSpec("imageProperty", "image_property", "plist", ""),
    FieldSpec("showTextPreview", "show_text_preview", "bool", True),
    FieldSpec("fallbackToContent", "fallback_to_content", "bool", True),
    FieldSpec("showThumbnails", "show_thumbnails", "bool", True),
    FieldSpec("fallbackToEmbeds", "fallback_to_embeds", "bool", True),
    FieldSpec("omitFirstLine", "omit_first_line", "bool", False),
    FieldSpec("alwaysOmitFirstLine", "always_omit_first_line", "bool", False),
    FieldSpec("fallbackToCtime", "fallback_to_ctime", "bool", True),
    FieldSpec("fallbackToMtime", "fallback_to_mtime", "bool", True),
    FieldSpec("metadataDisplayLeft", "metadata_display_left", "slot", "timestamp"),
    FieldSpec("metadataDisplayRight", "metadata_display_right", "slot", "path"),
    FieldSpec("metadataDisplay1", "metadata_display1", "slot", "timestamp"),
    FieldSpec("metadataDisplay2", "metadata_display2", "slot", "path"),
    FieldSpec("metadataDisplay3", "metadata_display3", "slot", "none"),
    FieldSpec("metadataDisplay4", "metadata_display4", "slot", "none"),
    FieldSpec("metadataLayout12SideBySide", "metadata_layout12_side_by_side", "bool", True),
    FieldSpec("metadataLayout34SideBySide", "metadata_layout34_side_by_side", "bool", False),
    FieldSpec("showTimestampIcon", "show_timestamp_icon", "bool", True),
    FieldSpec("listMarker", "list_marker", "enum", "bullet", ("bullet", "number", "none")),
    FieldSpec("queryHeight", "query_height", "int", 0),
    FieldSpec("viewMode", "view_mode", "enum", "card", VIEW_MODES),
    FieldSpec("sortMethod", "sort_method", "enum", "mtime-desc", SORT_METHODS),
    FieldSpec("displayedCount", "displayed_count", "int", 50),
    FieldSpec("randomizeAction", "randomize_action", "enum", "shuffle", ("shuffle", "random")),
    # Global-only fields: global -> built-in, instance config is ignored
    FieldSpec(
        "thumbnailCacheSize",
        "thumbnail_cache_size",
        "enum",
        "balanced",
        ("minimal", "small", "balanced", "large", "unlimited"),
        global_only=True,
    ),
    FieldSpec("minCardWidth", "min_card_width", "int", 400, global_only=True),
    FieldSpec("thumbnailPosition", "thumbnail_position", "enum", "right", ("left", "right"), global_only=True),
    FieldSpec(
        "timestampDisplay",
        "timestamp_display",
        "enum",
        "sort-based",
        ("ctime", "mtime", "sort-based"),
        global_only=True,
    ),
    FieldSpec("createdProperty", "created_property", "plist", "", global_only=True),
    FieldSpec("modifiedProperty", "modified_property", "plist", "", global_only=True),
    FieldSpec("openFileAction", "open_file_action", "enum", "card", ("card", "title"), global_only=True),
    FieldSpec("openRandomInNewPane", "open_random_in_new_pane", "bool", True, global_only=True),
    FieldSpec("minMasonryColumns", "min_masonry_columns", "int", 2, global_only=True),
    FieldSpec("minGridColumns", "min_grid_columns", "int", 1, global_only=True),
    FieldSpec("addCardBackground", "add_card_background", "str", "tinted", global_only=True),
)

FIELDS_BY_KEY: dict[str, FieldSpec] = {spec.key: spec for spec in FIELDS}

# Deprecated two-field display keys, read only by migration
LEGACY_SHOW_TIMESTAMP = "showTimestamp"
LEGACY_BOTTOM_DISPLAY = "cardBottomDisplay"
LEGACY_BOTTOM_CHOICES = ("none", "tags", "path")


@dataclass(frozen=True)
class EffectiveSettings:
    """Fully resolved configuration for one view instance."""

    title_property: str = ""
    description_property: str = ""
    image_property: str = ""
    show_text_preview: bool = True
    fallback_to_content: bool = True
    show_thumbnails: bool = True
    fallback_to_embeds: bool = True
    omit_first_line: bool = False
    always_omit_first_line: bool = False
    fallback_to_ctime: bool = True
    fallback_to_mtime: bool = True
    metadata_display_left: str = "timestamp"
    metadata_display_right: str = "path"
    metadata_display1: str = "timestamp"
    metadata_display2: str = "path"
    metadata_display3: str = "none"
    metadata_display4: str = "none"
    metadata_layout12_side_by_side: bool = True
    metadata_layout34_side_by_side: bool = False
    show_timestamp_icon: bool = True
    list_marker: str = "bullet"
    query_height: int = 0
    view_mode: ViewMode = "card"
    sort_method: SortMethod = "mtime-desc"
    displayed_count: int = 50
    randomize_action: str = "shuffle"
    thumbnail_cache_size: str = "balanced"
    min_card_width: int = 400
    thumbnail_position: str = "right"
    timestamp_display: str = "sort-based"
    created_property: str = ""
    modified_property: str = ""
    open_file_action: str = "card"
    open_random_in_new_pane: bool = True
    min_masonry_columns: int = 2
    min_grid_columns: int = 1
    add_card_background: str = "tinted"

    @property
    def omits_first_line(self) -> bool:
        return self.omit_first_line or self.always_omit_first_line

    def to_raw(self) -> dict[str, Any]:
        """Persistable camelCase mapping; reads back to the same settings."""
        values = asdict(self)
        return {spec.key: values[spec.attr] for spec in FIELDS}


def coerce(spec: FieldSpec, value: Any) -> Any:
    """Coerce a raw config value to the field's type.

    Returns None when the value has the wrong type, so the caller falls
    through to the next layer.
    """
    if value is None:
        return None

    if spec.kind == "bool":
        return value if isinstance(value, bool) else None

    if spec.kind == "int":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)

    if not isinstance(value, str):
        return None

    if spec.kind == "enum":
        value = value.strip()
        return value if value in spec.choices else None
    if spec.kind == "slot":
        value = value.strip()
        return value or "none"
    if spec.kind == "plist":
        return value if value.strip() else None
    return value if value else None
