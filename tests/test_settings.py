import logging
from pathlib import Path

import pytest

from cardview.settings.load import ConfigError, load_config_file, migrate_metadata_keys, read_config
from cardview.settings.schema import FIELDS, EffectiveSettings


class BasesConfig:
    """Mimics a view config object that only exposes get()."""

    def __init__(self, values: dict):
        self._values = values

    def get(self, key):
        return self._values.get(key)


def test_empty_sources_give_builtin_defaults():
    assert read_config({}) == EffectiveSettings()
    assert read_config(None, None, None) == EffectiveSettings()


def test_field_table_matches_dataclass_defaults():
    defaults = EffectiveSettings()
    for spec in FIELDS:
        assert getattr(defaults, spec.attr) == spec.default, spec.key


def test_layer_precedence():
    global_defaults = {"titleProperty": "name", "descriptionProperty": "summary", "imageProperty": "cover"}
    view_defaults = {"titleProperty": "heading", "descriptionProperty": "abstract"}
    raw = {"titleProperty": "title"}

    settings = read_config(raw, global_defaults, view_defaults)

    assert settings.title_property == "title"
    assert settings.description_property == "abstract"
    assert settings.image_property == "cover"


def test_global_only_fields_ignore_instance_and_view_config():
    raw = {"thumbnailCacheSize": "large", "minCardWidth": 100, "createdProperty": "born"}
    view_defaults = {"thumbnailCacheSize": "small", "openFileAction": "title"}
    global_defaults = {"thumbnailCacheSize": "minimal"}

    settings = read_config(raw, global_defaults, view_defaults)

    assert settings.thumbnail_cache_size == "minimal"
    assert settings.min_card_width == 400
    assert settings.created_property == ""
    assert settings.open_file_action == "card"


def test_wrong_type_falls_through_to_next_layer():
    raw = {
        "sortMethod": 3,
        "showThumbnails": "yes",
        "displayedCount": "20",
        "titleProperty": ["title"],
        "queryHeight": True,
    }
    view_defaults = {"sortMethod": "title", "showThumbnails": False, "displayedCount": 10}

    settings = read_config(raw, None, view_defaults)

    assert settings.sort_method == "title"
    assert settings.show_thumbnails is False
    assert settings.displayed_count == 10
    assert settings.title_property == ""
    assert settings.query_height == 0


def test_unknown_enum_value_is_absent():
    settings = read_config({"listMarker": "star", "viewMode": "masonry"})
    assert settings.list_marker == "bullet"
    assert settings.view_mode == "masonry"


def test_blank_property_list_falls_through():
    settings = read_config({"titleProperty": "   "}, {"titleProperty": "title"})
    assert settings.title_property == "title"


def test_number_fields_accept_floats():
    assert read_config({"displayedCount": 12.0}).displayed_count == 12
    assert read_config({"displayedCount": float("nan")}).displayed_count == 50


def test_reads_config_objects_with_get():
    settings = read_config(BasesConfig({"titleProperty": "name", "showTextPreview": False}))
    assert settings.title_property == "name"
    assert settings.show_text_preview is False


def test_legacy_keys_migrate_to_left_right():
    settings = read_config({"showTimestamp": False, "cardBottomDisplay": "path"})
    assert settings.metadata_display_left == "none"
    assert settings.metadata_display_right == "path"


@pytest.mark.parametrize(
    "raw, left, right",
    [
        ({"showTimestamp": True, "cardBottomDisplay": "tags"}, "timestamp", "tags"),
        ({"showTimestamp": True, "cardBottomDisplay": "none"}, "timestamp", "none"),
        ({"showTimestamp": False}, "none", "tags"),
        ({"cardBottomDisplay": "path"}, "timestamp", "path"),
    ],
)
def test_legacy_migration_table(raw, left, right):
    migrated = migrate_metadata_keys(raw)
    assert migrated["metadataDisplayLeft"] == left
    assert migrated["metadataDisplayRight"] == right
    assert "showTimestamp" not in migrated
    assert "cardBottomDisplay" not in migrated


def test_legacy_keys_also_fill_four_slots():
    settings = read_config({"showTimestamp": True, "cardBottomDisplay": "tags"})
    assert (settings.metadata_display1, settings.metadata_display2) == ("timestamp", "tags")
    assert (settings.metadata_display3, settings.metadata_display4) == ("none", "none")
    assert settings.metadata_layout12_side_by_side is True


def test_new_keys_win_over_legacy_keys():
    raw = {
        "showTimestamp": False,
        "cardBottomDisplay": "path",
        "metadataDisplayLeft": "tags",
        "metadataDisplayRight": "timestamp",
    }
    settings = read_config(raw)
    assert settings.metadata_display_left == "tags"
    assert settings.metadata_display_right == "timestamp"


def test_migration_is_noop_on_current_config():
    current = {
        "metadataDisplayLeft": "tags",
        "metadataDisplayRight": "path",
        "metadataDisplay1": "status",
        "metadataDisplay2": "none",
        "metadataDisplay3": "none",
        "metadataDisplay4": "none",
    }
    assert migrate_metadata_keys(current) == current
    assert migrate_metadata_keys(migrate_metadata_keys(current)) == current


def test_duplicate_correction_during_migration_logs_warning(caplog):
    raw = {"showTimestamp": True, "metadataDisplay1": "status", "metadataDisplay2": "status"}
    with caplog.at_level(logging.WARNING, logger="cardview.settings.load"):
        settings = read_config(raw)

    assert (settings.metadata_display1, settings.metadata_display2) == ("status", "none")
    assert any("metadataDisplay2" in r.getMessage() for r in caplog.records)


def test_duplicates_in_current_config_are_corrected_silently(caplog):
    with caplog.at_level(logging.WARNING, logger="cardview.settings.load"):
        settings = read_config({"metadataDisplayLeft": "tags", "metadataDisplayRight": "tags"})
        read_config(settings.to_raw())

    assert settings.metadata_display_left == "tags"
    assert settings.metadata_display_right == "none"
    assert caplog.records == []


def test_empty_slot_string_reads_as_none():
    settings = read_config({"metadataDisplay3": "", "metadataDisplay4": "  "})
    assert settings.metadata_display3 == "none"
    assert settings.metadata_display4 == "none"


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"showTimestamp": False, "cardBottomDisplay": "path"},
        {"metadataDisplayLeft": "tags", "metadataDisplayRight": "tags", "sortMethod": "title"},
        {"titleProperty": " ", "displayedCount": "7", "metadataDisplay1": "status", "metadataDisplay2": "status"},
    ],
)
def test_read_config_is_idempotent(raw):
    global_defaults = {"thumbnailCacheSize": "large", "titleProperty": "name", "showTimestamp": False}
    view_defaults = {"descriptionProperty": "summary", "displayedCount": 20}

    first = read_config(raw, global_defaults, view_defaults)
    second = read_config(first.to_raw(), global_defaults, view_defaults)

    assert second == first


def test_load_config_file(tmp_path: Path):
    path = tmp_path / "cardview.toml"
    path.write_text(
        """
[global]
thumbnailCacheSize = "small"
createdProperty = "created, date"

[view_defaults]
titleProperty = "title"

[view]
sortMethod = "title"
showTimestamp = false
cardBottomDisplay = "tags"
""",
        encoding="utf-8",
    )

    sources = load_config_file(path)
    settings = read_config(sources.view, sources.global_settings, sources.view_defaults)

    assert settings.thumbnail_cache_size == "small"
    assert settings.created_property == "created, date"
    assert settings.title_property == "title"
    assert settings.sort_method == "title"
    assert (settings.metadata_display_left, settings.metadata_display_right) == ("none", "tags")


def test_load_config_file_errors(tmp_path: Path):
    bad = tmp_path / "bad.toml"
    bad.write_text("view = [", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_file(bad)

    not_table = tmp_path / "not_table.toml"
    not_table.write_text('view = "card"\n', encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_file(not_table)

    with pytest.raises(ConfigError):
        load_config_file(tmp_path / "missing.toml")

    not_utf8 = tmp_path / "latin1.toml"
    not_utf8.write_bytes(b"[view]\ntitleProperty = \"caf\xe9\xff\"\n")
    with pytest.raises(ConfigError, match="UTF-8"):
        load_config_file(not_utf8)

    with pytest.raises(ConfigError):
        load_config_file(tmp_path)
