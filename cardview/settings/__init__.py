"""Settings schema, layered resolution, and legacy key migration."""

from .load import ConfigError, ConfigSources, load_config_file, migrate_metadata_keys, read_config
from .schema import FIELDS, EffectiveSettings, FieldSpec

__all__ = [
    "ConfigError",
    "ConfigSources",
    "EffectiveSettings",
    "FIELDS",
    "FieldSpec",
    "load_config_file",
    "migrate_metadata_keys",
    "read_config",
]
