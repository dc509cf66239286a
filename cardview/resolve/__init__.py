"""Property resolution across Bases and Datacore records."""

from .property import (
    date_millis,
    parse_property_list,
    resolve_first,
    resolve_first_date,
    resolve_first_images,
    stringify,
    unwrap,
)

__all__ = [
    "date_millis",
    "parse_property_list",
    "resolve_first",
    "resolve_first_date",
    "resolve_first_images",
    "stringify",
    "unwrap",
]
