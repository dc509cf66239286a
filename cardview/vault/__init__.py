"""Vault loading and parsing utilities."""

from .loader import load_record, load_records
from .parser import extract_embeds, extract_inline_tags

__all__ = [
    "load_record",
    "load_records",
    "extract_embeds",
    "extract_inline_tags",
]
