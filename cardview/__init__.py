"""cardview - render vault notes as cards, masonry tiles, or list rows."""

__version__ = "0.3.0"
