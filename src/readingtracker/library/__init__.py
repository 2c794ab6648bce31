"""Book catalog and the rules for composing book views."""

from .catalog import BookCatalog
from .compose import clamp_pages, compose_book, effective_total_pages, progress_percent

__all__ = [
    "BookCatalog",
    "clamp_pages",
    "compose_book",
    "effective_total_pages",
    "progress_percent",
]
