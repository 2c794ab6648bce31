"""API module for external book services.

Provides a client for finding public-domain books and their readable
download links.
"""

from .gutendex import (
    GutendexClient,
    GutendexError,
    GutenbergBook,
    ReadableFormat,
    clean_title,
    pick_best_format,
)

__all__ = [
    "GutendexClient",
    "GutendexError",
    "GutenbergBook",
    "ReadableFormat",
    "clean_title",
    "pick_best_format",
]
