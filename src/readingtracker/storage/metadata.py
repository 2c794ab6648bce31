"""Locally cached per-book metadata and progress.

Two maps live in key-value storage, both keyed by book id:

- ``book_metadata_v1``: author, cover image, Gutenberg id, read URL and a
  cached total page count. Updates merge into the existing entry.
- ``book_progress_v1``: ``{"current_page": int}``.
"""

import logging
from typing import Any, Optional, Union

from ..db.schemas import BookMetadata
from .kv import METADATA_KEY, PROGRESS_KEY, KeyValueStore

logger = logging.getLogger(__name__)


def _to_page(value: Any) -> int:
    """Coerce a stored or supplied page number, falling back to 0."""
    if isinstance(value, bool):
        return 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


class MetadataCache:
    """Reads and writes supplementary book fields on the device."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def _read_map(self, key: str) -> dict[str, dict]:
        value = self.kv.get(key)
        return value if isinstance(value, dict) else {}

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    def set_metadata(
        self, book_id: str, metadata: Union[BookMetadata, dict]
    ) -> BookMetadata:
        """Merge fields into a book's cached metadata.

        Only fields present in ``metadata`` are overwritten; a dict may be
        partial, a BookMetadata contributes the fields that were set.

        Returns:
            The merged metadata
        """
        if isinstance(metadata, BookMetadata):
            updates = metadata.model_dump(exclude_unset=True)
        else:
            updates = BookMetadata.model_validate(metadata).model_dump(exclude_unset=True)

        entries = self._read_map(METADATA_KEY)
        merged = {**entries.get(book_id, {}), **updates}
        entries[book_id] = merged
        self.kv.set(METADATA_KEY, entries)
        return BookMetadata.model_validate(merged)

    def get_metadata(self, book_id: str) -> Optional[BookMetadata]:
        entry = self._read_map(METADATA_KEY).get(book_id)
        return BookMetadata.model_validate(entry) if entry else None

    def get_all_metadata(self) -> dict[str, BookMetadata]:
        return {
            book_id: BookMetadata.model_validate(entry)
            for book_id, entry in self._read_map(METADATA_KEY).items()
            if isinstance(entry, dict)
        }

    def delete_metadata(self, book_id: str) -> None:
        entries = self._read_map(METADATA_KEY)
        if entries.pop(book_id, None) is not None:
            self.kv.set(METADATA_KEY, entries)

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def set_progress(self, book_id: str, current_page: Any) -> int:
        """Store a book's current page. Non-numeric input is stored as 0."""
        page = _to_page(current_page)
        entries = self._read_map(PROGRESS_KEY)
        entries[book_id] = {"current_page": page}
        self.kv.set(PROGRESS_KEY, entries)
        return page

    def get_progress(self, book_id: str) -> int:
        entry = self._read_map(PROGRESS_KEY).get(book_id) or {}
        return _to_page(entry.get("current_page", 0))

    def get_all_progress(self) -> dict[str, int]:
        return {
            book_id: _to_page(entry.get("current_page", 0))
            for book_id, entry in self._read_map(PROGRESS_KEY).items()
            if isinstance(entry, dict)
        }

    def delete_progress(self, book_id: str) -> None:
        entries = self._read_map(PROGRESS_KEY)
        if entries.pop(book_id, None) is not None:
            self.kv.set(PROGRESS_KEY, entries)

    def forget(self, book_id: str) -> None:
        """Drop both cached metadata and progress for a book."""
        self.delete_metadata(book_id)
        self.delete_progress(book_id)
        logger.debug(f"Cleared local cache for book {book_id}")
