"""Rules for merging record store rows with locally cached fields.

All functions here are pure: the effective values are derived from the
composed record each time rather than stored, so the two stores cannot
drift apart on them.
"""

from typing import Optional

from ..db.schemas import (
    DEFAULT_TOTAL_PAGES,
    UNKNOWN_AUTHOR,
    BookMetadata,
    BookRecord,
    BookView,
    ProgressSource,
)
from ..utils import round_half_up


def effective_total_pages(
    record_total: Optional[int], cached_total: Optional[int] = None
) -> int:
    """Total page count used for clamping and percentages.

    Record value if present and non-zero, else the cached value, else 300.
    """
    if record_total:
        return record_total
    if cached_total and cached_total > 0:
        return cached_total
    return DEFAULT_TOTAL_PAGES


def clamp_pages(pages_read: int, total_pages: int) -> int:
    """Keep pages read within [0, total_pages]."""
    return max(0, min(pages_read, total_pages))


def progress_percent(pages_read: int, total_pages: int) -> int:
    """Whole-number percentage complete; 0 when total_pages is 0."""
    if total_pages <= 0:
        return 0
    return int(round_half_up(pages_read / total_pages * 100))


def compose_book(
    record: BookRecord,
    metadata: Optional[BookMetadata] = None,
    cached_progress: Optional[int] = None,
    progress_source: ProgressSource = ProgressSource.CACHE,
) -> BookView:
    """Build the composed view of one book.

    Args:
        record: Canonical row from the record store
        metadata: Locally cached supplementary fields, if any
        cached_progress: Current page from the local progress cache
        progress_source: Which store is authoritative for pages read

    Returns:
        BookView with fallbacks applied
    """
    meta = metadata or BookMetadata()
    total = effective_total_pages(record.total_pages, meta.total_pages)

    if progress_source == ProgressSource.CACHE:
        pages_read = cached_progress or 0
    else:
        pages_read = record.pages_read or 0
    pages_read = clamp_pages(pages_read, total)

    return BookView(
        id=record.id,
        title=record.title,
        author=meta.author or UNKNOWN_AUTHOR,
        category=record.category,
        total_pages=total,
        pages_read=pages_read,
        progress_percent=progress_percent(pages_read, total),
        cover_image=record.cover_image or meta.cover_image,
        gutenberg_id=meta.gutenberg_id,
        read_url=meta.read_url,
        created_at=record.created_at,
    )
