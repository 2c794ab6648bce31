"""Reading progress updates.

Recording progress clamps a book's pages read at its effective total page
count and credits the pages actually added to today's history bucket.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ..auth import SessionProvider, require_user_id
from ..db.schemas import BookMetadata, BookRecord, BookView, ProgressSource
from ..errors import NotFoundError
from ..library.compose import clamp_pages, compose_book, effective_total_pages
from ..storage.metadata import MetadataCache
from ..storage.records import RecordStore
from ..utils import parse_page_count
from .ledger import HistoryLedger

logger = logging.getLogger(__name__)


@dataclass
class ProgressPreview:
    """What recording an increment would do, computed without writing."""

    book_id: str
    current_pages: int
    total_pages: int
    requested: int

    @property
    def would_exceed(self) -> bool:
        return self.current_pages + self.requested > self.total_pages

    @property
    def capped_increment(self) -> int:
        """Largest increment that does not pass the last page."""
        return max(0, min(self.requested, self.total_pages - self.current_pages))

    @property
    def resulting_pages(self) -> int:
        return self.current_pages + self.capped_increment


class ProgressEngine:
    """Records page increments against books."""

    def __init__(
        self,
        records: RecordStore,
        cache: MetadataCache,
        session: SessionProvider,
        progress_source: ProgressSource = ProgressSource.CACHE,
        ledger: Optional[HistoryLedger] = None,
    ):
        """Initialize progress engine.

        Args:
            records: Store holding book and history rows
            cache: Local metadata and progress cache
            session: Reports the signed-in user
            progress_source: Which store is authoritative for pages read
            ledger: History ledger (default: one over records)
        """
        self.records = records
        self.cache = cache
        self.session = session
        self.progress_source = progress_source
        self.ledger = ledger or HistoryLedger(records)

    def _load(self, user_id: str, book_id: str) -> tuple[BookRecord, Optional[BookMetadata], int, int]:
        """Fetch a book with its effective total and current pages."""
        record = self.records.get_book(user_id, book_id)
        if record is None:
            raise NotFoundError(f"Book not found: {book_id}")

        metadata = self.cache.get_metadata(book_id)
        total = effective_total_pages(
            record.total_pages, metadata.total_pages if metadata else None
        )
        if self.progress_source == ProgressSource.CACHE:
            current = self.cache.get_progress(book_id)
        else:
            current = record.pages_read or 0
        return record, metadata, total, clamp_pages(current, total)

    def _store_progress(self, user_id: str, record: BookRecord, pages: int) -> BookRecord:
        if self.progress_source == ProgressSource.CACHE:
            self.cache.set_progress(record.id, pages)
            return record
        return self.records.update_pages_read(user_id, record.id, pages)

    def preview(self, book_id: str, pages: Any) -> ProgressPreview:
        """Describe the effect of recording pages without writing anything.

        Raises:
            InvalidInputError: If pages is not a positive whole number
            NotFoundError: If the book does not exist
        """
        increment = parse_page_count(pages)
        _, _, total, current = self._load(require_user_id(self.session), book_id)
        return ProgressPreview(
            book_id=book_id,
            current_pages=current,
            total_pages=total,
            requested=increment,
        )

    def record_progress(
        self,
        book_id: str,
        pages: Any,
        on_date: Optional[date] = None,
    ) -> BookView:
        """Add pages read to a book and to the day's history bucket.

        Pages read are capped at the book's effective total. The ledger is
        credited with the pages actually added, so a capped update adds
        less than requested and an update on a finished book adds nothing.

        Args:
            book_id: Book to update
            pages: Pages read since the last update
            on_date: Calendar day to credit (default: today)

        Returns:
            The updated book view

        Raises:
            InvalidInputError: If pages is not a positive whole number
            NotFoundError: If the book does not exist
        """
        increment = parse_page_count(pages)
        user_id = require_user_id(self.session)
        if on_date is None:
            on_date = date.today()

        record, metadata, total, current = self._load(user_id, book_id)
        new_pages = min(current + increment, total)
        credited = new_pages - current

        record = self._store_progress(user_id, record, new_pages)

        if credited > 0:
            try:
                self.ledger.append(user_id, book_id, credited, on_date)
            except Exception:
                logger.warning(
                    f"History update failed for book {book_id}; restoring progress to {current}"
                )
                self._store_progress(user_id, record, current)
                raise

        if credited < increment:
            logger.info(f"Capped progress for book {book_id} at {total} pages")
        logger.debug(f"Book {book_id}: {current} -> {new_pages} of {total}")

        return compose_book(record, metadata, new_pages, self.progress_source)
