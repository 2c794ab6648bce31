"""Book catalog: composes record store rows with the local metadata cache.

The record store owns title, category, total pages and creation time.
Author, cover, Gutenberg id, read URL and (in account mode) progress are
cached on the device and merged in when books are listed.
"""

import logging
from typing import Union

from pydantic import ValidationError

from ..auth import SessionProvider, require_user_id
from ..db.schemas import BookCreate, BookMetadata, BookView, ProgressSource
from ..errors import InvalidInputError, NotFoundError
from ..storage.metadata import MetadataCache
from ..storage.records import RecordStore
from .compose import compose_book

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    """First validation problem, phrased for the person filling in the form."""
    first = error.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ())) or "input"
    if field == "title":
        if first.get("type") == "string_too_long":
            return "Title must be 100 characters or fewer"
        return "Please enter a book title"
    if field == "total_pages":
        return "Please enter a valid number of pages"
    return f"Invalid {field}: {first.get('msg')}"


class BookCatalog:
    """CRUD over books, returning composed book views."""

    def __init__(
        self,
        records: RecordStore,
        cache: MetadataCache,
        session: SessionProvider,
        progress_source: ProgressSource = ProgressSource.CACHE,
    ):
        """Initialize book catalog.

        Args:
            records: Store holding canonical book and history rows
            cache: Local metadata and progress cache
            session: Reports the signed-in user
            progress_source: Which store is authoritative for pages read
        """
        self.records = records
        self.cache = cache
        self.session = session
        self.progress_source = progress_source

    @property
    def user_id(self) -> str:
        return require_user_id(self.session)

    def list_books(self) -> list[BookView]:
        """All of the user's books, newest first, merged with cached fields."""
        records = self.records.list_books(self.user_id)
        metadata = self.cache.get_all_metadata()
        progress = self.cache.get_all_progress()
        return [
            compose_book(
                record,
                metadata.get(record.id),
                progress.get(record.id, 0),
                self.progress_source,
            )
            for record in records
        ]

    def get_book(self, book_id: str) -> BookView:
        """Get one composed book.

        Raises:
            NotFoundError: If the book does not exist for this user
        """
        record = self.records.get_book(self.user_id, book_id)
        if record is None:
            raise NotFoundError(f"Book not found: {book_id}")
        return compose_book(
            record,
            self.cache.get_metadata(book_id),
            self.cache.get_progress(book_id),
            self.progress_source,
        )

    def add_book(self, book: Union[BookCreate, dict]) -> BookView:
        """Add a book.

        The record is created first; local metadata and a zero progress
        entry are written only once that succeeds.

        Raises:
            InvalidInputError: If the title or page count is invalid
        """
        if not isinstance(book, BookCreate):
            try:
                book = BookCreate.model_validate(book)
            except ValidationError as e:
                raise InvalidInputError(_validation_message(e)) from e

        user_id = self.user_id
        record = self.records.create_book(
            user_id,
            title=book.title,
            total_pages=book.total_pages,
            category=book.category,
            cover_image=book.cover_image,
        )

        metadata = self.cache.set_metadata(
            record.id,
            BookMetadata(
                author=book.author,
                cover_image=book.cover_image,
                gutenberg_id=book.gutenberg_id,
                read_url=book.read_url,
                total_pages=book.total_pages,
            ),
        )
        self.cache.set_progress(record.id, 0)

        logger.info(f"Added book {record.id} ({record.title!r}) for user {user_id}")
        return compose_book(record, metadata, 0, self.progress_source)

    def update_metadata(self, book_id: str, **fields) -> BookView:
        """Change cached supplementary fields (author, cover, read URL...)."""
        self.get_book(book_id)
        try:
            self.cache.set_metadata(book_id, fields)
        except ValidationError as e:
            raise InvalidInputError(_validation_message(e)) from e
        return self.get_book(book_id)

    def delete_book(self, book_id: str) -> None:
        """Delete a book and everything that hangs off it.

        History rows go first because they reference the book. If that
        fails the book is left in place and the error propagates.

        Raises:
            NotFoundError: If the book does not exist for this user
        """
        user_id = self.user_id
        if self.records.get_book(user_id, book_id) is None:
            raise NotFoundError(f"Book not found: {book_id}")
        removed = self.records.delete_history(user_id, book_id)
        self.records.delete_book(user_id, book_id)
        self.cache.forget(book_id)
        logger.info(f"Deleted book {book_id} and {removed} history entries")

    def reset(self) -> None:
        """Delete every book, history entry and cached field for the user."""
        user_id = self.user_id
        records = self.records.list_books(user_id)
        self.records.delete_all_history(user_id)
        self.records.delete_all_books(user_id)
        for record in records:
            self.cache.forget(record.id)
        logger.info(f"Reset all reading data for user {user_id}")
