"""Pydantic schemas for data validation.

These schemas define the shape of book records, reading history entries,
locally cached metadata and the composed book view handed to front ends.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_TOTAL_PAGES = 300
UNKNOWN_AUTHOR = "Unknown Author"
MAX_TITLE_LENGTH = 100


class BookCategory(str, Enum):
    """Category tag picked when a book is added."""

    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    SELF_HELP = "Self-Help"
    BIOGRAPHY = "Biography"
    SCIENCE_FICTION = "Science Fiction"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    THRILLER = "Thriller"
    FANTASY = "Fantasy"
    HISTORY = "History"
    PHILOSOPHY = "Philosophy"
    BUSINESS = "Business"
    TECHNOLOGY = "Technology"
    HEALTH = "Health"
    TRAVEL = "Travel"
    OTHER = "Other"


class ProgressSource(str, Enum):
    """Store that is authoritative for a book's pages read."""

    CACHE = "cache"  # Local progress cache (account mode)
    RECORD = "record"  # The book record's pages_read column (guest mode)


# ============================================================================
# Book Schemas
# ============================================================================


class BookCreate(BaseModel):
    """Schema for adding a new book."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    total_pages: int = Field(..., gt=0, description="Total page count")
    category: BookCategory = BookCategory.OTHER

    # Supplementary fields, cached locally rather than in the record store
    author: Optional[str] = None
    cover_image: Optional[str] = Field(None, description="Cover URI or blob reference")
    gutenberg_id: Optional[int] = Field(None, description="Project Gutenberg book id")
    read_url: Optional[str] = Field(None, description="Where the text can be read")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        """Strip surrounding whitespace so blank titles fail min_length."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("total_pages", mode="before")
    @classmethod
    def parse_total_pages(cls, v):
        """Accept numeric strings from form input."""
        if isinstance(v, bool):
            raise ValueError("total_pages must be a number")
        if isinstance(v, str):
            return int(v.strip())
        return v

    @field_validator("author", "cover_image", "read_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BookRecord(BaseModel):
    """Canonical book row as stored in the record store."""

    id: str
    user_id: str
    title: str
    total_pages: Optional[int] = None
    pages_read: int = 0
    category: BookCategory = BookCategory.OTHER
    cover_image: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class BookMetadata(BaseModel):
    """Supplementary per-book fields cached on the device."""

    author: Optional[str] = None
    cover_image: Optional[str] = None
    gutenberg_id: Optional[int] = None
    read_url: Optional[str] = None
    total_pages: Optional[int] = None


class BookView(BaseModel):
    """A book record merged with its locally cached fields."""

    id: str
    title: str
    author: str = UNKNOWN_AUTHOR
    category: BookCategory = BookCategory.OTHER
    total_pages: int = DEFAULT_TOTAL_PAGES
    pages_read: int = 0
    progress_percent: int = 0
    cover_image: Optional[str] = None
    gutenberg_id: Optional[int] = None
    read_url: Optional[str] = None
    created_at: datetime

    model_config = {"frozen": True}

    @property
    def remaining_pages(self) -> int:
        return max(0, self.total_pages - self.pages_read)

    @property
    def is_finished(self) -> bool:
        return self.total_pages > 0 and self.pages_read >= self.total_pages


# ============================================================================
# Reading History Schemas
# ============================================================================


class HistoryEntry(BaseModel):
    """One (user, book, date) ledger bucket."""

    id: str
    user_id: str
    book_id: str
    date: date
    pages_read: int = Field(0, ge=0)
    created_at: datetime

    model_config = {"from_attributes": True}
