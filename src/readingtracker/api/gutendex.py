"""Gutendex API client for public-domain books.

Gutendex (gutendex.com) is a JSON API over the Project Gutenberg catalog:
- Search by title/author
- Lookup by Gutenberg id
- Download links per format (HTML, plain text, EPUB, PDF)
- Cover images

No API key required. Gutendex does not report page counts, so books added
from it get the default total page count.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

import requests

from ..db.schemas import (
    DEFAULT_TOTAL_PAGES,
    MAX_TITLE_LENGTH,
    UNKNOWN_AUTHOR,
    BookCategory,
    BookCreate,
)
from ..errors import NetworkError

logger = logging.getLogger(__name__)

# Readable formats, most preferred first
FORMAT_PREFERENCE = [
    "text/html; charset=utf-8",
    "text/html",
    "text/plain; charset=utf-8",
    "text/plain",
    "application/epub+zip",
    "application/pdf",
]

_HTTP_URL = re.compile(r"^https?://")


class GutendexError(NetworkError):
    """Raised when a Gutendex request fails."""

    pass


@dataclass
class ReadableFormat:
    """A download link and its MIME type."""

    mime: str
    url: str


@dataclass
class GutenbergBook:
    """A book result from Gutendex."""

    gutenberg_id: int
    title: str
    author: str = UNKNOWN_AUTHOR
    authors: list[str] = field(default_factory=list)
    cover_image: Optional[str] = None
    read_url: Optional[str] = None
    read_mime: Optional[str] = None
    languages: list[str] = field(default_factory=list)
    download_count: Optional[int] = None

    def to_book_create(self, total_pages: Optional[int] = None) -> BookCreate:
        """Convert to BookCreate, estimating 300 pages when unknown."""
        return BookCreate(
            title=self.title[:MAX_TITLE_LENGTH],
            total_pages=total_pages or DEFAULT_TOTAL_PAGES,
            category=BookCategory.OTHER,
            author=self.author,
            cover_image=self.cover_image,
            gutenberg_id=self.gutenberg_id,
            read_url=self.read_url,
        )


def pick_best_format(formats: Optional[dict]) -> Optional[ReadableFormat]:
    """Pick the most readable download link from a Gutendex formats map.

    Preference order is FORMAT_PREFERENCE, then any other ``text/html``
    variant, then any key whose value is an http(s) link.
    """
    if not formats:
        return None

    for mime in FORMAT_PREFERENCE:
        if formats.get(mime):
            return ReadableFormat(mime=mime, url=formats[mime])

    for mime, url in formats.items():
        if mime.startswith("text/html") and url:
            return ReadableFormat(mime=mime, url=url)

    for mime, url in formats.items():
        if isinstance(url, str) and _HTTP_URL.match(url):
            return ReadableFormat(mime=mime, url=url)

    return None


def clean_title(title: Optional[str]) -> str:
    """Drop subtitles and parentheticals to widen a title search."""
    if not title:
        return ""
    value = str(title).strip().split(":")[0]
    value = re.sub(r"\([^)]*\)", "", value).strip()
    return re.sub(r"\s+", " ", value)


def _normalize_name(name: Optional[str]) -> str:
    return (name or "").strip().lower()


class GutendexClient:
    """Client for the Gutendex API."""

    BASE_URL = "https://gutendex.com/books"

    def __init__(self, base_url: Optional[str] = None, timeout: int = 10):
        """Initialize client.

        Args:
            base_url: Books endpoint (default: public Gutendex)
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": "ReadingTracker/0.1"})

    def _get(self, params: dict) -> dict:
        """Make GET request with error handling."""
        try:
            response = self._session.get(f"{self.base_url}/", params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout:
            raise GutendexError("Request timed out")
        except requests.exceptions.HTTPError as e:
            raise GutendexError(f"HTTP error: {e.response.status_code}")
        except requests.exceptions.RequestException as e:
            raise GutendexError(f"Request failed: {e}")
        except ValueError:
            raise GutendexError("Invalid JSON in response")

    def _to_book(self, data: dict) -> Optional[GutenbergBook]:
        """Convert a Gutendex result to GutenbergBook."""
        if not data.get("id") or not data.get("title"):
            return None

        formats = data.get("formats") or {}
        best = pick_best_format(formats)
        authors = [a.get("name") for a in data.get("authors") or [] if a.get("name")]

        return GutenbergBook(
            gutenberg_id=data["id"],
            title=data["title"],
            author=authors[0] if authors else UNKNOWN_AUTHOR,
            authors=authors,
            cover_image=formats.get("image/jpeg"),
            read_url=best.url if best else None,
            read_mime=best.mime if best else None,
            languages=data.get("languages") or [],
            download_count=data.get("download_count"),
        )

    def _results(self, data: dict) -> list[GutenbergBook]:
        books = []
        for item in data.get("results") or []:
            book = self._to_book(item)
            if book:
                books.append(book)
        return books

    def search(self, query: str) -> list[GutenbergBook]:
        """Search for books by title and author words.

        Args:
            query: Search text

        Returns:
            List of GutenbergBook, in Gutendex's popularity order
        """
        query = query.strip()
        if not query:
            return []
        return self._results(self._get({"search": query}))

    def get_by_id(self, gutenberg_id: int) -> Optional[GutenbergBook]:
        """Look up a book by Gutenberg id.

        Returns:
            GutenbergBook if found, None otherwise
        """
        books = self._results(self._get({"ids": str(gutenberg_id)}))
        return books[0] if books else None

    def find_public_domain_book(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
        gutenberg_id: Optional[int] = None,
    ) -> Optional[GutenbergBook]:
        """Find a readable public-domain copy of a book.

        Looks up by id when given. Otherwise tries several query variants
        (cleaned title with author, cleaned title, raw title with author,
        raw title, author) and returns the best-scoring readable result of
        the first variant that has one. A title match scores 2, an author
        match 1.

        Returns:
            GutenbergBook with a read_url, or None

        Raises:
            GutendexError: If every query failed
        """
        if gutenberg_id:
            book = self.get_by_id(gutenberg_id)
            return book if book and book.read_url else None

        short_title = clean_title(title)
        variants = []
        if short_title and author:
            variants.append(f"{short_title} {author}")
        if short_title:
            variants.append(short_title)
        if title and author:
            variants.append(f"{title} {author}")
        if title:
            variants.append(title)
        if author:
            variants.append(author)
        # Keep order, drop duplicates
        variants = list(dict.fromkeys(variants))

        wanted_author = _normalize_name(author)
        last_error: Optional[GutendexError] = None
        failures = 0

        for query in variants:
            try:
                candidates = [b for b in self.search(query) if b.read_url]
            except GutendexError as e:
                logger.warning(f"Gutendex search for {query!r} failed: {e}")
                last_error = e
                failures += 1
                continue

            def score(book: GutenbergBook) -> int:
                title_score = 2 if short_title and short_title.lower() in book.title.lower() else 0
                author_score = 0
                if wanted_author and any(
                    wanted_author in _normalize_name(name) for name in book.authors
                ):
                    author_score = 1
                return title_score + author_score

            if candidates:
                return max(candidates, key=score)

        if variants and failures == len(variants) and last_error is not None:
            raise last_error
        return None
