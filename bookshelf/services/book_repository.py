"""In-memory book repository."""

import copy
import logging
import secrets
import string
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from fastapi import Request
from opentelemetry.trace import Status, StatusCode

from bookshelf.core.tracing import get_tracer
from bookshelf.models.book import Book

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

ID_ALPHABET = string.ascii_letters + string.digits
DEFAULT_ID_LENGTH = 16


class ValidationReason(str, Enum):
    """Why a book payload was rejected."""

    MISSING_NAME = "missing name"
    READ_PAGE_EXCEEDS_PAGE_COUNT = "readPage exceeds pageCount"
    NEGATIVE_PAGE_NUMBER = "negative pageCount or readPage"


class BookError(Exception):
    """Base class for repository errors."""


class BookValidationError(BookError):
    """Raised when a payload fails validation. Nothing is written."""

    def __init__(self, reason: ValidationReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


class BookNotFoundError(BookError):
    """Raised when no record has the requested id."""

    def __init__(self, book_id: str) -> None:
        super().__init__(f"book {book_id!r} not found")
        self.book_id = book_id


@dataclass
class BookInput:
    """Mutable fields accepted by create and update."""

    name: str | None = None
    year: int | None = None
    author: str | None = None
    summary: str | None = None
    publisher: str | None = None
    page_count: int = 0
    read_page: int = 0
    reading: bool = False


@dataclass(frozen=True)
class BookSummary:
    """List projection of a book."""

    id: str
    name: str
    publisher: str | None


def random_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """Generate a random alphanumeric id."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def parse_flag(value: str | None) -> bool | None:
    """Parse a boolean query filter.

    ``"1"`` means true and any other non-empty value means false. An absent or
    empty value means the filter is not applied.
    """
    if not value:
        return None
    return value == "1"


def validate(data: BookInput) -> None:
    """Check a payload, raising BookValidationError on the first failed rule."""
    if not data.name:
        raise BookValidationError(ValidationReason.MISSING_NAME)
    if data.read_page > data.page_count:
        raise BookValidationError(ValidationReason.READ_PAGE_EXCEEDS_PAGE_COUNT)
    if data.page_count < 0 or data.read_page < 0:
        raise BookValidationError(ValidationReason.NEGATIVE_PAGE_NUMBER)


class BookRepository:
    """Ordered in-memory collection of books.

    Records are returned as copies so the collection stays their only owner.
    All access goes through one lock, so writes are serialized against each
    other and against reads.
    """

    def __init__(
        self,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] = utc_now,
        id_length: int = DEFAULT_ID_LENGTH,
    ) -> None:
        if id_factory is None:

            def id_factory() -> str:
                return random_id(id_length)

        self._id_factory = id_factory
        self._clock = clock
        self._books: list[Book] = []
        self._issued_ids: set[str] = set()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    def _new_id(self) -> str:
        book_id = self._id_factory()
        while book_id in self._issued_ids:
            logger.debug(f"Generated id {book_id} was already issued, retrying")
            book_id = self._id_factory()
        self._issued_ids.add(book_id)
        return book_id

    def _index_of(self, book_id: str) -> int:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        raise BookNotFoundError(book_id)

    def create(self, data: BookInput) -> str:
        """Validate and store a new book.

        Args:
            data: Field values for the new record.

        Returns:
            The generated book id.

        Raises:
            BookValidationError: If the name is missing or readPage exceeds pageCount.
        """
        with tracer.start_as_current_span("book_repository.create") as span:
            try:
                validate(data)
            except BookValidationError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                logger.debug(f"Rejected new book: {e}")
                raise

            with self._lock:
                now = self._clock()
                book = Book(
                    id=self._new_id(),
                    name=data.name,
                    year=data.year,
                    author=data.author,
                    summary=data.summary,
                    publisher=data.publisher,
                    page_count=data.page_count,
                    read_page=data.read_page,
                    reading=data.reading,
                    inserted_at=now,
                    updated_at=now,
                )
                self._books.append(book)

            span.set_attribute("book.id", book.id)
            span.set_attribute("book.finished", book.finished)
            logger.info(f"Added book {book.id} ({book.name!r})")
            return book.id

    def list_books(
        self,
        name: str | None = None,
        reading: bool | None = None,
        finished: bool | None = None,
    ) -> list[BookSummary]:
        """List books matching every given filter, in insertion order.

        Args:
            name: Case-insensitive substring of the book name.
            reading: Required value of ``reading``.
            finished: Required value of ``finished``.
        """
        with tracer.start_as_current_span("book_repository.list_books") as span:
            with self._lock:
                books = self._books
                if name:
                    needle = name.lower()
                    books = [book for book in books if needle in book.name.lower()]
                if reading is not None:
                    books = [book for book in books if book.reading == reading]
                if finished is not None:
                    books = [book for book in books if book.finished == finished]
                summaries = [
                    BookSummary(id=book.id, name=book.name, publisher=book.publisher)
                    for book in books
                ]

            span.set_attribute("books.count", len(summaries))
            return summaries

    def get(self, book_id: str) -> Book:
        """Return a copy of the book with the given id.

        Raises:
            BookNotFoundError: If no book has that id.
        """
        with tracer.start_as_current_span("book_repository.get") as span:
            span.set_attribute("book.id", book_id)
            with self._lock:
                return copy.copy(self._books[self._index_of(book_id)])

    def update(self, book_id: str, data: BookInput) -> Book:
        """Replace every mutable field of a book.

        The payload is validated before the id is looked up, so an invalid
        payload is reported even when the id does not exist.

        Returns:
            A copy of the updated book.

        Raises:
            BookValidationError: If the payload is invalid.
            BookNotFoundError: If no book has that id.
        """
        with tracer.start_as_current_span("book_repository.update") as span:
            span.set_attribute("book.id", book_id)
            try:
                validate(data)
                with self._lock:
                    book = self._books[self._index_of(book_id)]
                    book.name = data.name
                    book.year = data.year
                    book.author = data.author
                    book.summary = data.summary
                    book.publisher = data.publisher
                    book.set_progress(data.page_count, data.read_page)
                    book.reading = data.reading
                    book.updated_at = self._clock()
                    updated = copy.copy(book)
            except BookError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                logger.debug(f"Rejected update of book {book_id}: {e}")
                raise

            span.set_attribute("book.finished", updated.finished)
            logger.info(f"Updated book {book_id}")
            return updated

    def delete(self, book_id: str) -> None:
        """Remove a book from the collection.

        Raises:
            BookNotFoundError: If no book has that id.
        """
        with tracer.start_as_current_span("book_repository.delete") as span:
            span.set_attribute("book.id", book_id)
            with self._lock:
                del self._books[self._index_of(book_id)]

            logger.info(f"Deleted book {book_id}")


def get_book_repository(request: Request) -> BookRepository:
    """Dependency that provides the application's book repository."""
    return request.app.state.book_repository
