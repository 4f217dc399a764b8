"""Book API routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from bookshelf.api.schemas import (
    BookCreatedData,
    BookDetailData,
    BookListData,
    BookPayload,
    BookResponse,
    BookSummaryResponse,
    Envelope,
)
from bookshelf.services.book_repository import (
    BookInput,
    BookNotFoundError,
    BookRepository,
    BookValidationError,
    ValidationReason,
    get_book_repository,
    parse_flag,
)

router = APIRouter(prefix="/books", tags=["books"])

MSG_CREATED = "Buku berhasil ditambahkan"
MSG_UPDATED = "Buku berhasil diperbarui"
MSG_DELETED = "Buku berhasil dihapus"
MSG_NOT_FOUND = "Buku tidak ditemukan"
MSG_UPDATE_NOT_FOUND = "Gagal memperbarui buku. Id tidak ditemukan"
MSG_DELETE_NOT_FOUND = "Buku gagal dihapus. Id tidak ditemukan"

REASON_TEXT = {
    ValidationReason.MISSING_NAME: "Mohon isi nama buku",
    ValidationReason.READ_PAGE_EXCEEDS_PAGE_COUNT: (
        "readPage tidak boleh lebih besar dari pageCount"
    ),
    ValidationReason.NEGATIVE_PAGE_NUMBER: "pageCount dan readPage tidak boleh negatif",
}

# Failure bodies are rendered by the HTTPException handler in bookshelf.main
BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": Envelope[None]}}
NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": Envelope[None]}}


def to_input(payload: BookPayload) -> BookInput:
    return BookInput(**payload.model_dump())


@router.post(
    "",
    response_model=Envelope[BookCreatedData],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
)
async def create_book(
    payload: BookPayload,
    books: BookRepository = Depends(get_book_repository),
) -> Envelope[BookCreatedData]:
    """Add a new book."""
    try:
        book_id = books.create(to_input(payload))
    except BookValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Gagal menambahkan buku. {REASON_TEXT[e.reason]}",
        ) from e

    return Envelope(
        status="success",
        message=MSG_CREATED,
        data=BookCreatedData(book_id=book_id),
    )


@router.get("", response_model=Envelope[BookListData], response_model_exclude_unset=True)
async def list_books(
    name: str | None = None,
    reading: str | None = None,
    finished: str | None = None,
    books: BookRepository = Depends(get_book_repository),
) -> Envelope[BookListData]:
    """List books, optionally filtered by name, reading and finished.

    ``reading`` and ``finished`` take ``1`` for true; any other value means false.
    """
    summaries = books.list_books(
        name=name,
        reading=parse_flag(reading),
        finished=parse_flag(finished),
    )

    return Envelope(
        status="success",
        data=BookListData(
            books=[BookSummaryResponse.model_validate(summary) for summary in summaries]
        ),
    )


@router.get(
    "/{book_id}",
    response_model=Envelope[BookDetailData],
    response_model_exclude_unset=True,
    responses=NOT_FOUND,
)
async def get_book(
    book_id: str,
    books: BookRepository = Depends(get_book_repository),
) -> Envelope[BookDetailData]:
    """Get a specific book by ID."""
    try:
        book = books.get(book_id)
    except BookNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MSG_NOT_FOUND,
        ) from e

    return Envelope(
        status="success",
        data=BookDetailData(book=BookResponse.model_validate(book)),
    )


@router.put(
    "/{book_id}",
    response_model=Envelope[None],
    response_model_exclude_unset=True,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
async def update_book(
    book_id: str,
    payload: BookPayload,
    books: BookRepository = Depends(get_book_repository),
) -> Envelope[None]:
    """Replace every editable field of a book."""
    try:
        books.update(book_id, to_input(payload))
    except BookValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Gagal memperbarui buku. {REASON_TEXT[e.reason]}",
        ) from e
    except BookNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MSG_UPDATE_NOT_FOUND,
        ) from e

    return Envelope(status="success", message=MSG_UPDATED)


@router.delete(
    "/{book_id}",
    response_model=Envelope[None],
    response_model_exclude_unset=True,
    responses=NOT_FOUND,
)
async def delete_book(
    book_id: str,
    books: BookRepository = Depends(get_book_repository),
) -> Envelope[None]:
    """Delete a book."""
    try:
        books.delete(book_id)
    except BookNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MSG_DELETE_NOT_FOUND,
        ) from e

    return Envelope(status="success", message=MSG_DELETED)
