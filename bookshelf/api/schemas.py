"""Pydantic schemas for API request/response validation."""

from datetime import datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base schema using camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Book schemas
class BookPayload(CamelModel):
    """Schema for the body of create and update requests.

    ``name`` is optional here so that a missing name is reported with the
    book-specific message rather than a generic validation error.
    """

    name: str | None = None
    year: int | None = None
    author: str | None = None
    summary: str | None = None
    publisher: str | None = None
    page_count: int = Field(0, ge=0)
    read_page: int = Field(0, ge=0)
    reading: bool = False


class BookResponse(CamelModel):
    """Schema for a full book record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    year: int | None
    author: str | None
    summary: str | None
    publisher: str | None
    page_count: int
    read_page: int
    finished: bool
    reading: bool
    inserted_at: datetime
    updated_at: datetime


class BookSummaryResponse(BaseModel):
    """Schema for a book in a list response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    publisher: str | None


class BookCreatedData(CamelModel):
    book_id: str


class BookListData(BaseModel):
    books: list[BookSummaryResponse]


class BookDetailData(BaseModel):
    book: BookResponse


# Envelope
class Envelope(BaseModel, Generic[DataT]):
    """Schema wrapping every API response."""

    status: Literal["success", "fail"]
    message: str | None = None
    data: DataT | None = None
