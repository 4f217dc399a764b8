"""Book model."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Book:
    """A book record held in the in-memory collection."""

    id: str
    name: str
    inserted_at: datetime
    updated_at: datetime
    year: int | None = None
    author: str | None = None
    summary: str | None = None
    publisher: str | None = None
    page_count: int = 0
    read_page: int = 0
    reading: bool = False
    finished: bool = field(init=False)

    def __post_init__(self) -> None:
        self.finished = self.page_count == self.read_page

    def set_progress(self, page_count: int, read_page: int) -> None:
        """Replace the page counters and recompute ``finished``."""
        self.page_count = page_count
        self.read_page = read_page
        self.finished = page_count == read_page

    def __repr__(self) -> str:
        return f"<Book(id='{self.id}', name='{self.name}', publisher='{self.publisher}')>"
