"""Pytest configuration and fixtures."""

import itertools
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from bookshelf.core.config import Settings
from bookshelf.main import create_app
from bookshelf.services.book_repository import BookInput, BookRepository

START_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that advances one second every time it is read."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, otel_enabled=False, log_level="DEBUG")


@pytest.fixture
def repository(clock) -> BookRepository:
    """Create an empty repository with a deterministic clock."""
    return BookRepository(clock=clock)


@pytest.fixture
def sequential_repository(clock) -> BookRepository:
    """Create a repository whose ids are book-0001, book-0002, ..."""
    counter = itertools.count(1)
    return BookRepository(id_factory=lambda: f"book-{next(counter):04d}", clock=clock)


@pytest.fixture
def test_app(test_settings, repository) -> FastAPI:
    return create_app(settings=test_settings, repository=repository)


@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def book_payload() -> dict:
    """A valid create/update request body."""
    return {
        "name": "Laskar Pelangi",
        "year": 2005,
        "author": "Andrea Hirata",
        "summary": "Sepuluh anak dari Belitung",
        "publisher": "Bentang Pustaka",
        "pageCount": 529,
        "readPage": 120,
        "reading": True,
    }


@pytest.fixture
def sample_book(repository) -> str:
    """Create a sample book and return its id."""
    return repository.create(
        BookInput(
            name="Test Book",
            year=2020,
            author="Test Author",
            summary="A test summary",
            publisher="Test Publisher",
            page_count=100,
            read_page=25,
            reading=True,
        )
    )
