"""
Pytest configuration and shared fixtures.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from books_api.config import APIConfig
from books_api.database import BookRepository
from books_api.main import create_app


@pytest.fixture
def sample_book_data():
    """Book seeded into the database before each API test."""
    return {
        "isbn": "1234567890",
        "amazon_url": "https://amazon.com/testing",
        "author": "Paige Turner",
        "language": "Elvish",
        "pages": 100,
        "publisher": "Richman Publishing",
        "title": "Testbook",
        "year": 2020,
    }


@pytest.fixture
def new_book_data():
    """Valid creation payload for a book that is not in the database."""
    return {
        "isbn": "2345678901",
        "amazon_url": "https://testbook.com",
        "author": "Book Riederman",
        "language": "wookie",
        "pages": 150,
        "publisher": "wei suk publishing",
        "title": "Book wars",
        "year": 1989,
    }


@pytest.fixture
def update_book_data(new_book_data):
    """Valid update payload: every field except the isbn."""
    return {k: v for k, v in new_book_data.items() if k != "isbn"}


@pytest.fixture
def database_url(tmp_path):
    """SQLite database private to a single test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'books.db'}"


@pytest.fixture
def app_config(database_url):
    """API settings pointing at the test database."""
    return APIConfig(
        database_url=database_url,
        log_level="WARNING",
        log_format="console",
        log_file=None,
        debug=False,
    )


@pytest.fixture
def seeded_database(database_url, sample_book_data):
    """Create the books table and insert the sample book."""
    async def seed():
        repository = BookRepository.from_url(database_url)
        try:
            await repository.create_table()
            await repository.create(sample_book_data)
        finally:
            await repository.dispose()

    asyncio.run(seed())
    return database_url


@pytest.fixture
def client(app_config, seeded_database):
    """Test client running the full application lifespan."""
    app = create_app(app_config)
    with TestClient(app) as test_client:
        yield test_client
