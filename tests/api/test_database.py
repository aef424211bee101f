"""
Tests for the book repository.
"""

import pytest
import pytest_asyncio
from sqlalchemy.exc import IntegrityError

from books_api.database import BookRepository, books_table
from books_api.errors import BadRequestError, ConflictError, NotFoundError


@pytest_asyncio.fixture
async def repository(database_url, sample_book_data):
    """Repository over a fresh table holding the sample book."""
    repo = BookRepository.from_url(database_url)
    await repo.create_table()
    await repo.create(sample_book_data)
    yield repo
    await repo.dispose()


class TestBookRepository:
    """Test cases for BookRepository."""

    @pytest.mark.asyncio
    async def test_find_all_without_filters(self, repository, sample_book_data):
        """Test every row is returned when no filter is given."""
        books = await repository.find_all()
        assert [b.isbn for b in books] == [sample_book_data["isbn"]]

    @pytest.mark.asyncio
    async def test_find_all_with_filters(self, repository, new_book_data):
        """Test equality filters combine."""
        await repository.create(new_book_data)

        books = await repository.find_all({"language": "wookie", "pages": "150"})
        assert [b.isbn for b in books] == [new_book_data["isbn"]]

        books = await repository.find_all({"language": "wookie", "pages": "100"})
        assert books == []

    @pytest.mark.asyncio
    async def test_find_all_rejects_unknown_column(self, repository):
        """Test filter keys are limited to book columns."""
        with pytest.raises(BadRequestError):
            await repository.find_all({"1=1; DROP TABLE books; --": "x"})
        assert await repository.count() == 1

    @pytest.mark.asyncio
    async def test_find_one(self, repository, sample_book_data):
        """Test fetching a book by key."""
        book = await repository.find_one(sample_book_data["isbn"])
        assert book.model_dump() == sample_book_data

    @pytest.mark.asyncio
    async def test_find_one_not_found(self, repository):
        """Test fetching a missing key."""
        with pytest.raises(NotFoundError) as exc_info:
            await repository.find_one("12345")
        assert exc_info.value.status_code == 404
        assert exc_info.value.isbn == "12345"

    @pytest.mark.asyncio
    async def test_create_duplicate(self, repository, sample_book_data):
        """Test inserting an existing isbn."""
        with pytest.raises(ConflictError):
            await repository.create(sample_book_data)
        assert await repository.count() == 1

    @pytest.mark.asyncio
    async def test_update(self, repository, sample_book_data, update_book_data):
        """Test all non-key fields are replaced."""
        book = await repository.update(sample_book_data["isbn"], update_book_data)
        assert book.isbn == sample_book_data["isbn"]
        assert book.model_dump(exclude={"isbn"}) == update_book_data

    @pytest.mark.asyncio
    async def test_update_not_found(self, repository, update_book_data):
        """Test updating a missing key."""
        with pytest.raises(NotFoundError):
            await repository.update("12345", update_book_data)

    @pytest.mark.asyncio
    async def test_remove(self, repository, sample_book_data):
        """Test deleting a book."""
        await repository.remove(sample_book_data["isbn"])
        assert await repository.count() == 0

        with pytest.raises(NotFoundError):
            await repository.remove(sample_book_data["isbn"])

    @pytest.mark.asyncio
    async def test_health_check(self, repository):
        """Test health check against a live database."""
        health = await repository.health_check()
        assert health["status"] == "healthy"
        assert health["books_count"] == 1

    @pytest.mark.asyncio
    async def test_health_check_without_table(self, database_url):
        """Test health check reports a missing table as unhealthy."""
        repo = BookRepository.from_url(database_url)
        try:
            health = await repo.health_check()
        finally:
            await repo.dispose()
        assert health["status"] == "unhealthy"
        assert "error" in health

    @pytest.mark.asyncio
    async def test_columns_reject_null(self, repository, new_book_data):
        """Test the table itself refuses rows with missing fields."""
        async with repository.engine.begin() as conn:
            with pytest.raises(IntegrityError):
                await conn.execute(
                    books_table.insert().values(isbn=new_book_data["isbn"], title="No author")
                )
        assert await repository.count() == 1

    @pytest.mark.asyncio
    async def test_find_all_rejects_out_of_range_integer(self, repository):
        """Test integer filters are bounded to the column range."""
        with pytest.raises(BadRequestError):
            await repository.find_all({"pages": str(2 ** 31)})
