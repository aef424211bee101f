"""
Database access layer for book records.
Translates book operations into parameterized SQL against the books table.
"""

from typing import Any, Dict, List, Mapping, Optional

import structlog
from sqlalchemy import (
    Column, Integer, MetaData, Table, Text,
    delete, func, insert, select, text, update,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from books_api.errors import BadRequestError, ConflictError, NotFoundError
from books_api.models import BookResponse
from books_api.schemas import BOOK_FIELDS, INT_MAX, INT_MIN, MUTABLE_FIELDS

logger = structlog.get_logger(__name__)

metadata = MetaData()

books_table = Table(
    "books",
    metadata,
    Column("isbn", Text, primary_key=True),
    Column("amazon_url", Text, nullable=False),
    Column("author", Text, nullable=False),
    Column("language", Text, nullable=False),
    Column("pages", Integer, nullable=False),
    Column("publisher", Text, nullable=False),
    Column("title", Text, nullable=False),
    Column("year", Integer, nullable=False),
)


class BookRepository:
    """
    Book record accessor.

    Every method runs exactly one statement in its own transaction; there is no
    state shared between calls other than the engine's connection pool.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "BookRepository":
        """
        Build a repository around a new async engine.

        Args:
            database_url: SQLAlchemy async database URL
            echo: Log every SQL statement

        Returns:
            BookRepository bound to the new engine
        """
        engine = create_async_engine(database_url, echo=echo, pool_pre_ping=True)
        logger.info("Database engine created", dialect=engine.dialect.name)
        return cls(engine)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("Database engine disposed")

    async def create_table(self) -> None:
        """Create the books table if it does not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Books table ready")

    async def drop_table(self) -> None:
        """Drop the books table if it exists."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.drop_all)
        logger.info("Books table dropped")

    def _build_filters(self, filters: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Turn query parameters into equality predicates on known columns.

        Raises:
            BadRequestError: Unknown column, or a non-integer or out of range
                value for an integer column
        """
        predicates = {}
        for key, value in filters.items():
            if key not in BOOK_FIELDS:
                raise BadRequestError(f"Cannot filter books by '{key}'")
            if isinstance(books_table.c[key].type, Integer):
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    raise BadRequestError(f"Filter '{key}' must be an integer")
                if not INT_MIN <= value <= INT_MAX:
                    raise BadRequestError(f"Filter '{key}' is out of range")
            predicates[key] = value
        return predicates

    async def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[BookResponse]:
        """
        Get every book, optionally narrowed by equality filters.

        Args:
            filters: Column name to value; empty or None returns every row

        Returns:
            List of books ordered by ISBN
        """
        predicates = self._build_filters(filters or {})
        stmt = select(books_table).order_by(books_table.c.isbn)
        for key, value in predicates.items():
            stmt = stmt.where(books_table.c[key] == value)

        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            rows = result.mappings().all()

        logger.debug("Fetched books", count=len(rows), filters=predicates)
        return [BookResponse(**row) for row in rows]

    async def find_one(self, isbn: str) -> BookResponse:
        """
        Get a single book by ISBN.

        Raises:
            NotFoundError: No book has this ISBN
        """
        stmt = select(books_table).where(books_table.c.isbn == isbn)

        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            row = result.mappings().first()

        if row is None:
            logger.info("Book not found", isbn=isbn)
            raise NotFoundError(isbn)
        return BookResponse(**row)

    async def create(self, payload: Mapping[str, Any]) -> BookResponse:
        """
        Insert a new book.

        Args:
            payload: All book fields, already validated

        Returns:
            The stored book

        Raises:
            ConflictError: A book with this ISBN already exists
        """
        values = {field: payload[field] for field in BOOK_FIELDS}
        stmt = insert(books_table).values(**values).returning(*books_table.c)

        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(stmt)
                row = result.mappings().one()
        except IntegrityError as e:
            logger.warning("Book already exists", isbn=values["isbn"], error=str(e.orig))
            raise ConflictError(values["isbn"])

        logger.debug("Created book", isbn=row["isbn"])
        return BookResponse(**row)

    async def update(self, isbn: str, payload: Mapping[str, Any]) -> BookResponse:
        """
        Replace every non-key field of a book.

        Args:
            isbn: Key of the book to update
            payload: All mutable book fields, already validated

        Returns:
            The updated book

        Raises:
            NotFoundError: No book has this ISBN
        """
        values = {field: payload[field] for field in MUTABLE_FIELDS}
        stmt = (
            update(books_table)
            .where(books_table.c.isbn == isbn)
            .values(**values)
            .returning(*books_table.c)
        )

        async with self.engine.begin() as conn:
            result = await conn.execute(stmt)
            row = result.mappings().first()

        if row is None:
            logger.info("Book not found for update", isbn=isbn)
            raise NotFoundError(isbn)

        logger.debug("Updated book", isbn=isbn)
        return BookResponse(**row)

    async def remove(self, isbn: str) -> None:
        """
        Delete a book by ISBN.

        Raises:
            NotFoundError: No book has this ISBN
        """
        stmt = delete(books_table).where(books_table.c.isbn == isbn).returning(books_table.c.isbn)

        async with self.engine.begin() as conn:
            result = await conn.execute(stmt)
            row = result.first()

        if row is None:
            logger.info("Book not found for delete", isbn=isbn)
            raise NotFoundError(isbn)

        logger.debug("Deleted book", isbn=isbn)

    async def count(self) -> int:
        """Number of rows in the books table."""
        async with self.engine.connect() as conn:
            result = await conn.execute(select(func.count()).select_from(books_table))
            return result.scalar_one()

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                books_count = (
                    await conn.execute(select(func.count()).select_from(books_table))
                ).scalar_one()

            return {
                "status": "healthy",
                "books_table": "accessible",
                "books_count": books_count,
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
            }
