"""
Book endpoints.

Each handler validates the request shape, calls the repository and returns the
JSON envelope. Errors raised here or by the repository are rendered by the
exception handlers registered in ``books_api.main``.
"""

import json
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request, status

from books_api.database import BookRepository
from books_api.errors import BadRequestError, SchemaValidationError
from books_api.models import BookEnvelope, BookListResponse, ErrorResponse, MessageResponse
from books_api.schemas import BOOK_CREATE_SCHEMA, BOOK_UPDATE_SCHEMA
from books_api.validation import validate

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)


def get_repository(request: Request) -> BookRepository:
    """Book repository created by the application lifespan."""
    return request.app.state.repository


async def read_json(request: Request) -> Any:
    """Decode the request body, rejecting anything that is not JSON."""
    body = await request.body()
    try:
        return json.loads(body or b"null")
    except ValueError:
        raise BadRequestError("Request body must be valid JSON")


def check_schema(payload: Any, schema: dict) -> None:
    result = validate(payload, schema)
    if not result.valid:
        logger.info("Payload rejected", schema=schema["$id"], errors=result.errors)
        raise SchemaValidationError(result.errors)


@router.get("", response_model=BookListResponse)
async def list_books(
    request: Request,
    repository: BookRepository = Depends(get_repository),
):
    """
    Get all books.

    Any query parameter naming a book column narrows the list by equality,
    e.g. ``/books?author=Paige%20Turner&year=2020``. Each column may be given
    at most once.
    """
    filters = {}
    for key, value in request.query_params.multi_items():
        if key in filters:
            raise BadRequestError(f"Filter '{key}' given more than once")
        filters[key] = value

    books = await repository.find_all(filters)
    return BookListResponse(books=books)


@router.get("/{isbn}", response_model=BookEnvelope)
async def get_book(
    isbn: str,
    repository: BookRepository = Depends(get_repository),
):
    """Get a single book by ISBN."""
    book = await repository.find_one(isbn)
    return BookEnvelope(book=book)


@router.post("", response_model=BookEnvelope, status_code=status.HTTP_201_CREATED)
async def create_book(
    request: Request,
    repository: BookRepository = Depends(get_repository),
):
    """Create a book. Every field, including the ISBN, is required."""
    payload = await read_json(request)
    check_schema(payload, BOOK_CREATE_SCHEMA)

    book = await repository.create(payload)
    logger.info("Book created", isbn=book.isbn)
    return BookEnvelope(book=book)


@router.put("/{isbn}", response_model=BookEnvelope)
async def update_book(
    isbn: str,
    request: Request,
    repository: BookRepository = Depends(get_repository),
):
    """Replace every field of a book except its ISBN."""
    payload = await read_json(request)
    # the isbn comes from the path and can never be changed
    if isinstance(payload, dict) and "isbn" in payload:
        raise BadRequestError("Operation not allowed!")
    check_schema(payload, BOOK_UPDATE_SCHEMA)

    book = await repository.update(isbn, payload)
    logger.info("Book updated", isbn=isbn)
    return BookEnvelope(book=book)


@router.delete("/{isbn}", response_model=MessageResponse)
async def delete_book(
    isbn: str,
    repository: BookRepository = Depends(get_repository),
):
    """Delete a book by ISBN."""
    await repository.remove(isbn)
    logger.info("Book deleted", isbn=isbn)
    return MessageResponse(message="Book deleted")
