"""
Error kinds raised by the books API and mapped to HTTP responses.
"""

from typing import List, Union

from fastapi import status


class BookAPIError(Exception):
    """Base class for errors that carry their own HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Union[str, List[str]], status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class SchemaValidationError(BookAPIError):
    """Payload does not satisfy a book schema."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[str]):
        super().__init__(list(errors))
        self.errors = list(errors)


class BadRequestError(BookAPIError):
    """Request is malformed or contains a disallowed field."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BookAPIError):
    """No book row matches the requested ISBN."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, isbn: str):
        super().__init__(f"There is no book with an isbn '{isbn}'")
        self.isbn = isbn


class ConflictError(BookAPIError):
    """A book with the same ISBN already exists."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, isbn: str):
        super().__init__(f"A book with isbn '{isbn}' already exists")
        self.isbn = isbn
