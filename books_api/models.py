"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import List, Union

from pydantic import BaseModel, Field


class BookResponse(BaseModel):
    """Book record as stored in the books table."""
    isbn: str = Field(..., description="International Standard Book Number")
    amazon_url: str = Field(..., description="Amazon product page")
    author: str = Field(..., description="Book author")
    language: str = Field(..., description="Language the book is written in")
    pages: int = Field(..., description="Number of pages")
    publisher: str = Field(..., description="Publisher name")
    title: str = Field(..., description="Book title")
    year: int = Field(..., description="Publication year")


class BookEnvelope(BaseModel):
    """Response wrapper for a single book."""
    book: BookResponse


class BookListResponse(BaseModel):
    """Response wrapper for a list of books."""
    books: List[BookResponse] = Field(..., description="List of books")


class MessageResponse(BaseModel):
    """Plain message response."""
    message: str


class ErrorDetail(BaseModel):
    """Error payload."""
    message: Union[str, List[str]] = Field(..., description="Error message or list of violations")
    status: int = Field(..., description="HTTP status code")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: ErrorDetail


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")


class ValidationResult(BaseModel):
    """Outcome of validating a payload against a JSON Schema."""
    valid: bool
    errors: List[str] = Field(default_factory=list)
