"""
JSON Schemas for book payloads.

The create schema requires every column including the ISBN. The update schema
carries its own required set: every column except the ISBN, which is the
immutable row key and is rejected before validation runs.
"""

# Bounds of a 32-bit signed INTEGER column
INT_MIN = -2147483648
INT_MAX = 2147483647

BOOK_PROPERTIES = {
    "isbn": {"type": "string", "minLength": 1},
    "amazon_url": {"type": "string", "minLength": 1},
    "author": {"type": "string", "minLength": 1},
    "language": {"type": "string", "minLength": 1},
    "pages": {"type": "integer", "minimum": 1, "maximum": INT_MAX},
    "publisher": {"type": "string", "minLength": 1},
    "title": {"type": "string", "minLength": 1},
    "year": {"type": "integer", "minimum": INT_MIN, "maximum": INT_MAX},
}

BOOK_FIELDS = tuple(BOOK_PROPERTIES)
MUTABLE_FIELDS = tuple(field for field in BOOK_FIELDS if field != "isbn")

BOOK_CREATE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "$id": "bookAdd",
    "title": "Book creation",
    "type": "object",
    "properties": BOOK_PROPERTIES,
    "required": list(BOOK_FIELDS),
    "additionalProperties": False,
}

BOOK_UPDATE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "$id": "bookUpdate",
    "title": "Book update",
    "type": "object",
    "properties": {field: BOOK_PROPERTIES[field] for field in MUTABLE_FIELDS},
    "required": list(MUTABLE_FIELDS),
    "additionalProperties": False,
}
