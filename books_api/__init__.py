"""
FastAPI RESTful API for the Books catalogue.

This package provides a small REST API for:
- Listing and filtering book records
- Fetching, creating, updating and deleting books by ISBN
- JSON Schema validation of request payloads
"""
