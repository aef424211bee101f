#!/usr/bin/env python3
"""
Database Management Utility

This script provides utilities to manage the books table:
- Create the table
- Drop the table
- Load books from a JSON seed file
- Show the number of stored books
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Dict

from books_api.config import config
from books_api.database import BookRepository
from books_api.errors import ConflictError
from books_api.schemas import BOOK_CREATE_SCHEMA
from books_api.validation import validate
from utilities.logger import setup_logging


async def init_table(repository: BookRepository):
    """Create the books table."""
    await repository.create_table()
    print("✅ Books table created")


async def drop_table(repository: BookRepository):
    """Drop the books table."""
    await repository.drop_table()
    print("🗑️  Books table dropped")


async def seed_books(repository: BookRepository, seed_file: Path) -> Dict[str, int]:
    """
    Insert every book from a JSON file holding a list of book objects.

    Records that fail validation or already exist are skipped.

    Returns:
        Counts of inserted, invalid and duplicate records
    """
    records = json.loads(seed_file.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError(f"{seed_file} must contain a JSON list of books")

    await repository.create_table()

    stats = {"success": 0, "failed": 0, "duplicates": 0}
    for i, record in enumerate(records, 1):
        result = validate(record, BOOK_CREATE_SCHEMA)
        if not result.valid:
            stats["failed"] += 1
            print(f"❌ Record {i} is invalid:")
            for error in result.errors:
                print(f"     {error}")
            continue

        try:
            await repository.create(record)
            stats["success"] += 1
        except ConflictError as e:
            stats["duplicates"] += 1
            print(f"⚠️  Record {i}: {e.message}")

    print(
        f"📚 Seeded {stats['success']} books "
        f"({stats['failed']} invalid, {stats['duplicates']} duplicates)"
    )
    return stats


async def show_count(repository: BookRepository):
    """Show the number of stored books."""
    count = await repository.count()
    print(f"📚 Total Books: {count}")


def print_usage():
    print("Usage: python manage_db.py [init|drop|seed|count] [file]")
    print()
    print("Commands:")
    print("  init     - Create the books table")
    print("  drop     - Drop the books table")
    print("  seed     - Load books from a JSON file")
    print("  count    - Show the number of stored books")
    print()
    print("Examples:")
    print("  python manage_db.py init")
    print("  python manage_db.py seed data/books.json")


async def main():
    """Main function."""
    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1].lower()
    if command not in ("init", "drop", "seed", "count"):
        print(f"❌ Unknown command: {command}")
        print("Available commands: init, drop, seed, count")
        sys.exit(1)
    if command == "seed" and len(sys.argv) < 3:
        print("❌ Error: file required for seed command")
        print("Usage: python manage_db.py seed <file>")
        sys.exit(1)

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug
    )

    repository = BookRepository.from_url(config.database_url, echo=config.database_echo)
    try:
        if command == "init":
            await init_table(repository)
        elif command == "drop":
            await drop_table(repository)
        elif command == "seed":
            await seed_books(repository, Path(sys.argv[2]))
        elif command == "count":
            await show_count(repository)
    finally:
        await repository.dispose()


if __name__ == "__main__":
    asyncio.run(main())
