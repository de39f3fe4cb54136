"""Entities module with entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model and request payloads
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .book import Book, BookCreate, BookRepository, BookTable

__all__ = [
    "Book",
    "BookCreate",
    "BookRepository",
    "BookTable",
]
