"""Book repository for data access operations."""

from loguru import logger
from sqlmodel import Session, select

from .entity import Book, BookCreate
from .table import BookTable


class BookRepository:
    """Data-access layer for books.

    The repository flushes but never commits; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, payload: BookCreate) -> Book:
        """Insert a new book and return it with its assigned identifier."""
        row = BookTable(
            title=payload.title,
            author=payload.author,
            description=payload.description,
        )
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        logger.info("Created book {}", row.id)
        return Book.model_validate(row, from_attributes=True)

    def list_all(self) -> list[Book]:
        """Return every book, oldest first."""
        statement = select(BookTable).order_by(BookTable.created_at, BookTable.id)
        rows = self._session.exec(statement).all()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def delete(self, book_id: str) -> Book | None:
        """Delete a book by identifier, returning it, or None if it does not exist."""
        row = self._session.get(BookTable, book_id)
        if row is None:
            return None
        book = Book.model_validate(row, from_attributes=True)
        self._session.delete(row)
        self._session.flush()
        logger.info("Deleted book {}", book_id)
        return book
