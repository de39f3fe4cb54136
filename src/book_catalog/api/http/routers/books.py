"""Book API router: list, create and delete."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.book_catalog.api.http.deps import (
    get_db_session,
    get_request_claims,
)
from src.book_catalog.entities.book import Book, BookCreate, BookRepository

router = APIRouter(dependencies=[Depends(get_request_claims)])


def _store_failure(action: str, exc: SQLAlchemyError) -> HTTPException:
    logger.bind(error_type=type(exc).__name__).error("Failed to {}: {}", action, exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    )


@router.get("", response_model=list[Book])
def list_books(session: Session = Depends(get_db_session)) -> list[Book]:
    """List all books."""
    try:
        return BookRepository(session).list_all()
    except SQLAlchemyError as exc:
        raise _store_failure("load books", exc) from exc


@router.post("", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(
    payload: BookCreate,
    session: Session = Depends(get_db_session),
) -> Book:
    """Create a new book."""
    try:
        created_book = BookRepository(session).create(payload)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise _store_failure("add book", exc) from exc
    return created_book


@router.delete("/{book_id}", response_model=Book)
def delete_book(
    book_id: str,
    session: Session = Depends(get_db_session),
) -> Book:
    """Delete a book and return the removed record."""
    try:
        deleted = BookRepository(session).delete(book_id)
        if deleted is not None:
            session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise _store_failure("delete book", exc) from exc

    if deleted is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    return deleted
