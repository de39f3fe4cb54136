"""Tests for the database session and schema services."""

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlmodel import select

from src.book_catalog.core.services import DbManageService, DbSessionService
from src.book_catalog.entities.book import BookTable


def test_sessions_share_committed_rows(db_service: DbSessionService):
    with db_service.get_session() as db:
        db.add(BookTable(title="Dune", author="Frank Herbert"))
        db.commit()

    with db_service.get_session() as db:
        assert len(db.exec(select(BookTable)).all()) == 1


def test_uncommitted_rows_are_discarded_on_close(db_service: DbSessionService):
    with db_service.get_session() as db:
        db.add(BookTable(title="Dune", author="Frank Herbert"))
        db.flush()

    with db_service.get_session() as db:
        assert db.exec(select(BookTable)).all() == []


def test_health_check(db_service: DbSessionService):
    assert db_service.health_check() is True


def test_drop_and_create_schema(engine: Engine):
    manager = DbManageService(engine)

    manager.drop_all()
    assert "books" not in inspect(engine).get_table_names()

    manager.create_all()
    assert "books" in inspect(engine).get_table_names()
