"""Base SQLModel tables and pydantic entities shared by every domain entity."""

import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base entity class with a store-assigned identifier."""

    id: str = PydanticField(description="Unique identifier for the entity")
    created_at: datetime = PydanticField(default_factory=_utcnow)


class EntityTable(SQLModel, table=False):
    """Base table with an auto-generated UUID primary key."""

    id: str = Field(
        primary_key=True,
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        index=True,
        sa_column_kwargs={"server_default": sa.func.now()},
    )
