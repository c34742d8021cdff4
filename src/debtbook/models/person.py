"""People the user lends to or borrows from."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import DateTime, orm
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .transaction import Transaction


def utcnow() -> datetime:
    """Naive UTC timestamp, the representation stored in every datetime column."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class Person(SQLModel, table=True):
    """A counterparty whose running balance is tracked."""

    __tablename__: ClassVar[str] = "people"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=120, index=True)
    relationship: Optional[str] = Field(default=None, max_length=80)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=40)
    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=False), nullable=False
    )

    transactions: list["Transaction"] = Relationship(
        back_populates="person",
        sa_relationship=orm.relationship(
            "Transaction",
            back_populates="person",
            cascade="all, delete-orphan",
            passive_deletes=True,
        ),
    )
