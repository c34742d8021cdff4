"""SQLModel definitions for transactions between the user and a person."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy import orm
from sqlmodel import Field, Relationship, SQLModel

from .person import utcnow

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .person import Person


class Transaction(SQLModel, table=True):
    """Money that moved between the user and one person.

    ``amount`` is always positive; ``is_person_debtor`` carries the direction.
    True means the person owes the user, False means the user owes the person.
    """

    __tablename__: ClassVar[str] = "transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    person_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("people.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    amount: Decimal = Field(max_digits=10, decimal_places=2, nullable=False)
    description: str = Field(nullable=False, max_length=255)
    date: datetime = Field(sa_type=DateTime(timezone=False), nullable=False, index=True)
    is_person_debtor: bool = Field(nullable=False)
    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=False), nullable=False
    )

    person: Optional["Person"] = Relationship(
        back_populates="transactions",
        sa_relationship=orm.relationship("Person", back_populates="transactions"),
    )
