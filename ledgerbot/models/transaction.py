from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from .base import Base

DAY_KEY_FORMAT = "%Y-%m-%d"


class DecimalText(TypeDecorator):
    """Stores ``Decimal`` values as text; SQLite has no exact numeric type."""

    impl = String(64)

    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class Transaction(Base):
    """A recorded transfer between two accounts.

    Rows are append-only. ``id`` comes from SQLite's ``AUTOINCREMENT`` so it is
    strictly increasing and never reused, and ``day`` holds the UTC calendar
    day of ``date`` so a whole day can be read through its index.
    """

    __tablename__ = "transactions"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    day: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    from_account: Mapped[str] = mapped_column(String(128), nullable=False)
    to_account: Mapped[str] = mapped_column(String(128), nullable=False)
    amount: Mapped[Decimal] = mapped_column(DecimalText(), nullable=False)
    description: Mapped[str] = mapped_column(String(512), default="", nullable=False)
