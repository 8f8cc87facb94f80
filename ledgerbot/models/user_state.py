from __future__ import annotations

import datetime
from typing import Optional

from sqlalchemy import BigInteger, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class UserStateRecord(Base):
    """Conversation position of one operator, overwritten on every turn."""

    __tablename__ = "user_states"

    operator_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    raw: Mapped[str] = mapped_column(Text, default="", nullable=False)
    chat_id: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    message_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    date: Mapped[Optional[datetime.date]] = mapped_column(Date, nullable=True)
    transaction_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
