from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TransactionCreate(BaseModel):
    """Internal payload for appending a transaction to the ledger."""

    date: datetime
    from_account: str = Field(min_length=1, max_length=128)
    to_account: str = Field(min_length=1, max_length=128)
    amount: Decimal
    description: str = Field(default="", max_length=512)

    @field_validator("date")
    @classmethod
    def _normalise_date(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_validator("from_account", "to_account")
    @classmethod
    def _reject_blank_account(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Account label must not be blank")
        return value


class TransactionRead(BaseModel):
    """Ledger record as seen by the conversation layer."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    date: datetime
    from_account: str
    to_account: str
    amount: Decimal
    description: str

    @field_validator("date")
    @classmethod
    def _normalise_date(cls, value: datetime) -> datetime:
        return _as_utc(value)
