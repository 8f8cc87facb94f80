from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import LedgerBotError
from ..models.transaction import DAY_KEY_FORMAT, Transaction
from ..schemas.transaction import TransactionCreate

logger = logging.getLogger(__name__)


class TransactionNotFoundError(LedgerBotError):
    """Raised when a transaction cannot be found."""

    def __init__(self, transaction_id: int) -> None:
        super().__init__(f"Transaction {transaction_id} not found")
        self.transaction_id = transaction_id


def day_key(value: date) -> str:
    return value.strftime(DAY_KEY_FORMAT)


async def create_transaction(session: AsyncSession, payload: TransactionCreate) -> Transaction:
    """Append a transaction and return it with its newly assigned id.

    The id and the day key are written by the same INSERT, so a committed row
    is always visible through both lookups.
    """
    transaction = Transaction(
        date=payload.date,
        day=day_key(payload.date),
        from_account=payload.from_account,
        to_account=payload.to_account,
        amount=payload.amount,
        description=payload.description,
    )
    session.add(transaction)
    await session.commit()
    await session.refresh(transaction)
    logger.info("Created transaction %s on %s", transaction.id, transaction.day)
    return transaction


async def get_transaction(session: AsyncSession, transaction_id: int) -> Transaction:
    transaction = await session.get(Transaction, transaction_id)
    if transaction is None:
        raise TransactionNotFoundError(transaction_id)
    return transaction


async def list_transactions_by_day(session: AsyncSession, day: date) -> Sequence[Transaction]:
    """Return every transaction recorded on ``day`` (UTC), oldest first."""
    stmt = select(Transaction).where(Transaction.day == day_key(day)).order_by(Transaction.id)
    result = await session.execute(stmt)
    return result.scalars().all()
