from __future__ import annotations

import logging

from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.processed_update import ProcessedUpdate

logger = logging.getLogger(__name__)


async def mark_seen(session: AsyncSession, key: str) -> bool:
    """Record ``key`` as processed.

    Returns ``True`` only for the call that inserted the key; the primary key
    constraint rejects every later insert, including ones made after a
    restart. Any other storage error propagates to the caller.
    """
    try:
        await session.execute(insert(ProcessedUpdate).values(key=key))
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.debug("Update %s already processed", key)
        return False
    return True
