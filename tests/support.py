"""Shared fixtures: a throwaway SQLite ledger and fake Telegram updates."""

from __future__ import annotations

import tempfile
from pathlib import Path
from types import SimpleNamespace
from unittest import IsolatedAsyncioTestCase
from unittest.mock import AsyncMock

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ledgerbot.models import Base

OPERATOR_ID = 528101001


class LedgerDatabaseTestCase(IsolatedAsyncioTestCase):
    """Creates the schema in a temporary SQLite file for every test."""

    async def asyncSetUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.database_url = f"sqlite+aiosqlite:///{Path(self._tmpdir.name) / 'ledger.db'}"
        self.engine = create_async_engine(self.database_url)
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self.session_factory = async_sessionmaker(
            self.engine, expire_on_commit=False, class_=AsyncSession
        )

    async def asyncTearDown(self) -> None:
        await self.engine.dispose()
        self._tmpdir.cleanup()


def make_message_update(
    text: str,
    *,
    message_id: int,
    user_id: int = OPERATOR_ID,
    chat_id: int = OPERATOR_ID,
) -> SimpleNamespace:
    return SimpleNamespace(
        message=SimpleNamespace(text=text, message_id=message_id, chat_id=chat_id),
        callback_query=None,
        effective_user=SimpleNamespace(id=user_id),
        effective_chat=SimpleNamespace(id=chat_id),
    )


def make_callback_update(
    data: str,
    *,
    query_id: str,
    message_id: int = 900,
    user_id: int = OPERATOR_ID,
    chat_id: int = OPERATOR_ID,
) -> SimpleNamespace:
    query = SimpleNamespace(
        id=query_id,
        data=data,
        message=SimpleNamespace(message_id=message_id, chat_id=chat_id),
        answer=AsyncMock(),
    )
    return SimpleNamespace(
        message=None,
        callback_query=query,
        effective_user=SimpleNamespace(id=user_id),
        effective_chat=SimpleNamespace(id=chat_id),
    )
