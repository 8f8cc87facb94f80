from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from ..errors import LedgerBotError
from ..services.idempotence import mark_seen
from ..services.user_states import load_user_state, save_user_state
from .messages import OutboundMessage, SendMessage
from .states import NoTransitionError, StateGraph, resolve_trigger
from .transport import TelegramTransport

logger = logging.getLogger(__name__)

STORAGE_FAILURE_TEXT = "Something went wrong while accessing the ledger. Please try again."


def delivery_key(update: Any) -> Optional[str]:
    """Identifier of one delivery of an update, stable across redeliveries."""
    chat = getattr(update, "effective_chat", None)
    if chat is None:
        return None
    query = getattr(update, "callback_query", None)
    if query is not None:
        return f"telegram:{chat.id}:cb:{query.id}"
    message = getattr(update, "message", None)
    if message is not None:
        return f"telegram:{chat.id}:{message.message_id}"
    return None


class UpdateDispatcher:
    """Processes updates one at a time for the single allow-listed operator.

    Steps per update: authorise, deduplicate, load state, advance the graph,
    render the reply, save the new state, deliver. The state is saved only
    after rendering succeeded, so a failed render leaves the operator where
    they were.
    """

    def __init__(
        self,
        graph: StateGraph,
        session_factory: Callable[[], AsyncSession],
        transport: TelegramTransport,
        operator_id: int,
    ) -> None:
        self.graph = graph
        self.session_factory = session_factory
        self.transport = transport
        self.operator_id = operator_id

    async def handle(self, update: Any, context: ContextTypes.DEFAULT_TYPE) -> None:
        """python-telegram-bot handler callback."""
        await self.dispatch(update)

    async def dispatch(self, update: Any) -> None:
        user = getattr(update, "effective_user", None)
        if user is None or user.id != self.operator_id:
            return
        if resolve_trigger(update) is None:
            logger.debug("Ignoring update without text or callback data")
            return
        key = delivery_key(update)
        if key is None:
            return

        try:
            async with self.session_factory() as session:
                first_time = await mark_seen(session, key)
        except SQLAlchemyError:
            logger.exception("Idempotence check failed for %s; dropping update", key)
            return
        if not first_time:
            logger.info("Dropping redelivered update %s", key)
            return

        query = getattr(update, "callback_query", None)
        if query is not None:
            await self.transport.answer_callback(query)

        chat_id = update.effective_chat.id
        try:
            async with self.session_factory() as session:
                state = await load_user_state(session, user.id)
        except SQLAlchemyError:
            logger.exception("Failed to load state for operator %s", user.id)
            await self._send_text(chat_id, STORAGE_FAILURE_TEXT)
            return

        state.chat_id = chat_id
        state.message_id = query.message.message_id if query is not None else None

        try:
            next_state = self.graph.advance(state, update)
        except NoTransitionError as exc:
            logger.debug("Ignoring update %s: %s", key, exc)
            return
        except LedgerBotError as exc:
            await self._send_text(chat_id, str(exc))
            return

        try:
            async with self.session_factory() as session:
                reply = await self.graph.render(next_state, session)
        except LedgerBotError as exc:
            await self._send_text(chat_id, str(exc))
            return
        except SQLAlchemyError:
            logger.exception("Failed to render state %s for update %s", next_state.name, key)
            await self._send_text(chat_id, STORAGE_FAILURE_TEXT)
            return

        try:
            async with self.session_factory() as session:
                await save_user_state(session, user.id, next_state)
        except SQLAlchemyError:
            logger.exception("Failed to save state %s for operator %s", next_state.name, user.id)
            await self._send_text(chat_id, STORAGE_FAILURE_TEXT)
            return

        await self._deliver(reply)

    async def _send_text(self, chat_id: int, text: str) -> None:
        await self._deliver(SendMessage(chat_id, text))

    async def _deliver(self, message: OutboundMessage) -> None:
        try:
            await self.transport.deliver(message)
        except TelegramError:
            logger.exception("Failed to deliver reply to chat %s", message.chat_id)
