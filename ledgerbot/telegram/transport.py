from __future__ import annotations

import logging
from typing import Any

from telegram.error import BadRequest, TelegramError

from .messages import EditMessage, OutboundMessage

logger = logging.getLogger(__name__)


def _is_message_not_modified_error(error: Exception) -> bool:
    return isinstance(error, BadRequest) and "message is not modified" in str(error).lower()


class TelegramTransport:
    """Turns outbound replies into Bot API calls."""

    def __init__(self, bot: Any) -> None:
        self.bot = bot

    async def deliver(self, message: OutboundMessage) -> None:
        if isinstance(message, EditMessage):
            try:
                await self.bot.edit_message_text(
                    message.text,
                    chat_id=message.chat_id,
                    message_id=message.message_id,
                    reply_markup=message.keyboard,
                )
            except BadRequest as exc:
                if _is_message_not_modified_error(exc):
                    return
                raise
            return
        await self.bot.send_message(
            message.chat_id,
            message.text,
            reply_markup=message.keyboard,
        )

    async def answer_callback(self, query: Any) -> None:
        try:
            await query.answer()
        except TelegramError:
            logger.exception("Failed to answer callback query %s", getattr(query, "id", None))
