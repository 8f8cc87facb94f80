from types import SimpleNamespace
from unittest import IsolatedAsyncioTestCase
from unittest.mock import AsyncMock

from telegram.error import BadRequest, NetworkError

from ledgerbot.telegram import transport as transport_module
from ledgerbot.telegram.keyboard import InlineKeyboardBuilder
from ledgerbot.telegram.messages import EditMessage, SendMessage
from ledgerbot.telegram.transport import TelegramTransport


class TelegramTransportTests(IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.bot = SimpleNamespace(send_message=AsyncMock(), edit_message_text=AsyncMock())
        self.transport = TelegramTransport(self.bot)

    async def test_send_message(self) -> None:
        builder = InlineKeyboardBuilder(2)
        builder.add_button("1", "show 1")
        keyboard = builder.markup()
        await self.transport.deliver(SendMessage(42, "hello", keyboard))

        self.bot.send_message.assert_awaited_once_with(42, "hello", reply_markup=keyboard)
        self.bot.edit_message_text.assert_not_awaited()

    async def test_edit_message(self) -> None:
        await self.transport.deliver(EditMessage(42, 7, "updated"))

        self.bot.edit_message_text.assert_awaited_once_with(
            "updated", chat_id=42, message_id=7, reply_markup=None
        )
        self.bot.send_message.assert_not_awaited()

    async def test_unchanged_edit_is_ignored(self) -> None:
        self.bot.edit_message_text.side_effect = BadRequest(
            "Message is not modified: specified new message content is identical"
        )

        await self.transport.deliver(EditMessage(42, 7, "same"))

    async def test_other_bad_request_propagates(self) -> None:
        self.bot.edit_message_text.side_effect = BadRequest("Message to edit not found")

        with self.assertRaises(BadRequest):
            await self.transport.deliver(EditMessage(42, 7, "gone"))

    async def test_callback_answer_failure_is_logged(self) -> None:
        query = SimpleNamespace(id="q1", answer=AsyncMock(side_effect=NetworkError("timeout")))

        with self.assertLogs(transport_module.logger, level="ERROR"):
            await self.transport.answer_callback(query)
