from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import patch

from ledgerbot.errors import InvalidInputError
from ledgerbot.schemas.transaction import TransactionCreate
from ledgerbot.schemas.user_state import UserState
from ledgerbot.services import transactions
from ledgerbot.services.transactions import TransactionNotFoundError
from ledgerbot.telegram import renderers
from ledgerbot.telegram.messages import EditMessage, SendMessage

from tests.support import LedgerDatabaseTestCase

DAY = date(2026, 10, 19)
NOW = datetime(2026, 10, 19, 9, 15, tzinfo=timezone.utc)


def _callbacks(message) -> list[list[str]]:
    return [[button.callback_data for button in row] for row in message.keyboard.inline_keyboard]


class RendererTests(LedgerDatabaseTestCase):
    async def _create(self, description: str, *, amount: str = "10", when: datetime = NOW) -> int:
        payload = TransactionCreate(
            date=when,
            from_account="cash",
            to_account="card",
            amount=Decimal(amount),
            description=description,
        )
        async with self.session_factory() as session:
            created = await transactions.create_transaction(session, payload)
        return created.id

    async def test_start_sends_welcome_without_keyboard(self) -> None:
        async with self.session_factory() as session:
            reply = await renderers.render_start(UserState(name="start", chat_id=7), session)

        self.assertIsInstance(reply, SendMessage)
        self.assertEqual(reply.chat_id, 7)
        self.assertIn("/create", reply.text)
        self.assertIsNone(reply.keyboard)

    async def test_create_without_input_prompts_for_fields(self) -> None:
        async with self.session_factory() as session:
            reply = await renderers.render_create_transaction(UserState(chat_id=7), session)
            rows = await transactions.list_transactions_by_day(session, DAY)

        self.assertEqual(reply.text, renderers.CREATE_PROMPT_TEXT)
        self.assertEqual(list(rows), [])

    async def test_create_writes_ledger_and_confirms(self) -> None:
        state = UserState(name="createTransaction", chat_id=7, raw="A B 100 lunch")
        with patch.object(renderers, "utcnow", return_value=NOW):
            async with self.session_factory() as session:
                reply = await renderers.render_create_transaction(state, session)

        self.assertEqual(reply, SendMessage(7, "Transaction created"))
        async with self.session_factory() as session:
            created = await transactions.get_transaction(session, 1)
        self.assertEqual(
            (created.from_account, created.to_account, created.amount, created.description, created.day),
            ("A", "B", Decimal("100"), "lunch", "2026-10-19"),
        )

    async def test_create_with_malformed_amount_writes_nothing(self) -> None:
        state = UserState(name="createTransaction", chat_id=7, raw="A B lots lunch")
        async with self.session_factory() as session:
            with self.assertRaisesRegex(InvalidInputError, "Invalid amount 'lots'"):
                await renderers.render_create_transaction(state, session)
            with self.assertRaises(TransactionNotFoundError):
                await transactions.get_transaction(session, 1)

    async def test_list_empty_day_has_only_navigation(self) -> None:
        state = UserState(name="listTransactions", chat_id=7, date=DAY)
        async with self.session_factory() as session:
            reply = await renderers.render_list_transactions(state, session)

        self.assertIsInstance(reply, SendMessage)
        self.assertEqual(reply.text, "No transactions for 19.10.2026")
        self.assertEqual(_callbacks(reply), [["list 18.10.2026", "list 20.10.2026"]])

    async def test_list_numbers_transactions_and_pads_button_grid(self) -> None:
        ids = [await self._create(f"item {index}", amount=f"{index}.50") for index in range(1, 8)]
        await self._create("other day", when=datetime(2026, 10, 20, 8, 0, tzinfo=timezone.utc))

        state = UserState(name="listTransactions", chat_id=7, date=DAY)
        async with self.session_factory() as session:
            reply = await renderers.render_list_transactions(state, session)

        lines = reply.text.splitlines()
        self.assertEqual(lines[0], "Transactions for 19.10.2026:")
        self.assertEqual(lines[2], "1. cash -> card 1.5 : item 1")
        self.assertEqual(lines[-1], "7. cash -> card 7.5 : item 7")
        self.assertNotIn("other day", reply.text)
        self.assertEqual(
            _callbacks(reply),
            [
                [f"show {tx_id}" for tx_id in ids[:5]],
                [f"show {ids[5]}", f"show {ids[6]}", "empty", "empty", "empty"],
                ["list 18.10.2026", "list 20.10.2026"],
            ],
        )
        labels = [button.text for button in reply.keyboard.inline_keyboard[0]]
        self.assertEqual(labels, ["1", "2", "3", "4", "5"])

    async def test_list_edits_message_when_triggered_by_button(self) -> None:
        state = UserState(name="listTransactions", chat_id=7, message_id=55, date=DAY)
        async with self.session_factory() as session:
            reply = await renderers.render_list_transactions(state, session)

        self.assertIsInstance(reply, EditMessage)
        self.assertEqual((reply.chat_id, reply.message_id), (7, 55))

    async def test_list_requires_a_day(self) -> None:
        async with self.session_factory() as session:
            with self.assertRaises(InvalidInputError):
                await renderers.render_list_transactions(UserState(name="listTransactions"), session)

    async def test_show_renders_fields_and_buttons(self) -> None:
        tx_id = await self._create("team lunch", amount="-42.10")

        state = UserState(name="showTransaction", chat_id=7, message_id=55, transaction_id=tx_id)
        async with self.session_factory() as session:
            reply = await renderers.render_show_transaction(state, session)

        self.assertIsInstance(reply, EditMessage)
        self.assertEqual(
            reply.text.splitlines(),
            [
                f"Transaction #{tx_id}",
                "Date: 19.10.2026",
                "From: cash",
                "To: card",
                "Amount: -42.1",
                "Description: team lunch",
            ],
        )
        self.assertEqual(
            _callbacks(reply),
            [
                [f"edit date {tx_id}"],
                [f"edit from {tx_id}"],
                [f"edit to {tx_id}"],
                [f"edit amount {tx_id}"],
                [f"edit description {tx_id}"],
                ["list 19.10.2026"],
            ],
        )

    async def test_show_unknown_transaction_raises_not_found(self) -> None:
        state = UserState(name="showTransaction", chat_id=7, transaction_id=999)
        async with self.session_factory() as session:
            with self.assertRaises(TransactionNotFoundError):
                await renderers.render_show_transaction(state, session)

    async def test_show_requires_a_transaction(self) -> None:
        async with self.session_factory() as session:
            with self.assertRaises(InvalidInputError):
                await renderers.render_show_transaction(UserState(name="showTransaction"), session)

    async def test_list_on_last_calendar_day_has_no_next_button(self) -> None:
        state = UserState(name="listTransactions", chat_id=7, date=date.max)
        async with self.session_factory() as session:
            reply = await renderers.render_list_transactions(state, session)

        self.assertEqual(_callbacks(reply), [["list 30.12.9999"]])
