from __future__ import annotations

import textwrap
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from ..errors import InvalidInputError
from ..schemas.transaction import TransactionRead
from ..schemas.user_state import UserState
from ..services.transactions import create_transaction, get_transaction, list_transactions_by_day
from .helpers import format_amount_for_display, format_day, utcnow
from .keyboard import InlineKeyboardBuilder
from .messages import EditMessage, OutboundMessage, SendMessage
from .parsers import TRANSACTION_TEXT_FORMAT, parse_transaction_text

WELCOME_TEXT = textwrap.dedent(
    """
    Hi! I keep a ledger of your transfers.

    - /create <from> <to> <amount> <description> - record a transfer.
    - /list [DD.MM.YYYY] - browse the transfers of a day (today by default).
    """
).strip()

CREATE_PROMPT_TEXT = f"Send the transaction as: {TRANSACTION_TEXT_FORMAT}"
TRANSACTION_CREATED_TEXT = "Transaction created"

TRANSACTIONS_PER_ROW = 5
PREVIOUS_DAY_LABEL = "< Prev day"
NEXT_DAY_LABEL = "Next day >"
BACK_TO_DAY_LABEL = "Back to day"
EDITABLE_FIELDS = ("date", "from", "to", "amount", "description")


def _reply(
    state: UserState,
    text: str,
    keyboard: Optional[InlineKeyboardMarkup] = None,
) -> OutboundMessage:
    if state.message_id is not None:
        return EditMessage(state.chat_id, state.message_id, text, keyboard)
    return SendMessage(state.chat_id, text, keyboard)


def _list_callback(day) -> str:
    return f"list {format_day(day)}"


def format_transaction_line(index: int, transaction: TransactionRead) -> str:
    return (
        f"{index}. {transaction.from_account} -> {transaction.to_account} "
        f"{format_amount_for_display(transaction.amount)} : {transaction.description}"
    )


async def render_start(state: UserState, session: AsyncSession) -> OutboundMessage:
    return _reply(state, WELCOME_TEXT)


async def render_create_transaction(state: UserState, session: AsyncSession) -> OutboundMessage:
    if not state.raw.strip():
        return _reply(state, CREATE_PROMPT_TEXT)
    payload = parse_transaction_text(state.raw, now=utcnow())
    await create_transaction(session, payload)
    return _reply(state, TRANSACTION_CREATED_TEXT)


async def render_list_transactions(state: UserState, session: AsyncSession) -> OutboundMessage:
    if state.date is None:
        raise InvalidInputError("No day selected. Use /list [DD.MM.YYYY].")
    day = state.date
    transactions = [
        TransactionRead.model_validate(tx) for tx in await list_transactions_by_day(session, day)
    ]

    keyboard = InlineKeyboardBuilder(TRANSACTIONS_PER_ROW)
    if not transactions:
        text = f"No transactions for {format_day(day)}"
    else:
        lines = [f"Transactions for {format_day(day)}:", ""]
        for index, transaction in enumerate(transactions, start=1):
            lines.append(format_transaction_line(index, transaction))
            keyboard.add_button(str(index), f"show {transaction.id}")
        keyboard.fill_last_row()
        text = "\n".join(lines)

    navigation = []
    if day > date.min:
        navigation.append(
            InlineKeyboardButton(PREVIOUS_DAY_LABEL, callback_data=_list_callback(day - timedelta(days=1)))
        )
    if day < date.max:
        navigation.append(
            InlineKeyboardButton(NEXT_DAY_LABEL, callback_data=_list_callback(day + timedelta(days=1)))
        )
    keyboard.add_row(*navigation)
    return _reply(state, text, keyboard.markup())


async def render_show_transaction(state: UserState, session: AsyncSession) -> OutboundMessage:
    if state.transaction_id is None:
        raise InvalidInputError("No transaction selected. Pick one from /list.")
    transaction = TransactionRead.model_validate(await get_transaction(session, state.transaction_id))

    text = "\n".join(
        [
            f"Transaction #{transaction.id}",
            f"Date: {format_day(transaction.date)}",
            f"From: {transaction.from_account}",
            f"To: {transaction.to_account}",
            f"Amount: {format_amount_for_display(transaction.amount)}",
            f"Description: {transaction.description}",
        ]
    )

    # Edit callbacks have no consumer yet; the buttons only reserve the layout.
    keyboard = InlineKeyboardBuilder(1)
    for field_name in EDITABLE_FIELDS:
        keyboard.add_button(f"Edit {field_name}", f"edit {field_name} {transaction.id}")
    keyboard.add_row(
        InlineKeyboardButton(BACK_TO_DAY_LABEL, callback_data=_list_callback(transaction.date))
    )
    return _reply(state, text, keyboard.markup())
