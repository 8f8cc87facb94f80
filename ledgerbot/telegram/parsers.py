"""Argument parsers attached to conversation transitions.

Each parser receives the current state and the argument string of the update
and returns an updated copy; the input state is never mutated, so a parse
failure leaves the caller's state exactly as it was.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from pydantic import ValidationError

from ..errors import InvalidInputError
from ..schemas.transaction import TransactionCreate
from ..schemas.user_state import UserState
from .helpers import parse_amount_token, parse_day, today_utc

ArgsParser = Callable[[UserState, str], UserState]

TRANSACTION_TEXT_FORMAT = "<from> <to> <amount> <description>"

# SQLite INTEGER is a signed 64-bit value.
MAX_TRANSACTION_ID = 2**63 - 1


def raw_parser(state: UserState, args: str) -> UserState:
    return state.model_copy(update={"raw": args})


def date_parser(state: UserState, args: str) -> UserState:
    if not args:
        return state.model_copy(update={"date": today_utc()})
    try:
        day = parse_day(args)
    except ValueError as exc:
        raise InvalidInputError(str(exc)) from exc
    return state.model_copy(update={"date": day})


def transaction_id_parser(state: UserState, args: str) -> UserState:
    if not (args.isascii() and args.isdigit()):
        raise InvalidInputError(f"Invalid transaction id '{args}'.")
    transaction_id = int(args)
    if not 1 <= transaction_id <= MAX_TRANSACTION_ID:
        raise InvalidInputError(f"Invalid transaction id '{args}'.")
    return state.model_copy(update={"transaction_id": transaction_id})


def parse_transaction_text(raw: str, *, now: datetime) -> TransactionCreate:
    """Turn ``from to amount description`` into a ledger payload dated ``now``."""
    parts = raw.split(maxsplit=3)
    if len(parts) != 4:
        raise InvalidInputError(f"Invalid message format. Use: {TRANSACTION_TEXT_FORMAT}")
    from_account, to_account, amount_raw, description = parts
    try:
        amount = parse_amount_token(amount_raw)
    except ValueError as exc:
        raise InvalidInputError(str(exc)) from exc
    try:
        return TransactionCreate(
            date=now,
            from_account=from_account,
            to_account=to_account,
            amount=amount,
            description=description,
        )
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid transaction: {exc.errors()[0]['msg']}") from exc
