from .idempotence import mark_seen
from .transactions import (
    TransactionNotFoundError,
    create_transaction,
    get_transaction,
    list_transactions_by_day,
)
from .user_states import START_STATE, load_user_state, save_user_state

__all__ = [
    "mark_seen",
    "create_transaction",
    "get_transaction",
    "list_transactions_by_day",
    "TransactionNotFoundError",
    "START_STATE",
    "load_user_state",
    "save_user_state",
]
