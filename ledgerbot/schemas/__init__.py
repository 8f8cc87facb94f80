from .transaction import TransactionCreate, TransactionRead
from .user_state import UserState

__all__ = [
    "TransactionCreate",
    "TransactionRead",
    "UserState",
]
