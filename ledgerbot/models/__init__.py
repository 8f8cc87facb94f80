from .base import Base
from .processed_update import ProcessedUpdate
from .transaction import DAY_KEY_FORMAT, Transaction
from .user_state import UserStateRecord

__all__ = [
    "Base",
    "DAY_KEY_FORMAT",
    "ProcessedUpdate",
    "Transaction",
    "UserStateRecord",
]
