from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserState(BaseModel):
    """Where the operator is in the conversation and what they were doing.

    ``message_id`` is only set when the current turn came from a button press,
    so replies edit that message instead of sending a new one. ``date`` and
    ``transaction_id`` are written by transition parsers and read by the
    destination node's renderer.
    """

    model_config = ConfigDict(from_attributes=True)

    name: str = ""
    raw: str = ""
    chat_id: int = 0
    message_id: Optional[int] = None
    date: Optional[datetime.date] = None
    transaction_id: Optional[int] = None
