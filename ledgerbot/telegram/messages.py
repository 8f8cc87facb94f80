"""Outbound replies produced by the conversation graph.

Renderers return one of these values; only the transport adapter knows how to
turn them into Bot API calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from telegram import InlineKeyboardMarkup


@dataclass(frozen=True)
class SendMessage:
    chat_id: int
    text: str
    keyboard: Optional[InlineKeyboardMarkup] = None


@dataclass(frozen=True)
class EditMessage:
    chat_id: int
    message_id: int
    text: str
    keyboard: Optional[InlineKeyboardMarkup] = None


OutboundMessage = Union[SendMessage, EditMessage]
