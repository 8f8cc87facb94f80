"""Conversation graph driving the bot.

A node is a named state with a renderer (the reply sent after entering it) and
three transition tables: free text, ``/command`` and callback token. The graph
is built once by :func:`build_state_graph` and never modified afterwards.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.user_state import UserState
from ..services.user_states import START_STATE
from . import renderers
from .messages import OutboundMessage
from .parsers import ArgsParser, date_parser, raw_parser, transaction_id_parser

CREATE_TRANSACTION_STATE = "createTransaction"
LIST_TRANSACTIONS_STATE = "listTransactions"
SHOW_TRANSACTION_STATE = "showTransaction"

Renderer = Callable[[UserState, AsyncSession], Awaitable[OutboundMessage]]


class NoTransitionError(Exception):
    """Raised when an update matches no edge leaving the current node."""


class TriggerKind(str, Enum):
    TEXT = "text"
    COMMAND = "command"
    CALLBACK = "callback"


@dataclass(frozen=True)
class Trigger:
    kind: TriggerKind
    key: str
    args: str


def resolve_trigger(update: Any) -> Optional[Trigger]:
    """Classify an update as a command, a callback or plain text.

    Returns ``None`` for updates that carry neither message text nor callback
    data (photos, edits, service messages).
    """
    query = getattr(update, "callback_query", None)
    if query is not None:
        if not query.data:
            return None
        token, _, args = query.data.strip().partition(" ")
        return Trigger(TriggerKind.CALLBACK, token, args.strip())

    message = getattr(update, "message", None)
    text = (getattr(message, "text", None) or "").strip()
    if not text:
        return None
    if text.startswith("/"):
        head, *rest = text.split(maxsplit=1)
        command = head[1:].split("@", 1)[0].lower()
        return Trigger(TriggerKind.COMMAND, command, rest[0].strip() if rest else "")
    return Trigger(TriggerKind.TEXT, "", text)


@dataclass(frozen=True)
class Transition:
    destination: str
    parser: Optional[ArgsParser] = None


@dataclass
class StateNode:
    name: str
    renderer: Renderer
    by_text: Optional[Transition] = None
    by_command: dict[str, Transition] = field(default_factory=dict)
    by_callback: dict[str, Transition] = field(default_factory=dict)

    def transition_for(self, trigger: Trigger) -> Optional[Transition]:
        if trigger.kind is TriggerKind.COMMAND:
            return self.by_command.get(trigger.key)
        if trigger.kind is TriggerKind.CALLBACK:
            return self.by_callback.get(trigger.key)
        return self.by_text


class StateGraph:
    """Immutable-by-convention set of nodes keyed by name."""

    def __init__(self, nodes: dict[str, StateNode]) -> None:
        for node in nodes.values():
            targets = [node.by_text] if node.by_text else []
            targets += [*node.by_command.values(), *node.by_callback.values()]
            for transition in targets:
                if transition.destination not in nodes:
                    raise ValueError(
                        f"Node '{node.name}' points at unknown node '{transition.destination}'"
                    )
        self.nodes = nodes

    def node(self, name: str) -> StateNode:
        return self.nodes.get(name) or self.nodes[START_STATE]

    def advance(self, state: UserState, update: Any) -> UserState:
        """Return the state reached by applying ``update`` to ``state``.

        Raises :class:`NoTransitionError` when the current node has no edge for
        the update, and lets parser errors propagate. ``state`` itself is left
        untouched either way.
        """
        trigger = resolve_trigger(update)
        if trigger is None:
            raise NoTransitionError("Update carries no text or callback data")
        current = self.node(state.name)
        transition = current.transition_for(trigger)
        if transition is None:
            raise NoTransitionError(
                f"No {trigger.kind.value} transition '{trigger.key}' from '{current.name}'"
            )

        next_state = state.model_copy()
        if transition.parser is not None:
            next_state = transition.parser(next_state, trigger.args)
        next_state.name = transition.destination
        return next_state

    async def render(self, state: UserState, session: AsyncSession) -> OutboundMessage:
        return await self.nodes[state.name].renderer(state, session)


def _add_navigation_commands(node: StateNode) -> None:
    node.by_command["start"] = Transition(START_STATE)
    node.by_command["create"] = Transition(CREATE_TRANSACTION_STATE, raw_parser)
    node.by_command["list"] = Transition(LIST_TRANSACTIONS_STATE, date_parser)


def build_state_graph() -> StateGraph:
    start = StateNode(START_STATE, renderers.render_start)
    create = StateNode(CREATE_TRANSACTION_STATE, renderers.render_create_transaction)
    listing = StateNode(LIST_TRANSACTIONS_STATE, renderers.render_list_transactions)
    show = StateNode(SHOW_TRANSACTION_STATE, renderers.render_show_transaction)

    for node in (start, create, listing, show):
        _add_navigation_commands(node)

    create.by_text = Transition(CREATE_TRANSACTION_STATE, raw_parser)

    listing.by_callback["list"] = Transition(LIST_TRANSACTIONS_STATE, date_parser)
    listing.by_callback["show"] = Transition(SHOW_TRANSACTION_STATE, transaction_id_parser)

    show.by_callback["list"] = Transition(LIST_TRANSACTIONS_STATE, date_parser)

    return StateGraph({node.name: node for node in (start, create, listing, show)})
