from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user_state import UserStateRecord
from ..schemas.user_state import UserState

START_STATE = "start"


async def load_user_state(session: AsyncSession, operator_id: int) -> UserState:
    """Load the operator's conversation state.

    A missing row is the normal first-contact case and yields a fresh state
    positioned at the start node, as does a stored row with an empty name.
    """
    record = await session.get(UserStateRecord, operator_id)
    if record is None:
        return UserState(name=START_STATE)
    state = UserState.model_validate(record)
    if not state.name:
        state.name = START_STATE
    return state


async def save_user_state(session: AsyncSession, operator_id: int, state: UserState) -> None:
    await session.merge(UserStateRecord(operator_id=operator_id, **state.model_dump()))
    await session.commit()
