"""
Ledger event handler - append-only notifications.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import Any, Dict, List, Optional

from app.models.event import EventType, LedgerEvent
from app.utils.hashing import canonical_json, hash_payload
from app.utils.time import ledger_now


async def record_event(
    session: AsyncSession,
    event_type: EventType,
    entity_id: Any,
    payload: Dict[str, Any]
) -> LedgerEvent:
    """
    Append an event to the log.

    Must be called inside the transaction of the mutation it reports, so a
    rolled-back call leaves no event behind.
    """
    event = LedgerEvent(
        event_type=event_type,
        entity_id=str(entity_id),
        payload=canonical_json(payload),
        payload_hash=hash_payload(payload),
        created_at=ledger_now()
    )
    session.add(event)
    return event


async def get_events(
    session: AsyncSession,
    event_type: Optional[EventType] = None,
    after_id: int = 0,
    limit: int = 100
) -> List[LedgerEvent]:
    """Get events in emission order, optionally filtered by type."""
    statement = select(LedgerEvent).where(LedgerEvent.id > after_id)

    if event_type:
        statement = statement.where(LedgerEvent.event_type == event_type)

    statement = statement.order_by(LedgerEvent.id).limit(limit)

    result = await session.execute(statement)
    return list(result.scalars().all())
