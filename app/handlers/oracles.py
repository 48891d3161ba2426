"""
Oracle authority handler.

The set only grows: the initializer is authorized at startup, and any
authorized identity may authorize others. There is no revocation.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List, Optional

from app.core.database import ledger_transaction
from app.core.errors import InvalidInputError, UnauthorizedError
from app.handlers.events import record_event
from app.models.event import EventType
from app.models.oracle import Oracle
from app.utils.time import ledger_now

logger = logging.getLogger(__name__)


async def is_authorized(session: AsyncSession, identity: Optional[str]) -> bool:
    """Pure lookup; unknown identities are not authorized."""
    if not identity:
        return False
    return await session.get(Oracle, identity) is not None


async def bootstrap_oracle(session: AsyncSession, initializer: str) -> Oracle:
    """
    Authorize the initializing identity unconditionally.

    Run once at startup before serving any other operation. Calling it again
    with the same identity returns the existing grant.
    """
    if not initializer:
        raise InvalidInputError("Initial oracle identity must not be empty")

    async with ledger_transaction(session):
        oracle = await session.get(Oracle, initializer)
        if oracle is None:
            oracle = Oracle(identity=initializer, authorized_by=None, authorized_at=ledger_now())
            session.add(oracle)
            await record_event(
                session,
                EventType.ORACLE_AUTHORIZED,
                initializer,
                {"identity": initializer}
            )
            logger.info("Bootstrapped initial oracle %s", initializer)
    return oracle


async def authorize_oracle(
    session: AsyncSession,
    new_identity: Optional[str],
    caller: str
) -> Oracle:
    """Grant oracle authority. Re-authorizing an oracle is a no-op success."""
    async with ledger_transaction(session):
        if not await is_authorized(session, caller):
            logger.warning("Rejected oracle grant by unauthorized caller %s", caller)
            raise UnauthorizedError(f"{caller} is not an authorized oracle")
        if not new_identity or not new_identity.strip():
            raise InvalidInputError("Oracle identity must not be empty")

        oracle = await session.get(Oracle, new_identity)
        if oracle is not None:
            return oracle

        oracle = Oracle(identity=new_identity, authorized_by=caller, authorized_at=ledger_now())
        session.add(oracle)
        await record_event(
            session,
            EventType.ORACLE_AUTHORIZED,
            new_identity,
            {"identity": new_identity}
        )

    logger.info("Oracle %s authorized by %s", new_identity, caller)
    return oracle


async def get_oracles(session: AsyncSession) -> List[Oracle]:
    """Return all authorized identities in grant order."""
    statement = select(Oracle).order_by(Oracle.authorized_at, Oracle.identity)
    result = await session.execute(statement)
    return list(result.scalars().all())
