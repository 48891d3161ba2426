"""
Credit ledger handler - minting, verification and ledger reads.

Credit lifecycle:
    UNVERIFIED --verify--> VERIFIED --list--> LISTED --purchase--> VERIFIED (new owner)
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func
from typing import List

from app.core.constants import FIRST_CREDIT_ID
from app.core.database import ledger_transaction
from app.core.errors import (
    AlreadyVerifiedError,
    DeviceInactiveError,
    InvalidInputError,
    NotFoundError,
    NotOwnerError,
    UnauthorizedError,
)
from app.handlers.devices import load_device, increment_credit_count
from app.handlers.events import record_event
from app.handlers.oracles import is_authorized
from app.models.credit import CarbonCredit
from app.models.event import EventType
from app.models.listing import Listing, ListingRead
from app.models.ownership import OwnedCredit, ProducerTotal
from app.utils.time import ledger_now

logger = logging.getLogger(__name__)


async def get_total_credits(session: AsyncSession) -> int:
    """Number of credits minted so far, which is also the next credit id."""
    result = await session.execute(select(func.count(CarbonCredit.id)))
    return FIRST_CREDIT_ID + (result.scalar() or 0)


async def load_credit(session: AsyncSession, credit_id: int) -> CarbonCredit:
    credit = None
    if credit_id >= FIRST_CREDIT_ID:
        credit = await session.get(CarbonCredit, credit_id)
    if credit is None:
        raise NotFoundError(f"Credit {credit_id} not found")
    return credit


async def mint_credit(
    session: AsyncSession,
    device_key: str,
    co2_kg: int,
    caller: str
) -> CarbonCredit:
    """
    Mint a credit for a CO2 reduction reported by the device owner.

    The id comes from the committed credit count read under the write gate,
    so ids run 0, 1, 2, ... with no gaps, even when a mint is rejected.
    """
    async with ledger_transaction(session):
        device = await load_device(session, device_key)
        if device.owner != caller:
            raise NotOwnerError(f"{caller} does not own device {device_key!r}")
        if not device.is_active:
            raise DeviceInactiveError(f"Device {device_key!r} is inactive")
        if isinstance(co2_kg, bool) or not isinstance(co2_kg, int) or co2_kg <= 0:
            raise InvalidInputError("CO2 amount must be a positive whole number of kilograms")

        credit_id = await get_total_credits(session)
        now = ledger_now()
        credit = CarbonCredit(
            id=credit_id,
            producer=caller,
            co2_kg=co2_kg,
            device_key=device_key,
            is_verified=False,
            price=0,
            is_for_sale=False,
            current_owner=caller,
            created_at=now,
            updated_at=now
        )
        session.add(credit)
        increment_credit_count(device)
        session.add(OwnedCredit(credit_id=credit_id, owner=caller))

        total = await session.get(ProducerTotal, caller)
        if total is None:
            total = ProducerTotal(identity=caller, total_co2_kg=0)
            session.add(total)
        total.total_co2_kg += co2_kg

        await record_event(
            session,
            EventType.CREDIT_GENERATED,
            credit_id,
            {"id": credit_id, "producer": caller, "co2": co2_kg, "device": device_key}
        )

    logger.info("Minted credit %s: %s kg CO2 on %s by %s", credit_id, co2_kg, device_key, caller)
    return credit


async def verify_credit(
    session: AsyncSession,
    credit_id: int,
    caller: str
) -> CarbonCredit:
    """
    Mark a credit verified on behalf of an oracle.

    Verification happens exactly once; a second call fails with
    AlreadyVerifiedError rather than succeeding silently.
    """
    async with ledger_transaction(session):
        if not await is_authorized(session, caller):
            logger.warning("Rejected verification of credit %s by %s", credit_id, caller)
            raise UnauthorizedError(f"{caller} is not an authorized oracle")
        credit = await load_credit(session, credit_id)
        if credit.is_verified:
            raise AlreadyVerifiedError(f"Credit {credit_id} is already verified")

        credit.is_verified = True
        credit.updated_at = ledger_now()
        await record_event(
            session,
            EventType.CREDIT_VERIFIED,
            credit_id,
            {"id": credit_id, "oracle": caller}
        )

    logger.info("Credit %s verified by %s", credit_id, caller)
    return credit


async def get_credit(session: AsyncSession, credit_id: int) -> CarbonCredit:
    """Get a credit by id."""
    return await load_credit(session, credit_id)


async def get_owned_credit_ids(session: AsyncSession, owner: str) -> List[int]:
    """
    Ids of the credits an identity currently owns.

    Treat the result as a set: its order is not part of the contract.
    """
    statement = select(OwnedCredit.credit_id).where(OwnedCredit.owner == owner)
    result = await session.execute(statement)
    return list(result.scalars().all())


async def get_listed_credits(session: AsyncSession) -> List[ListingRead]:
    """All listed, verified credits with their prices, in ascending id order."""
    statement = (
        select(Listing.credit_id, Listing.price)
        .join(CarbonCredit, CarbonCredit.id == Listing.credit_id)
        .where(CarbonCredit.is_for_sale == True, CarbonCredit.is_verified == True)  # noqa: E712
        .order_by(Listing.credit_id)
    )
    result = await session.execute(statement)
    return [ListingRead(credit_id=credit_id, price=price) for credit_id, price in result.all()]


async def get_producer_total(session: AsyncSession, identity: str) -> int:
    """Total CO2 (kg) of the credits an identity minted, regardless of later trades."""
    total = await session.get(ProducerTotal, identity)
    return total.total_co2_kg if total else 0
