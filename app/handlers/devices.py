"""
Device registry handler.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List

from app.core.database import ledger_transaction
from app.core.errors import AlreadyExistsError, InvalidInputError, NotFoundError, NotOwnerError
from app.handlers.events import record_event
from app.models.device import Device
from app.models.event import EventType
from app.utils.time import ledger_now

logger = logging.getLogger(__name__)


async def load_device(session: AsyncSession, device_key: str) -> Device:
    device = await session.get(Device, device_key)
    if not device:
        raise NotFoundError(f"Device {device_key!r} not found")
    return device


async def register_device(
    session: AsyncSession,
    device_key: str,
    device_type: str,
    caller: str
) -> Device:
    """
    Register a device owned by the caller.

    The key is bound to the caller for good: there is no re-registration
    and no ownership transfer.
    """
    if not device_key or not device_key.strip():
        raise InvalidInputError("Device key must not be empty")
    if not device_type or not device_type.strip():
        raise InvalidInputError("Device type must not be empty")

    async with ledger_transaction(session):
        if await session.get(Device, device_key):
            raise AlreadyExistsError(f"Device {device_key!r} is already registered")

        device = Device(
            device_key=device_key,
            device_type=device_type,
            owner=caller,
            is_active=True,
            credits_generated=0,
            registered_at=ledger_now()
        )
        session.add(device)
        await record_event(
            session,
            EventType.DEVICE_REGISTERED,
            device_key,
            {"key": device_key, "owner": caller, "type": device_type}
        )

    logger.info("Registered device %s (%s) for %s", device_key, device_type, caller)
    return device


async def set_device_active(
    session: AsyncSession,
    device_key: str,
    caller: str,
    active: bool
) -> Device:
    """Toggle the active flag. Credits minted earlier are unaffected."""
    async with ledger_transaction(session):
        device = await load_device(session, device_key)
        if device.owner != caller:
            raise NotOwnerError(f"{caller} does not own device {device_key!r}")
        device.is_active = active

    logger.info("Device %s active=%s", device_key, active)
    return device


def increment_credit_count(device: Device) -> None:
    """Count a credit minted on this device. Only the ledger calls this, inside its mint."""
    device.credits_generated += 1


async def get_device(session: AsyncSession, device_key: str) -> Device:
    """Get device by key."""
    return await load_device(session, device_key)


async def get_devices_by_owner(session: AsyncSession, owner: str) -> List[Device]:
    """Return all devices registered by an identity."""
    statement = select(Device).where(Device.owner == owner).order_by(Device.registered_at)
    result = await session.execute(statement)
    return list(result.scalars().all())
