"""Tests for the device registry."""

import pytest

from app.core.errors import AlreadyExistsError, InvalidInputError, NotFoundError, NotOwnerError
from app.handlers.devices import get_device, get_devices_by_owner, register_device, set_device_active
from app.handlers.events import get_events
from app.models.event import EventType

from conftest import ALICE, BOB


async def test_register_device(session):
    """A new device is active, unused and owned by its registrant."""
    device = await register_device(session, "D1", "solar", ALICE)

    assert device.owner == ALICE
    assert device.device_type == "solar"
    assert device.is_active is True
    assert device.credits_generated == 0
    assert device.registered_at is not None

    events = await get_events(session, EventType.DEVICE_REGISTERED)
    assert len(events) == 1
    assert events[0].entity_id == "D1"


@pytest.mark.parametrize("key, device_type", [("", "solar"), ("D1", ""), ("   ", "solar")])
async def test_register_rejects_empty_strings(session, key, device_type):
    with pytest.raises(InvalidInputError):
        await register_device(session, key, device_type, ALICE)


async def test_register_duplicate_key(session):
    """A key stays bound to its first owner."""
    await register_device(session, "D1", "solar", ALICE)

    with pytest.raises(AlreadyExistsError):
        await register_device(session, "D1", "wind", BOB)

    device = await get_device(session, "D1")
    assert device.owner == ALICE
    assert device.device_type == "solar"
    assert len(await get_events(session, EventType.DEVICE_REGISTERED)) == 1


async def test_set_active_by_owner(session):
    await register_device(session, "D1", "solar", ALICE)

    device = await set_device_active(session, "D1", ALICE, False)
    assert device.is_active is False

    device = await set_device_active(session, "D1", ALICE, True)
    assert device.is_active is True


async def test_set_active_requires_owner(session):
    await register_device(session, "D1", "solar", ALICE)

    with pytest.raises(NotOwnerError):
        await set_device_active(session, "D1", BOB, False)

    assert (await get_device(session, "D1")).is_active is True


async def test_set_active_unknown_device(session):
    with pytest.raises(NotFoundError):
        await set_device_active(session, "missing", ALICE, False)


async def test_get_unknown_device(session):
    with pytest.raises(NotFoundError):
        await get_device(session, "missing")


async def test_devices_by_owner(session):
    await register_device(session, "D1", "solar", ALICE)
    await register_device(session, "D2", "wind", ALICE)
    await register_device(session, "D3", "solar", BOB)

    keys = {d.device_key for d in await get_devices_by_owner(session, ALICE)}
    assert keys == {"D1", "D2"}
    assert await get_devices_by_owner(session, "nobody") == []
