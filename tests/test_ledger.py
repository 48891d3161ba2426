"""Tests for minting, verification and ledger reads."""

import asyncio

import pytest

from app.core.errors import (
    AlreadyVerifiedError,
    DeviceInactiveError,
    InvalidInputError,
    NotFoundError,
    NotOwnerError,
    UnauthorizedError,
)
from app.handlers.devices import get_device, register_device, set_device_active
from app.handlers.events import get_events
from app.handlers.ledger import (
    get_credit,
    get_owned_credit_ids,
    get_producer_total,
    get_total_credits,
    mint_credit,
    verify_credit,
)
from app.handlers.oracles import authorize_oracle
from app.models.credit import CreditStatus
from app.models.event import EventType

from conftest import ALICE, BOB, ORACLE


async def test_mint_creates_unverified_credit(ledger):
    credit = await mint_credit(ledger, "D1", 100, ALICE)

    assert credit.id == 0
    assert credit.producer == ALICE
    assert credit.current_owner == ALICE
    assert credit.co2_kg == 100
    assert credit.device_key == "D1"
    assert credit.is_verified is False
    assert credit.is_for_sale is False
    assert credit.price == 0
    assert credit.status == CreditStatus.UNVERIFIED

    assert (await get_device(ledger, "D1")).credits_generated == 1
    assert await get_owned_credit_ids(ledger, ALICE) == [0]
    assert await get_producer_total(ledger, ALICE) == 100

    events = await get_events(ledger, EventType.CREDIT_GENERATED)
    assert len(events) == 1
    assert events[0].entity_id == "0"


async def test_credit_ids_are_sequential_without_gaps(ledger):
    """Rejected mints do not consume ids."""
    ids = [(await mint_credit(ledger, "D1", 10, ALICE)).id]

    with pytest.raises(InvalidInputError):
        await mint_credit(ledger, "D1", 0, ALICE)
    with pytest.raises(NotOwnerError):
        await mint_credit(ledger, "D1", 10, BOB)

    for _ in range(4):
        ids.append((await mint_credit(ledger, "D1", 10, ALICE)).id)

    assert ids == [0, 1, 2, 3, 4]
    assert await get_total_credits(ledger) == 5
    assert (await get_device(ledger, "D1")).credits_generated == 5


async def test_concurrent_mints_get_distinct_ids(ledger, session_factory):
    async def mint_one(amount):
        async with session_factory() as session:
            credit = await mint_credit(session, "D1", amount, ALICE)
            return credit.id

    ids = await asyncio.gather(*(mint_one(amount) for amount in range(1, 11)))

    assert sorted(ids) == list(range(10))
    async with session_factory() as fresh:
        assert await get_total_credits(fresh) == 10
        assert (await get_device(fresh, "D1")).credits_generated == 10
        assert await get_producer_total(fresh, ALICE) == sum(range(1, 11))
        assert sorted(await get_owned_credit_ids(fresh, ALICE)) == list(range(10))


async def test_mint_requires_device_owner(ledger):
    with pytest.raises(NotOwnerError):
        await mint_credit(ledger, "D1", 100, BOB)

    assert await get_total_credits(ledger) == 0
    assert await get_owned_credit_ids(ledger, BOB) == []


async def test_mint_on_unknown_device(ledger):
    with pytest.raises(NotFoundError):
        await mint_credit(ledger, "missing", 100, ALICE)


@pytest.mark.parametrize("amount", [0, -5])
async def test_mint_rejects_non_positive_amount(ledger, amount):
    with pytest.raises(InvalidInputError):
        await mint_credit(ledger, "D1", amount, ALICE)

    assert await get_producer_total(ledger, ALICE) == 0


async def test_deactivation_keeps_earlier_credits(ledger):
    await mint_credit(ledger, "D1", 100, ALICE)
    await set_device_active(ledger, "D1", ALICE, False)

    credit = await get_credit(ledger, 0)
    assert credit.co2_kg == 100
    await verify_credit(ledger, 0, ORACLE)
    assert (await get_credit(ledger, 0)).is_verified is True


async def test_verify_by_oracle(ledger):
    await mint_credit(ledger, "D1", 100, ALICE)

    credit = await verify_credit(ledger, 0, ORACLE)

    assert credit.is_verified is True
    assert credit.status == CreditStatus.VERIFIED
    events = await get_events(ledger, EventType.CREDIT_VERIFIED)
    assert len(events) == 1


async def test_verify_twice_is_rejected(ledger):
    await mint_credit(ledger, "D1", 100, ALICE)
    await verify_credit(ledger, 0, ORACLE)

    with pytest.raises(AlreadyVerifiedError):
        await verify_credit(ledger, 0, ORACLE)

    assert (await get_credit(ledger, 0)).is_verified is True
    assert len(await get_events(ledger, EventType.CREDIT_VERIFIED)) == 1


async def test_verify_by_delegated_oracle(ledger):
    await mint_credit(ledger, "D1", 100, ALICE)
    await authorize_oracle(ledger, BOB, ORACLE)

    assert (await verify_credit(ledger, 0, BOB)).is_verified is True


@pytest.mark.parametrize("credit_id", [1, 99, -1])
async def test_verify_out_of_range(ledger, credit_id):
    await mint_credit(ledger, "D1", 100, ALICE)

    with pytest.raises(NotFoundError):
        await verify_credit(ledger, credit_id, ORACLE)


async def test_unauthorized_check_precedes_range_check(ledger):
    with pytest.raises(UnauthorizedError):
        await verify_credit(ledger, 42, BOB)


async def test_get_credit_out_of_range(ledger):
    with pytest.raises(NotFoundError):
        await get_credit(ledger, 0)


async def test_owned_ids_empty_for_unknown_identity(ledger):
    assert await get_owned_credit_ids(ledger, "nobody") == []
    assert await get_producer_total(ledger, "nobody") == 0


async def test_producer_totals_are_per_identity(ledger):
    await register_device(ledger, "D2", "wind", BOB)
    await mint_credit(ledger, "D1", 100, ALICE)
    await mint_credit(ledger, "D2", 30, BOB)
    await mint_credit(ledger, "D1", 25, ALICE)

    assert await get_producer_total(ledger, ALICE) == 125
    assert await get_producer_total(ledger, BOB) == 30
    assert set(await get_owned_credit_ids(ledger, ALICE)) == {0, 2}
    assert set(await get_owned_credit_ids(ledger, BOB)) == {1}
