"""Tests for the oracle authority set."""

import pytest

from app.core.errors import InvalidInputError, UnauthorizedError
from app.handlers.events import get_events
from app.handlers.oracles import authorize_oracle, bootstrap_oracle, get_oracles, is_authorized
from app.models.event import EventType

from conftest import ALICE, BOB, ORACLE


async def test_unknown_identity_is_not_authorized(session):
    assert await is_authorized(session, ALICE) is False
    assert await is_authorized(session, None) is False


async def test_bootstrap_authorizes_initializer(session):
    oracle = await bootstrap_oracle(session, ORACLE)

    assert oracle.authorized_by is None
    assert await is_authorized(session, ORACLE) is True


async def test_bootstrap_twice_keeps_one_grant(session):
    await bootstrap_oracle(session, ORACLE)
    await bootstrap_oracle(session, ORACLE)

    assert [o.identity for o in await get_oracles(session)] == [ORACLE]
    assert len(await get_events(session, EventType.ORACLE_AUTHORIZED)) == 1


async def test_authorized_identity_grants_transitively(session):
    await bootstrap_oracle(session, ORACLE)

    granted = await authorize_oracle(session, ALICE, ORACLE)
    assert granted.authorized_by == ORACLE

    # alice can now grant in turn
    await authorize_oracle(session, BOB, ALICE)
    assert await is_authorized(session, BOB) is True

    events = await get_events(session, EventType.ORACLE_AUTHORIZED)
    assert [e.entity_id for e in events] == [ORACLE, ALICE, BOB]


async def test_authorize_requires_oracle_caller(session):
    await bootstrap_oracle(session, ORACLE)

    with pytest.raises(UnauthorizedError):
        await authorize_oracle(session, BOB, ALICE)

    assert await is_authorized(session, BOB) is False


@pytest.mark.parametrize("identity", [None, "", "  "])
async def test_authorize_rejects_null_identity(session, identity):
    await bootstrap_oracle(session, ORACLE)

    with pytest.raises(InvalidInputError):
        await authorize_oracle(session, identity, ORACLE)


async def test_reauthorizing_is_a_no_op(session):
    await bootstrap_oracle(session, ORACLE)
    await authorize_oracle(session, ALICE, ORACLE)

    again = await authorize_oracle(session, ALICE, ORACLE)

    assert again.identity == ALICE
    assert len(await get_oracles(session)) == 2
    assert len(await get_events(session, EventType.ORACLE_AUTHORIZED)) == 2
