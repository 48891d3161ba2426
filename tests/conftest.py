"""Pytest configuration and fixtures for ledger tests."""

import pytest
import pytest_asyncio
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import app.models  # noqa: F401  registers tables on SQLModel.metadata
from app.core.errors import PaymentFailedError
from app.handlers.devices import register_device
from app.handlers.oracles import bootstrap_oracle
from app.handlers.payments import PaymentGateway

ORACLE = "oracle-admin"
ALICE = "alice"
BOB = "bob"


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh file-backed SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def ledger(session):
    """Session with the initial oracle bootstrapped and device D1 registered by alice."""
    await bootstrap_oracle(session, ORACLE)
    await register_device(session, "D1", "solar", ALICE)
    return session


class FailingGateway(PaymentGateway):
    """Gateway that declines the Nth transfer and every one after it."""

    def __init__(self, fail_on_call: int = 1):
        self.calls = 0
        self.fail_on_call = fail_on_call

    async def pay(self, session, recipient, amount, credit_id, kind):
        self.calls += 1
        if self.calls >= self.fail_on_call:
            raise PaymentFailedError(f"transfer to {recipient} declined")
        return await super().pay(session, recipient, amount, credit_id, kind)

