"""
Async database setup using SQLModel with aiosqlite.

All mutating ledger operations go through ``ledger_transaction`` so that each
one commits entirely or not at all, one at a time.
"""

import asyncio
import weakref
from contextlib import asynccontextmanager
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from typing import AsyncGenerator, AsyncIterator
from app.models import *

from app.core.config import get_settings

settings = get_settings()

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
)


AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession
)

# One write gate per event loop
_write_gates: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = (
    weakref.WeakKeyDictionary()
)


def get_write_gate() -> asyncio.Lock:
    """Return the write gate serializing ledger mutations on the running loop."""
    loop = asyncio.get_running_loop()
    gate = _write_gates.get(loop)
    if gate is None:
        gate = asyncio.Lock()
        _write_gates[loop] = gate
    return gate


@asynccontextmanager
async def ledger_transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run one logical ledger operation atomically.

    Holds the write gate for the whole operation, commits when the block
    exits normally and rolls back on any exception.
    """
    async with get_write_gate():
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise


async def init_db() -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session."""
    async with AsyncSessionLocal() as session:
        yield session
