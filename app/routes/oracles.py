"""
Oracle authority endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_session
from app.core.identity import get_caller
from app.models.oracle import Oracle, OracleAuthorize, OracleStatus
from app.handlers.oracles import authorize_oracle, get_oracles, is_authorized

router = APIRouter(prefix="/oracles", tags=["oracles"])


@router.post("/", response_model=Oracle, status_code=status.HTTP_201_CREATED)
async def authorize_oracle_endpoint(
    grant: OracleAuthorize,
    caller: str = Depends(get_caller),
    session: AsyncSession = Depends(get_session)
):
    """Authorize another identity to verify credits. Caller must be an oracle."""
    return await authorize_oracle(session, grant.identity, caller)


@router.get("", response_model=List[Oracle])
async def list_oracles_endpoint(
    session: AsyncSession = Depends(get_session)
):
    """List all authorized oracles."""
    return await get_oracles(session)


@router.get("/{identity}", response_model=OracleStatus)
async def oracle_status_endpoint(
    identity: str,
    session: AsyncSession = Depends(get_session)
):
    """Check whether an identity is an authorized oracle."""
    return OracleStatus(identity=identity, is_authorized=await is_authorized(session, identity))
