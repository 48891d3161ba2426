"""
Carbon credit endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any

from app.core.database import get_session
from app.core.identity import get_caller
from app.models.credit import CarbonCreditMint, CarbonCreditRead
from app.handlers.ledger import (
    get_credit,
    get_owned_credit_ids,
    get_producer_total,
    get_total_credits,
    mint_credit,
    verify_credit
)

router = APIRouter(prefix="/credits", tags=["credits"])


@router.post("/", response_model=CarbonCreditRead, status_code=status.HTTP_201_CREATED)
async def mint_credit_endpoint(
    mint: CarbonCreditMint,
    caller: str = Depends(get_caller),
    session: AsyncSession = Depends(get_session)
):
    """Mint a credit for a CO2 reduction reported on the caller's device."""
    credit = await mint_credit(session, mint.device_key, mint.co2_kg, caller)
    return CarbonCreditRead.from_credit(credit)


@router.get("")
async def credit_count_endpoint(
    session: AsyncSession = Depends(get_session)
) -> Dict[str, Any]:
    """Total credits minted so far."""
    return {"total_credits": await get_total_credits(session)}


@router.get("/owners/{identity}")
async def owner_credits_endpoint(
    identity: str,
    session: AsyncSession = Depends(get_session)
) -> Dict[str, Any]:
    """
    Credits currently owned by an identity and the CO2 it produced.

    The id list is unordered.
    """
    return {
        "identity": identity,
        "credit_ids": await get_owned_credit_ids(session, identity),
        "produced_co2_kg": await get_producer_total(session, identity)
    }


@router.get("/{credit_id}", response_model=CarbonCreditRead)
async def get_credit_endpoint(
    credit_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Get a carbon credit by id."""
    return CarbonCreditRead.from_credit(await get_credit(session, credit_id))


@router.post("/{credit_id}/verify", response_model=CarbonCreditRead)
async def verify_credit_endpoint(
    credit_id: int,
    caller: str = Depends(get_caller),
    session: AsyncSession = Depends(get_session)
):
    """
    Verify a carbon credit. The caller must be an authorized oracle.

    A credit is verified once; verifying it again is rejected.
    """
    credit = await verify_credit(session, credit_id, caller)
    return CarbonCreditRead.from_credit(credit)
