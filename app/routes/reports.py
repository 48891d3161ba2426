"""
Report and aggregation endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any, List, Optional

from app.core.database import get_session
from app.models.event import EventType, LedgerEventRead
from app.models.payout import Payout
from app.handlers.events import get_events
from app.handlers.payments import get_payouts
from app.handlers.reports import get_device_auditor_view, get_ledger_summary

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary")
async def ledger_summary_endpoint(
    session: AsyncSession = Depends(get_session)
) -> Dict[str, Any]:
    """
    Get ledger-wide aggregation summary.

    Returns:
        - total_devices / active_devices
        - total_credits / verified_credits / unverified_credits / listed_credits
        - oracles
        - total_co2_kg / verified_co2_kg
        - traded_volume
    """
    return await get_ledger_summary(session)


@router.get("/devices/{device_key}")
async def device_auditor_view_endpoint(
    device_key: str,
    session: AsyncSession = Depends(get_session)
) -> Dict[str, Any]:
    """Get single-device "auditor view" with every credit minted on it."""
    return await get_device_auditor_view(session, device_key)


@router.get("/events", response_model=List[LedgerEventRead])
async def events_endpoint(
    event_type: Optional[EventType] = None,
    after_id: int = 0,
    limit: int = 100,
    session: AsyncSession = Depends(get_session)
):
    """Ledger notifications in emission order."""
    return await get_events(session, event_type, after_id, limit)


@router.get("/payouts", response_model=List[Payout])
async def payouts_endpoint(
    recipient: Optional[str] = None,
    credit_id: Optional[int] = None,
    session: AsyncSession = Depends(get_session)
):
    """Value transfers made by purchases."""
    return await get_payouts(session, recipient, credit_id)
