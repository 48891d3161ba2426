"""
Report and aggregation handlers.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func
from typing import Dict, Any

from app.models.credit import CarbonCredit
from app.models.device import Device
from app.models.listing import Listing
from app.models.oracle import Oracle
from app.models.payout import Payout, PayoutKind
from app.handlers.devices import load_device


async def get_ledger_summary(session: AsyncSession) -> Dict[str, Any]:
    """
    Get ledger-wide aggregation summary.

    Returns:
        Dictionary with device, credit, listing, oracle and CO2 totals
    """
    device_count = (await session.execute(select(func.count(Device.device_key)))).scalar() or 0
    active_count = (await session.execute(
        select(func.count(Device.device_key)).where(Device.is_active == True)  # noqa: E712
    )).scalar() or 0

    credit_count = (await session.execute(select(func.count(CarbonCredit.id)))).scalar() or 0
    verified_count = (await session.execute(
        select(func.count(CarbonCredit.id)).where(CarbonCredit.is_verified == True)  # noqa: E712
    )).scalar() or 0
    listed_count = (await session.execute(select(func.count(Listing.credit_id)))).scalar() or 0
    oracle_count = (await session.execute(select(func.count(Oracle.identity)))).scalar() or 0

    total_co2 = (await session.execute(select(func.sum(CarbonCredit.co2_kg)))).scalar() or 0
    verified_co2 = (await session.execute(
        select(func.sum(CarbonCredit.co2_kg)).where(CarbonCredit.is_verified == True)  # noqa: E712
    )).scalar() or 0

    # Sales volume counts what sellers received, not refunds
    traded_volume = (await session.execute(
        select(func.sum(Payout.amount)).where(Payout.kind == PayoutKind.SALE)
    )).scalar() or 0

    return {
        "total_devices": device_count,
        "active_devices": active_count,
        "total_credits": credit_count,
        "verified_credits": verified_count,
        "unverified_credits": credit_count - verified_count,
        "listed_credits": listed_count,
        "oracles": oracle_count,
        "total_co2_kg": total_co2,
        "verified_co2_kg": verified_co2,
        "traded_volume": traded_volume
    }


async def get_device_auditor_view(
    session: AsyncSession,
    device_key: str
) -> Dict[str, Any]:
    """
    Get single-device "auditor view" with every credit minted on it.
    """
    device = await load_device(session, device_key)

    credits_statement = select(CarbonCredit).where(
        CarbonCredit.device_key == device_key
    ).order_by(CarbonCredit.id)

    credits_result = await session.execute(credits_statement)
    credits = list(credits_result.scalars().all())

    total_co2 = sum(c.co2_kg for c in credits)
    verified_co2 = sum(c.co2_kg for c in credits if c.is_verified)

    return {
        "device": {
            "device_key": device.device_key,
            "device_type": device.device_type,
            "owner": device.owner,
            "is_active": device.is_active,
            "credits_generated": device.credits_generated,
            "registered_at": device.registered_at.isoformat()
        },
        "credits_count": len(credits),
        "total_co2_kg": total_co2,
        "verified_co2_kg": verified_co2,
        "credits": [
            {
                "id": c.id,
                "co2_kg": c.co2_kg,
                "status": c.status.value,
                "current_owner": c.current_owner,
                "price": c.price,
                "created_at": c.created_at.isoformat(),
                "updated_at": c.updated_at.isoformat()
            }
            for c in credits
        ]
    }
