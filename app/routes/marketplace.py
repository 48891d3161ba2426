"""
Marketplace endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_session
from app.core.identity import get_caller
from app.models.credit import CarbonCreditRead
from app.models.listing import ListingCreate, ListingRead
from app.models.payout import PurchaseRequest, TradeReceipt
from app.handlers.ledger import get_listed_credits
from app.handlers.marketplace import list_credit, purchase_credit
from app.handlers.payments import PaymentGateway, get_payment_gateway

router = APIRouter(prefix="/marketplace", tags=["marketplace"])


@router.get("/listings", response_model=List[ListingRead])
async def listings_endpoint(
    session: AsyncSession = Depends(get_session)
):
    """Credits for sale with their prices, in ascending id order."""
    return await get_listed_credits(session)


@router.post("/{credit_id}/listing", response_model=CarbonCreditRead)
async def list_credit_endpoint(
    credit_id: int,
    listing: ListingCreate,
    caller: str = Depends(get_caller),
    session: AsyncSession = Depends(get_session)
):
    """List a verified credit owned by the caller, or change its price."""
    credit = await list_credit(session, credit_id, listing.price, caller)
    return CarbonCreditRead.from_credit(credit)


@router.post("/{credit_id}/purchase", response_model=TradeReceipt)
async def purchase_credit_endpoint(
    credit_id: int,
    purchase: PurchaseRequest,
    caller: str = Depends(get_caller),
    session: AsyncSession = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway)
):
    """
    Buy a listed credit.

    The seller receives the price; any overpayment is refunded to the caller.
    """
    return await purchase_credit(session, credit_id, caller, purchase.payment_amount, gateway)
