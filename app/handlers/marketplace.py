"""
Marketplace handler - fixed-price listing and purchase of verified credits.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import ledger_transaction
from app.core.errors import (
    InsufficientPaymentError,
    InvalidInputError,
    NotForSaleError,
    NotOwnerError,
    NotVerifiedError,
    PaymentFailedError,
    SelfTradeError,
)
from app.handlers.events import record_event
from app.handlers.ledger import load_credit
from app.handlers.payments import PaymentGateway
from app.models.credit import CarbonCredit
from app.models.event import EventType
from app.models.listing import Listing
from app.models.ownership import OwnedCredit
from app.models.payout import PayoutKind, TradeReceipt
from app.utils.time import ledger_now

logger = logging.getLogger(__name__)


async def list_credit(
    session: AsyncSession,
    credit_id: int,
    price: int,
    caller: str
) -> CarbonCredit:
    """
    Offer a verified credit for sale at a fixed price.

    Listing an already listed credit changes its price.
    """
    async with ledger_transaction(session):
        credit = await load_credit(session, credit_id)
        if credit.current_owner != caller:
            raise NotOwnerError(f"{caller} does not own credit {credit_id}")
        if not credit.is_verified:
            raise NotVerifiedError(f"Credit {credit_id} is not verified")
        if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
            raise InvalidInputError("Price must be a positive whole number")

        now = ledger_now()
        credit.price = price
        credit.is_for_sale = True
        credit.updated_at = now

        listing = await session.get(Listing, credit_id)
        if listing is None:
            session.add(Listing(credit_id=credit_id, price=price, listed_at=now))
        else:
            listing.price = price
            listing.listed_at = now

        await record_event(
            session,
            EventType.CREDIT_LISTED,
            credit_id,
            {"id": credit_id, "price": price}
        )

    logger.info("Credit %s listed at %s by %s", credit_id, price, caller)
    return credit


async def purchase_credit(
    session: AsyncSession,
    credit_id: int,
    caller: str,
    payment_amount: int,
    gateway: Optional[PaymentGateway] = None
) -> TradeReceipt:
    """
    Buy a listed credit.

    Ownership, both owner indices, the listing and the payouts change in one
    transaction: the seller is paid the price and any overpayment goes back
    to the buyer. If a transfer or the commit fails nothing of the purchase
    is kept, and transfers that already settled are reversed.
    """
    gateway = gateway or PaymentGateway()
    settled = []

    try:
        async with ledger_transaction(session):
            credit = await load_credit(session, credit_id)
            if not credit.is_verified:
                raise NotVerifiedError(f"Credit {credit_id} is not verified")
            if not credit.is_for_sale:
                raise NotForSaleError(f"Credit {credit_id} is not for sale")
            if credit.current_owner == caller:
                raise SelfTradeError(f"{caller} already owns credit {credit_id}")
            if isinstance(payment_amount, bool) or not isinstance(payment_amount, int):
                raise InvalidInputError("Payment amount must be a whole number")
            if payment_amount < credit.price:
                raise InsufficientPaymentError(
                    f"Payment {payment_amount} is below the price {credit.price} of credit {credit_id}"
                )

            seller = credit.current_owner
            price = credit.price
            refund = payment_amount - price

            credit.current_owner = caller
            credit.is_for_sale = False
            credit.price = 0
            credit.updated_at = ledger_now()

            # Moves the id from the seller's index to the buyer's
            owned = await session.get(OwnedCredit, credit_id)
            if owned is None:
                session.add(OwnedCredit(credit_id=credit_id, owner=caller))
            else:
                owned.owner = caller

            listing = await session.get(Listing, credit_id)
            if listing is not None:
                await session.delete(listing)

            # Database errors must surface before any money moves
            await session.flush()

            transfers = [(seller, price, PayoutKind.SALE)]
            if refund > 0:
                transfers.append((caller, refund, PayoutKind.REFUND))
            for recipient, amount, kind in transfers:
                await gateway.pay(session, recipient, amount, credit_id, kind)
                settled.append((recipient, amount, kind))

            await record_event(
                session,
                EventType.CREDIT_TRADED,
                credit_id,
                {"id": credit_id, "seller": seller, "buyer": caller, "price": price}
            )
    except Exception:
        await _reverse_settled(gateway, credit_id, settled)
        raise

    logger.info("Credit %s sold by %s to %s for %s", credit_id, seller, caller, price)
    return TradeReceipt(
        credit_id=credit_id,
        seller=seller,
        buyer=caller,
        price=price,
        refund=refund
    )


async def _reverse_settled(gateway: PaymentGateway, credit_id: int, settled) -> None:
    """Undo the transfers of an aborted purchase, newest first."""
    for recipient, amount, kind in reversed(settled):
        try:
            await gateway.reverse(recipient, amount, credit_id, kind)
        except PaymentFailedError:
            logger.error(
                "Could not reverse %s of %s to %s for credit %s",
                kind.value, amount, recipient, credit_id
            )
