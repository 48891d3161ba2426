"""
Payment gateway handler - the host's "pay identity X amount Y" primitive.

Gateways run inside the purchase transaction. Raising PaymentFailedError
aborts the purchase and rolls back every ledger change made by it; transfers
already settled by then are handed back to the gateway to reverse.
"""

import logging
import httpx
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List, Optional

from app.core.config import get_settings
from app.core.constants import PAYMENT_REVERSAL_PATH, PAYMENT_TRANSFER_PATH
from app.core.errors import InvalidInputError, PaymentFailedError
from app.models.payout import Payout, PayoutKind
from app.utils.time import ledger_now

logger = logging.getLogger(__name__)


class PaymentGateway:
    """
    Ledger-local gateway.

    Records each transfer as a Payout row in the caller's session, so the
    transfer commits or rolls back together with the purchase.
    """

    async def pay(
        self,
        session: AsyncSession,
        recipient: str,
        amount: int,
        credit_id: int,
        kind: PayoutKind
    ) -> Payout:
        if amount <= 0:
            raise InvalidInputError("Transfer amount must be positive")
        payout = Payout(
            credit_id=credit_id,
            recipient=recipient,
            amount=amount,
            kind=kind,
            created_at=ledger_now()
        )
        session.add(payout)
        return payout

    async def reverse(
        self,
        recipient: str,
        amount: int,
        credit_id: int,
        kind: PayoutKind
    ) -> None:
        """Undo a transfer of an aborted purchase. Local payouts roll back with it."""
        return None


class HttpPaymentGateway(PaymentGateway):
    """
    Settles each transfer through an external payment service, then records it.

    Settled transfers cannot be rolled back with the database, so the
    purchase reverses them through the service when it aborts later on.
    Calls run while the purchase holds the write gate: every other ledger
    mutation waits up to `timeout` seconds per transfer.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _post(self, path: str, body: dict) -> None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(f"{self.base_url}{path}", json=body)
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.warning("Payment service call %s for %s failed: %s", path, body["reference"], e)
                raise PaymentFailedError(
                    f"{body['kind']} of {body['amount']} to {body['recipient']} failed: {e}"
                ) from e

    async def pay(
        self,
        session: AsyncSession,
        recipient: str,
        amount: int,
        credit_id: int,
        kind: PayoutKind
    ) -> Payout:
        await self._post(PAYMENT_TRANSFER_PATH, {
            "recipient": recipient,
            "amount": amount,
            "reference": f"credit-{credit_id}",
            "kind": kind.value
        })
        return await super().pay(session, recipient, amount, credit_id, kind)

    async def reverse(
        self,
        recipient: str,
        amount: int,
        credit_id: int,
        kind: PayoutKind
    ) -> None:
        await self._post(PAYMENT_REVERSAL_PATH, {
            "recipient": recipient,
            "amount": amount,
            "reference": f"credit-{credit_id}",
            "kind": kind.value
        })
        logger.info("Reversed %s of %s to %s for credit %s", kind.value, amount, recipient, credit_id)


def get_payment_gateway() -> PaymentGateway:
    """Dependency returning the configured gateway."""
    settings = get_settings()
    if settings.payment_service_url:
        return HttpPaymentGateway(settings.payment_service_url, timeout=settings.payment_timeout)
    return PaymentGateway()


async def get_payouts(
    session: AsyncSession,
    recipient: Optional[str] = None,
    credit_id: Optional[int] = None
) -> List[Payout]:
    """Get recorded payouts, optionally filtered by recipient or credit."""
    statement = select(Payout)

    if recipient:
        statement = statement.where(Payout.recipient == recipient)
    if credit_id is not None:
        statement = statement.where(Payout.credit_id == credit_id)

    statement = statement.order_by(Payout.id)

    result = await session.execute(statement)
    return list(result.scalars().all())
