"""
Payout model - value transfers made by purchases.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from app.utils.time import utc_now


class PayoutKind(str, Enum):
    SALE = "SALE"
    REFUND = "REFUND"


class Payout(SQLModel, table=True):
    """Payout table - written in the same transaction as the purchase."""
    __tablename__ = "payouts"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    credit_id: int = Field(..., foreign_key="carbon_credits.id", index=True)
    recipient: str = Field(..., index=True)
    amount: int = Field(..., gt=0)
    kind: PayoutKind
    created_at: datetime = Field(default_factory=utc_now)


class PurchaseRequest(SQLModel):
    """Schema for purchasing a listed credit."""
    payment_amount: int


class TradeReceipt(SQLModel):
    """Outcome of a successful purchase."""
    credit_id: int
    seller: str
    buyer: str
    price: int
    refund: int = 0
