"""
Ledger event model - append-only notification log with payload hashes.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from app.utils.time import utc_now


class EventType(str, Enum):
    """Notifications emitted once per successful mutating call."""
    DEVICE_REGISTERED = "device_registered"
    CREDIT_GENERATED = "credit_generated"
    CREDIT_VERIFIED = "credit_verified"
    CREDIT_LISTED = "credit_listed"
    CREDIT_TRADED = "credit_traded"
    ORACLE_AUTHORIZED = "oracle_authorized"


class LedgerEventBase(SQLModel):
    """Base ledger event schema."""
    event_type: EventType = Field(..., index=True)
    entity_id: str = Field(..., description="Device key, credit id or oracle identity")
    payload: str = Field(..., description="Canonical JSON of the event fields")
    payload_hash: str = Field(..., description="SHA-256 hash of the payload")


class LedgerEvent(LedgerEventBase, table=True):
    """Ledger event database table - append-only."""
    __tablename__ = "ledger_events"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)


class LedgerEventRead(LedgerEventBase):
    """Schema for reading a ledger event."""
    id: int
    created_at: datetime
