"""
Carbon credit model - one attested CO2 reduction and its sale state.
"""

from sqlmodel import SQLModel, Field
from datetime import datetime
from enum import Enum

from app.utils.time import utc_now


class CreditStatus(str, Enum):
    """Carbon credit status lifecycle."""
    UNVERIFIED = "UNVERIFIED"
    VERIFIED = "VERIFIED"
    LISTED = "LISTED"


class CarbonCreditBase(SQLModel):
    """Base carbon credit schema."""
    producer: str = Field(..., index=True, description="Identity that minted the credit")
    co2_kg: int = Field(..., description="CO2 reduced in kilograms", gt=0)
    device_key: str = Field(..., foreign_key="devices.device_key")
    is_verified: bool = Field(default=False)
    price: int = Field(default=0, ge=0, description="Sale price, 0 when not listed")
    is_for_sale: bool = Field(default=False)
    current_owner: str = Field(..., index=True)


class CarbonCredit(CarbonCreditBase, table=True):
    """Carbon credit database table. Ids are assigned by the ledger."""
    __tablename__ = "carbon_credits"
    
    id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status(self) -> CreditStatus:
        if self.is_for_sale:
            return CreditStatus.LISTED
        if self.is_verified:
            return CreditStatus.VERIFIED
        return CreditStatus.UNVERIFIED


class CarbonCreditMint(SQLModel):
    """Schema for minting a credit against a device."""
    device_key: str
    co2_kg: int


class CarbonCreditRead(CarbonCreditBase):
    """Schema for reading a carbon credit."""
    id: int
    status: CreditStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_credit(cls, credit: CarbonCredit) -> "CarbonCreditRead":
        return cls(**credit.model_dump(), status=credit.status)
