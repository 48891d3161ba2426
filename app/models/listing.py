"""
Listing index - credits currently offered for sale.
"""

from sqlmodel import SQLModel, Field
from datetime import datetime

from app.utils.time import utc_now


class Listing(SQLModel, table=True):
    """Listing table, kept in step with the credit's for-sale flag."""
    __tablename__ = "listings"
    
    credit_id: int = Field(primary_key=True, foreign_key="carbon_credits.id")
    price: int = Field(..., gt=0)
    listed_at: datetime = Field(default_factory=utc_now)


class ListingCreate(SQLModel):
    """Schema for listing a credit."""
    price: int


class ListingRead(SQLModel):
    credit_id: int
    price: int
