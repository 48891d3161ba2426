"""
Per-owner credit index and produced-CO2 totals.
"""

from sqlmodel import SQLModel, Field


class OwnedCredit(SQLModel, table=True):
    """
    Owner index entry.

    Keyed by credit id, so every credit sits in exactly one owner's index.
    Reads of an owner's set carry no ordering guarantee.
    """
    __tablename__ = "owned_credits"
    
    credit_id: int = Field(primary_key=True, foreign_key="carbon_credits.id")
    owner: str = Field(..., index=True)


class ProducerTotal(SQLModel, table=True):
    """Running CO2 total of credits an identity minted. Never decreases."""
    __tablename__ = "producer_totals"
    
    identity: str = Field(primary_key=True)
    total_co2_kg: int = Field(default=0, ge=0)
