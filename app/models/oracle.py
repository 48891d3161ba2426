"""
Oracle model - identities allowed to verify credits.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from app.utils.time import utc_now


class Oracle(SQLModel, table=True):
    """Oracle authority table. Presence of a row means authorized; rows are never removed."""
    __tablename__ = "oracles"
    
    identity: str = Field(primary_key=True)
    authorized_by: Optional[str] = Field(
        default=None,
        description="Granting oracle, None for the initializer"
    )
    authorized_at: datetime = Field(default_factory=utc_now)


class OracleAuthorize(SQLModel):
    """Schema for authorizing a new oracle."""
    identity: str


class OracleStatus(SQLModel):
    identity: str
    is_authorized: bool
