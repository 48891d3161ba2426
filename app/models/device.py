"""
Device model - a registered source of CO2 reduction claims.
"""

from sqlmodel import SQLModel, Field
from datetime import datetime

from app.utils.time import utc_now


class DeviceBase(SQLModel):
    """Base device schema."""
    device_key: str = Field(..., description="Caller-chosen unique device key")
    device_type: str = Field(..., description="Free-form device type label (e.g. 'solar')")


class Device(DeviceBase, table=True):
    """Device database table. Rows are never deleted."""
    __tablename__ = "devices"
    
    device_key: str = Field(primary_key=True)
    owner: str = Field(..., index=True, description="Registering identity, bound for life")
    is_active: bool = Field(default=True)
    credits_generated: int = Field(default=0, ge=0)
    registered_at: datetime = Field(default_factory=utc_now)


class DeviceCreate(DeviceBase):
    """Schema for registering a device."""
    pass


class DeviceActiveUpdate(SQLModel):
    """Schema for toggling a device's active flag."""
    is_active: bool


class DeviceRead(DeviceBase):
    """Schema for reading a device."""
    owner: str
    is_active: bool
    credits_generated: int
    registered_at: datetime
