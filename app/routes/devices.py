"""
Device registry endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_session
from app.core.identity import get_caller
from app.models.device import DeviceActiveUpdate, DeviceCreate, DeviceRead
from app.handlers.devices import (
    get_device,
    get_devices_by_owner,
    register_device,
    set_device_active
)

router = APIRouter(prefix="/devices", tags=["devices"])


@router.post("/", response_model=DeviceRead, status_code=status.HTTP_201_CREATED)
async def register_device_endpoint(
    device: DeviceCreate,
    caller: str = Depends(get_caller),
    session: AsyncSession = Depends(get_session)
):
    """Register a device owned by the caller."""
    return await register_device(session, device.device_key, device.device_type, caller)


@router.get("", response_model=List[DeviceRead])
async def list_devices_endpoint(
    owner: str,
    session: AsyncSession = Depends(get_session)
):
    """List the devices registered by an owner."""
    return await get_devices_by_owner(session, owner)


@router.get("/{device_key}", response_model=DeviceRead)
async def get_device_endpoint(
    device_key: str,
    session: AsyncSession = Depends(get_session)
):
    """Get device by key."""
    return await get_device(session, device_key)


@router.patch("/{device_key}/active", response_model=DeviceRead)
async def set_device_active_endpoint(
    device_key: str,
    update: DeviceActiveUpdate,
    caller: str = Depends(get_caller),
    session: AsyncSession = Depends(get_session)
):
    """Activate or deactivate a device. Only its owner may do this."""
    return await set_device_active(session, device_key, caller, update.is_active)
