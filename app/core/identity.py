"""
Caller identity as authenticated by the host.
"""

from fastapi import Header
from typing import Optional

from app.core.constants import CALLER_HEADER
from app.core.errors import InvalidInputError


async def get_caller(caller: Optional[str] = Header(default=None, alias=CALLER_HEADER)) -> str:
    """Dependency returning the opaque caller identity."""
    if not caller or not caller.strip():
        raise InvalidInputError(f"Missing {CALLER_HEADER} header")
    return caller.strip()
