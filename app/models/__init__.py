# SQLModel database models

from app.models.device import Device
from app.models.credit import CarbonCredit
from app.models.oracle import Oracle
from app.models.ownership import OwnedCredit, ProducerTotal
from app.models.listing import Listing
from app.models.payout import Payout
from app.models.event import LedgerEvent

__all__ = [
    "Device",
    "CarbonCredit",
    "Oracle",
    "OwnedCredit",
    "ProducerTotal",
    "Listing",
    "Payout",
    "LedgerEvent",
]
