"""
Ledger error kinds.

Every rejection is local and synchronous: the call that raised it changed
nothing. Each kind carries the HTTP status used by the API layer.
"""

from fastapi import status


class LedgerError(Exception):
    """Base class for all ledger rejections."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__.removesuffix("Error")


class InvalidInputError(LedgerError):
    """Malformed, missing or non-positive argument."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(LedgerError):
    """Unknown device key or out-of-range credit id."""
    status_code = status.HTTP_404_NOT_FOUND


class AlreadyExistsError(LedgerError):
    """Duplicate device registration."""
    status_code = status.HTTP_409_CONFLICT


class NotOwnerError(LedgerError):
    """Caller does not own the device or credit."""
    status_code = status.HTTP_403_FORBIDDEN


class UnauthorizedError(LedgerError):
    """Caller is not an authorized oracle."""
    status_code = status.HTTP_403_FORBIDDEN


class DeviceInactiveError(LedgerError):
    status_code = status.HTTP_409_CONFLICT


class AlreadyVerifiedError(LedgerError):
    status_code = status.HTTP_409_CONFLICT


class NotVerifiedError(LedgerError):
    status_code = status.HTTP_409_CONFLICT


class NotForSaleError(LedgerError):
    status_code = status.HTTP_409_CONFLICT


class SelfTradeError(LedgerError):
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientPaymentError(LedgerError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED


class PaymentFailedError(LedgerError):
    """The host value transfer failed; the whole purchase is rolled back."""
    status_code = status.HTTP_502_BAD_GATEWAY
