"""
Ledger constants.
"""

# Header carrying the caller identity authenticated by the host
CALLER_HEADER = "X-Caller-Id"

# First credit id handed out by the ledger
FIRST_CREDIT_ID = 0

# Payment service endpoint (relative to PAYMENT_SERVICE_URL)
PAYMENT_TRANSFER_PATH = "/transfers"

# Payment service endpoint undoing a settled transfer
PAYMENT_REVERSAL_PATH = "/reversals"
