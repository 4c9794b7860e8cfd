"""
Ledger and dispatch constants.

All monetary values are expressed in the ledger's smallest unit
(1e-8 of the display unit).
"""

from __future__ import annotations

# Fractional digits of the display unit
DECIMALS = 8

# Default absolute fee for a send, in smallest units
DEFAULT_FEE = 10_000

# Broadcast attempts before giving up
BROADCAST_ATTEMPTS = 3

# Seconds between confirmation polls
CONFIRMATION_POLL_INTERVAL = 15.0

# Event names emitted by a pending transaction
EVENT_TRANSACTION_HASH = "transactionHash"
EVENT_CONFIRMATION = "confirmation"
