"""
Operator Service Area (OSA)
===========================

The 96-byte operator block: general data with a BCD phone number, the last
transaction, a 2-entry transaction history and two trip passes.
"""

from ncmc_sdk.osa.container import OSAContainer, OSAHistory
from ncmc_sdk.osa.records import OSAGeneral, TransactionRecord, TripPass

__all__ = [
    "OSAContainer",
    "OSAHistory",
    "OSAGeneral",
    "TransactionRecord",
    "TripPass",
]
