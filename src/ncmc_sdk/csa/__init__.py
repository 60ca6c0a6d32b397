"""
Common Service Area (CSA)
=========================

The 96-byte block readable by every NCMC terminal: general data, the last
validation, a 4-entry log history and 7 reserved bytes.

    >>> from ncmc_sdk.csa import CSAContainer
    >>> csa = CSAContainer.parse(raw, effective_date=28399680)
    >>> csa.history[0].card_balance
    20000
"""

from ncmc_sdk.csa.container import CSAContainer, CSAHistory
from ncmc_sdk.csa.records import CSAGeneral, LogEntry, ValidationRecord

__all__ = [
    "CSAContainer",
    "CSAHistory",
    "CSAGeneral",
    "LogEntry",
    "ValidationRecord",
]
