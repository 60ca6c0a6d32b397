"""
NCMC SDK - Transit Card Data Codec
==================================

This package encodes and decodes the two fixed 96-byte data areas of a
National Common Mobility Card (NCMC) used for transit fare payment:

- **CSA** (Common Service Area): readable by every NCMC terminal; holds
  the last validation and a 4-entry transaction log
- **OSA** (Operator Service Area): one operator's block; holds the last
  transaction, a 2-entry history and two trip passes

Raw card bytes are parsed into range-validated records and serialized back
bit-exactly. No card-reader I/O or cryptography is performed.

Main Components
---------------
- **codec**: field packing, effective-date time arithmetic, history ring
- **csa** / **osa**: record types and 96-byte containers
- **builder**: fluent construction of containers and trip passes
- **display**: human-readable dumps
- **cli**: the `ncmc` command-line tool

Quick Start
-----------
Parse a CSA block read from a card:
    >>> from ncmc_sdk import CSAContainer
    >>> csa = CSAContainer.parse(raw, effective_date=28399680)
    >>> csa.general.get_version_string()
    '1.2.3'

Build an OSA block:
    >>> from ncmc_sdk import OSABuilder
    >>> osa = OSABuilder(28300000).phone_number("7977192875").build()
    >>> len(osa.to_bytes())
    96

Effective Date
--------------
Transaction times are stored as minutes after the card effective date,
which is not written into either block. The same effective date must be
given when a block is parsed as when it was built.

Copyright (c) 2026 NCMC SDK Contributors
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from ncmc_sdk.errors import (
    NCMCError,
    FieldRangeError,
    InvalidFormatError,
    InvalidLengthError,
    InvalidArgumentError,
    EffectiveDateError,
    PreconditionError,
    InconsistentStateError,
)

from ncmc_sdk.codec import (
    HistoryBuffer,
    LanguageCode,
    ServiceStatus,
    Terminal,
    TimedRecord,
    TxnStatus,
)

from ncmc_sdk.csa import (
    CSAContainer,
    CSAGeneral,
    CSAHistory,
    LogEntry,
    ValidationRecord,
)

from ncmc_sdk.osa import (
    OSAContainer,
    OSAGeneral,
    OSAHistory,
    TransactionRecord,
    TripPass,
)

from ncmc_sdk.builder import CSABuilder, OSABuilder, TripPassBuilder, make_terminal
from ncmc_sdk.config import CodecConfig

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "NCMCError",
    "FieldRangeError",
    "InvalidFormatError",
    "InvalidLengthError",
    "InvalidArgumentError",
    "EffectiveDateError",
    "PreconditionError",
    "InconsistentStateError",
    # Shared types
    "HistoryBuffer",
    "LanguageCode",
    "ServiceStatus",
    "Terminal",
    "TimedRecord",
    "TxnStatus",
    # CSA
    "CSAContainer",
    "CSAGeneral",
    "CSAHistory",
    "LogEntry",
    "ValidationRecord",
    # OSA
    "OSAContainer",
    "OSAGeneral",
    "OSAHistory",
    "TransactionRecord",
    "TripPass",
    # Builders
    "CSABuilder",
    "OSABuilder",
    "TripPassBuilder",
    "make_terminal",
    # Configuration
    "CodecConfig",
]
