"""
NCMC Codec Primitives
=====================

Building blocks shared by the CSA and OSA layers:

- **fields**: fixed-width integers, MSB-first bit-fields, the 20-bit balance
  encoding and packed BCD
- **timebase**: effective-date relative minutes and absolute 24-bit seconds
- **types**: language, status and terminal identity types
- **history**: the fixed-depth most-recent-first history ring
"""

from ncmc_sdk.codec.fields import (
    U20_MAX,
    check_range,
    decode_bcd,
    encode_bcd,
    max_for_bits,
    pack_bits,
    pack_nibbles,
    pack_u20_filled,
    pack_uint,
    require_length,
    require_type,
    unpack_bits,
    unpack_nibbles,
    unpack_u20_filled,
    unpack_uint,
)
from ncmc_sdk.codec.history import HistoryBuffer
from ncmc_sdk.codec.timebase import (
    MS_PER_MINUTE,
    MS_PER_SECOND,
    OFFSET_MAX,
    TimedRecord,
    absolute_from_offset,
    absolute_from_seconds,
    offset_from_absolute,
    seconds_from_absolute,
)
from ncmc_sdk.codec.types import LanguageCode, ServiceStatus, Terminal, TxnStatus

__all__ = [
    "U20_MAX",
    "check_range",
    "decode_bcd",
    "encode_bcd",
    "max_for_bits",
    "pack_bits",
    "pack_nibbles",
    "pack_u20_filled",
    "pack_uint",
    "require_length",
    "require_type",
    "unpack_bits",
    "unpack_nibbles",
    "unpack_u20_filled",
    "unpack_uint",
    "HistoryBuffer",
    "MS_PER_MINUTE",
    "MS_PER_SECOND",
    "OFFSET_MAX",
    "TimedRecord",
    "absolute_from_offset",
    "absolute_from_seconds",
    "offset_from_absolute",
    "seconds_from_absolute",
    "LanguageCode",
    "ServiceStatus",
    "Terminal",
    "TxnStatus",
]
