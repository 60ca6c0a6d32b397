"""
Card Time Encodings
===================

NCMC records store time in two different ways.

Relative Time (validation, log and transaction records)
-------------------------------------------------------
A 24-bit count of minutes since the card *effective date*, itself expressed
in minutes since the Unix epoch:

    offset = absolute_ms // 60000 - effective_date

The effective date is never written into the record. It must be supplied
identically when encoding and when decoding, otherwise the decoded absolute
time is silently wrong. 0xFFFFFF minutes gives roughly a 32-year horizon.

Absolute Time (OSA trip passes)
-------------------------------
A 24-bit count of seconds since the Unix epoch. The limit of 0xFFFFFF
seconds is still enforced even though real timestamps exceed it only in the
distant future.

All inputs are integer milliseconds since the Unix epoch (UTC).

Copyright (c) 2026 NCMC SDK Contributors
"""

from dataclasses import dataclass
from typing import Optional

from ncmc_sdk.codec.fields import pack_uint
from ncmc_sdk.errors import FieldRangeError, PreconditionError


MS_PER_SECOND = 1000
MS_PER_MINUTE = 60_000

OFFSET_MAX = 0xFFFFFF
ABSOLUTE_SECONDS_MAX = 0xFFFFFF


def offset_from_absolute(effective_date: int, absolute_ms: int) -> int:
    """
    Convert an absolute time to a minute offset from the effective date.

    Args:
        effective_date: Card effective date in minutes since epoch
        absolute_ms: Absolute time in milliseconds since epoch

    Returns:
        Offset in minutes, 0 to 0xFFFFFF

    Raises:
        FieldRangeError: If the time predates the effective date or the
            offset does not fit in 24 bits

    Example:
        >>> offset_from_absolute(28399680, 28399680 * 60000)
        0
    """
    if absolute_ms < 0:
        raise FieldRangeError(
            f"Absolute time must not be negative, got {absolute_ms}",
            field="date_and_time", value=absolute_ms,
        )
    if effective_date < 0:
        raise FieldRangeError(
            f"Effective date must not be negative, got {effective_date}",
            field="effective_date", value=effective_date,
        )

    minutes = absolute_ms // MS_PER_MINUTE
    if minutes < effective_date:
        raise FieldRangeError(
            "Transaction time cannot be before the card effective date "
            f"({minutes} < {effective_date} minutes)",
            field="date_and_time", value=minutes,
        )

    offset = minutes - effective_date
    if offset > OFFSET_MAX:
        raise FieldRangeError(
            "Transaction time is out of the 24-bit range from the effective date",
            field="date_and_time", value=offset, maximum=OFFSET_MAX,
        )
    return offset


def absolute_from_offset(effective_date: int, offset: int) -> int:
    """Convert a minute offset back to absolute milliseconds since epoch."""
    return (effective_date + offset) * MS_PER_MINUTE


def seconds_from_absolute(absolute_ms: int, name: str = "time") -> int:
    """
    Convert absolute milliseconds to the 24-bit seconds encoding.

    Raises:
        FieldRangeError: If the result exceeds 0xFFFFFF or the input is negative
    """
    if absolute_ms < 0:
        raise FieldRangeError(
            f"{name} must not be negative, got {absolute_ms}",
            field=name, value=absolute_ms,
        )
    seconds = absolute_ms // MS_PER_SECOND
    if seconds > ABSOLUTE_SECONDS_MAX:
        raise FieldRangeError(
            f"{name} exceeds the 24-bit storage limit ({seconds} seconds)",
            field=name, value=seconds, maximum=ABSOLUTE_SECONDS_MAX,
        )
    return seconds


def absolute_from_seconds(seconds: int) -> int:
    """Convert the 24-bit seconds encoding back to milliseconds."""
    return seconds * MS_PER_SECOND


# =============================================================================
# Timed Record Base
# =============================================================================

@dataclass
class TimedRecord:
    """
    Base for records that carry a time relative to the card effective date.

    The effective date is a required constructor argument. Passing None is
    allowed, but every time operation then raises PreconditionError until a
    record with a real effective date is used instead.

    Attributes:
        effective_date: Card effective date in minutes since epoch (not
            serialized). Read-only once the record is constructed.
        date_and_time_offset: Stored 24-bit minute offset
    """
    effective_date: Optional[int]
    date_and_time_offset: int = 0

    def __setattr__(self, name: str, value) -> None:
        if name == "effective_date" and "effective_date" in self.__dict__:
            raise AttributeError(
                f"{type(self).__name__}.effective_date is fixed at construction"
            )
        super().__setattr__(name, value)

    def _require_effective_date(self, action: str) -> int:
        if self.effective_date is None:
            raise PreconditionError(
                f"Card effective date must be set before {action}"
            )
        return self.effective_date

    def set_date_and_time(self, absolute_ms: int) -> None:
        """
        Store an absolute time as an offset from the effective date.

        Raises:
            PreconditionError: If the record has no effective date
            FieldRangeError: If the time is before the effective date or too far after it
        """
        effective_date = self._require_effective_date("setting the transaction time")
        self.date_and_time_offset = offset_from_absolute(effective_date, absolute_ms)

    def get_date_and_time(self) -> int:
        """Absolute transaction time in milliseconds since epoch."""
        effective_date = self._require_effective_date("reading the transaction time")
        return absolute_from_offset(effective_date, self.date_and_time_offset)

    def get_card_effective_date(self) -> int:
        """Card effective date in minutes since epoch."""
        return self._require_effective_date("reading the effective date")

    def _offset_bytes(self) -> bytes:
        return pack_uint(self.date_and_time_offset, 3, "date_and_time_offset")
