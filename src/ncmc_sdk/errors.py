"""
NCMC SDK Error Hierarchy
========================

This module defines the exception hierarchy for the NCMC card codec.
All exceptions inherit from NCMCError, allowing callers to catch every
codec failure with a single except clause if desired.

Exception Hierarchy
-------------------
NCMCError (base)
├── FieldRangeError - value does not fit its bit width or logical maximum
├── InvalidFormatError - malformed text input (hex terminal ID, BCD phone)
├── InvalidLengthError - byte buffer is not the exact size of the block
├── InvalidArgumentError - cross-field rule broken or wrong record type
└── EffectiveDateError (card effective date problems)
    ├── PreconditionError - time operation before the effective date is known
    └── InconsistentStateError - child and owner disagree on the effective date

Every error is raised synchronously by the setter or parse call that
received the bad input. A failing setter never leaves the record partially
modified.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class NCMCError(Exception):
    """
    Base exception for all NCMC SDK errors.

        try:
            csa = CSAContainer.parse(raw, effective_date)
        except NCMCError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Field Validation Exceptions
# =============================================================================

class FieldRangeError(NCMCError):
    """
    A numeric value exceeds the range of the field it is stored in.

    Raised for version components, RFU bits, balances, 24-bit identifiers,
    time offsets that overflow 24 bits, and times before the effective date.

    Attributes:
        field: Name of the offending field (optional)
        value: The rejected value (optional)
        maximum: Largest value the field accepts (optional)
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[int] = None,
        maximum: Optional[int] = None,
    ):
        self.field = field
        self.value = value
        self.maximum = maximum
        super().__init__(message)


class InvalidFormatError(NCMCError):
    """
    A text input does not match the required format.

    Raised when:
    - A terminal ID is not exactly six hexadecimal characters
    - A phone number is not exactly ten ASCII decimal digits
    """
    pass


class InvalidLengthError(NCMCError):
    """
    A byte buffer handed to a parse call has the wrong size.

    Attributes:
        expected: Required number of bytes
        actual: Number of bytes received
    """

    def __init__(self, what: str, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{what} data must be exactly {expected} bytes, got {actual}"
        )


class InvalidArgumentError(NCMCError):
    """
    An argument is rejected by a rule beyond its own value range.

    Raised for a trip pass whose remaining trips would exceed the trips
    allotted, and for a child record of the wrong type handed to a
    container or history buffer.
    """
    pass


# =============================================================================
# Effective Date Exceptions
# =============================================================================

class EffectiveDateError(NCMCError):
    """Base exception for card effective date problems."""
    pass


class PreconditionError(EffectiveDateError):
    """
    A time-dependent operation was called before the effective date was set.

    Relative timestamps are meaningless without the card effective date,
    so both encoding and decoding them require it.
    """
    pass


class InconsistentStateError(EffectiveDateError):
    """
    A child record or buffer carries a different effective date than its owner.

    Raised when assigning a validation record or history buffer into a
    container, or a log entry into a history buffer.
    """

    def __init__(self, what: str, expected: Optional[int], actual: Optional[int]):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{what} effective date {actual} does not match {expected}"
        )
