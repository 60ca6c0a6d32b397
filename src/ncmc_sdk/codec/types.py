"""
Shared NCMC Types
=================

Enumerations used by both the CSA and the OSA, and the 6-byte terminal
identity record embedded in CSA validation and log records.

Stored fields keep the raw integer read from the card rather than the enum
member, so a block with an unassigned code still decodes. The enums give
names to the known values.
"""

from dataclasses import dataclass
from enum import IntEnum
import re

from ncmc_sdk.codec.fields import check_range, pack_uint, require_length, unpack_uint
from ncmc_sdk.errors import InvalidFormatError


# =============================================================================
# Enumeration Types
# =============================================================================

class LanguageCode(IntEnum):
    """
    5-bit language codes.

    Codes 0b10111 to 0b11111 are reserved. They are legal storage values
    but have no display name.
    """
    ENGLISH = 0b00000
    HINDI = 0b00001
    BENGALI = 0b00010
    MARATHI = 0b00011
    TELUGU = 0b00100
    TAMIL = 0b00101
    GUJARATI = 0b00110
    URDU = 0b00111
    KANNADA = 0b01000
    ODIA = 0b01001
    MALAYALAM = 0b01010
    PUNJABI = 0b01011
    SANSKRIT = 0b01100
    ASSAMESE = 0b01101
    MAITHILI = 0b01110
    SANTALI = 0b01111
    KASHMIRI = 0b10000
    NEPALI = 0b10001
    SINDHI = 0b10010
    DOGRI = 0b10011
    KONKANI = 0b10100
    MANIPURI = 0b10101
    BODO = 0b10110
    RFU_START = 0b10111
    RFU_END = 0b11111

    @classmethod
    def is_reserved(cls, value: int) -> bool:
        """Check if a 5-bit value falls in the reserved range."""
        return cls.RFU_START <= value <= cls.RFU_END

    @classmethod
    def display_name(cls, value: int) -> str:
        """Get the language name, or "Unknown" for reserved or invalid codes."""
        if cls.is_reserved(value):
            return "Unknown"
        try:
            return cls(value).name.capitalize()
        except ValueError:
            return "Unknown"


class TxnStatus(IntEnum):
    """4-bit transaction status codes."""
    EXIT = 0x0
    ENTRY = 0x1
    PENALTY = 0x2
    ONETAP = 0x3

    @classmethod
    def display_name(cls, value: int) -> str:
        """Get the status name, or "UNKNOWN" for unassigned codes."""
        try:
            return cls(value).name
        except ValueError:
            return "UNKNOWN"


class ServiceStatus(IntEnum):
    """1-bit OSA service status."""
    INACTIVE = 0
    ACTIVE = 1

    def get_description(self) -> str:
        return "Active" if self is ServiceStatus.ACTIVE else "Inactive"


# =============================================================================
# Terminal
# =============================================================================

# Terminal ID as entered by operators: exactly 6 hex digits
TERMINAL_ID_PATTERN = re.compile(r"[0-9A-Fa-f]{6}")


@dataclass
class Terminal:
    """
    Terminal identification data (6 bytes).

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       1       Acquirer ID
        1       2       Operator ID (big-endian)
        3       3       Terminal ID (big-endian, 24-bit)

    Example:
        >>> term = Terminal()
        >>> term.set_acquirer_id(15)
        >>> term.set_operator_id(1025)
        >>> term.set_terminal_id("A1B2C3")
        >>> term.to_bytes().hex()
        '0f0401a1b2c3'
    """
    acquirer_id: int = 0
    operator_id: int = 0
    terminal_id: int = 0

    DATA_SIZE = 6
    TERMINAL_ID_MAX = 0xFFFFFF

    def set_acquirer_id(self, acquirer_id: int) -> None:
        self.acquirer_id = check_range(acquirer_id, 0xFF, "acquirer_id")

    def set_operator_id(self, operator_id: int) -> None:
        self.operator_id = check_range(operator_id, 0xFFFF, "operator_id")

    def set_terminal_id(self, hex_id: str) -> None:
        """
        Set the terminal ID from a 6-character hex string (case-insensitive).

        Raises:
            InvalidFormatError: If the string is not exactly 6 hex digits
        """
        if not isinstance(hex_id, str) or not TERMINAL_ID_PATTERN.fullmatch(hex_id):
            raise InvalidFormatError(
                f"Terminal ID must be exactly 6 hexadecimal characters, got {hex_id!r}"
            )
        self.terminal_id = int(hex_id, 16)

    def get_terminal_id(self) -> str:
        """Terminal ID as an uppercase, zero-padded 6-digit hex string."""
        return f"{self.terminal_id:06X}"

    def to_bytes(self) -> bytes:
        """Serialize to 6 bytes."""
        return (
            pack_uint(self.acquirer_id, 1, "acquirer_id")
            + pack_uint(self.operator_id, 2, "operator_id")
            + pack_uint(self.terminal_id, 3, "terminal_id")
        )

    @classmethod
    def parse(cls, data: bytes) -> "Terminal":
        """Deserialize 6 bytes of terminal data."""
        require_length(data, cls.DATA_SIZE, "Terminal")
        return cls(
            acquirer_id=data[0],
            operator_id=unpack_uint(data, 1, 2),
            terminal_id=unpack_uint(data, 3, 3),
        )
