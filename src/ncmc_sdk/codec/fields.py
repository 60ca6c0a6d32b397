"""
Fixed-Width Field Primitives
============================

This module provides the integer and bit-field packing used by every NCMC
record. All multi-byte integers on the card are unsigned big-endian, and
sub-byte fields are packed MSB-first within their byte.

Contract
--------
- Encoding is partial: a value that does not fit its width raises
  FieldRangeError and nothing is produced.
- Decoding is total: any input bytes decode, excess bits are masked away.

Special Encodings
-----------------
**20-bit balance with filler nibble** (CSA log entries):

    Byte A: balance bits 19-12
    Byte B: balance bits 11-4
    Byte C: balance bits 3-0 in the high nibble, low nibble fixed at 0xF

The filler nibble is written on encode and ignored on decode.

**Packed BCD** (OSA phone number): two decimal digits per byte, the first
digit of each pair in the high nibble.
"""

from typing import Sequence

from ncmc_sdk.errors import (
    FieldRangeError,
    InvalidArgumentError,
    InvalidFormatError,
    InvalidLengthError,
)


U20_MAX = 0xFFFFF
U20_FILLER = 0x0F


def check_range(value: int, maximum: int, name: str = "value") -> int:
    """
    Validate that 0 <= value <= maximum.

    Args:
        value: The value to check
        maximum: Largest accepted value (inclusive)
        name: Field name used in the error message

    Returns:
        The value, unchanged

    Raises:
        FieldRangeError: If the value is negative or above maximum
    """
    if not 0 <= value <= maximum:
        raise FieldRangeError(
            f"{name} must be in the range [0, {maximum}], got {value}",
            field=name,
            value=value,
            maximum=maximum,
        )
    return value


def max_for_bits(bits: int) -> int:
    """Largest unsigned value representable in the given number of bits."""
    return (1 << bits) - 1


def require_length(data: bytes, size: int, what: str) -> None:
    """
    Ensure a buffer is exactly the size of the block being parsed.

    Raises:
        InvalidLengthError: If len(data) != size
    """
    if len(data) != size:
        raise InvalidLengthError(what, size, len(data))


def require_type(value, expected: type, what: str) -> None:
    """
    Ensure a child record is of the type its slot holds.

    Raises:
        InvalidArgumentError: If value is not an instance of expected
    """
    if not isinstance(value, expected):
        raise InvalidArgumentError(
            f"{what} must be a {expected.__name__}, got {type(value).__name__}"
        )


# =============================================================================
# Whole-Byte Integers
# =============================================================================

def pack_uint(value: int, size: int, name: str = "value") -> bytes:
    """
    Encode an unsigned integer as `size` big-endian bytes (1 to 4).

    Example:
        >>> pack_uint(0x0401, 2).hex()
        '0401'
        >>> pack_uint(0xA1B2C3, 3).hex()
        'a1b2c3'
    """
    check_range(value, max_for_bits(8 * size), name)
    return value.to_bytes(size, "big")


def unpack_uint(data: bytes, offset: int, size: int) -> int:
    """Decode `size` big-endian bytes starting at `offset`."""
    return int.from_bytes(data[offset:offset + size], "big")


# =============================================================================
# Sub-Byte Fields
# =============================================================================

def pack_bits(fields: Sequence[tuple[int, int]], name: str = "byte") -> int:
    """
    Pack (value, width) pairs MSB-first into a single byte.

    The widths must add up to 8. Each value is range-checked against its
    own width before anything is combined.

    Example:
        >>> pack_bits([(1, 3), (2, 3), (3, 2)])  # version 1.2.3
        43
    """
    total = sum(width for _, width in fields)
    if total != 8:
        raise ValueError(f"{name} fields cover {total} bits, expected 8")

    result = 0
    for index, (value, width) in enumerate(fields):
        check_range(value, max_for_bits(width), f"{name} field {index}")
        result = (result << width) | value
    return result


def unpack_bits(byte: int, widths: Sequence[int]) -> tuple[int, ...]:
    """
    Split a byte into MSB-first fields of the given widths.

    Example:
        >>> unpack_bits(0b00101011, (3, 3, 2))
        (1, 2, 3)
    """
    values = []
    shift = 8
    for width in widths:
        shift -= width
        values.append((byte >> shift) & max_for_bits(width))
    return tuple(values)


def pack_nibbles(high: int, low: int, name: str = "byte") -> int:
    """Pack two 4-bit values into a byte, high nibble first."""
    return pack_bits([(high, 4), (low, 4)], name)


def unpack_nibbles(byte: int) -> tuple[int, int]:
    """Split a byte into its (high, low) nibbles."""
    return (byte >> 4) & 0x0F, byte & 0x0F


# =============================================================================
# 20-Bit Balance With Filler Nibble
# =============================================================================

def pack_u20_filled(value: int, name: str = "value") -> bytes:
    """
    Encode a 20-bit value into 3 bytes, forcing the trailing nibble to 0xF.

    Example:
        >>> pack_u20_filled(20000).hex()  # 0x04E20
        '04e20f'
    """
    check_range(value, U20_MAX, name)
    return bytes([
        (value >> 12) & 0xFF,
        (value >> 4) & 0xFF,
        ((value & 0x0F) << 4) | U20_FILLER,
    ])


def unpack_u20_filled(data: bytes, offset: int = 0) -> int:
    """Decode a 20-bit value packed by pack_u20_filled(); the filler is ignored."""
    return (data[offset] << 12) | (data[offset + 1] << 4) | (data[offset + 2] >> 4)


# =============================================================================
# Packed BCD
# =============================================================================

def encode_bcd(digits: str, size: int, name: str = "value") -> bytes:
    """
    Encode a string of exactly 2*size ASCII decimal digits as packed BCD.

    Raises:
        InvalidFormatError: If the length is wrong or a non-digit is present
    """
    if len(digits) != size * 2:
        raise InvalidFormatError(
            f"{name} must be exactly {size * 2} digits, got {len(digits)}"
        )
    # str.isdigit() also accepts non-ASCII digits such as '²'
    if not all("0" <= ch <= "9" for ch in digits):
        raise InvalidFormatError(f"{name} must contain only digits 0-9: {digits!r}")

    return bytes(
        (int(digits[i]) << 4) | int(digits[i + 1])
        for i in range(0, len(digits), 2)
    )


def decode_bcd(data: bytes) -> str:
    """
    Decode packed BCD into a digit string.

    Nibbles above 9 appear as hex letters so corrupted data stays visible.
    """
    return "".join(f"{byte >> 4:X}{byte & 0x0F:X}" for byte in data)
