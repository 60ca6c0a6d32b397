"""
CSA Record Definitions
======================

This module defines the data blocks of the Common Service Area (CSA), the
96-byte area of an NCMC card that any compliant terminal can read.

CSA Layout
----------
    Offset  Size    Block
    ------  ----    -----
    0       2       General data (version, language)
    2       19      Validation data (last transaction)
    21      68      History (4 log entries of 17 bytes)
    89      7       Reserved (RFU)

The container and history live in csa.container; this module holds the
individual records.
"""

from dataclasses import dataclass, field

from ncmc_sdk.codec.fields import (
    check_range,
    pack_bits,
    pack_nibbles,
    pack_u20_filled,
    pack_uint,
    require_length,
    unpack_bits,
    unpack_nibbles,
    unpack_u20_filled,
    unpack_uint,
    U20_MAX,
)
from ncmc_sdk.codec.timebase import TimedRecord
from ncmc_sdk.codec.types import LanguageCode, Terminal, TxnStatus
from ncmc_sdk.errors import FieldRangeError


# =============================================================================
# General Data
# =============================================================================

@dataclass
class CSAGeneral:
    """
    CSA general data (2 bytes).

    Structure:
        Byte 0: [major (3 bits)][minor (3 bits)][patch (2 bits)]
        Byte 1: [language (5 bits)][rfu (3 bits)]

    Example:
        >>> gen = CSAGeneral()
        >>> gen.set_version(1, 2, 3)
        >>> gen.to_bytes().hex()
        '2b00'
    """
    major_version: int = 0
    minor_version: int = 0
    patch_version: int = 0
    language: int = LanguageCode.ENGLISH
    rfu: int = 0

    DATA_SIZE = 2
    MAJOR_VERSION_MAX = 7
    MINOR_VERSION_MAX = 7
    PATCH_VERSION_MAX = 3
    RFU_MAX = 7

    def set_version(self, major: int, minor: int, patch: int) -> None:
        """
        Set the data format version.

        Raises:
            FieldRangeError: If any component exceeds 7/7/3. No component is
                changed in that case.
        """
        check_range(major, self.MAJOR_VERSION_MAX, "major_version")
        check_range(minor, self.MINOR_VERSION_MAX, "minor_version")
        check_range(patch, self.PATCH_VERSION_MAX, "patch_version")
        self.major_version = major
        self.minor_version = minor
        self.patch_version = patch

    def set_language(self, code: int) -> None:
        """Set the language. All 32 five-bit codes are storable."""
        self.language = check_range(int(code), 0x1F, "language")

    def set_rfu(self, value: int) -> None:
        self.rfu = check_range(value, self.RFU_MAX, "rfu")

    def get_version_string(self) -> str:
        return f"{self.major_version}.{self.minor_version}.{self.patch_version}"

    def get_language_string(self) -> str:
        return LanguageCode.display_name(self.language)

    def to_bytes(self) -> bytes:
        version = pack_bits(
            [(self.major_version, 3), (self.minor_version, 3), (self.patch_version, 2)],
            "version",
        )
        language = pack_bits([(int(self.language), 5), (self.rfu, 3)], "language")
        return bytes([version, language])

    @classmethod
    def parse(cls, data: bytes) -> "CSAGeneral":
        require_length(data, cls.DATA_SIZE, "CSA general")
        major, minor, patch = unpack_bits(data[0], (3, 3, 2))
        language, rfu = unpack_bits(data[1], (5, 3))
        return cls(
            major_version=major,
            minor_version=minor,
            patch_version=patch,
            language=language,
            rfu=rfu,
        )


# =============================================================================
# Validation Data
# =============================================================================

@dataclass
class ValidationRecord(TimedRecord):
    """
    CSA validation data: the card's last transaction (19 bytes).

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       1       Error code
        1       1       Product type
        2       6       Terminal info
        8       3       Date/time offset (minutes from effective date)
        11      2       Fare amount
        13      2       Route number
        15      3       Service provider data
        18      1       [txn status (4 bits)][rfu (4 bits)]
    """
    error_code: int = 0
    product_type: int = 0
    terminal_info: Terminal = field(default_factory=Terminal)
    fare_amount: int = 0
    route_number: int = 0
    service_provider_data: int = 0
    txn_status: int = TxnStatus.ENTRY
    rfu: int = 0

    DATA_SIZE = 19
    SERVICE_DATA_MAX = 0xFFFFFF
    RFU_MAX = 0x0F

    def set_error_code(self, code: int) -> None:
        self.error_code = check_range(code, 0xFF, "error_code")

    def set_product_type(self, product_type: int) -> None:
        self.product_type = check_range(product_type, 0xFF, "product_type")

    def set_terminal_info(self, info: Terminal) -> None:
        self.terminal_info = Terminal(info.acquirer_id, info.operator_id, info.terminal_id)

    def set_fare_amount(self, amount: int) -> None:
        self.fare_amount = check_range(amount, 0xFFFF, "fare_amount")

    def set_route_number(self, number: int) -> None:
        self.route_number = check_range(number, 0xFFFF, "route_number")

    def set_service_provider_data(self, data: int) -> None:
        self.service_provider_data = check_range(
            data, self.SERVICE_DATA_MAX, "service_provider_data"
        )

    def set_txn_status(self, status: int) -> None:
        self.txn_status = check_range(int(status), 0x0F, "txn_status")

    def set_rfu(self, value: int) -> None:
        self.rfu = check_range(value, self.RFU_MAX, "rfu")

    def get_service_provider_data(self) -> str:
        """Service provider data as a 6-digit uppercase hex string."""
        return f"{self.service_provider_data:06X}"

    def get_txn_status_string(self) -> str:
        return TxnStatus.display_name(self.txn_status)

    def get_rfu_string(self) -> str:
        return f"{self.rfu:04b}"

    def to_bytes(self) -> bytes:
        result = bytearray()
        result.extend(pack_uint(self.error_code, 1, "error_code"))
        result.extend(pack_uint(self.product_type, 1, "product_type"))
        result.extend(self.terminal_info.to_bytes())
        result.extend(self._offset_bytes())
        result.extend(pack_uint(self.fare_amount, 2, "fare_amount"))
        result.extend(pack_uint(self.route_number, 2, "route_number"))
        result.extend(pack_uint(self.service_provider_data, 3, "service_provider_data"))
        result.append(pack_nibbles(int(self.txn_status), self.rfu, "status"))
        return bytes(result)

    @classmethod
    def parse(cls, data: bytes, effective_date: int) -> "ValidationRecord":
        require_length(data, cls.DATA_SIZE, "CSA validation")
        status, rfu = unpack_nibbles(data[18])
        return cls(
            effective_date=effective_date,
            error_code=data[0],
            product_type=data[1],
            terminal_info=Terminal.parse(bytes(data[2:8])),
            date_and_time_offset=unpack_uint(data, 8, 3),
            fare_amount=unpack_uint(data, 11, 2),
            route_number=unpack_uint(data, 13, 2),
            service_provider_data=unpack_uint(data, 15, 3),
            txn_status=status,
            rfu=rfu,
        )


# =============================================================================
# Log Entry
# =============================================================================

@dataclass
class LogEntry(TimedRecord):
    """
    One CSA history slot (17 bytes).

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       6       Terminal info
        6       3       Date/time offset (minutes from effective date)
        9       2       Transaction amount
        11      2       Transaction sequence number
        13      3       Card balance (20 bits) + filler nibble 0xF
        16      1       [txn status (4 bits)][rfu (4 bits)]

    Example:
        >>> entry = LogEntry(effective_date=28399680)
        >>> entry.set_card_balance(20000)
        >>> entry.to_bytes()[13:16].hex()
        '04e20f'
    """
    terminal_info: Terminal = field(default_factory=Terminal)
    txn_amount: int = 0
    txn_sq_no: int = 0
    card_balance: int = 0
    txn_status: int = TxnStatus.ENTRY
    rfu: int = 0

    DATA_SIZE = 17
    CARD_BALANCE_MAX = U20_MAX
    RFU_MAX = 0x0F

    def set_terminal_info(self, info: Terminal) -> None:
        self.terminal_info = Terminal(info.acquirer_id, info.operator_id, info.terminal_id)

    def set_txn_amount(self, amount: int) -> None:
        self.txn_amount = check_range(amount, 0xFFFF, "txn_amount")

    def set_txn_sq_no(self, sq_no: int) -> None:
        self.txn_sq_no = check_range(sq_no, 0xFFFF, "txn_sq_no")

    def set_card_balance(self, balance: int) -> None:
        """
        Raises:
            FieldRangeError: If the balance exceeds 20 bits (1,048,575)
        """
        if not 0 <= balance <= self.CARD_BALANCE_MAX:
            raise FieldRangeError(
                f"Card balance exceeds 20-bit limit: {balance}",
                field="card_balance", value=balance, maximum=self.CARD_BALANCE_MAX,
            )
        self.card_balance = balance

    def set_txn_status(self, status: int) -> None:
        self.txn_status = check_range(int(status), 0x0F, "txn_status")

    def set_rfu(self, value: int) -> None:
        self.rfu = check_range(value, self.RFU_MAX, "rfu")

    def get_txn_status_string(self) -> str:
        return TxnStatus.display_name(self.txn_status)

    def get_rfu_string(self) -> str:
        return f"{self.rfu:04b}"

    def to_bytes(self) -> bytes:
        result = bytearray()
        result.extend(self.terminal_info.to_bytes())
        result.extend(self._offset_bytes())
        result.extend(pack_uint(self.txn_amount, 2, "txn_amount"))
        result.extend(pack_uint(self.txn_sq_no, 2, "txn_sq_no"))
        result.extend(pack_u20_filled(self.card_balance, "card_balance"))
        result.append(pack_nibbles(int(self.txn_status), self.rfu, "status"))
        return bytes(result)

    @classmethod
    def parse(cls, data: bytes, effective_date: int) -> "LogEntry":
        require_length(data, cls.DATA_SIZE, "CSA log")
        status, rfu = unpack_nibbles(data[16])
        return cls(
            effective_date=effective_date,
            terminal_info=Terminal.parse(bytes(data[0:6])),
            date_and_time_offset=unpack_uint(data, 6, 3),
            txn_amount=unpack_uint(data, 9, 2),
            txn_sq_no=unpack_uint(data, 11, 2),
            card_balance=unpack_u20_filled(data, 13),
            txn_status=status,
            rfu=rfu,
        )
