"""
OSA Record Definitions
======================

This module defines the data blocks of the Operator Service Area (OSA), the
96-byte area of an NCMC card reserved for one operator's own products.

OSA Layout
----------
    Offset  Size    Block
    ------  ----    -----
    0       7       General data (version, phone number, language, status)
    7       13      Last transaction record
    20      26      History (2 transaction records of 13 bytes)
    46      20      Trip pass 0
    66      20      Trip pass 1
    86      10      Zero padding

Trip passes use absolute 24-bit second timestamps; only the transaction
records are relative to the card effective date.

Copyright (c) 2026 NCMC SDK Contributors
"""

from dataclasses import dataclass, field

from ncmc_sdk.codec.fields import (
    check_range,
    decode_bcd,
    encode_bcd,
    pack_bits,
    pack_nibbles,
    pack_uint,
    require_length,
    unpack_bits,
    unpack_nibbles,
    unpack_uint,
)
from ncmc_sdk.codec.timebase import (
    TimedRecord,
    absolute_from_seconds,
    seconds_from_absolute,
)
from ncmc_sdk.codec.types import LanguageCode, ServiceStatus, TxnStatus
from ncmc_sdk.errors import FieldRangeError, InvalidArgumentError


# =============================================================================
# General Data
# =============================================================================

@dataclass
class OSAGeneral:
    """
    OSA general data (7 bytes).

    Structure:
        Byte 0:    [major (3 bits)][minor (3 bits)][patch (2 bits)]
        Bytes 1-5: Phone number, 10 BCD digits
        Byte 6:    [language (5 bits)][status (1 bit)][rfu (2 bits)]

    A stored phone number of all zeros means "no phone number" and reads
    back as an empty string.
    """
    major_version: int = 0
    minor_version: int = 0
    patch_version: int = 0
    phone_number: bytes = field(default_factory=lambda: bytes(5))
    language: int = LanguageCode.ENGLISH
    service_status: int = ServiceStatus.INACTIVE
    rfu: int = 0

    DATA_SIZE = 7
    PHONE_NUMBER_BYTES = 5
    PHONE_NUMBER_DIGITS = 10
    MAJOR_VERSION_MAX = 7
    MINOR_VERSION_MAX = 7
    PATCH_VERSION_MAX = 3
    RFU_MAX = 3

    def set_version(self, major: int, minor: int, patch: int) -> None:
        """
        Raises:
            FieldRangeError: If any component exceeds 7/7/3
        """
        check_range(major, self.MAJOR_VERSION_MAX, "major_version")
        check_range(minor, self.MINOR_VERSION_MAX, "minor_version")
        check_range(patch, self.PATCH_VERSION_MAX, "patch_version")
        self.major_version = major
        self.minor_version = minor
        self.patch_version = patch

    def set_phone_number(self, number: str) -> None:
        """
        Set the phone number from exactly 10 ASCII digits.

        Raises:
            InvalidFormatError: On wrong length or non-digit characters
        """
        self.phone_number = encode_bcd(number, self.PHONE_NUMBER_BYTES, "Phone number")

    def set_language(self, code: int) -> None:
        self.language = check_range(int(code), 0x1F, "language")

    def set_service_status(self, status: int) -> None:
        self.service_status = ServiceStatus(check_range(int(status), 1, "service_status"))

    def set_rfu(self, value: int) -> None:
        self.rfu = check_range(value, self.RFU_MAX, "rfu")

    def get_phone_number(self) -> str:
        """
        The phone number as 10 digits, or "" when every digit is zero.

        Nibbles above 9 can only come from a corrupted card. They are shown
        as hex letters ("1A00000000") rather than the ':' to '?' characters
        some terminal firmware prints for them.
        """
        digits = decode_bcd(self.phone_number)
        if digits == "0" * self.PHONE_NUMBER_DIGITS:
            return ""
        return digits

    def get_version_string(self) -> str:
        return f"{self.major_version}.{self.minor_version}.{self.patch_version}"

    def get_language_string(self) -> str:
        return LanguageCode.display_name(self.language)

    def get_service_status_string(self) -> str:
        return ServiceStatus(self.service_status).get_description()

    def to_bytes(self) -> bytes:
        if len(self.phone_number) != self.PHONE_NUMBER_BYTES:
            raise FieldRangeError(
                f"Phone number must be {self.PHONE_NUMBER_BYTES} BCD bytes",
                field="phone_number",
            )
        result = bytearray()
        result.append(pack_bits(
            [(self.major_version, 3), (self.minor_version, 3), (self.patch_version, 2)],
            "version",
        ))
        result.extend(self.phone_number)
        result.append(pack_bits(
            [(int(self.language), 5), (int(self.service_status), 1), (self.rfu, 2)],
            "language",
        ))
        return bytes(result)

    @classmethod
    def parse(cls, data: bytes) -> "OSAGeneral":
        require_length(data, cls.DATA_SIZE, "OSA general")
        major, minor, patch = unpack_bits(data[0], (3, 3, 2))
        language, status, rfu = unpack_bits(data[6], (5, 1, 2))
        return cls(
            major_version=major,
            minor_version=minor,
            patch_version=patch,
            phone_number=bytes(data[1:6]),
            language=language,
            service_status=ServiceStatus(status),
            rfu=rfu,
        )


# =============================================================================
# Transaction Record
# =============================================================================

@dataclass
class TransactionRecord(TimedRecord):
    """
    OSA transaction record (13 bytes), used for the last transaction and
    for each history slot.

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       1       Error code
        1       1       Product type
        2       3       Date/time offset (minutes from effective date)
        5       2       Station ID
        7       2       Fare
        9       3       Terminal ID (24-bit)
        12      1       [txn status (4 bits)][rfu (4 bits)]
    """
    error_code: int = 0
    product_type: int = 0
    station_id: int = 0
    fare: int = 0
    terminal_id: int = 0
    txn_status: int = TxnStatus.ENTRY
    rfu: int = 0

    DATA_SIZE = 13
    TERMINAL_ID_MAX = 0xFFFFFF
    RFU_MAX = 0x0F

    def set_error_code(self, code: int) -> None:
        self.error_code = check_range(code, 0xFF, "error_code")

    def set_product_type(self, product_type: int) -> None:
        self.product_type = check_range(product_type, 0xFF, "product_type")

    def set_station_id(self, station_id: int) -> None:
        self.station_id = check_range(station_id, 0xFFFF, "station_id")

    def set_fare(self, fare: int) -> None:
        self.fare = check_range(fare, 0xFFFF, "fare")

    def set_terminal_id(self, terminal_id: int) -> None:
        """
        Raises:
            FieldRangeError: If the ID exceeds 24 bits
        """
        self.terminal_id = check_range(terminal_id, self.TERMINAL_ID_MAX, "terminal_id")

    def set_txn_status(self, status: int) -> None:
        self.txn_status = check_range(int(status), 0x0F, "txn_status")

    def set_rfu(self, value: int) -> None:
        self.rfu = check_range(value, self.RFU_MAX, "rfu")

    def get_txn_status_string(self) -> str:
        return TxnStatus.display_name(self.txn_status)

    def get_terminal_id_string(self) -> str:
        return f"{self.terminal_id:06X}"

    def to_bytes(self) -> bytes:
        result = bytearray()
        result.extend(pack_uint(self.error_code, 1, "error_code"))
        result.extend(pack_uint(self.product_type, 1, "product_type"))
        result.extend(self._offset_bytes())
        result.extend(pack_uint(self.station_id, 2, "station_id"))
        result.extend(pack_uint(self.fare, 2, "fare"))
        result.extend(pack_uint(self.terminal_id, 3, "terminal_id"))
        result.append(pack_nibbles(int(self.txn_status), self.rfu, "status"))
        return bytes(result)

    @classmethod
    def parse(cls, data: bytes, effective_date: int) -> "TransactionRecord":
        require_length(data, cls.DATA_SIZE, "OSA transaction record")
        status, rfu = unpack_nibbles(data[12])
        return cls(
            effective_date=effective_date,
            error_code=data[0],
            product_type=data[1],
            date_and_time_offset=unpack_uint(data, 2, 3),
            station_id=unpack_uint(data, 5, 2),
            fare=unpack_uint(data, 7, 2),
            terminal_id=unpack_uint(data, 9, 3),
            txn_status=status,
            rfu=rfu,
        )


# =============================================================================
# Trip Pass
# =============================================================================

@dataclass
class TripPass:
    """
    OSA trip pass (20 bytes).

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       1       Pass ID
        1       3       Pass expiry (seconds since epoch)
        4       1       Priority
        5       2       Trips allotted
        7       2       Remaining trips
        9       2       Source ID
        11      2       Destination ID
        13      1       Flags
        14      1       Daily trip counter
        15      2       Daily trip indicator
        17      3       Start date/time (seconds since epoch)

    set_remaining_trips() checks against the trips_allotted value stored
    at the time of the call, so set the allotment first. TripPassBuilder
    enforces that order.
    """
    pass_id: int = 0
    pass_expiry: int = 0
    priority: int = 0
    trips_allotted: int = 0
    remaining_trips: int = 0
    source_id: int = 0
    destination_id: int = 0
    flags: int = 0
    daily_trip_counter: int = 0
    daily_trip_indicator: int = 0
    start_date_and_time: int = 0

    DATA_SIZE = 20

    def set_pass_id(self, pass_id: int) -> None:
        self.pass_id = check_range(pass_id, 0xFF, "pass_id")

    def set_pass_expiry(self, absolute_ms: int) -> None:
        """
        Raises:
            FieldRangeError: If absolute_ms // 1000 exceeds 0xFFFFFF
        """
        self.pass_expiry = seconds_from_absolute(absolute_ms, "pass_expiry")

    def set_priority(self, priority: int) -> None:
        self.priority = check_range(priority, 0xFF, "priority")

    def set_trips_allotted(self, trips: int) -> None:
        self.trips_allotted = check_range(trips, 0xFFFF, "trips_allotted")

    def set_remaining_trips(self, trips: int) -> None:
        """
        Raises:
            InvalidArgumentError: If trips exceeds the current trips_allotted
        """
        check_range(trips, 0xFFFF, "remaining_trips")
        if trips > self.trips_allotted:
            raise InvalidArgumentError(
                f"Remaining trips ({trips}) cannot be greater than "
                f"allotted trips ({self.trips_allotted})"
            )
        self.remaining_trips = trips

    def set_source_id(self, source_id: int) -> None:
        self.source_id = check_range(source_id, 0xFFFF, "source_id")

    def set_destination_id(self, destination_id: int) -> None:
        self.destination_id = check_range(destination_id, 0xFFFF, "destination_id")

    def set_flags(self, flags: int) -> None:
        self.flags = check_range(flags, 0xFF, "flags")

    def set_daily_trip_counter(self, count: int) -> None:
        self.daily_trip_counter = check_range(count, 0xFF, "daily_trip_counter")

    def set_daily_trip_indicator(self, indicator: int) -> None:
        self.daily_trip_indicator = check_range(indicator, 0xFFFF, "daily_trip_indicator")

    def set_start_date_and_time(self, absolute_ms: int) -> None:
        """
        Raises:
            FieldRangeError: If absolute_ms // 1000 exceeds 0xFFFFFF
        """
        self.start_date_and_time = seconds_from_absolute(absolute_ms, "start_date_and_time")

    def get_pass_expiry(self) -> int:
        """Pass expiry in milliseconds since epoch."""
        return absolute_from_seconds(self.pass_expiry)

    def get_start_date_and_time(self) -> int:
        """Start date/time in milliseconds since epoch."""
        return absolute_from_seconds(self.start_date_and_time)

    def has_flag(self, mask: int) -> bool:
        return bool(self.flags & mask)

    def to_bytes(self) -> bytes:
        result = bytearray()
        result.extend(pack_uint(self.pass_id, 1, "pass_id"))
        result.extend(pack_uint(self.pass_expiry, 3, "pass_expiry"))
        result.extend(pack_uint(self.priority, 1, "priority"))
        result.extend(pack_uint(self.trips_allotted, 2, "trips_allotted"))
        result.extend(pack_uint(self.remaining_trips, 2, "remaining_trips"))
        result.extend(pack_uint(self.source_id, 2, "source_id"))
        result.extend(pack_uint(self.destination_id, 2, "destination_id"))
        result.extend(pack_uint(self.flags, 1, "flags"))
        result.extend(pack_uint(self.daily_trip_counter, 1, "daily_trip_counter"))
        result.extend(pack_uint(self.daily_trip_indicator, 2, "daily_trip_indicator"))
        result.extend(pack_uint(self.start_date_and_time, 3, "start_date_and_time"))
        return bytes(result)

    @classmethod
    def parse(cls, data: bytes) -> "TripPass":
        require_length(data, cls.DATA_SIZE, "OSA trip pass")
        return cls(
            pass_id=data[0],
            pass_expiry=unpack_uint(data, 1, 3),
            priority=data[4],
            trips_allotted=unpack_uint(data, 5, 2),
            remaining_trips=unpack_uint(data, 7, 2),
            source_id=unpack_uint(data, 9, 2),
            destination_id=unpack_uint(data, 11, 2),
            flags=data[13],
            daily_trip_counter=data[14],
            daily_trip_indicator=unpack_uint(data, 15, 2),
            start_date_and_time=unpack_uint(data, 17, 3),
        )
