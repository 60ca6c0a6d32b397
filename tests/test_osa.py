"""
OSA Unit Tests
==============

Tests for the Operator Service Area records and the 96-byte container.
"""

import pytest

from ncmc_sdk.codec.types import LanguageCode, ServiceStatus
from ncmc_sdk.csa import CSAGeneral, CSAHistory, LogEntry, ValidationRecord
from ncmc_sdk.errors import (
    FieldRangeError,
    InconsistentStateError,
    InvalidArgumentError,
    InvalidFormatError,
    InvalidLengthError,
)
from ncmc_sdk.osa import (
    OSAContainer,
    OSAGeneral,
    OSAHistory,
    TransactionRecord,
    TripPass,
)


EFFECTIVE_DATE = 28300000


# =============================================================================
# General Data
# =============================================================================

class TestOSAGeneral:
    """Tests for the 7-byte OSA general block."""

    def test_phone_number_bcd(self):
        gen = OSAGeneral()
        gen.set_phone_number("1234567890")
        data = gen.to_bytes()
        assert data[1] == 0x12
        assert data[2] == 0x34
        assert data[5] == 0x90
        assert gen.get_phone_number() == "1234567890"

    def test_empty_phone_number(self):
        """An all-zero phone number reads back as an empty string."""
        assert OSAGeneral().get_phone_number() == ""
        gen = OSAGeneral()
        gen.set_phone_number("0000000000")
        assert gen.get_phone_number() == ""

    @pytest.mark.parametrize("bad", ["123", "12345678901", "12345abcde", "+911234567"])
    def test_invalid_phone_number(self, bad):
        with pytest.raises(InvalidFormatError):
            OSAGeneral().set_phone_number(bad)

    def test_last_byte_layout(self):
        gen = OSAGeneral()
        gen.set_language(LanguageCode.TAMIL)
        gen.set_service_status(ServiceStatus.ACTIVE)
        gen.set_rfu(2)
        assert gen.to_bytes()[6] == (5 << 3) | (1 << 2) | 2

    def test_status_string(self):
        gen = OSAGeneral()
        assert gen.get_service_status_string() == "Inactive"
        gen.set_service_status(ServiceStatus.ACTIVE)
        assert gen.get_service_status_string() == "Active"

    def test_rfu_range(self):
        with pytest.raises(FieldRangeError):
            OSAGeneral().set_rfu(4)

    def test_version_range(self):
        with pytest.raises(FieldRangeError):
            OSAGeneral().set_version(0, 0, 4)

    def test_corrupt_phone_digit_shown_as_hex(self):
        """Nibbles above 9 read back as hex letters."""
        gen = OSAGeneral.parse(bytes([0x00, 0x1A, 0x00, 0x00, 0x00, 0x00, 0x00]))
        assert gen.get_phone_number() == "1A00000000"

    def test_round_trip(self):
        gen = OSAGeneral()
        gen.set_version(2, 0, 1)
        gen.set_phone_number("7977192875")
        gen.set_service_status(ServiceStatus.ACTIVE)
        parsed = OSAGeneral.parse(gen.to_bytes())
        assert parsed == gen
        assert parsed.get_version_string() == "2.0.1"
        assert parsed.get_phone_number() == "7977192875"


# =============================================================================
# Transaction Record
# =============================================================================

class TestTransactionRecord:
    """Tests for the 13-byte transaction record."""

    def test_layout(self):
        record = TransactionRecord(EFFECTIVE_DATE)
        record.set_error_code(1)
        record.set_product_type(2)
        record.set_date_and_time((EFFECTIVE_DATE + 0x010203) * 60_000)
        record.set_station_id(505)
        record.set_fare(50)
        record.set_terminal_id(0xA1B2C3)
        record.set_txn_status(3)

        data = record.to_bytes()
        assert len(data) == 13
        assert data == bytes([
            0x01, 0x02,
            0x01, 0x02, 0x03,
            0x01, 0xF9,
            0x00, 0x32,
            0xA1, 0xB2, 0xC3,
            0x30,
        ])

    def test_terminal_id_range(self):
        with pytest.raises(FieldRangeError):
            TransactionRecord(EFFECTIVE_DATE).set_terminal_id(0x1000000)

    def test_round_trip(self):
        record = TransactionRecord(EFFECTIVE_DATE)
        record.set_date_and_time(1735689600000)
        record.set_station_id(505)
        parsed = TransactionRecord.parse(record.to_bytes(), EFFECTIVE_DATE)
        assert parsed == record
        assert parsed.get_date_and_time() == 1735689600000
        assert parsed.get_terminal_id_string() == "000000"


# =============================================================================
# Trip Pass
# =============================================================================

class TestTripPass:
    """Tests for the 20-byte trip pass."""

    def test_expiry_encoding(self):
        """1,000,000 seconds is stored as 0F 42 40."""
        trip_pass = TripPass()
        trip_pass.set_pass_expiry(1_000_000_000)
        assert trip_pass.to_bytes()[1:4] == bytes([0x0F, 0x42, 0x40])
        assert trip_pass.get_pass_expiry() == 1_000_000_000

    def test_present_day_expiry_rejected(self):
        with pytest.raises(FieldRangeError):
            TripPass().set_pass_expiry(1735689600000)

    def test_remaining_at_allotted(self):
        trip_pass = TripPass()
        trip_pass.set_trips_allotted(50)
        trip_pass.set_remaining_trips(50)
        assert trip_pass.remaining_trips == 50

    def test_remaining_above_allotted(self):
        trip_pass = TripPass()
        trip_pass.set_trips_allotted(50)
        with pytest.raises(InvalidArgumentError):
            trip_pass.set_remaining_trips(51)
        assert trip_pass.remaining_trips == 0

    def test_remaining_checks_current_allotment(self):
        """Remaining trips must be set after the allotment."""
        with pytest.raises(InvalidArgumentError):
            TripPass().set_remaining_trips(1)

    def test_start_date_and_time(self):
        trip_pass = TripPass()
        trip_pass.set_start_date_and_time(15552000000)
        assert trip_pass.start_date_and_time == 15552000
        assert trip_pass.get_start_date_and_time() == 15552000000

    def test_flags(self):
        trip_pass = TripPass()
        trip_pass.set_flags(0b1000_0001)
        assert trip_pass.has_flag(0x01)
        assert not trip_pass.has_flag(0x02)

    def test_round_trip(self):
        trip_pass = TripPass()
        trip_pass.set_pass_id(101)
        trip_pass.set_pass_expiry(15552000000)
        trip_pass.set_priority(2)
        trip_pass.set_trips_allotted(40)
        trip_pass.set_remaining_trips(35)
        trip_pass.set_source_id(12)
        trip_pass.set_destination_id(34)
        trip_pass.set_daily_trip_counter(3)
        trip_pass.set_daily_trip_indicator(0xBEEF)
        parsed = TripPass.parse(trip_pass.to_bytes())
        assert parsed == trip_pass

    def test_parse_wrong_length(self):
        with pytest.raises(InvalidLengthError):
            TripPass.parse(bytes(19))


# =============================================================================
# Container
# =============================================================================

class TestOSAContainer:
    """Tests for the 96-byte OSA container."""

    def test_offsets(self):
        assert OSAContainer.TRANSACTION_OFFSET == 7
        assert OSAContainer.HISTORY_OFFSET == 20
        assert OSAContainer.TRIP_PASS_OFFSET == 46
        assert OSAContainer.PADDING_OFFSET == 86

    def test_serialized_size_and_padding(self):
        data = OSAContainer(EFFECTIVE_DATE).to_bytes()
        assert len(data) == 96
        assert data[86:] == bytes(10)

    def test_round_trip(self):
        original = OSAContainer(EFFECTIVE_DATE)
        original.general.set_phone_number("7977192875")
        original.get_trip_pass(0).set_trips_allotted(40)
        original.get_trip_pass(0).set_remaining_trips(35)

        data = original.to_bytes()
        assert len(data) == 96
        assert OSAContainer.parse(data, EFFECTIVE_DATE) == original

    def test_full_round_trip(self):
        original = OSAContainer(EFFECTIVE_DATE)
        original.general.set_version(2, 0, 1)
        original.transaction.set_date_and_time(1735689600000)
        original.transaction.set_station_id(505)
        record = TransactionRecord(EFFECTIVE_DATE)
        record.set_fare(50)
        original.history.add_record(record)
        trip_pass = TripPass()
        trip_pass.set_pass_id(7)
        original.set_trip_pass(trip_pass, 1)

        parsed = OSAContainer.parse(original.to_bytes(), EFFECTIVE_DATE)
        assert parsed == original
        assert parsed.history[0].fare == 50
        assert parsed.get_trip_pass(1).pass_id == 7
        assert parsed.to_bytes() == original.to_bytes()

    def test_trip_pass_slot_offset(self):
        osa = OSAContainer(EFFECTIVE_DATE)
        trip_pass = TripPass()
        trip_pass.set_pass_id(0x42)
        osa.set_trip_pass(trip_pass, 1)
        assert osa.to_bytes()[66] == 0x42

    @pytest.mark.parametrize("index", [-1, 2])
    def test_trip_pass_index(self, index):
        osa = OSAContainer(EFFECTIVE_DATE)
        with pytest.raises(FieldRangeError):
            osa.get_trip_pass(index)
        with pytest.raises(FieldRangeError):
            osa.set_trip_pass(TripPass(), index)

    def test_set_trip_pass_copies(self):
        osa = OSAContainer(EFFECTIVE_DATE)
        trip_pass = TripPass()
        osa.set_trip_pass(trip_pass, 0)
        trip_pass.set_pass_id(9)
        assert osa.get_trip_pass(0).pass_id == 0

    def test_set_transaction_mismatch(self):
        osa = OSAContainer(EFFECTIVE_DATE)
        with pytest.raises(InconsistentStateError):
            osa.set_validation(TransactionRecord(EFFECTIVE_DATE + 1))
        with pytest.raises(InconsistentStateError):
            osa.transaction = TransactionRecord(None)

    def test_set_history_mismatch(self):
        osa = OSAContainer(EFFECTIVE_DATE)
        with pytest.raises(InconsistentStateError):
            osa.set_history(OSAHistory(EFFECTIVE_DATE - 1))

    def test_setters_reject_wrong_record_types(self):
        """CSA records never fit OSA slots, even with the same effective date."""
        osa = OSAContainer(EFFECTIVE_DATE)
        osa.transaction.set_fare(50)
        before = osa.to_bytes()

        with pytest.raises(InvalidArgumentError):
            osa.set_transaction(ValidationRecord(EFFECTIVE_DATE))
        with pytest.raises(InvalidArgumentError):
            osa.set_validation(ValidationRecord(EFFECTIVE_DATE))
        with pytest.raises(InvalidArgumentError):
            osa.set_history(CSAHistory(EFFECTIVE_DATE))
        with pytest.raises(InvalidArgumentError):
            osa.general = CSAGeneral()
        with pytest.raises(InvalidArgumentError):
            osa.set_trip_pass(TransactionRecord(EFFECTIVE_DATE), 0)

        assert osa.to_bytes() == before

    def test_history_rejects_log_entry(self):
        osa = OSAContainer(EFFECTIVE_DATE)
        with pytest.raises(InvalidArgumentError):
            osa.history.add_record(LogEntry(EFFECTIVE_DATE))
        assert osa.history.valid_count == 0
        assert len(osa.to_bytes()) == 96

    def test_child_effective_date_is_read_only(self):
        osa = OSAContainer(EFFECTIVE_DATE)
        with pytest.raises(AttributeError):
            osa.transaction.effective_date = EFFECTIVE_DATE + 1
        with pytest.raises(AttributeError):
            osa.history.effective_date = EFFECTIVE_DATE + 1
        assert osa.transaction.get_card_effective_date() == EFFECTIVE_DATE

    def test_padding_ignored_on_parse(self):
        data = bytearray(OSAContainer(EFFECTIVE_DATE).to_bytes())
        data[90] = 0xFF
        parsed = OSAContainer.parse(bytes(data), EFFECTIVE_DATE)
        assert parsed.to_bytes()[86:] == bytes(10)

    @pytest.mark.parametrize("size", [0, 86, 97])
    def test_parse_wrong_length(self, size):
        with pytest.raises(InvalidLengthError):
            OSAContainer.parse(bytes(size), EFFECTIVE_DATE)
