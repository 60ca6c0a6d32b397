"""
CSA Unit Tests
==============

Tests for the Common Service Area records and the 96-byte container,
including the reference block written by a terminal for effective date
28399680 (2023-12-31).
"""

import pytest

from ncmc_sdk.builder import make_terminal
from ncmc_sdk.codec.types import LanguageCode, Terminal, TxnStatus
from ncmc_sdk.csa import (
    CSAContainer,
    CSAGeneral,
    CSAHistory,
    LogEntry,
    ValidationRecord,
)
from ncmc_sdk.errors import (
    FieldRangeError,
    InconsistentStateError,
    InvalidArgumentError,
    InvalidLengthError,
    PreconditionError,
)
from ncmc_sdk.osa import OSAGeneral, OSAHistory, TransactionRecord


EFFECTIVE_DATE = 28399680


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def terminal() -> Terminal:
    return make_terminal(10, 1000, "ABCDEF")


@pytest.fixture
def golden_csa(terminal: Terminal) -> CSAContainer:
    """
    The reference CSA: version 1.2.3, one validation, one log entry.

    Validation at 2025-01-01 00:00 UTC, fare 1500. Log entry at
    2024-12-31 00:00 UTC, sequence 101, balance 20000.
    """
    csa = CSAContainer(EFFECTIVE_DATE)
    csa.general.set_version(1, 2, 3)
    csa.general.set_language(LanguageCode.ENGLISH)

    csa.validation.set_terminal_info(terminal)
    csa.validation.set_date_and_time(1735689600000)
    csa.validation.set_fare_amount(1500)

    log = LogEntry(EFFECTIVE_DATE)
    log.set_terminal_info(terminal)
    log.set_date_and_time(1735603200000)
    log.set_txn_sq_no(101)
    log.set_card_balance(20000)
    csa.history.add_log(log)

    csa.set_rfu(bytes([0xDE, 0xAD, 0xBE, 0xEF, 0x01, 0x02, 0x03]))
    return csa


@pytest.fixture
def golden_bytes(golden_csa: CSAContainer) -> bytes:
    return golden_csa.to_bytes()


# =============================================================================
# General Data
# =============================================================================

class TestCSAGeneral:
    """Tests for the 2-byte CSA general block."""

    def test_version_bits(self):
        gen = CSAGeneral()
        gen.set_version(1, 2, 3)
        assert gen.to_bytes() == bytes([0x2B, 0x00])
        assert gen.get_version_string() == "1.2.3"

    def test_language_bits(self):
        gen = CSAGeneral()
        gen.set_language(LanguageCode.HINDI)
        gen.set_rfu(5)
        assert gen.to_bytes()[1] == (1 << 3) | 5
        assert gen.get_language_string() == "Hindi"

    @pytest.mark.parametrize("version", [(8, 0, 0), (0, 8, 0), (0, 0, 4)])
    def test_version_out_of_range(self, version):
        gen = CSAGeneral()
        gen.set_version(7, 7, 3)
        with pytest.raises(FieldRangeError):
            gen.set_version(*version)
        assert gen.get_version_string() == "7.7.3"

    def test_reserved_language_is_storable(self):
        gen = CSAGeneral()
        gen.set_language(0b11111)
        assert gen.get_language_string() == "Unknown"
        assert CSAGeneral.parse(gen.to_bytes()).language == 0b11111

    def test_rfu_range(self):
        with pytest.raises(FieldRangeError):
            CSAGeneral().set_rfu(8)

    def test_parse(self):
        gen = CSAGeneral.parse(bytes([0xFF, 0x0B]))
        assert gen.get_version_string() == "7.7.3"
        assert gen.language == LanguageCode.HINDI
        assert gen.rfu == 3


# =============================================================================
# Validation Data
# =============================================================================

class TestValidationRecord:
    """Tests for the 19-byte validation record."""

    def test_layout(self, terminal):
        record = ValidationRecord(EFFECTIVE_DATE)
        record.set_error_code(0x12)
        record.set_product_type(0x34)
        record.set_terminal_info(terminal)
        record.set_date_and_time(1735689600000)
        record.set_fare_amount(1500)
        record.set_route_number(0x0102)
        record.set_service_provider_data(0xABCDEF)
        record.set_txn_status(TxnStatus.PENALTY)
        record.set_rfu(0x5)

        data = record.to_bytes()
        assert len(data) == 19
        assert data[0:2] == bytes([0x12, 0x34])
        assert data[2:8] == bytes([0x0A, 0x03, 0xE8, 0xAB, 0xCD, 0xEF])
        assert data[8:11] == bytes([0x08, 0x10, 0x60])   # 528480 minutes
        assert data[11:13] == bytes([0x05, 0xDC])
        assert data[13:15] == bytes([0x01, 0x02])
        assert data[15:18] == bytes([0xAB, 0xCD, 0xEF])
        assert data[18] == 0x25

    def test_getters(self):
        record = ValidationRecord(EFFECTIVE_DATE, service_provider_data=0xABC, rfu=0b0101)
        assert record.get_service_provider_data() == "000ABC"
        assert record.get_rfu_string() == "0101"
        assert record.get_txn_status_string() == "ENTRY"

    def test_time_requires_effective_date(self):
        record = ValidationRecord(None)
        with pytest.raises(PreconditionError):
            record.set_date_and_time(1735689600000)

    def test_time_before_effective_date(self):
        record = ValidationRecord(EFFECTIVE_DATE)
        with pytest.raises(FieldRangeError):
            record.set_date_and_time(EFFECTIVE_DATE * 60_000 - 60_000)

    def test_service_provider_data_range(self):
        with pytest.raises(FieldRangeError):
            ValidationRecord(EFFECTIVE_DATE).set_service_provider_data(0x1000000)

    def test_terminal_info_is_copied(self, terminal):
        record = ValidationRecord(EFFECTIVE_DATE)
        record.set_terminal_info(terminal)
        terminal.set_acquirer_id(99)
        assert record.terminal_info.acquirer_id == 10

    def test_unknown_status_decodes(self):
        data = bytearray(ValidationRecord(EFFECTIVE_DATE).to_bytes())
        data[18] = 0xF0
        record = ValidationRecord.parse(bytes(data), EFFECTIVE_DATE)
        assert record.txn_status == 0xF
        assert record.get_txn_status_string() == "UNKNOWN"

    def test_parse_wrong_length(self):
        with pytest.raises(InvalidLengthError):
            ValidationRecord.parse(bytes(18), EFFECTIVE_DATE)


# =============================================================================
# Log Entry
# =============================================================================

class TestLogEntry:
    """Tests for the 17-byte log entry."""

    def test_balance_encoding(self):
        entry = LogEntry(EFFECTIVE_DATE)
        entry.set_card_balance(20000)
        assert entry.to_bytes()[13:16] == bytes([0x04, 0xE2, 0x0F])

    def test_balance_limit(self):
        entry = LogEntry(EFFECTIVE_DATE)
        entry.set_card_balance(0xFFFFF)
        with pytest.raises(FieldRangeError):
            entry.set_card_balance(0x100000)
        assert entry.card_balance == 0xFFFFF

    def test_round_trip(self, terminal):
        entry = LogEntry(EFFECTIVE_DATE)
        entry.set_terminal_info(terminal)
        entry.set_date_and_time(1735603200000)
        entry.set_txn_amount(250)
        entry.set_txn_sq_no(101)
        entry.set_card_balance(20000)
        entry.set_txn_status(TxnStatus.EXIT)

        parsed = LogEntry.parse(entry.to_bytes(), EFFECTIVE_DATE)
        assert parsed == entry
        assert parsed.get_date_and_time() == 1735603200000

    def test_parse_ignores_filler_nibble(self):
        entry = LogEntry(EFFECTIVE_DATE)
        entry.set_card_balance(20000)
        data = bytearray(entry.to_bytes())
        data[15] = 0x00
        assert LogEntry.parse(bytes(data), EFFECTIVE_DATE).card_balance == 20000

    def test_different_effective_date_shifts_time(self):
        """The same bytes decode to a different time under another effective date."""
        entry = LogEntry(EFFECTIVE_DATE)
        entry.set_date_and_time(1735603200000)
        parsed = LogEntry.parse(entry.to_bytes(), EFFECTIVE_DATE + 1)
        assert parsed.get_date_and_time() == 1735603200000 + 60_000


# =============================================================================
# Container
# =============================================================================

class TestCSAContainer:
    """Tests for the 96-byte CSA container."""

    def test_offsets(self):
        assert CSAContainer.VALIDATION_OFFSET == 2
        assert CSAContainer.HISTORY_OFFSET == 21
        assert CSAContainer.RFU_OFFSET == 89

    def test_empty_container_is_96_bytes(self):
        assert len(CSAContainer(EFFECTIVE_DATE).to_bytes()) == 96

    def test_golden_layout(self, golden_bytes):
        assert len(golden_bytes) == 96
        assert golden_bytes[0:2] == bytes([0x2B, 0x00])
        assert golden_bytes[2:8] == bytes([0x00, 0x00, 0x0A, 0x03, 0xE8, 0xAB])
        assert golden_bytes[10:13] == bytes([0x08, 0x10, 0x60])
        assert golden_bytes[13:15] == bytes([0x05, 0xDC])
        assert golden_bytes[20] == 0x10
        # Log entry in history slot 0
        assert golden_bytes[21:27] == bytes([0x0A, 0x03, 0xE8, 0xAB, 0xCD, 0xEF])
        assert golden_bytes[27:30] == bytes([0x08, 0x0A, 0xC0])
        assert golden_bytes[32:34] == bytes([0x00, 0x65])
        assert golden_bytes[34:37] == bytes([0x04, 0xE2, 0x0F])
        # Remaining history slots are empty
        assert golden_bytes[38:89] == bytes(51)
        assert golden_bytes[89:96] == bytes([0xDE, 0xAD, 0xBE, 0xEF, 0x01, 0x02, 0x03])

    def test_parse_golden(self, golden_bytes):
        parsed = CSAContainer.parse(golden_bytes, EFFECTIVE_DATE)
        assert parsed.general.get_version_string() == "1.2.3"
        assert parsed.validation.fare_amount == 1500
        assert parsed.validation.get_date_and_time() == 1735689600000
        assert parsed.history.valid_count == 1
        assert parsed.history[0].card_balance == 20000
        assert parsed.history[0].txn_sq_no == 101
        assert parsed.rfu == bytes([0xDE, 0xAD, 0xBE, 0xEF, 0x01, 0x02, 0x03])

    def test_reserialize_is_byte_exact(self, golden_bytes):
        parsed = CSAContainer.parse(golden_bytes, EFFECTIVE_DATE)
        assert parsed.to_bytes() == golden_bytes

    def test_round_trip_equality(self, golden_csa, golden_bytes):
        assert CSAContainer.parse(golden_bytes, EFFECTIVE_DATE) == golden_csa

    @pytest.mark.parametrize("size", [0, 95, 97])
    def test_parse_wrong_length(self, size):
        with pytest.raises(InvalidLengthError):
            CSAContainer.parse(bytes(size), EFFECTIVE_DATE)

    def test_children_share_effective_date(self):
        csa = CSAContainer(EFFECTIVE_DATE)
        assert csa.validation.get_card_effective_date() == EFFECTIVE_DATE
        assert csa.history.get_card_effective_date() == EFFECTIVE_DATE

    def test_set_validation_mismatch(self, golden_csa):
        before = golden_csa.to_bytes()
        with pytest.raises(InconsistentStateError):
            golden_csa.set_validation(ValidationRecord(EFFECTIVE_DATE + 1))
        assert golden_csa.to_bytes() == before

    def test_set_history_mismatch(self):
        csa = CSAContainer(EFFECTIVE_DATE)
        with pytest.raises(InconsistentStateError):
            csa.history = CSAHistory(EFFECTIVE_DATE + 1)

    def test_set_validation_rejects_transaction_record(self, golden_csa, golden_bytes):
        """A matching effective date is not enough: the record type must match too."""
        with pytest.raises(InvalidArgumentError):
            golden_csa.set_validation(TransactionRecord(EFFECTIVE_DATE))
        assert golden_csa.to_bytes() == golden_bytes

    def test_set_history_rejects_osa_history(self, golden_csa, golden_bytes):
        with pytest.raises(InvalidArgumentError):
            golden_csa.set_history(OSAHistory(EFFECTIVE_DATE))
        with pytest.raises(InvalidArgumentError):
            golden_csa.history = OSAHistory(EFFECTIVE_DATE)
        assert golden_csa.to_bytes() == golden_bytes

    def test_set_general_rejects_osa_general(self, golden_csa, golden_bytes):
        with pytest.raises(InvalidArgumentError):
            golden_csa.set_general(OSAGeneral())
        assert golden_csa.to_bytes() == golden_bytes

    def test_history_rejects_transaction_record(self, golden_csa, golden_bytes):
        with pytest.raises(InvalidArgumentError):
            golden_csa.history.add_log(TransactionRecord(EFFECTIVE_DATE))
        assert len(golden_csa.to_bytes()) == 96
        assert golden_csa.to_bytes() == golden_bytes

    def test_child_effective_date_is_read_only(self, golden_csa):
        with pytest.raises(AttributeError):
            golden_csa.validation.effective_date = EFFECTIVE_DATE + 1
        with pytest.raises(AttributeError):
            golden_csa.history.effective_date = EFFECTIVE_DATE + 1
        assert golden_csa.validation.get_card_effective_date() == EFFECTIVE_DATE
        assert golden_csa.history.get_card_effective_date() == EFFECTIVE_DATE

    def test_set_validation_copies(self):
        csa = CSAContainer(EFFECTIVE_DATE)
        record = ValidationRecord(EFFECTIVE_DATE)
        record.set_fare_amount(100)
        csa.set_validation(record)
        record.set_fare_amount(200)
        assert csa.validation.fare_amount == 100

    def test_rfu_length(self):
        csa = CSAContainer(EFFECTIVE_DATE)
        with pytest.raises(InvalidLengthError):
            csa.set_rfu(bytes(6))

    def test_equality_includes_effective_date(self):
        assert CSAContainer(EFFECTIVE_DATE) == CSAContainer(EFFECTIVE_DATE)
        assert CSAContainer(EFFECTIVE_DATE) != CSAContainer(EFFECTIVE_DATE + 1)

    def test_simple_round_trip(self):
        original = CSAContainer(28283400)
        original.validation.set_fare_amount(500)
        assert CSAContainer.parse(original.to_bytes(), 28283400) == original
