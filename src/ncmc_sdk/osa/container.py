"""
OSA Container
=============

The complete 96-byte Operator Service Area with its 2-slot transaction
history and two trip pass slots.

Effective date handling matches the CSA container: fixed at construction,
pushed into the transaction record and history, and checked on every later
assignment. Trip passes use absolute time and are not affected.

Copyright (c) 2026 NCMC SDK Contributors
"""

import copy
import logging

from ncmc_sdk.codec.fields import require_length, require_type
from ncmc_sdk.codec.history import HistoryBuffer
from ncmc_sdk.errors import FieldRangeError, InconsistentStateError
from ncmc_sdk.osa.records import OSAGeneral, TransactionRecord, TripPass

# Logger for this module
logger = logging.getLogger(__name__)


class OSAHistory(HistoryBuffer):
    """OSA transaction history: the last 2 records, most recent first (26 bytes)."""
    CAPACITY = 2
    ENTRY_TYPE = TransactionRecord
    NAME = "OSA history"

    def add_record(self, record: TransactionRecord) -> None:
        self.add(record)

    def get_records(self) -> tuple[TransactionRecord, ...]:
        return self.entries


class OSAContainer:
    """
    Operator Service Area (96 bytes).

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       7       General data
        7       13      Last transaction
        20      26      History (2 x 13-byte records)
        46      20      Trip pass 0
        66      20      Trip pass 1
        86      10      Zero padding

    The padding is always written as zeros and ignored on parse.
    """
    TOTAL_SIZE = 96
    TRIP_PASS_COUNT = 2
    GENERAL_OFFSET = 0
    TRANSACTION_OFFSET = GENERAL_OFFSET + OSAGeneral.DATA_SIZE                # 7
    HISTORY_OFFSET = TRANSACTION_OFFSET + TransactionRecord.DATA_SIZE        # 20
    TRIP_PASS_OFFSET = HISTORY_OFFSET + OSAHistory.total_size()              # 46
    PADDING_OFFSET = TRIP_PASS_OFFSET + TRIP_PASS_COUNT * TripPass.DATA_SIZE  # 86

    def __init__(self, effective_date: int) -> None:
        self._effective_date = effective_date
        self._general = OSAGeneral()
        self._transaction = TransactionRecord(effective_date)
        self._history = OSAHistory(effective_date)
        self._trip_passes = [TripPass() for _ in range(self.TRIP_PASS_COUNT)]

    # =========================================================================
    # Children
    # =========================================================================

    @property
    def effective_date(self) -> int:
        return self._effective_date

    def get_card_effective_date(self) -> int:
        return self._effective_date

    @property
    def general(self) -> OSAGeneral:
        return self._general

    @general.setter
    def general(self, value: OSAGeneral) -> None:
        self.set_general(value)

    @property
    def transaction(self) -> TransactionRecord:
        return self._transaction

    @transaction.setter
    def transaction(self, value: TransactionRecord) -> None:
        self.set_transaction(value)

    @property
    def history(self) -> OSAHistory:
        return self._history

    @history.setter
    def history(self, value: OSAHistory) -> None:
        self.set_history(value)

    @property
    def trip_passes(self) -> tuple[TripPass, ...]:
        return tuple(self._trip_passes)

    def set_general(self, general: OSAGeneral) -> None:
        """
        Raises:
            InvalidArgumentError: If general is not an OSAGeneral
        """
        require_type(general, OSAGeneral, "General data")
        self._general = copy.deepcopy(general)

    def set_transaction(self, record: TransactionRecord) -> None:
        """
        Raises:
            InvalidArgumentError: If record is not a TransactionRecord
            InconsistentStateError: If the record's effective date differs
        """
        require_type(record, TransactionRecord, "Transaction record")
        if record.effective_date != self._effective_date:
            raise InconsistentStateError(
                "Transaction record", self._effective_date, record.effective_date
            )
        self._transaction = copy.deepcopy(record)

    # Same operation under the name used by the CSA container
    set_validation = set_transaction

    def set_history(self, history: OSAHistory) -> None:
        """
        Raises:
            InvalidArgumentError: If history is not an OSAHistory
            InconsistentStateError: If the history's effective date differs
        """
        require_type(history, OSAHistory, "History")
        if history.effective_date != self._effective_date:
            raise InconsistentStateError(
                "History", self._effective_date, history.effective_date
            )
        self._history = copy.deepcopy(history)

    def _check_trip_pass_index(self, index: int) -> None:
        if not 0 <= index < self.TRIP_PASS_COUNT:
            raise FieldRangeError(
                f"Trip pass index must be 0 or 1, got {index}",
                field="trip_pass_index", value=index, maximum=self.TRIP_PASS_COUNT - 1,
            )

    def set_trip_pass(self, trip_pass: TripPass, index: int) -> None:
        """
        Store a copy of a trip pass in slot 0 or 1.

        Raises:
            InvalidArgumentError: If trip_pass is not a TripPass
            FieldRangeError: If index is not 0 or 1
        """
        self._check_trip_pass_index(index)
        require_type(trip_pass, TripPass, "Trip pass")
        self._trip_passes[index] = copy.deepcopy(trip_pass)

    def get_trip_pass(self, index: int) -> TripPass:
        """
        Raises:
            FieldRangeError: If index is not 0 or 1
        """
        self._check_trip_pass_index(index)
        return self._trip_passes[index]

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_bytes(self) -> bytes:
        """Serialize the complete OSA to exactly 96 bytes."""
        result = bytearray()
        result.extend(self._general.to_bytes())
        result.extend(self._transaction.to_bytes())
        result.extend(self._history.to_bytes())
        for trip_pass in self._trip_passes:
            result.extend(trip_pass.to_bytes())
        result.extend(bytes(self.TOTAL_SIZE - self.PADDING_OFFSET))
        return bytes(result)

    @classmethod
    def parse(cls, data: bytes, effective_date: int) -> "OSAContainer":
        """
        Parse a 96-byte OSA block.

        Raises:
            InvalidLengthError: If data is not exactly 96 bytes
        """
        require_length(data, cls.TOTAL_SIZE, "OSA")
        data = bytes(data)

        result = cls(effective_date)
        result._general = OSAGeneral.parse(data[cls.GENERAL_OFFSET:cls.TRANSACTION_OFFSET])
        result._transaction = TransactionRecord.parse(
            data[cls.TRANSACTION_OFFSET:cls.HISTORY_OFFSET], effective_date
        )
        result._history = OSAHistory.parse(
            data[cls.HISTORY_OFFSET:cls.TRIP_PASS_OFFSET], effective_date
        )
        for index in range(cls.TRIP_PASS_COUNT):
            start = cls.TRIP_PASS_OFFSET + index * TripPass.DATA_SIZE
            result._trip_passes[index] = TripPass.parse(data[start:start + TripPass.DATA_SIZE])

        if any(data[cls.PADDING_OFFSET:]):
            logger.debug("OSA padding bytes are not zero; ignoring them")

        logger.debug(
            f"Parsed OSA v{result._general.get_version_string()} "
            f"with {result._history.valid_count} transaction records"
        )
        return result

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OSAContainer):
            return NotImplemented
        return (
            self._effective_date == other._effective_date
            and self._general == other._general
            and self._transaction == other._transaction
            and self._history == other._history
            and self._trip_passes == other._trip_passes
        )

    def __repr__(self) -> str:
        return (
            f"OSAContainer(effective_date={self._effective_date!r}, "
            f"general={self._general!r}, transaction={self._transaction!r}, "
            f"history={self._history!r}, trip_passes={self._trip_passes!r})"
        )
