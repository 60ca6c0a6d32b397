"""
CSA Container
=============

The complete 96-byte Common Service Area and its 4-slot log history.

The container owns the card effective date. It is fixed at construction,
pushed into the validation record and the history buffer, and every child
assigned later must carry the same value.

Usage
-----
    >>> csa = CSAContainer(28399680)
    >>> csa.general.set_version(1, 2, 3)
    >>> csa.validation.set_fare_amount(1500)
    >>> raw = csa.to_bytes()
    >>> CSAContainer.parse(raw, 28399680) == csa
    True

Copyright (c) 2026 NCMC SDK Contributors
"""

import copy
import logging

from ncmc_sdk.codec.fields import require_length, require_type
from ncmc_sdk.codec.history import HistoryBuffer
from ncmc_sdk.csa.records import CSAGeneral, LogEntry, ValidationRecord
from ncmc_sdk.errors import InconsistentStateError, InvalidLengthError

# Logger for this module
logger = logging.getLogger(__name__)


class CSAHistory(HistoryBuffer):
    """CSA transaction history: the last 4 log entries, most recent first (68 bytes)."""
    CAPACITY = 4
    ENTRY_TYPE = LogEntry
    NAME = "CSA history"

    def add_log(self, entry: LogEntry) -> None:
        self.add(entry)

    def get_logs(self) -> tuple[LogEntry, ...]:
        return self.entries


class CSAContainer:
    """
    Common Service Area (96 bytes).

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       2       General data
        2       19      Validation data
        21      68      History (4 x 17-byte log entries)
        89      7       RFU bytes

    Attributes:
        effective_date: Card effective date in minutes since epoch (not serialized)
    """
    TOTAL_SIZE = 96
    RFU_SIZE = 7
    GENERAL_OFFSET = 0
    VALIDATION_OFFSET = GENERAL_OFFSET + CSAGeneral.DATA_SIZE          # 2
    HISTORY_OFFSET = VALIDATION_OFFSET + ValidationRecord.DATA_SIZE    # 21
    RFU_OFFSET = HISTORY_OFFSET + CSAHistory.total_size()              # 89

    def __init__(self, effective_date: int) -> None:
        self._effective_date = effective_date
        self._general = CSAGeneral()
        self._validation = ValidationRecord(effective_date)
        self._history = CSAHistory(effective_date)
        self._rfu = bytes(self.RFU_SIZE)

    # =========================================================================
    # Children
    # =========================================================================

    @property
    def effective_date(self) -> int:
        return self._effective_date

    def get_card_effective_date(self) -> int:
        return self._effective_date

    @property
    def general(self) -> CSAGeneral:
        return self._general

    @general.setter
    def general(self, value: CSAGeneral) -> None:
        self.set_general(value)

    @property
    def validation(self) -> ValidationRecord:
        return self._validation

    @validation.setter
    def validation(self, value: ValidationRecord) -> None:
        self.set_validation(value)

    @property
    def history(self) -> CSAHistory:
        return self._history

    @history.setter
    def history(self, value: CSAHistory) -> None:
        self.set_history(value)

    @property
    def rfu(self) -> bytes:
        return self._rfu

    @rfu.setter
    def rfu(self, value: bytes) -> None:
        self.set_rfu(value)

    def set_general(self, general: CSAGeneral) -> None:
        """
        Raises:
            InvalidArgumentError: If general is not a CSAGeneral
        """
        require_type(general, CSAGeneral, "General data")
        self._general = copy.deepcopy(general)

    def set_validation(self, validation: ValidationRecord) -> None:
        """
        Raises:
            InvalidArgumentError: If validation is not a ValidationRecord
            InconsistentStateError: If the record's effective date differs
        """
        require_type(validation, ValidationRecord, "Validation record")
        if validation.effective_date != self._effective_date:
            raise InconsistentStateError(
                "Validation record", self._effective_date, validation.effective_date
            )
        self._validation = copy.deepcopy(validation)

    def set_history(self, history: CSAHistory) -> None:
        """
        Raises:
            InvalidArgumentError: If history is not a CSAHistory
            InconsistentStateError: If the history's effective date differs
        """
        require_type(history, CSAHistory, "History")
        if history.effective_date != self._effective_date:
            raise InconsistentStateError(
                "History", self._effective_date, history.effective_date
            )
        self._history = copy.deepcopy(history)

    def set_rfu(self, rfu: bytes) -> None:
        if len(rfu) != self.RFU_SIZE:
            raise InvalidLengthError("CSA RFU", self.RFU_SIZE, len(rfu))
        self._rfu = bytes(rfu)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_bytes(self) -> bytes:
        """Serialize the complete CSA to exactly 96 bytes."""
        result = bytearray()
        result.extend(self._general.to_bytes())
        result.extend(self._validation.to_bytes())
        result.extend(self._history.to_bytes())
        result.extend(self._rfu)
        return bytes(result)

    @classmethod
    def parse(cls, data: bytes, effective_date: int) -> "CSAContainer":
        """
        Parse a 96-byte CSA block.

        Args:
            data: Raw CSA bytes
            effective_date: Card effective date in minutes since epoch; the
                same value that was used when the block was written

        Raises:
            InvalidLengthError: If data is not exactly 96 bytes
        """
        require_length(data, cls.TOTAL_SIZE, "CSA")
        data = bytes(data)

        result = cls(effective_date)
        result._general = CSAGeneral.parse(data[cls.GENERAL_OFFSET:cls.VALIDATION_OFFSET])
        result._validation = ValidationRecord.parse(
            data[cls.VALIDATION_OFFSET:cls.HISTORY_OFFSET], effective_date
        )
        result._history = CSAHistory.parse(
            data[cls.HISTORY_OFFSET:cls.RFU_OFFSET], effective_date
        )
        result._rfu = data[cls.RFU_OFFSET:]

        logger.debug(
            f"Parsed CSA v{result._general.get_version_string()} "
            f"with {result._history.valid_count} log entries"
        )
        return result

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CSAContainer):
            return NotImplemented
        return (
            self._effective_date == other._effective_date
            and self._general == other._general
            and self._validation == other._validation
            and self._history == other._history
            and self._rfu == other._rfu
        )

    def __repr__(self) -> str:
        return (
            f"CSAContainer(effective_date={self._effective_date!r}, "
            f"general={self._general!r}, validation={self._validation!r}, "
            f"history={self._history!r}, rfu={self._rfu.hex()!r})"
        )
