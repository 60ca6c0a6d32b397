"""
Transaction History Buffer
==========================

Fixed-depth, most-recent-first ring of history records. The CSA keeps the
last four log entries and the OSA the last two transaction records; both
use the same insertion and serialization rules, implemented here.

Insertion
---------
A new record goes to slot 0 and existing records move one slot towards
the end. When the buffer is full the record in the last slot is dropped.

Serialization
-------------
Valid records are written in slot order, followed by zero bytes for every
unused slot, so the encoded size is always capacity * record size.

Parsing stops at the first slot that is entirely zero. A genuine record
whose bytes are all zero is therefore indistinguishable from padding and
is read back as the end of the history. This matches what card terminals
write and is kept for wire compatibility.

Copyright (c) 2026 NCMC SDK Contributors
"""

from typing import ClassVar, Iterator, Optional
import copy
import logging

from ncmc_sdk.codec.fields import require_length, require_type
from ncmc_sdk.errors import InconsistentStateError, PreconditionError

# Logger for this module
logger = logging.getLogger(__name__)


class HistoryBuffer:
    """
    Base class for fixed-capacity history buffers.

    Subclasses set CAPACITY and ENTRY_TYPE. ENTRY_TYPE must provide
    DATA_SIZE, to_bytes() and parse(data, effective_date), and carry an
    effective_date attribute.

    Attributes:
        effective_date: Card effective date shared by every stored record,
            fixed at construction
    """
    CAPACITY: ClassVar[int] = 0
    ENTRY_TYPE: ClassVar[type] = object
    NAME: ClassVar[str] = "History"

    def __init__(self, effective_date: Optional[int]) -> None:
        self._effective_date = effective_date
        self._entries: list = []

    @property
    def effective_date(self) -> Optional[int]:
        return self._effective_date

    @classmethod
    def total_size(cls) -> int:
        """Encoded size in bytes."""
        return cls.CAPACITY * cls.ENTRY_TYPE.DATA_SIZE

    # =========================================================================
    # Mutation
    # =========================================================================

    def add(self, record) -> None:
        """
        Insert a copy of a record as the most recent entry.

        Raises:
            InvalidArgumentError: If the record is not of ENTRY_TYPE
            PreconditionError: If the buffer has no effective date
            InconsistentStateError: If the record's effective date differs
        """
        require_type(record, self.ENTRY_TYPE, f"{self.NAME} entry")
        if self.effective_date is None:
            raise PreconditionError(
                f"Cannot add to {self.NAME} until its effective date is set"
            )
        if record.effective_date != self.effective_date:
            raise InconsistentStateError(
                f"{self.NAME} entry", self.effective_date, record.effective_date
            )

        self._entries.insert(0, copy.deepcopy(record))
        del self._entries[self.CAPACITY:]

    def clear(self) -> None:
        """Discard all entries. The effective date is kept."""
        self._entries.clear()

    # =========================================================================
    # Access
    # =========================================================================

    @property
    def valid_count(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple:
        """Valid entries, most recent first."""
        return tuple(self._entries)

    def get_card_effective_date(self) -> int:
        if self.effective_date is None:
            raise PreconditionError("Card effective date has not been set")
        return self.effective_date

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int):
        return self._entries[index]

    def __iter__(self) -> Iterator:
        return iter(self._entries)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_bytes(self) -> bytes:
        """Serialize valid entries followed by zero padding."""
        result = bytearray()
        for entry in self._entries:
            result.extend(entry.to_bytes())

        padding = (self.CAPACITY - len(self._entries)) * self.ENTRY_TYPE.DATA_SIZE
        result.extend(bytes(padding))
        return bytes(result)

    @classmethod
    def parse(cls, data: bytes, effective_date: Optional[int]) -> "HistoryBuffer":
        """
        Deserialize a history block, stopping at the first all-zero slot.

        Raises:
            InvalidLengthError: If data is not exactly total_size() bytes
        """
        require_length(data, cls.total_size(), cls.NAME)

        history = cls(effective_date)
        size = cls.ENTRY_TYPE.DATA_SIZE
        for index in range(cls.CAPACITY):
            chunk = bytes(data[index * size:(index + 1) * size])
            if not any(chunk):
                logger.debug(f"{cls.NAME}: slot {index} is empty, stopping")
                break
            history._entries.append(cls.ENTRY_TYPE.parse(chunk, effective_date))

        logger.debug(f"{cls.NAME}: parsed {history.valid_count} of {cls.CAPACITY} slots")
        return history

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HistoryBuffer) or type(self) is not type(other):
            return NotImplemented
        return (
            self.effective_date == other.effective_date
            and self._entries == other._entries
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(effective_date={self.effective_date!r}, "
            f"entries={self._entries!r})"
        )
