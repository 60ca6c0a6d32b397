"""
Fluent Card Builders
====================

Staged construction of CSA and OSA containers. Every method returns the
builder so calls can be chained, and every value goes through the record's
validated set_* method, so a builder can never produce a block that the
setters would have rejected.

Record fields are given as keywords named after the setters:
`fare_amount=1500` calls `set_fare_amount(1500)`. Times are milliseconds
since the epoch, as for the setters.

Example:
    >>> csa = (
    ...     CSABuilder(effective_date=28399680)
    ...     .version(1, 2, 3)
    ...     .validation(fare_amount=1500, date_and_time=1735689600000)
    ...     .add_log(txn_sq_no=101, card_balance=20000,
    ...              date_and_time=1735603200000)
    ...     .build()
    ... )
    >>> len(csa.to_bytes())
    96

Copyright (c) 2026 NCMC SDK Contributors
"""

from typing import Any, Optional, Union
import copy
import logging

from ncmc_sdk.codec.types import Terminal
from ncmc_sdk.csa.container import CSAContainer
from ncmc_sdk.csa.records import LogEntry
from ncmc_sdk.errors import InvalidArgumentError
from ncmc_sdk.osa.container import OSAContainer
from ncmc_sdk.osa.records import TransactionRecord, TripPass

# Logger for this module
logger = logging.getLogger(__name__)


def make_terminal(acquirer_id: int = 0, operator_id: int = 0, terminal_id: str = "000000") -> Terminal:
    """Create a validated Terminal from its three identifiers."""
    terminal = Terminal()
    terminal.set_acquirer_id(acquirer_id)
    terminal.set_operator_id(operator_id)
    terminal.set_terminal_id(terminal_id)
    return terminal


def apply_fields(record: Any, fields: dict[str, Any]) -> None:
    """
    Call record.set_<name>(value) for each keyword, in the order given.

    Raises:
        InvalidArgumentError: If the record has no setter for a keyword
    """
    for name, value in fields.items():
        setter = getattr(record, f"set_{name}", None)
        if not callable(setter):
            raise InvalidArgumentError(
                f"{type(record).__name__} has no field '{name}'"
            )
        setter(value)


# =============================================================================
# Trip Pass Builder
# =============================================================================

class TripPassBuilder:
    """
    Builds an OSA trip pass.

    trips() always stores the allotment before the remaining count, which
    is the order TripPass.set_remaining_trips() depends on.

    Example:
        >>> trip_pass = (
        ...     TripPassBuilder()
        ...     .pass_id(101)
        ...     .expiry(15552000000)
        ...     .trips(40, 35)
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._pass = TripPass()

    def pass_id(self, pass_id: int) -> "TripPassBuilder":
        self._pass.set_pass_id(pass_id)
        return self

    def expiry(self, absolute_ms: int) -> "TripPassBuilder":
        self._pass.set_pass_expiry(absolute_ms)
        return self

    def priority(self, priority: int) -> "TripPassBuilder":
        self._pass.set_priority(priority)
        return self

    def trips(self, allotted: int, remaining: Optional[int] = None) -> "TripPassBuilder":
        """
        Set the trip allotment and the remaining count.

        Args:
            allotted: Trips allotted to the pass
            remaining: Trips still available; defaults to `allotted`

        Raises:
            InvalidArgumentError: If remaining exceeds allotted
        """
        self._pass.set_trips_allotted(allotted)
        self._pass.set_remaining_trips(allotted if remaining is None else remaining)
        return self

    def route(self, source: int, destination: int) -> "TripPassBuilder":
        self._pass.set_source_id(source)
        self._pass.set_destination_id(destination)
        return self

    def flags(self, flags: int) -> "TripPassBuilder":
        self._pass.set_flags(flags)
        return self

    def daily(self, counter: int, indicator: int) -> "TripPassBuilder":
        self._pass.set_daily_trip_counter(counter)
        self._pass.set_daily_trip_indicator(indicator)
        return self

    def start(self, absolute_ms: int) -> "TripPassBuilder":
        self._pass.set_start_date_and_time(absolute_ms)
        return self

    def build(self) -> TripPass:
        """Return a copy of the pass built so far."""
        return copy.deepcopy(self._pass)


# =============================================================================
# CSA Builder
# =============================================================================

class CSABuilder:
    """
    Builds a Common Service Area for one card effective date.

    Log entries are added oldest first, exactly as a terminal would write
    them, so the last add_log() call ends up in history slot 0.
    """

    def __init__(self, effective_date: int) -> None:
        self._csa = CSAContainer(effective_date)

    def version(self, major: int, minor: int, patch: int) -> "CSABuilder":
        self._csa.general.set_version(major, minor, patch)
        return self

    def language(self, code: int) -> "CSABuilder":
        self._csa.general.set_language(code)
        return self

    def validation(self, **fields: Any) -> "CSABuilder":
        """Set validation record fields, e.g. validation(fare_amount=1500)."""
        apply_fields(self._csa.validation, fields)
        return self

    def add_log(self, **fields: Any) -> "CSABuilder":
        """Create a log entry from keyword fields and push it into the history."""
        entry = LogEntry(self._csa.effective_date)
        apply_fields(entry, fields)
        self._csa.history.add_log(entry)
        return self

    def rfu(self, data: bytes) -> "CSABuilder":
        self._csa.set_rfu(data)
        return self

    def build(self) -> CSAContainer:
        """Return a copy of the container built so far."""
        logger.debug(
            f"Built CSA with {self._csa.history.valid_count} log entries "
            f"(effective date {self._csa.effective_date})"
        )
        return copy.deepcopy(self._csa)


# =============================================================================
# OSA Builder
# =============================================================================

class OSABuilder:
    """Builds an Operator Service Area for one card effective date."""

    def __init__(self, effective_date: int) -> None:
        self._osa = OSAContainer(effective_date)

    def version(self, major: int, minor: int, patch: int) -> "OSABuilder":
        self._osa.general.set_version(major, minor, patch)
        return self

    def phone_number(self, number: str) -> "OSABuilder":
        self._osa.general.set_phone_number(number)
        return self

    def language(self, code: int) -> "OSABuilder":
        self._osa.general.set_language(code)
        return self

    def service_status(self, status: int) -> "OSABuilder":
        self._osa.general.set_service_status(status)
        return self

    def transaction(self, **fields: Any) -> "OSABuilder":
        """Set last-transaction fields, e.g. transaction(station_id=505)."""
        apply_fields(self._osa.transaction, fields)
        return self

    def add_record(self, **fields: Any) -> "OSABuilder":
        """Create a transaction record from keyword fields and push it into the history."""
        record = TransactionRecord(self._osa.effective_date)
        apply_fields(record, fields)
        self._osa.history.add_record(record)
        return self

    def trip_pass(self, index: int, trip_pass: Union[TripPass, TripPassBuilder]) -> "OSABuilder":
        """
        Store a trip pass in slot 0 or 1.

        Raises:
            FieldRangeError: If index is not 0 or 1
        """
        if isinstance(trip_pass, TripPassBuilder):
            trip_pass = trip_pass.build()
        self._osa.set_trip_pass(trip_pass, index)
        return self

    def build(self) -> OSAContainer:
        """Return a copy of the container built so far."""
        logger.debug(
            f"Built OSA with {self._osa.history.valid_count} transaction records "
            f"(effective date {self._osa.effective_date})"
        )
        return copy.deepcopy(self._osa)
