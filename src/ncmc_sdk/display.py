"""
Human-Readable Card Dumps
=========================

Renders CSA and OSA records as banner-style text blocks for terminals and
logs. Each formatter returns a string; nothing is printed here.

Relative timestamps need the card effective date. When a record has none
the DATE AND TIME line reports it as not available instead of failing, so
a partially initialised record can still be inspected.

    >>> print(format_csa(CSAContainer.parse(raw, 28399680)))

Copyright (c) 2026 NCMC SDK Contributors
"""

from typing import Callable, Union

from ncmc_sdk.codec.history import HistoryBuffer
from ncmc_sdk.codec.types import Terminal
from ncmc_sdk.csa.container import CSAContainer
from ncmc_sdk.csa.records import CSAGeneral, LogEntry, ValidationRecord
from ncmc_sdk.errors import PreconditionError
from ncmc_sdk.osa.container import OSAContainer
from ncmc_sdk.osa.records import OSAGeneral, TransactionRecord, TripPass
from ncmc_sdk.timeutil import DEFAULT_DATETIME_FORMAT, format_utc


LABEL_WIDTH = 23
RULE_WIDTH = 68


def _banner(title: str, fill: str = "-") -> str:
    return f" {title} ".center(RULE_WIDTH, fill)


def _field(label: str, value: object) -> str:
    return f"  {label:<{LABEL_WIDTH}}: {value}"


def _timed_field(get_ms: Callable[[], int], fmt: str) -> str:
    try:
        return _field("DATE AND TIME", f"{format_utc(get_ms(), fmt)} (UTC)")
    except PreconditionError as e:
        return _field("DATE AND TIME", f"[Not available: {e}]")


# =============================================================================
# Shared Blocks
# =============================================================================

def format_terminal(terminal: Terminal) -> str:
    return "\n".join([
        _field("[TN] ACQUIRER ID", terminal.acquirer_id),
        _field("[TN] OPERATOR ID", terminal.operator_id),
        _field("[TN] TERMINAL ID", terminal.get_terminal_id()),
    ])


def format_general(general: Union[CSAGeneral, OSAGeneral]) -> str:
    """Format the general block of either area."""
    lines = [_banner("GENERAL DATA")]
    lines.append(_field("VERSION", general.get_version_string()))
    if isinstance(general, OSAGeneral):
        lines.append(_field("PHONE NUMBER", general.get_phone_number() or "[Not set]"))
    lines.append(_field(
        "LANGUAGE", f"{general.get_language_string()} (0b{int(general.language):05b})"
    ))
    if isinstance(general, OSAGeneral):
        lines.append(_field("SERVICE STATUS", general.get_service_status_string()))
        lines.append(_field("RFU (BINARY)", f"{general.rfu:02b}"))
    else:
        lines.append(_field("RFU (BINARY)", f"{general.rfu:03b}"))
    lines.append("-" * RULE_WIDTH)
    return "\n".join(lines)


# =============================================================================
# CSA Records
# =============================================================================

def format_validation(record: ValidationRecord, fmt: str = DEFAULT_DATETIME_FORMAT) -> str:
    return "\n".join([
        _banner("VALIDATION DATA"),
        format_terminal(record.terminal_info),
        _field("ERROR CODE", record.error_code),
        _field("PRODUCT TYPE", record.product_type),
        _timed_field(record.get_date_and_time, fmt),
        _field("FARE AMOUNT", record.fare_amount),
        _field("ROUTE NUMBER", record.route_number),
        _field("SERVICE PROVIDER DATA", f"0x{record.get_service_provider_data()}"),
        _field("TRANSACTION STATUS", record.get_txn_status_string()),
        _field("RFU (BINARY)", record.get_rfu_string()),
        "-" * RULE_WIDTH,
    ])


def format_log_entry(entry: LogEntry, fmt: str = DEFAULT_DATETIME_FORMAT) -> str:
    return "\n".join([
        _banner("LOG ENTRY"),
        format_terminal(entry.terminal_info),
        _timed_field(entry.get_date_and_time, fmt),
        _field("TRANSACTION SQ NO", entry.txn_sq_no),
        _field("TRANSACTION AMOUNT", entry.txn_amount),
        _field("CARD BALANCE", entry.card_balance),
        _field("TRANSACTION STATUS", entry.get_txn_status_string()),
        _field("RFU (BINARY)", entry.get_rfu_string()),
        "-" * RULE_WIDTH,
    ])


# =============================================================================
# OSA Records
# =============================================================================

def format_transaction(record: TransactionRecord, fmt: str = DEFAULT_DATETIME_FORMAT) -> str:
    return "\n".join([
        _banner("TRANSACTION RECORD"),
        _field("ERROR CODE", record.error_code),
        _field("PRODUCT TYPE", record.product_type),
        _timed_field(record.get_date_and_time, fmt),
        _field("STATION ID", record.station_id),
        _field("FARE", record.fare),
        _field("TERMINAL ID", f"0x{record.get_terminal_id_string()}"),
        _field("TRANSACTION STATUS", record.get_txn_status_string()),
        _field("RFU (BINARY)", f"{record.rfu:04b}"),
        "-" * RULE_WIDTH,
    ])


def format_trip_pass(trip_pass: TripPass, fmt: str = DEFAULT_DATETIME_FORMAT) -> str:
    return "\n".join([
        _banner("TRIP PASS"),
        _field("PASS ID", trip_pass.pass_id),
        _field("PASS EXPIRY", f"{format_utc(trip_pass.get_pass_expiry(), fmt)} (UTC)"),
        _field("PRIORITY", trip_pass.priority),
        _field("TRIPS ALLOTTED", trip_pass.trips_allotted),
        _field("REMAINING TRIPS", trip_pass.remaining_trips),
        _field("SOURCE ID", trip_pass.source_id),
        _field("DESTINATION ID", trip_pass.destination_id),
        _field("FLAGS (BINARY)", f"{trip_pass.flags:08b}"),
        _field("DAILY TRIP COUNTER", trip_pass.daily_trip_counter),
        _field("DAILY TRIP INDICATOR", trip_pass.daily_trip_indicator),
        _field(
            "START DATE & TIME",
            f"{format_utc(trip_pass.get_start_date_and_time(), fmt)} (UTC)",
        ),
        "-" * RULE_WIDTH,
    ])


# =============================================================================
# History and Containers
# =============================================================================

def format_history(history: HistoryBuffer, fmt: str = DEFAULT_DATETIME_FORMAT) -> str:
    """Format either history buffer, entries most recent first."""
    lines = [_banner(history.NAME.upper() + " DATA", "=")]
    if history.effective_date is None:
        lines.append(_field("CARD EFFECTIVE DATE", "[Not set]"))
    else:
        lines.append(_field("CARD EFFECTIVE DATE", f"{history.effective_date} min"))
    lines.append(_field("VALID ENTRY COUNT", history.valid_count))

    if history.valid_count == 0:
        lines.append("  [No entries]")
    for entry in history:
        if isinstance(entry, LogEntry):
            lines.append(format_log_entry(entry, fmt))
        else:
            lines.append(format_transaction(entry, fmt))

    lines.append("=" * RULE_WIDTH)
    return "\n".join(lines)


def format_csa(csa: CSAContainer, fmt: str = DEFAULT_DATETIME_FORMAT) -> str:
    return "\n".join([
        _banner("COMMON SERVICE AREA (CSA)", "="),
        format_general(csa.general),
        format_validation(csa.validation, fmt),
        format_history(csa.history, fmt),
        _banner(f"RFU ({CSAContainer.RFU_SIZE} Bytes)"),
        "  " + csa.rfu.hex(" ").upper(),
        "=" * RULE_WIDTH,
    ])


def format_osa(osa: OSAContainer, fmt: str = DEFAULT_DATETIME_FORMAT) -> str:
    lines = [
        _banner("OPERATOR SERVICE AREA (OSA)", "="),
        format_general(osa.general),
        format_transaction(osa.transaction, fmt),
        format_history(osa.history, fmt),
    ]
    for index, trip_pass in enumerate(osa.trip_passes):
        lines.append(f"  Trip pass slot {index}:")
        lines.append(format_trip_pass(trip_pass, fmt))
    lines.append("=" * RULE_WIDTH)
    return "\n".join(lines)


def hex_dump(data: bytes, width: int = 16) -> str:
    """
    Offset-prefixed hex dump, `width` bytes per line.

    Example:
        >>> hex_dump(bytes(range(4)))
        '0000: 00 01 02 03'
    """
    lines = []
    for offset in range(0, len(data), width):
        chunk = data[offset:offset + width]
        lines.append(f"{offset:04X}: {chunk.hex(' ').upper()}")
    return "\n".join(lines)
