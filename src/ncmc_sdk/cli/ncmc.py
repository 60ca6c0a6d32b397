"""
ncmc - NCMC Card Block Tool
===========================

Command-line interface for decoding, verifying and generating the 96-byte
CSA and OSA blocks of an NCMC card.

Commands
--------
- **decode**: Parse a block and print every field
- **verify**: Parse a block and check that it re-encodes byte for byte
- **sample**: Print the hex of a populated sample block
- **effective-date**: Convert a YYYY-MM-DD date to effective-date minutes

Usage Examples
--------------
Decode a CSA read from a card:
    $ ncmc decode csa --effective-date 28399680 2B00...

Decode an OSA dump stored in a file:
    $ ncmc decode osa --file card.osa --effective-date 28300000

Check a dump survives a parse/encode cycle:
    $ ncmc verify csa --file card.csa --effective-date 28399680

The effective date can also come from NCMC_EFFECTIVE_DATE.

Copyright (c) 2026 NCMC SDK Contributors
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click

from ncmc_sdk import __version__
from ncmc_sdk.builder import CSABuilder, OSABuilder, TripPassBuilder, make_terminal
from ncmc_sdk.cli.errors import ExitCode, handle_cli_exception
from ncmc_sdk.codec.types import LanguageCode, ServiceStatus
from ncmc_sdk.config import CodecConfig
from ncmc_sdk.csa.container import CSAContainer
from ncmc_sdk.display import format_csa, format_osa, hex_dump
from ncmc_sdk.osa.container import OSAContainer
from ncmc_sdk.timeutil import effective_date_from_utc

logger = logging.getLogger(__name__)


# Effective dates used by the sample blocks when none is configured
SAMPLE_CSA_EFFECTIVE_DATE = 28399680   # 2023-12-31 00:00 UTC
SAMPLE_OSA_EFFECTIVE_DATE = 28300000

AREAS = {"csa": CSAContainer, "osa": OSAContainer}


# =============================================================================
# Sample Blocks
# =============================================================================

def sample_csa(effective_date: int = SAMPLE_CSA_EFFECTIVE_DATE) -> CSAContainer:
    """A CSA with version 1.2.3, one validation, one log entry and RFU bytes set."""
    terminal = make_terminal(10, 1000, "ABCDEF")
    return (
        CSABuilder(effective_date)
        .version(1, 2, 3)
        .language(LanguageCode.ENGLISH)
        .validation(
            terminal_info=terminal,
            date_and_time=1735689600000,    # 2025-01-01 00:00 UTC
            fare_amount=1500,
        )
        .add_log(
            terminal_info=terminal,
            date_and_time=1735603200000,    # 2024-12-31 00:00 UTC
            txn_sq_no=101,
            card_balance=20000,
        )
        .rfu(bytes([0xDE, 0xAD, 0xBE, 0xEF, 0x01, 0x02, 0x03]))
        .build()
    )


def sample_osa(effective_date: int = SAMPLE_OSA_EFFECTIVE_DATE) -> OSAContainer:
    """An OSA with a phone number, one transaction, one history record and a trip pass."""
    trip_pass = (
        TripPassBuilder()
        .pass_id(101)
        .expiry(15552000000)
        .trips(40, 35)
    )
    return (
        OSABuilder(effective_date)
        .version(2, 0, 1)
        .phone_number("7977192875")
        .service_status(ServiceStatus.ACTIVE)
        .transaction(date_and_time=1735689600000, station_id=505)
        .add_record(fare=50)
        .trip_pass(0, trip_pass)
        .build()
    )


SAMPLES = {"csa": sample_csa, "osa": sample_osa}
SAMPLE_EFFECTIVE_DATES = {"csa": SAMPLE_CSA_EFFECTIVE_DATE, "osa": SAMPLE_OSA_EFFECTIVE_DATE}


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """Shared state for ncmc commands: configuration and verbosity."""

    def __init__(self) -> None:
        self.config = CodecConfig.from_env()
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging from -v or NCMC_LOG_LEVEL."""
        level = logging.DEBUG if self.verbose else self.config.get_log_level()
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(name)s: %(message)s",
        )

    def resolve_effective_date(self, option: Optional[int]) -> int:
        """The --effective-date option, else NCMC_EFFECTIVE_DATE."""
        if option is not None:
            return option
        if self.config.effective_date is not None:
            return self.config.effective_date
        raise click.UsageError(
            "An effective date is required: pass --effective-date "
            "or set NCMC_EFFECTIVE_DATE"
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def read_block(hex_parts: tuple[str, ...], path: Optional[Path]) -> bytes:
    """
    Load block bytes from a binary file or from hex text.

    Whitespace inside the hex is ignored so dumps can be pasted as-is.
    """
    if path is not None:
        return path.read_bytes()
    text = "".join("".join(hex_parts).split())
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise click.BadParameter(f"'{text[:32]}' is not a valid hex string", param_hint="HEX")


def effective_date_option(func):
    return click.option(
        "-e", "--effective-date",
        type=click.IntRange(min=0),
        default=None,
        help="Card effective date in minutes since epoch",
    )(func)


def block_input(func):
    func = click.option(
        "-f", "--file", "path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Read the raw 96-byte block from a binary file",
    )(func)
    func = click.argument("hex_data", nargs=-1)(func)
    return click.argument("area", type=click.Choice(sorted(AREAS), case_sensitive=False))(func)


def _require_input(hex_data: tuple[str, ...], path: Optional[Path]) -> None:
    if not hex_data and path is None:
        raise click.UsageError("Give the block as HEX arguments or with --file")
    if hex_data and path is not None:
        raise click.UsageError("Give either HEX arguments or --file, not both")


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@click.version_option(version=__version__, prog_name="ncmc")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Decode, verify and generate NCMC card CSA/OSA blocks.

    \b
    Commands:
      decode          Print every field of a block
      verify          Check a block re-encodes byte for byte
      sample          Print a populated sample block as hex
      effective-date  Convert YYYY-MM-DD to effective-date minutes
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Decode Command
# =============================================================================

@main.command("decode")
@block_input
@effective_date_option
@click.option(
    "--dump",
    is_flag=True,
    help="Also print a hex dump of the input",
)
@pass_context
def cmd_decode(
    ctx: Context,
    area: str,
    hex_data: tuple[str, ...],
    path: Optional[Path],
    effective_date: Optional[int],
    dump: bool,
) -> None:
    """
    Parse a 96-byte block and print its fields.

    \b
    Examples:
      ncmc decode csa -e 28399680 2B00...
      ncmc decode osa -e 28300000 --file card.osa
    """
    _require_input(hex_data, path)
    effective_date = ctx.resolve_effective_date(effective_date)
    area = area.lower()

    try:
        data = read_block(hex_data, path)
        logger.debug(f"Decoding {len(data)} bytes as {area.upper()} (effective date {effective_date})")
        block = AREAS[area].parse(data, effective_date)

        if dump:
            click.echo(hex_dump(data))
            click.echo()
        fmt = ctx.config.time_format
        click.echo(format_csa(block, fmt) if area == "csa" else format_osa(block, fmt))

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Decode")


# =============================================================================
# Verify Command
# =============================================================================

@main.command("verify")
@block_input
@effective_date_option
@pass_context
def cmd_verify(
    ctx: Context,
    area: str,
    hex_data: tuple[str, ...],
    path: Optional[Path],
    effective_date: Optional[int],
) -> None:
    """
    Parse a block, re-encode it and compare the bytes.

    Exits with status 1 if any byte differs.
    """
    _require_input(hex_data, path)
    effective_date = ctx.resolve_effective_date(effective_date)
    area = area.lower()

    try:
        data = read_block(hex_data, path)
        reencoded = AREAS[area].parse(data, effective_date).to_bytes()
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Verify")

    mismatches = [i for i, (a, b) in enumerate(zip(data, reencoded)) if a != b]
    if mismatches:
        click.echo(f"{area.upper()}: MISMATCH at {len(mismatches)} byte(s)", err=True)
        for offset in mismatches:
            click.echo(
                f"  offset {offset:2d}: input 0x{data[offset]:02X}, "
                f"re-encoded 0x{reencoded[offset]:02X}",
                err=True,
            )
        sys.exit(ExitCode.CODEC_ERROR)

    click.echo(f"{area.upper()}: OK ({len(reencoded)} bytes re-encode identically)")


# =============================================================================
# Sample Command
# =============================================================================

@main.command("sample")
@click.argument("area", type=click.Choice(sorted(AREAS), case_sensitive=False))
@effective_date_option
@click.option(
    "--show",
    is_flag=True,
    help="Print the decoded fields instead of hex",
)
@pass_context
def cmd_sample(ctx: Context, area: str, effective_date: Optional[int], show: bool) -> None:
    """
    Print a populated sample block.

    Without --effective-date the sample uses its own fixed effective date
    (or NCMC_EFFECTIVE_DATE when set).
    """
    area = area.lower()
    if effective_date is None:
        effective_date = ctx.config.effective_date
    if effective_date is None:
        effective_date = SAMPLE_EFFECTIVE_DATES[area]

    try:
        block = SAMPLES[area](effective_date)
        if show:
            fmt = ctx.config.time_format
            click.echo(format_csa(block, fmt) if area == "csa" else format_osa(block, fmt))
        else:
            click.echo(block.to_bytes().hex().upper())
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Sample")


# =============================================================================
# Effective Date Command
# =============================================================================

@main.command("effective-date")
@click.argument("date_text", metavar="YYYY-MM-DD")
def cmd_effective_date(date_text: str) -> None:
    """
    Print the effective date (minutes since epoch) for a UTC calendar day.

    \b
    Example:
      ncmc effective-date 2023-12-31     # prints 28399680
    """
    try:
        minutes = effective_date_from_utc(date_text)
    except ValueError:
        raise click.BadParameter(f"'{date_text}' is not a YYYY-MM-DD date", param_hint="DATE")
    click.echo(str(minutes))


if __name__ == "__main__":
    main()
