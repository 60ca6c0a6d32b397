"""
NCMC SDK - Configuration
========================

Settings for the command-line tool. Configuration can come from:
- Default values (defined here)
- Environment variables

The codec classes take no configuration; the effective date is always
passed explicitly to containers and records.

Copyright (c) 2026 NCMC SDK Contributors
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os

from ncmc_sdk.timeutil import DEFAULT_DATETIME_FORMAT


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CodecConfig:
    """
    Configuration for the ncmc command-line tool.

    Attributes:
        effective_date: Default card effective date in minutes since epoch,
            used when a command is not given --effective-date
        log_level: Logging level name (default: "WARNING")
        time_format: strftime format for displayed timestamps
    """

    effective_date: Optional[int] = None
    log_level: str = "WARNING"
    time_format: str = DEFAULT_DATETIME_FORMAT

    @classmethod
    def from_env(cls) -> "CodecConfig":
        """
        Create CodecConfig from environment variables.

        Environment variables (all optional):
            NCMC_EFFECTIVE_DATE: Effective date in minutes (non-negative integer)
            NCMC_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
            NCMC_TIME_FORMAT: strftime format string

        Returns:
            CodecConfig with values from environment variables
        """
        config = cls()

        if effective_date := os.environ.get("NCMC_EFFECTIVE_DATE"):
            try:
                value = int(effective_date)
                if value >= 0:
                    config.effective_date = value
            except ValueError:
                pass  # Ignore invalid values

        if log_level := os.environ.get("NCMC_LOG_LEVEL"):
            if log_level.upper() in LOG_LEVELS:
                config.log_level = log_level.upper()

        if time_format := os.environ.get("NCMC_TIME_FORMAT"):
            config.time_format = time_format

        return config

    def get_log_level(self) -> int:
        """Numeric logging level for logging.basicConfig()."""
        return getattr(logging, self.log_level, logging.WARNING)
