"""
NCMC SDK - Test Configuration
=============================

pytest configuration shared by all tests.

It provides:
- Hypothesis profiles (select with HYPOTHESIS_PROFILE)
- Logging at DEBUG for the ncmc_sdk package so parse paths are exercised
"""

import logging
import os

import pytest
from hypothesis import settings


# ═══════════════════════════════════════════════════════════════════════════════
# HYPOTHESIS PROFILES
# ═══════════════════════════════════════════════════════════════════════════════

settings.register_profile("default", max_examples=100, deadline=None)
settings.register_profile("ci", max_examples=500, deadline=None)
settings.register_profile("dev", max_examples=10, deadline=None)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


# ═══════════════════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def debug_logging(caplog):
    """Capture ncmc_sdk debug output so log formatting errors surface in tests."""
    caplog.set_level(logging.DEBUG, logger="ncmc_sdk")
    yield caplog
