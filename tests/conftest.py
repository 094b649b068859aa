"""Shared test fixtures and configuration."""

import sys
from datetime import datetime, timezone
from pathlib import Path

# Add hr_scheduler/ to Python path so `from schedcheck.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "hr_scheduler"))

import pytest

from schedcheck.validation.engine import ValidationEngine

# A Monday morning, so the working-hours rule is quiet by default
FIXED_NOW = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def engine() -> ValidationEngine:
    return ValidationEngine(clock=lambda: FIXED_NOW)
