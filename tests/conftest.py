"""
Shared test fixtures for the deferred-railway test suite.

Every test starts from default structlog configuration and freshly loaded
settings, so configuration tests can't leak into engine tests.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog

from deferred_railway.config import get_settings


@pytest.fixture(autouse=True)
def _isolate_configuration() -> Iterator[None]:
    """Reset cached settings and structlog configuration around each test."""
    get_settings.cache_clear()
    structlog.reset_defaults()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture()
def calls() -> list[str]:
    """Ordered record of which step callables ran."""
    return []
