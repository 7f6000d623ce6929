"""Shared fixtures."""

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest
from aioresponses import aioresponses as aioresponses_cls

from autograding_action.reporting.base import Reporter


@pytest.fixture
def reporter_mock() -> MagicMock:
    """Create mock reporter; stop_commands works as a context manager."""
    return MagicMock(spec=Reporter)


@pytest.fixture
def aioresponses() -> Iterator[aioresponses_cls]:
    """Intercept aiohttp requests."""
    with aioresponses_cls() as mocked:
        yield mocked
