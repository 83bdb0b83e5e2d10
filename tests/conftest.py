"""
Pytest configuration and fixtures for oscbridge tests.
"""

import os
from typing import Callable, Generator

import pytest
from unittest.mock import patch

from oscbridge.config import DetectorConfig
from oscbridge.devices import GameDevice, LengthDetector
from oscbridge.osc import OscValue


@pytest.fixture
def mock_env_vars() -> Generator[dict, None, None]:
    """Mock environment variables for testing."""
    test_env = {
        "OSCBRIDGE_MAX_SAMPLES": "10",
        "OSCBRIDGE_MIN_SAMPLES": "3",
        "OSCBRIDGE_PENETRATING_THRESHOLD": "0.98",
        "LOG_LEVEL": "DEBUG",
        "LOG_BACKUP_COUNT": "2"
    }

    with patch.dict(os.environ, test_env, clear=False):
        yield test_env


@pytest.fixture
def detector() -> LengthDetector:
    """Length detector with default thresholds."""
    return LengthDetector(DetectorConfig(), name="test")


@pytest.fixture
def feed() -> Callable[[GameDevice, str, object], OscValue]:
    """Set a device channel, registering it on first use."""

    def _feed(device: GameDevice, key: str, value: object) -> OscValue:
        channel = device.get(key)
        if channel is None:
            channel = OscValue()
            device.add_key(key, channel)
        channel.set(value)
        return channel

    return _feed


@pytest.fixture
def orf_device() -> GameDevice:
    return GameDevice("Orf", "vagina", is_tps=False)


@pytest.fixture
def pen_device() -> GameDevice:
    return GameDevice("Pen", "pen1", is_tps=False)
