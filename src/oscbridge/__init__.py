"""
oscbridge: game device feature extraction

Turns the OSC contact parameters published by in-game devices into stable
penetrator length estimates and normalized feature values.
"""

__version__ = "0.1.0"
__description__ = "Game device length detection and feature extraction"

# Package-level imports for convenience
from .config import Config, DetectorConfig
from .devices import GameDevice, LengthDetector
from .logger import get_logger
from .models import BridgeSource, DeviceType
from .osc import OscValue

__all__ = [
    "Config",
    "DetectorConfig",
    "GameDevice",
    "LengthDetector",
    "BridgeSource",
    "DeviceType",
    "OscValue",
    "get_logger",
    "__version__",
]
