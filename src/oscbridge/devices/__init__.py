"""
Game devices and their length detectors.
"""

from .game_device import DeviceKey, GameDevice, parse_version_key
from .length_detector import LengthDetector

__all__ = ["DeviceKey", "GameDevice", "LengthDetector", "parse_version_key"]
