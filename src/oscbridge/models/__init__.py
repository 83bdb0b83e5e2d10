"""
oscbridge Models Package

Data models for the feature values produced by game devices.
"""

from .bridge import BridgeSource, DeviceType

__all__ = ["BridgeSource", "DeviceType"]
