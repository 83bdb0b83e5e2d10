"""
Bridge Output Models

Pydantic models for the feature values a game device publishes:
- DeviceType: closed set of device roles
- BridgeSource: one named feature value for one device
"""

import math
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class DeviceType(str, Enum):
    """Game device role enumeration."""
    ORIFICE = "orf"
    PENETRATOR = "pen"

    @classmethod
    def parse(cls, raw: str) -> Optional["DeviceType"]:
        """Resolve a raw OSC type name, exactly 'Orf' or 'Pen'."""
        return _RAW_TYPE_NAMES.get(raw)


_RAW_TYPE_NAMES = {
    "Orf": DeviceType.ORIFICE,
    "Pen": DeviceType.PENETRATOR,
}


class BridgeSource(BaseModel):
    """
    A single feature value produced by a game device.

    Values are normally in [0, 1]. The geometric pen estimate is not clamped,
    so values slightly outside that range are passed through as measured.
    """
    model_config = ConfigDict(frozen=True)

    device_type: DeviceType = Field(..., description="Device role")
    device_id: str = Field(..., description="Device identifier")
    feature_name: str = Field(..., description="Feature name, e.g. 'penSelf'")
    value: float = Field(..., description="Normalized feature value")

    @property
    def percent(self) -> int:
        # Halves round up
        return int(math.floor(self.value * 100 + 0.5))

    def as_tuple(self) -> Tuple[str, str, str, float]:
        return (self.device_type.value, self.device_id, self.feature_name, self.value)
