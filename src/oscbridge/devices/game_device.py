"""
Game devices.

A GameDevice owns the OSC values published for one orifice or penetrator in
the game and turns them into the feature values consumed by the bridge.
"""

from typing import Callable, Dict, List, Optional

from ..config import DetectorConfig
from ..logger import get_device_adapter
from ..models.bridge import BridgeSource, DeviceType
from ..osc.value import OscValue, as_bool, as_number
from .length_detector import LengthDetector


class DeviceKey:
    """Standard contact key names published under a device."""
    TOUCH_SELF = "TouchSelf"
    TOUCH_OTHERS = "TouchOthers"
    PEN_SELF = "PenSelf"
    PEN_OTHERS = "PenOthers"
    FROT_OTHERS = "FrotOthers"
    DEPTH_IN = "Depth_In"
    ROOT_ROOT = "RootRoot"
    PEN_SELF_NEW_ROOT = "PenSelfNewRoot"
    PEN_SELF_NEW_TIP = "PenSelfNewTip"
    PEN_OTHERS_NEW_ROOT = "PenOthersNewRoot"
    PEN_OTHERS_NEW_TIP = "PenOthersNewTip"
    TOUCH_SELF_CLOSE = "TouchSelfClose"
    TOUCH_OTHERS_CLOSE = "TouchOthersClose"
    FROT_OTHERS_CLOSE = "FrotOthersClose"


VERSION_PREFIX = "Version"


def parse_version_key(key: str) -> Optional[int]:
    """Return the version encoded in a 'Version/<n>' key, or None."""
    parts = key.split("/")
    if len(parts) != 2 or parts[0] != VERSION_PREFIX:
        return None
    # Plain ASCII digits only, no sign or separators
    if not (parts[1].isascii() and parts[1].isdigit()):
        return None
    return int(parts[1])


class GameDevice:
    """
    Channel state and feature derivation for one in-game device.

    Args:
        device_type: Raw device type from OSC, probably 'Orf' or 'Pen'
        device_id: Device identifier
        is_tps: Whether the device uses the TPS parameter set
        detector_config: Length detector settings
    """

    def __init__(
        self,
        device_type: str,
        device_id: str,
        is_tps: bool,
        detector_config: Optional[DetectorConfig] = None
    ):
        self.type = device_type
        self.id = device_id
        self.is_tps = is_tps
        self.kind = DeviceType.parse(device_type)
        self._values: Dict[str, OscValue] = {}
        self._recorded_self_length = LengthDetector(detector_config, name=f"{device_id}/self")
        self._recorded_others_length = LengthDetector(detector_config, name=f"{device_id}/others")
        self._version: Optional[int] = None
        self.logger = get_device_adapter(device_type, device_id)

        self._key_handlers: Dict[str, Callable[[], None]] = {
            DeviceKey.PEN_SELF_NEW_ROOT: self._update_self_length,
            DeviceKey.PEN_SELF_NEW_TIP: self._update_self_length,
            DeviceKey.PEN_OTHERS_NEW_ROOT: self._update_others_length,
            DeviceKey.PEN_OTHERS_NEW_TIP: self._update_others_length,
        }

    @property
    def self_length_detector(self) -> LengthDetector:
        return self._recorded_self_length

    @property
    def others_length_detector(self) -> LengthDetector:
        return self._recorded_others_length

    @property
    def keys(self) -> List[str]:
        return list(self._values)

    def add_key(self, key: str, value: OscValue) -> None:
        self._values[key] = value
        value.on_change(lambda: self.on_key_change(key))

        version = parse_version_key(key)
        if version is not None:
            if version != self._version:
                self.logger.info("Detected device version %d", version)
            self._version = version

    def on_key_change(self, key: str) -> None:
        handler = self._key_handlers.get(key)
        if handler is not None:
            handler()

    def _update_self_length(self) -> None:
        self._recorded_self_length.update(
            self._get_raw(DeviceKey.PEN_SELF_NEW_ROOT),
            self._get_raw(DeviceKey.PEN_SELF_NEW_TIP)
        )

    def _update_others_length(self) -> None:
        self._recorded_others_length.update(
            self._get_raw(DeviceKey.PEN_OTHERS_NEW_ROOT),
            self._get_raw(DeviceKey.PEN_OTHERS_NEW_TIP)
        )

    def _detector(self, self_role: bool) -> LengthDetector:
        return self._recorded_self_length if self_role else self._recorded_others_length

    def get_new_pen_amount(self, self_role: bool) -> Optional[float]:
        """
        Penetration depth from the root/tip proximity and the detected length.

        Returns 0 while the tip is outside, None if the length is unknown or
        either proximity is missing. The result is not clamped to [0, 1].
        """
        length = self._detector(self_role).get_length()
        if length is None or not length > 0:
            return None

        root_prox = self.get_number(DeviceKey.PEN_SELF_NEW_ROOT if self_role else DeviceKey.PEN_OTHERS_NEW_ROOT)
        tip_prox = self.get_number(DeviceKey.PEN_SELF_NEW_TIP if self_role else DeviceKey.PEN_OTHERS_NEW_TIP)
        if root_prox is None or tip_prox is None:
            return None

        config = self._detector(self_role).config
        if tip_prox > config.penetrating_threshold:
            exposed_length = 1 - root_prox
            exposed_ratio = exposed_length / length
            return 1 - exposed_ratio
        return 0.0

    def get_legacy_pen_amount(self, self_role: bool) -> Optional[float]:
        return self.get_number(DeviceKey.PEN_SELF if self_role else DeviceKey.PEN_OTHERS)

    def get_pen_amount(self, self_role: bool) -> Optional[float]:
        new_amount = self.get_new_pen_amount(self_role)
        if new_amount is not None:
            return new_amount
        return self.get_legacy_pen_amount(self_role)

    def get(self, key: str) -> Optional[OscValue]:
        return self._values.get(key)

    def _get_raw(self, key: str):
        value = self._values.get(key)
        return value.get() if value is not None else None

    def get_bool(self, key: str) -> bool:
        return as_bool(self._get_raw(key))

    def get_number(self, key: str) -> Optional[float]:
        return as_number(self._get_raw(key))

    def _gated(self, guard_key: str, value_key: str) -> float:
        if not self.get_bool(guard_key):
            return 0
        return self.get_number(value_key) or 0

    def get_sources(self) -> List[BridgeSource]:
        """Build the feature list for the device's type and parameter set."""
        if self.kind is None:
            return []

        def source(feature_name: str, value: Optional[float]) -> BridgeSource:
            return BridgeSource(
                device_type=self.kind,
                device_id=self.id,
                feature_name=feature_name,
                value=value if value is not None else 0
            )

        if self.is_tps:
            if self.kind == DeviceType.ORIFICE:
                return [source("penOthers", self.get_number(DeviceKey.DEPTH_IN))]
            return [source("penOthers", self.get_number(DeviceKey.ROOT_ROOT))]

        sources = [
            source("touchSelf", self._gated(DeviceKey.TOUCH_SELF_CLOSE, DeviceKey.TOUCH_SELF)),
            source("touchOthers", self._gated(DeviceKey.TOUCH_OTHERS_CLOSE, DeviceKey.TOUCH_OTHERS)),
        ]
        if self.kind == DeviceType.ORIFICE:
            sources += [
                source("penSelfLegacy", self.get_legacy_pen_amount(True)),
                source("penSelfNew", self.get_new_pen_amount(True)),
                source("penSelf", self.get_pen_amount(True)),
                source("penOthersLegacy", self.get_legacy_pen_amount(False)),
                source("penOthersNew", self.get_new_pen_amount(False)),
                source("penOthers", self.get_pen_amount(False)),
                source("frotOthers", self.get_number(DeviceKey.FROT_OTHERS)),
            ]
        else:
            sources += [
                source("penSelf", self.get_legacy_pen_amount(True)),
                source("penOthers", self.get_legacy_pen_amount(False)),
                source("frotOthers", self._gated(DeviceKey.FROT_OTHERS_CLOSE, DeviceKey.FROT_OTHERS)),
            ]
        return sources

    def get_status(self) -> str:
        out = [f"{self.type}:{self.id}"]
        self_length = self._recorded_self_length.get_length()
        others_length = self._recorded_others_length.get_length()
        if self_length:
            out.append(f"  Nearby self-penetrator length: {self_length:.2f}m")
        if others_length:
            out.append(f"  Nearby penetrator length: {others_length:.2f}m")
        for source in self.get_sources():
            out.append(f"  {source.feature_name}={source.percent}%")
        version = self.get_version()
        out.append(f"  version={version if version is not None else 'unknown'}")
        return "\n".join(out)

    def get_version(self) -> Optional[int]:
        return self._version

    def __repr__(self) -> str:
        return f"GameDevice({self.type!r}, {self.id!r}, is_tps={self.is_tps})"
