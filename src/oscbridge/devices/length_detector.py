"""
Penetrator length detection from root and tip proximity.

The root and tip proximity parameters arrive as separate OSC messages, so a
large share of the recorded (tip - root) differences mix a fresh reading with
a stale one. The true length keeps recurring across sampling windows while the
mixed readings scatter, so the estimate is taken from the tightest pair in the
recent history.
"""

import logging
from typing import Any, List, Optional, Tuple

from ..config import DetectorConfig
from ..osc.value import as_number

logger = logging.getLogger(__name__)


class LengthDetector:
    """Estimates the length of a nearby penetrator.

    Readings are proximities in [0, 1] from 1m receiver spheres, so the
    resulting lengths are in meters.
    """

    def __init__(self, config: Optional[DetectorConfig] = None, name: str = ""):
        self.config = config or DetectorConfig()
        self.name = name
        self._length: Optional[float] = None
        self._recent_samples: List[float] = []
        # Best length seen while the tip was inside, where it can't be measured properly
        self._penetrating_sample: Optional[float] = None

    def get_length(self) -> Optional[float]:
        return self._length

    @property
    def recent_samples(self) -> Tuple[float, ...]:
        """History, most recent first."""
        return tuple(self._recent_samples)

    @property
    def penetrating_sample(self) -> Optional[float]:
        return self._penetrating_sample

    def update(self, root_prox: Any, tip_prox: Any) -> None:
        """Feed the current root and tip proximity readings."""
        cfg = self.config
        root = as_number(root_prox)
        tip = as_number(tip_prox)

        if root is None or tip is None:
            self._reset("missing data")
            return
        if root < cfg.absent_threshold or tip < cfg.absent_threshold:
            self._reset("nobody in radius")
            return
        if root > cfg.root_inside_threshold:
            # Their root is at the center of our receiver, keep what we had
            logger.debug("%s: ignoring sample, root inside (root=%.3f)", self.name, root)
            return

        length = tip - root
        if length < cfg.min_length:
            logger.debug("%s: ignoring short or backward sample %.3f", self.name, length)
            return

        if tip > cfg.penetrating_threshold:
            if self._penetrating_sample is None or length > self._penetrating_sample:
                self._penetrating_sample = length
                self._update_length_from_samples()
        else:
            self._save_sample(length)

    def _reset(self, reason: str) -> None:
        if self._recent_samples or self._penetrating_sample is not None:
            logger.debug("%s: clearing length history (%s)", self.name, reason)
        self._penetrating_sample = None
        self._save_sample(None)

    def _save_sample(self, sample: Optional[float]) -> None:
        if sample is None:
            self._recent_samples.clear()
        else:
            self._recent_samples.insert(0, sample)
            del self._recent_samples[self.config.max_samples:]
        self._update_length_from_samples()

    def _update_length_from_samples(self) -> None:
        self._length = self._calculate_length_from_samples()

    def _calculate_length_from_samples(self) -> Optional[float]:
        if len(self._recent_samples) < self.config.min_samples:
            return self._penetrating_sample

        sorted_samples = sorted(self._recent_samples)
        smallest_diff = 1.0
        smallest_diff_index = -1
        for i in range(1, len(sorted_samples)):
            diff = abs(sorted_samples[i] - sorted_samples[i - 1])
            if diff < smallest_diff:
                smallest_diff = diff
                smallest_diff_index = i

        if smallest_diff_index >= 0:
            return sorted_samples[smallest_diff_index]
        return self._recent_samples[0]
