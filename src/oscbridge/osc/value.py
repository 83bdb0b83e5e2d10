"""
Named OSC value cells.

An OscValue holds the most recent value received for one OSC parameter and
notifies subscribers synchronously whenever a value arrives.
"""

import logging
from typing import Any, Callable, List, Optional, Union

logger = logging.getLogger(__name__)

OscScalar = Union[int, float, bool, None]


def as_number(value: Any) -> Optional[float]:
    """Return value if it is numeric (bools excluded), else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def as_bool(value: Any) -> bool:
    return bool(value)


class OscValue:
    """Single OSC parameter value with change notification."""

    def __init__(self, value: OscScalar = None):
        self._value = value
        self._listeners: List[Callable[[], Any]] = []

    def get(self) -> OscScalar:
        return self._value

    def set(self, value: OscScalar) -> None:
        """
        Store a received value and notify listeners.

        Every received value notifies, repeats included; each one is a new
        sample for whatever consumes it.
        """
        self._value = value
        for listener in list(self._listeners):
            listener()

    def clear(self) -> None:
        self.set(None)

    def on_change(self, callback: Callable[[], Any]) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], Any]) -> bool:
        try:
            self._listeners.remove(callback)
            return True
        except ValueError:
            logger.debug("Listener was not subscribed")
            return False

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"OscValue({self._value!r})"
