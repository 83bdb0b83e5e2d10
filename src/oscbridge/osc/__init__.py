"""
OSC value cells consumed by game devices.
"""

from .value import OscValue, OscScalar, as_number, as_bool

__all__ = ["OscValue", "OscScalar", "as_number", "as_bool"]
