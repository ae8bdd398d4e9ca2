"""
Core value types and errors shared across the reveal engine.
"""

from .error_handling import ConfigurationError, LaserPrintError, SchedulingError
from .geometry import Point, Rect

__all__ = [
    "ConfigurationError",
    "LaserPrintError",
    "SchedulingError",
    "Point",
    "Rect",
]
