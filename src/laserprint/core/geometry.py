"""
Geometry Primitives

Immutable point and rectangle values shared by the animators, the panel state
machine and the display list builder.
"""

import math
from dataclasses import dataclass
from typing import Any, Tuple


CORNER_NAMES = ("top_left", "top_right", "bottom_right", "bottom_left")


@dataclass(frozen=True)
class Point:
    """A 2D coordinate."""
    x: float = 0.0
    y: float = 0.0

    def lerp(self, target: "Point", t: float) -> "Point":
        """Interpolate linearly toward ``target``; ``t`` is not clamped."""
        return Point(self.x + (target.x - self.x) * t, self.y + (target.y - self.y) * t)

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @classmethod
    def coerce(cls, value: Any) -> "Point":
        """
        Build a point from a Point, an ``(x, y)`` pair or a mapping.

        Raises:
            TypeError: If the value has no recognisable point shape
        """
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls(float(value["x"]), float(value["y"]))
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(float(value[0]), float(value[1]))
        raise TypeError(f"Cannot interpret {value!r} as a point")


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle anchored at its top-left corner."""
    x: float
    y: float
    width: float
    height: float

    @property
    def is_valid(self) -> bool:
        """True when all values are finite and both dimensions are positive."""
        values = (self.x, self.y, self.width, self.height)
        return all(math.isfinite(v) for v in values) and self.width > 0 and self.height > 0

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in drawing order: top-left, top-right, bottom-right, bottom-left."""
        right = self.x + self.width
        bottom = self.y + self.height
        return (
            Point(self.x, self.y),
            Point(right, self.y),
            Point(right, bottom),
            Point(self.x, bottom),
        )

    def edge(self, index: int) -> Tuple[Point, Point]:
        """Edge ``index`` runs from corner ``index`` to the next corner clockwise."""
        corners = self.corners()
        return corners[index % 4], corners[(index + 1) % 4]

    def inset(self, left: float, top: float, right: float, bottom: float) -> "Rect":
        return Rect(
            self.x + left,
            self.y + top,
            self.width - left - right,
            self.height - top - bottom,
        )

    @classmethod
    def coerce(cls, value: Any) -> "Rect":
        """
        Build a rectangle from a Rect, a 4-sequence or a mapping.

        Mappings accept ``width``/``height`` or the short ``w``/``h`` keys.

        Raises:
            TypeError: If the value has no recognisable rectangle shape
        """
        if isinstance(value, Rect):
            return value
        if isinstance(value, dict):
            width = value["width"] if "width" in value else value["w"]
            height = value["height"] if "height" in value else value["h"]
            return cls(float(value["x"]), float(value["y"]), float(width), float(height))
        if isinstance(value, (tuple, list)) and len(value) == 4:
            return cls(*(float(v) for v in value))
        raise TypeError(f"Cannot interpret {value!r} as a rectangle")
