"""
Easing Functions for Derived Render Values

Beam and fill progress are linear in time; easing only reshapes the values a
renderer reads from a snapshot (beam tip position, fill opacity).
"""

from typing import Callable

from .animation_config import EasingFunction


def linear(t: float) -> float:
    return t


def ease_in_cubic(t: float) -> float:
    return t * t * t


def ease_out_cubic(t: float) -> float:
    return 1 - pow(1 - t, 3)


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    return 1 - pow(-2 * t + 2, 3) / 2


EASING_FUNCTIONS: dict[EasingFunction, Callable[[float], float]] = {
    EasingFunction.LINEAR: linear,
    EasingFunction.EASE_IN: ease_in_cubic,
    EasingFunction.EASE_OUT: ease_out_cubic,
    EasingFunction.EASE_IN_OUT: ease_in_out_cubic,
}


def apply_easing(progress: float, easing: EasingFunction) -> float:
    """Clamp progress to [0, 1] and apply the easing curve."""
    progress = max(0.0, min(1.0, progress))
    return EASING_FUNCTIONS.get(easing, linear)(progress)
