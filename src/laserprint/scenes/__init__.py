"""
Preset panel layouts for the holographic terminal screens.
"""

from .presets import CANVAS_SIZE, DEFAULT_ORIGIN, SCENES, Scene, available_scenes, get_scene

__all__ = ["CANVAS_SIZE", "DEFAULT_ORIGIN", "SCENES", "Scene", "available_scenes", "get_scene"]
