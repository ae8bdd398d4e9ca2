"""
Scene Presets

The three terminal screens of the holographic demo. Each scene is a canvas
size, a beam origin and a list of panel configurations whose content is a
plain list of text lines for the host to render.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..animations.animation_config import PanelConfig
from ..core.error_handling import ConfigurationError
from ..core.geometry import Point, Rect


CANVAS_SIZE = (900.0, 550.0)
DEFAULT_ORIGIN = Point(450.0, 275.0)
SCENE_SPEED = 1.5

CYAN = "#00f0ff"
VIOLET = "#8800ff"
MAGENTA = "#ff00ff"
AMBER = "#ffcc00"
GREEN = "#00ff66"


@dataclass(frozen=True)
class Scene:
    """A named panel layout sharing one beam origin."""
    name: str
    panels: Tuple[PanelConfig, ...]
    origin: Point = DEFAULT_ORIGIN
    size: Tuple[float, float] = CANVAS_SIZE


def _panel(panel_id: str, bounds: Tuple[float, float, float, float], color: str, delay: float,
           title: str, lines: List[str]) -> PanelConfig:
    return PanelConfig(
        panel_id=panel_id,
        bounds=Rect(*bounds),
        color=color,
        start_delay=delay,
        speed=SCENE_SPEED,
        title=title,
        content=lines,
    )


AGENTS = ["SHOKAT", "MENDEZ", "YAKOVLEV", "CHEN"]

SCENES: Dict[str, Scene] = {
    "briefing": Scene(
        name="briefing",
        panels=(
            _panel("mission-briefing", (30, 30, 380, 180), CYAN, 0, "Mission Briefing", [
                "► PRIORITY: ALPHA",
                "Target: Professor Klein",
                "Location: Sector 7-G Industrial",
                "Objective: Extract subject before rival syndicate intercepts.",
            ]),
            _panel("zone-map", (30, 230, 380, 290), VIOLET, 500, "Zone Map", [
                "GRID 8x8",
                "TARGET: grid 5-6",
                "AGENTS: 2 deployed",
            ]),
            _panel("intel-feed", (440, 30, 430, 490), CYAN, 900, "Intel Feed", [
                "[12:47:23] INTERCEPT Enemy patrol detected in grid 4-C. "
                "Recommend alternate route via maintenance tunnels.",
                "[12:44:51] ALERT Rival syndicate \"EuroCorp\" agents confirmed in sector. "
                "Armed response authorized.",
                "[12:42:08] UPDATE Target confirmed at research facility. "
                "Security level: moderate. Window: 15 minutes.",
                "[12:38:00] MISSION START Agents deployed. Comm channel open. Good hunting, operatives.",
            ]),
        ),
    ),
    "equipment": Scene(
        name="equipment",
        panels=(
            _panel("agent-roster", (30, 30, 240, 490), CYAN, 0, "Agent Roster",
                   [f"{i + 1} {agent} COMBAT READY" for i, agent in enumerate(AGENTS)]),
            _panel("armoury", (300, 30, 270, 280), MAGENTA, 500, "Armoury", [
                "⌐ UZI SMG EQUIPPED",
                "╦ MINIGUN EQUIPPED",
                "◎ PERSUADERTRON EQUIPPED",
                "+ MEDIKIT",
                "◆ EXPLOSIVES",
            ]),
            _panel("modifications", (300, 330, 270, 190), AMBER, 800, "Modifications", [
                "► CYBERNETIC LEGS v3",
                "► NEURAL ENHANCER",
                "► CHEST HARDENING [LOCKED]",
            ]),
            _panel("budget", (600, 30, 270, 150), GREEN, 600, "Budget", [
                "50,000",
                "CREDITS AVAILABLE",
            ]),
        ),
    ),
    "cryovat": Scene(
        name="cryovat",
        panels=(
            _panel("cryogenic-storage", (30, 30, 500, 180), CYAN, 0, "Cryogenic Storage",
                   [f"◉ {agent}" for agent in AGENTS]),
            _panel("vital-statistics", (30, 230, 280, 290), GREEN, 500, "Vital Statistics", [
                "HEALTH 85%",
                "STAMINA 92%",
                "ADRENALINE 40%",
                "NEURAL SYNC 78%",
            ]),
            _panel("enhancement-queue", (340, 230, 530, 290), MAGENTA, 800, "Enhancement Queue", [
                "IN PROGRESS: ARM CYBERNETICS v2 (67% COMPLETE - 2:34 REMAINING)",
                "QUEUED: OCULAR IMPLANT (COST: 15,000 CREDITS)",
            ]),
            _panel("agent-shokat", (560, 30, 310, 180), AMBER, 400, "Agent: Shokat", [
                "CLASS: ASSAULT SPECIALIST",
                "MISSIONS: 47 COMPLETED",
                "KILLS: 312",
                "STATUS: COMBAT READY",
            ]),
        ),
    ),
}


def available_scenes() -> List[str]:
    return list(SCENES.keys())


def get_scene(name: str) -> Scene:
    """
    Look up a scene preset by name (case-insensitive).

    Raises:
        ConfigurationError: If no scene has that name
    """
    try:
        return SCENES[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown scene {name!r}; available: {', '.join(available_scenes())}",
            component="scenes",
            operation="get_scene",
        ) from None
