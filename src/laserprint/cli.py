"""
LaserPrint Command Line

Simulates a scene's reveal on a deterministic clock and prints the phase
timeline, so timings can be inspected without a host UI.

Usage:
    laserprint --list
    laserprint --scene briefing [--frame-rate 60] [--limit-ms 10000] [--verbose]
"""

import argparse
import sys
from typing import List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .animations.animation_config import PanelPhase, RevealSettings
from .animations.clock import ManualClock
from .animations.reveal_orchestrator import RevealOrchestrator
from .core.error_handling import ConfigurationError
from .scenes import available_scenes, get_scene


PHASE_STYLES = {
    PanelPhase.PENDING: "dim",
    PanelPhase.DRAWING_CORNER: "cyan",
    PanelPhase.EDGES_SETTLED: "magenta",
    PanelPhase.FILLING: "yellow",
    PanelPhase.REVEALED: "bold green",
}


def configure_logging(level: str) -> None:
    """Send loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(),
               format="<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="laserprint",
        description="Simulate the laser print reveal of a panel scene",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--scene", default="briefing", help="Scene preset to simulate")
    parser.add_argument("--list", action="store_true", help="List the available scenes and exit")
    parser.add_argument("--frame-rate", type=float, default=None,
                        help="Simulated frames per second (default from settings)")
    parser.add_argument("--limit-ms", type=float, default=10000.0,
                        help="Give up after this much simulated time")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def simulate_scene(name: str, settings: RevealSettings, limit_ms: float
                   ) -> Tuple[RevealOrchestrator, List[Tuple[float, str, str]], bool]:
    """
    Run one scene to completion on a ManualClock.

    Returns:
        The orchestrator, the recorded ``(time_ms, panel_id, phase)`` events and
        whether every panel was revealed within ``limit_ms``
    """
    scene = get_scene(name)
    clock = ManualClock(frame_interval_ms=settings.frame_interval_ms)
    orchestrator = RevealOrchestrator(clock, settings)
    orchestrator.configure(scene.panels, scene.origin)

    events: List[Tuple[float, str, str]] = []

    @orchestrator.add_phase_listener
    def record(panel_id, phase, corner_index, time_ms):
        label = phase.value if corner_index is None else f"{phase.value}({corner_index})"
        events.append((time_ms, panel_id, label))

    orchestrator.trigger()
    completed = clock.run_until(lambda: orchestrator.all_revealed, limit_ms)
    return orchestrator, events, completed


def render_timeline(console: Console, scene_name: str,
                    events: List[Tuple[float, str, str]]) -> None:
    table = Table(title=f"Reveal timeline: {scene_name}")
    table.add_column("t (ms)", justify="right")
    table.add_column("panel")
    table.add_column("phase")

    for time_ms, panel_id, label in events:
        phase = PanelPhase(label.split("(")[0])
        table.add_row(f"{time_ms:.1f}", panel_id, f"[{PHASE_STYLES[phase]}]{label}[/]")
    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the laserprint command."""
    args = build_parser().parse_args(argv)
    console = Console()

    overrides = {} if args.frame_rate is None else {"frame_rate": args.frame_rate}
    try:
        settings = RevealSettings(**overrides)
    except ValidationError as e:
        console.print(f"[red]Invalid settings: {escape(str(e))}[/red]")
        return 2
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    if args.list:
        for name in available_scenes():
            console.print(name)
        return 0

    try:
        orchestrator, events, completed = simulate_scene(args.scene, settings, args.limit_ms)
    except ConfigurationError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        return 2

    render_timeline(console, args.scene, events)

    summary = orchestrator.get_performance_summary()
    finished_at = orchestrator.clock.now()
    status = "[green]all panels revealed[/green]" if completed else "[red]incomplete[/red]"
    console.print(Panel(
        f"{status} at {finished_at:.1f}ms\n"
        f"panels: {summary['panels_revealed']}/{summary['panels']}  "
        f"frames: {summary['total_frames']}  "
        f"animators: {summary['animations_completed']} completed",
        title="Summary",
    ))
    return 0 if completed else 1
