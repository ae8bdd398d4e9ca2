"""
Display List Builder

Turns panel snapshots into renderer-agnostic shape records. A host walks the
list in order and draws each record with whatever toolkit it uses; nothing
here draws anything.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Union

from ..animations.panel_state import PanelSnapshot
from ..core.geometry import Point, Rect


BEAM_WIDTH = 2.0
BEAM_CORE_RATIO = 0.4
BEAM_CORE_OPACITY = 0.8
BEAM_CORE_COLOR = "#ffffff"
BEAM_TIP_RADIUS = 4.0
BEAM_TIP_OPACITY = 0.9
EDGE_WIDTH = 2.0
EDGE_MARKER_SIZE = 6.0
CORNER_MARKER_SIZE = 8.0
ORIGIN_RADIUS = 6.0
ORIGIN_RING_RADIUS = 12.0
ORIGIN_RING_OPACITY = 0.5
TITLE_OFFSET = (12.0, 22.0)
TITLE_FONT_SIZE = 14.0
CONTENT_INSET = 8.0
CONTENT_TITLE_TOP = 32.0


@dataclass(frozen=True)
class LineShape:
    start: Point
    end: Point
    color: str
    width: float = EDGE_WIDTH
    opacity: float = 1.0
    role: str = "edge"


@dataclass(frozen=True)
class CircleShape:
    center: Point
    radius: float
    color: str
    opacity: float = 1.0
    role: str = "origin"


@dataclass(frozen=True)
class MarkerShape:
    """A filled square centred on a point."""
    center: Point
    size: float
    color: str
    role: str = "edge_marker"

    @property
    def rect(self) -> Rect:
        half = self.size / 2
        return Rect(self.center.x - half, self.center.y - half, self.size, self.size)


@dataclass(frozen=True)
class RectShape:
    bounds: Rect
    fill: Optional[str] = None
    stroke: Optional[str] = None
    opacity: float = 1.0
    stroke_width: float = EDGE_WIDTH
    role: str = "fill"


@dataclass(frozen=True)
class TextShape:
    position: Point
    text: str
    color: str
    font_size: float = TITLE_FONT_SIZE
    role: str = "title"


@dataclass(frozen=True)
class ContentSlot:
    """Area where the host renders the panel's opaque content payload."""
    bounds: Rect
    content: Any
    color: str


Shape = Union[LineShape, CircleShape, MarkerShape, RectShape, TextShape, ContentSlot]


def origin_shapes(origin: Point, color: str = "#00f0ff") -> List[Shape]:
    return [
        CircleShape(center=origin, radius=ORIGIN_RADIUS, color=color, role="origin"),
        CircleShape(center=origin, radius=ORIGIN_RING_RADIUS, color=color,
                    opacity=ORIGIN_RING_OPACITY, role="origin_ring"),
    ]


def beam_shapes(snapshot: PanelSnapshot) -> List[Shape]:
    """The in-flight beam: a glow line, a bright core and a tip dot once it has moved."""
    beam = snapshot.beam
    if beam is None:
        return []

    shapes: List[Shape] = [
        LineShape(beam.origin, beam.tip, snapshot.color, width=BEAM_WIDTH, role="beam"),
        LineShape(beam.origin, beam.tip, BEAM_CORE_COLOR, width=BEAM_WIDTH * BEAM_CORE_RATIO,
                  opacity=BEAM_CORE_OPACITY, role="beam_core"),
    ]
    if beam.progress > 0:
        shapes.append(CircleShape(beam.tip, BEAM_TIP_RADIUS, snapshot.color,
                                  opacity=BEAM_TIP_OPACITY, role="beam_tip"))
    return shapes


def settled_edge_shapes(snapshot: PanelSnapshot) -> List[Shape]:
    shapes: List[Shape] = []
    for index in snapshot.settled_edges:
        start, end = snapshot.bounds.edge(index)
        shapes.append(LineShape(start, end, snapshot.color, width=EDGE_WIDTH, role="edge"))
        shapes.append(MarkerShape(start, EDGE_MARKER_SIZE, snapshot.color, role="edge_marker"))
    return shapes


def frame_shapes(snapshot: PanelSnapshot) -> List[Shape]:
    """Fill, outline and corner markers, shown from EDGES_SETTLED onwards."""
    if not snapshot.frame_visible:
        return []

    shapes: List[Shape] = [
        RectShape(snapshot.bounds, fill=snapshot.color, opacity=snapshot.fill_opacity, role="fill"),
        RectShape(snapshot.bounds, stroke=snapshot.color, role="outline"),
    ]
    shapes.extend(
        MarkerShape(corner, CORNER_MARKER_SIZE, snapshot.color, role="corner_marker")
        for corner in snapshot.bounds.corners()
    )
    return shapes


def content_shapes(snapshot: PanelSnapshot) -> List[Shape]:
    if not snapshot.content_visible:
        return []

    bounds = snapshot.bounds
    shapes: List[Shape] = []
    if snapshot.title:
        position = Point(bounds.x + TITLE_OFFSET[0], bounds.y + TITLE_OFFSET[1])
        shapes.append(TextShape(position, snapshot.title.upper(), snapshot.color))

    if snapshot.content is not None:
        top = CONTENT_TITLE_TOP if snapshot.title else CONTENT_INSET
        slot = bounds.inset(CONTENT_INSET, top, CONTENT_INSET, CONTENT_INSET)
        shapes.append(ContentSlot(slot, snapshot.content, snapshot.color))
    return shapes


def build_panel_shapes(snapshot: PanelSnapshot) -> List[Shape]:
    """All shapes for one panel, back to front."""
    return (
        beam_shapes(snapshot)
        + settled_edge_shapes(snapshot)
        + frame_shapes(snapshot)
        + content_shapes(snapshot)
    )


def build_display_list(snapshots: Iterable[PanelSnapshot], origin: Optional[Point] = None) -> List[Shape]:
    """
    Build the full display list for one frame.

    Args:
        snapshots: Panel snapshots in drawing order
        origin: Beam origin; drawn first when given

    Returns:
        Shapes in drawing order
    """
    shapes: List[Shape] = origin_shapes(origin) if origin is not None else []
    for snapshot in snapshots:
        shapes.extend(build_panel_shapes(snapshot))
    return shapes
