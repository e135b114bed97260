"""Interfaces to the collaborators that consume a generated course.

The generator only produces value data (CourseLayout). Turning it into
renderable/collidable objects is the job of a GeometryEmitter, and
wiring checkpoint triggers/respawn targets is the job of a CourseSink.

build_course() walks a layout and feeds every descriptor and placement
to an emitter, collecting the handles it returns.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .course import CourseLayout, GeometryDescriptor, ObstaclePlacement, Vec3


class GeometryEmitter(Protocol):
    """Creates engine objects for descriptors and placements."""

    def emit_geometry(self, descriptor: GeometryDescriptor, origin: Vec3) -> Any:
        """Create a renderable+collidable object; `origin` is the owning segment/fixture position."""
        ...

    def emit_obstacle(self, placement: ObstaclePlacement, origin: Vec3) -> Any:
        """Create the obstacle and attach its runtime behaviour with the bound params."""
        ...


class CourseSink(Protocol):
    """Receives checkpoints and finish position once generation completes."""

    def course_ready(self, checkpoints: List[Vec3], finish_position: Vec3) -> None:
        ...


@dataclass
class BuiltCourse:
    """Handles returned by an emitter for one layout."""
    segment_handles: List[List[Any]] = field(default_factory=list)
    obstacle_handles: List[List[Any]] = field(default_factory=list)
    fixture_handles: Dict[str, List[Any]] = field(default_factory=dict)

    @property
    def total_handles(self) -> int:
        return (
            sum(len(h) for h in self.segment_handles)
            + sum(len(h) for h in self.obstacle_handles)
            + sum(len(h) for h in self.fixture_handles.values())
        )


def build_course(emitter: GeometryEmitter, layout: CourseLayout) -> BuiltCourse:
    """Emit every fixture, segment shape and obstacle in a layout.

    Args:
        emitter: Engine-side object factory.
        layout: Finished course from CourseGenerator.generate().

    Returns:
        BuiltCourse with the emitter's handles, grouped per segment/fixture.
    """
    built = BuiltCourse()
    for fixture in layout.fixtures:
        built.fixture_handles[fixture.name] = [
            emitter.emit_geometry(g, fixture.position) for g in fixture.geometry
        ]
    for segment in layout.segments:
        built.segment_handles.append([
            emitter.emit_geometry(g, segment.start_position) for g in segment.geometry
        ])
        built.obstacle_handles.append([
            emitter.emit_obstacle(o, segment.start_position) for o in segment.obstacles
        ])
    return built


class RecordingEmitter:
    """In-memory emitter: handles are indices into `geometry` / `obstacles`."""

    def __init__(self):
        self.geometry: List[Tuple[GeometryDescriptor, Vec3]] = []
        self.obstacles: List[Tuple[ObstaclePlacement, Vec3]] = []

    def emit_geometry(self, descriptor: GeometryDescriptor, origin: Vec3) -> int:
        self.geometry.append((descriptor, origin))
        return len(self.geometry) - 1

    def emit_obstacle(self, placement: ObstaclePlacement, origin: Vec3) -> int:
        self.obstacles.append((placement, origin))
        return len(self.obstacles) - 1

    def world_positions(self) -> List[Vec3]:
        """World position of every emitted shape, in emission order."""
        return [origin + d.position for d, origin in self.geometry]


class RecordingSink:
    """Keeps the last checkpoint list / finish position it was handed."""

    def __init__(self):
        self.calls = 0
        self.checkpoints: List[Vec3] = []
        self.finish_position: Optional[Vec3] = None

    def course_ready(self, checkpoints: List[Vec3], finish_position: Vec3) -> None:
        self.calls += 1
        self.checkpoints = list(checkpoints)
        self.finish_position = finish_position
