"""Value types describing a generated obstacle course.

Everything the generator produces is plain, immutable data:
- GeometryDescriptor: one shape (slab, cube, cylinder, sphere, trigger)
- ObstaclePlacement: a hazard archetype with its frozen runtime parameters
- SegmentRecord: one built segment and everything placed inside it
- CourseLayout: the finished course handed to emitters and sinks

Positions inside a segment are local to the segment's start position.
Axis convention: x = lateral, y = vertical, z = forward.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .config import GenerationConfig


@dataclass(frozen=True)
class Vec3:
    """Immutable 3D vector."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: float) -> "Vec3":
        return Vec3(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def forward(self, distance: float) -> "Vec3":
        """Copy moved `distance` along +z."""
        return Vec3(self.x, self.y, self.z + distance)

    def up(self, distance: float) -> "Vec3":
        """Copy moved `distance` along +y."""
        return Vec3(self.x, self.y + distance, self.z)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


ORIGIN = Vec3()
AXIS_UP = Vec3(0.0, 1.0, 0.0)
AXIS_RIGHT = Vec3(1.0, 0.0, 0.0)
AXIS_FORWARD = Vec3(0.0, 0.0, 1.0)


class SegmentType(Enum):
    """Segment archetypes."""
    STRAIGHT = "straight"
    RAMP = "ramp"
    NARROW_BRIDGE = "narrow_bridge"
    PLATFORM = "platform"
    GAUNTLET = "gauntlet"
    SLIDING_FLOOR = "sliding_floor"
    TUMBLING_BLOCKS = "tumbling_blocks"


class ObstacleType(Enum):
    """Obstacle archetypes.

    The first seven are placed by obstacle population. The last three are
    owned by the segment builders that create them (moving sub-platforms,
    slime zones, falling blocks).
    """
    SPINNING_BAR = "spinning_bar"
    PENDULUM = "pendulum"
    BUMPER = "bumper"
    WINDMILL = "windmill"
    PUNCH_WALL = "punch_wall"
    ROLLER = "roller"
    LAUNCHER = "launcher"
    MOVING_PLATFORM = "moving_platform"
    SLIME_ZONE = "slime_zone"
    FALLING_TILE = "falling_tile"


class ShapeKind(Enum):
    SLAB = "slab"
    CUBE = "cube"
    CYLINDER = "cylinder"
    SPHERE = "sphere"
    TRIGGER = "trigger"  # invisible box volume


class GeometryRole(Enum):
    FLOOR = "floor"
    WALL = "wall"
    DECOR = "decor"
    HAZARD_ZONE = "hazard_zone"
    TRIGGER = "trigger"
    OBSTACLE = "obstacle"


Color = Tuple[float, float, float, float]


@dataclass(frozen=True)
class GeometryDescriptor:
    """A single renderable/collidable shape.

    rotation holds Euler angles in degrees (pitch, yaw, roll). Positive
    pitch raises the far (+z) end of the shape.
    """
    kind: ShapeKind
    role: GeometryRole
    name: str
    position: Vec3
    size: Vec3
    rotation: Vec3 = ORIGIN
    material: Any = None
    color: Optional[Color] = None

    @property
    def pitch(self) -> float:
        return self.rotation.x

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "role": self.role.value,
            "name": self.name,
            "position": self.position.as_tuple(),
            "size": self.size.as_tuple(),
            "rotation": self.rotation.as_tuple(),
            "material": None if self.material is None else str(self.material),
            "color": self.color,
        }


@dataclass(frozen=True)
class ObstaclePlacement:
    """A hazard decided at generation time.

    params are computed once from the difficulty in force when the
    obstacle was emitted and are never recomputed afterwards.
    """
    archetype: ObstacleType
    position: Vec3
    params: Dict[str, float] = field(default_factory=dict)
    axis: Optional[Vec3] = None
    parts: Tuple[GeometryDescriptor, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "archetype": self.archetype.value,
            "position": self.position.as_tuple(),
            "params": dict(self.params),
            "axis": None if self.axis is None else self.axis.as_tuple(),
            "parts": [p.to_dict() for p in self.parts],
        }


@dataclass(frozen=True)
class SegmentRecord:
    """One built segment.

    end_position == start_position.forward(length).up(elevation_delta).
    Only ramps have a non-zero elevation delta.
    """
    index: int
    archetype: SegmentType
    start_position: Vec3
    end_position: Vec3
    length: float
    width: float
    difficulty: float
    elevation_delta: float = 0.0
    geometry: Tuple[GeometryDescriptor, ...] = ()
    obstacles: Tuple[ObstaclePlacement, ...] = ()

    @property
    def hazard_count(self) -> int:
        """Obstacles placed by population (excludes builder-owned behaviours)."""
        return sum(1 for o in self.obstacles if o.archetype in POPULATION_OBSTACLES)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "archetype": self.archetype.value,
            "start_position": self.start_position.as_tuple(),
            "end_position": self.end_position.as_tuple(),
            "length": self.length,
            "width": self.width,
            "difficulty": self.difficulty,
            "elevation_delta": self.elevation_delta,
            "geometry": [g.to_dict() for g in self.geometry],
            "obstacles": [o.to_dict() for o in self.obstacles],
        }


POPULATION_OBSTACLES = frozenset({
    ObstacleType.SPINNING_BAR,
    ObstacleType.PENDULUM,
    ObstacleType.BUMPER,
    ObstacleType.WINDMILL,
    ObstacleType.PUNCH_WALL,
    ObstacleType.ROLLER,
    ObstacleType.LAUNCHER,
})


@dataclass(frozen=True)
class Fixture:
    """Named geometry group outside the segment chain (start, finish, checkpoint markers)."""
    name: str
    position: Vec3
    geometry: Tuple[GeometryDescriptor, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "position": self.position.as_tuple(),
            "geometry": [g.to_dict() for g in self.geometry],
        }


@dataclass
class GenerationState:
    """Mutable state owned by the course generator for one run."""
    build_position: Vec3 = ORIGIN
    difficulty: float = 0.0
    segments: List[SegmentRecord] = field(default_factory=list)
    checkpoints: List[Vec3] = field(default_factory=list)
    fixtures: List[Fixture] = field(default_factory=list)
    finish_position: Optional[Vec3] = None

    def advance(self, length: float, elevation_delta: float = 0.0) -> Vec3:
        """Move the build position forward (and up) and return it."""
        self.build_position = self.build_position.forward(length).up(elevation_delta)
        return self.build_position


@dataclass(frozen=True)
class CourseLayout:
    """Finished course produced by one generation run."""
    seed: int
    config: "GenerationConfig"
    segments: Tuple[SegmentRecord, ...]
    checkpoints: Tuple[Vec3, ...]
    start_position: Vec3
    finish_position: Vec3
    fixtures: Tuple[Fixture, ...] = ()

    def segment_types(self) -> List[SegmentType]:
        return [s.archetype for s in self.segments]

    def obstacle_count(self) -> int:
        return sum(len(s.obstacles) for s in self.segments)

    def total_length(self) -> float:
        """Forward distance from the start line to the finish line."""
        return self.finish_position.z - self.start_position.z

    def total_elevation(self) -> float:
        return sum(s.elevation_delta for s in self.segments)

    def respawn_points(self) -> List[Vec3]:
        """Start position followed by each checkpoint lifted to spawn height."""
        lift = self.start_position.y
        return [self.start_position] + [c.up(lift) for c in self.checkpoints]

    def fixture(self, name: str) -> Optional[Fixture]:
        for f in self.fixtures:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "config": self.config.to_dict(),
            "segments": [s.to_dict() for s in self.segments],
            "checkpoints": [c.as_tuple() for c in self.checkpoints],
            "start_position": self.start_position.as_tuple(),
            "finish_position": self.finish_position.as_tuple(),
            "fixtures": [f.to_dict() for f in self.fixtures],
        }
