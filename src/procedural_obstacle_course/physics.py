"""Side-profile physics world for generated courses, using pymunk.

Projects a course onto its forward/vertical plane (pymunk x = course z,
pymunk y = course y) and holds every shape in a static pymunk Space.
Floors and walls are solid polygons (ramps keep their pitch), obstacles,
hazard zones and triggers are sensors tagged with a per-archetype
collision type.

Used as a reference GeometryEmitter and for profile queries such as
"how high is the floor at this forward distance".
"""

import math
import pymunk
from typing import Dict, List, Optional, Tuple

from .course import GeometryDescriptor, GeometryRole, ObstaclePlacement, ObstacleType, Vec3


# Collision types for shape categories
COLLISION_FLOOR = 1
COLLISION_WALL = 2
COLLISION_TRIGGER = 3
COLLISION_HAZARD_ZONE = 4
COLLISION_DECOR = 5
COLLISION_OBSTACLE_BASE = 10  # + index of the obstacle archetype

# Shape filter categories (bit masks)
CATEGORY_FLOOR = 0b00001
CATEGORY_WALL = 0b00010
CATEGORY_SENSOR = 0b00100
CATEGORY_OBSTACLE = 0b01000
CATEGORY_DECOR = 0b10000

_ROLE_TYPES = {
    GeometryRole.FLOOR: (COLLISION_FLOOR, CATEGORY_FLOOR),
    GeometryRole.WALL: (COLLISION_WALL, CATEGORY_WALL),
    GeometryRole.TRIGGER: (COLLISION_TRIGGER, CATEGORY_SENSOR),
    GeometryRole.HAZARD_ZONE: (COLLISION_HAZARD_ZONE, CATEGORY_SENSOR),
    GeometryRole.DECOR: (COLLISION_DECOR, CATEGORY_DECOR),
    GeometryRole.OBSTACLE: (COLLISION_OBSTACLE_BASE, CATEGORY_OBSTACLE),
}

_OBSTACLE_ORDER = list(ObstacleType)


def obstacle_collision_type(archetype: ObstacleType) -> int:
    return COLLISION_OBSTACLE_BASE + _OBSTACLE_ORDER.index(archetype)


def profile_box(center: Tuple[float, float], depth: float, height: float, pitch_deg: float = 0.0) -> List[Tuple[float, float]]:
    """Corners of a (depth x height) box centred at `center`, pitched by `pitch_deg`.

    Positive pitch raises the +x (forward) end.
    """
    cx, cy = center
    half_d, half_h = depth / 2.0, height / 2.0
    a = math.radians(pitch_deg)
    cos_a, sin_a = math.cos(a), math.sin(a)
    corners = [(-half_d, -half_h), (half_d, -half_h), (half_d, half_h), (-half_d, half_h)]
    return [(cx + x * cos_a - y * sin_a, cy + x * sin_a + y * cos_a) for x, y in corners]


class ProfileWorld:
    """Static pymunk space holding a course side profile.

    Wraps pymunk.Space with course-specific helpers.
    """

    QUERY_TOP = 1000.0

    def __init__(self):
        self.space = pymunk.Space()
        self.space.gravity = (0, 0)
        self._shape_names: Dict[pymunk.Shape, str] = {}

    def create_static_box(
        self,
        center: Tuple[float, float],
        depth: float,
        height: float,
        pitch_deg: float = 0.0,
        collision_type: int = COLLISION_FLOOR,
        category: int = CATEGORY_FLOOR,
        sensor: bool = False,
        friction: float = 1.0,
        name: str = "",
    ) -> pymunk.Shape:
        """Create a static (optionally pitched) box.

        Args:
            center: (forward, vertical) centre in world coordinates
            depth, height: Extent along forward / vertical
            pitch_deg: Rotation in degrees; positive raises the forward end
            collision_type: Collision category
            category: Shape filter category bits
            sensor: Sensors report overlaps but do not block movement
            friction: Surface friction coefficient

        Returns:
            The created shape (already added to space)
        """
        body = self.space.static_body
        shape = pymunk.Poly(body, profile_box(center, max(depth, 1e-3), max(height, 1e-3), pitch_deg))
        shape.collision_type = collision_type
        shape.friction = friction
        shape.sensor = sensor
        shape.filter = pymunk.ShapeFilter(categories=category)
        self.space.add(shape)
        self._shape_names[shape] = name
        return shape

    def add_descriptor(
        self,
        descriptor: GeometryDescriptor,
        world_position: Vec3,
        collision_type: Optional[int] = None,
    ) -> pymunk.Shape:
        """Add a descriptor whose centre is at `world_position`."""
        role_type, category = _ROLE_TYPES[descriptor.role]
        solid = descriptor.role in (GeometryRole.FLOOR, GeometryRole.WALL)
        return self.create_static_box(
            (world_position.z, world_position.y),
            descriptor.size.z,
            descriptor.size.y,
            pitch_deg=descriptor.pitch,
            collision_type=collision_type if collision_type is not None else role_type,
            category=category,
            sensor=not solid,
            name=descriptor.name,
        )

    def floor_height_at(self, z: float) -> Optional[float]:
        """Top of the highest floor surface at forward distance `z`, or None over a gap."""
        query_filter = pymunk.ShapeFilter(mask=CATEGORY_FLOOR)
        hit = self.space.segment_query_first(
            (z, self.QUERY_TOP), (z, -self.QUERY_TOP), 0.0, query_filter,
        )
        if hit is None:
            return None
        return hit.point.y

    def shapes_with_type(self, collision_type: int) -> List[pymunk.Shape]:
        return [s for s in self.space.shapes if s.collision_type == collision_type]

    def shape_name(self, shape: pymunk.Shape) -> str:
        return self._shape_names.get(shape, "")

    @property
    def shape_count(self) -> int:
        return len(self.space.shapes)

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_z, min_y, max_z, max_y) over all shapes."""
        boxes = [s.cache_bb() for s in self.space.shapes]
        if not boxes:
            return (0.0, 0.0, 0.0, 0.0)
        return (
            min(b.left for b in boxes),
            min(b.bottom for b in boxes),
            max(b.right for b in boxes),
            max(b.top for b in boxes),
        )


class ProfileEmitter:
    """GeometryEmitter that builds shapes in a ProfileWorld."""

    def __init__(self, world: Optional[ProfileWorld] = None):
        self.world = world or ProfileWorld()

    def emit_geometry(self, descriptor: GeometryDescriptor, origin: Vec3) -> pymunk.Shape:
        return self.world.add_descriptor(descriptor, origin + descriptor.position)

    def emit_obstacle(self, placement: ObstaclePlacement, origin: Vec3) -> List[pymunk.Shape]:
        pivot = origin + placement.position
        collision_type = obstacle_collision_type(placement.archetype)
        shapes = []
        for part in placement.parts:
            override = None if part.role == GeometryRole.FLOOR else collision_type
            shapes.append(self.world.add_descriptor(part, pivot + part.position, collision_type=override))
        return shapes
