"""Obstacle population and per-type obstacle emitters.

Population decides how many obstacles a segment gets and where they go:
- Standard: ceil(d) + {0, 1} obstacles at random spots inside a safe band
- Gauntlet: ceil(2d) + 2 obstacles evenly spaced along the segment

Each placement is then routed to the emitter for its archetype, which
binds difficulty-scaled runtime parameters (speed, force, swing angle,
...) and the geometry parts that make up the obstacle. All parameter
formulas are linear in difficulty.
"""

import math
from typing import Callable, Dict, List

from .course import (
    AXIS_FORWARD,
    AXIS_RIGHT,
    AXIS_UP,
    GeometryDescriptor,
    GeometryRole,
    ObstaclePlacement,
    ObstacleType,
    SegmentType,
    ShapeKind,
    Vec3,
    ORIGIN,
)
from .random_stream import RandomStream
from .selectors import pick_obstacle_type

# Placement margins
STANDARD_Z_MARGIN = 3.0  # z in [3, length - 3]
STANDARD_X_FRACTION = 0.35  # x in [-0.35w, 0.35w]
GAUNTLET_X_FRACTION = 0.3  # x in [-0.3w, 0.3w]

# Falling blocks
FALLING_WARNING_DELAY = 1.5
FALLING_RESPAWN_DELAY = 3.0

LAUNCHER_COOLDOWN = 0.5
BUMPER_UPWARD_RATIO = 0.4


def _part(kind: ShapeKind, name: str, position: Vec3, size: Vec3, color, rotation: Vec3 = ORIGIN) -> GeometryDescriptor:
    return GeometryDescriptor(
        kind=kind,
        role=GeometryRole.OBSTACLE,
        name=name,
        position=position,
        size=size,
        rotation=rotation,
        color=color,
    )


# ---------------------------------------------------------------------------
# Population obstacle emitters
# ---------------------------------------------------------------------------

def emit_spinning_bar(position: Vec3, difficulty: float, segment_width: float) -> ObstaclePlacement:
    """Horizontal bar sweeping around a short pillar."""
    bar_length = min(segment_width * 0.8, 8.0)
    return ObstaclePlacement(
        archetype=ObstacleType.SPINNING_BAR,
        position=position.up(1.2),
        params={
            "speed": 50.0 + difficulty * 20.0,
            "knockback_force": 8.0 + difficulty,
            "bar_length": bar_length,
        },
        axis=AXIS_UP,
        parts=(
            _part(ShapeKind.CUBE, "Bar", ORIGIN, Vec3(bar_length, 0.6, 0.6), (1.0, 0.3, 0.2, 1.0)),
            _part(ShapeKind.CYLINDER, "Pillar", Vec3(0.0, -0.6, 0.0), Vec3(0.5, 0.6, 0.5), (0.4, 0.4, 0.4, 1.0)),
        ),
    )


def emit_pendulum(position: Vec3, difficulty: float, segment_width: float) -> ObstaclePlacement:
    """Ball on an arm swinging across the track from a high pivot."""
    return ObstaclePlacement(
        archetype=ObstacleType.PENDULUM,
        position=position.up(6.0),
        params={
            "speed": 1.5 + difficulty * 0.3,
            "swing_angle": 40.0 + difficulty * 5.0,
            "knockback_force": 10.0 + difficulty * 2.0,
        },
        axis=AXIS_RIGHT,
        parts=(
            _part(ShapeKind.CUBE, "Arm", Vec3(0.0, -2.0, 0.0), Vec3(0.2, 4.0, 0.2), (0.5, 0.5, 0.5, 1.0)),
            _part(ShapeKind.SPHERE, "Ball", Vec3(0.0, -4.5, 0.0), Vec3(2.0, 2.0, 2.0), (1.0, 0.6, 0.1, 1.0)),
        ),
    )


def emit_bumper(position: Vec3, difficulty: float, segment_width: float) -> ObstaclePlacement:
    """Squat cylinder that bounces the player away."""
    return ObstaclePlacement(
        archetype=ObstacleType.BUMPER,
        position=position.up(0.75),
        params={
            "force": 12.0 + difficulty * 2.0,
            "upward_ratio": BUMPER_UPWARD_RATIO,
        },
        parts=(
            _part(ShapeKind.CYLINDER, "Bumper", ORIGIN, Vec3(1.5, 0.75, 1.5), (1.0, 0.2, 0.6, 1.0)),
        ),
    )


def emit_windmill(position: Vec3, difficulty: float, segment_width: float) -> ObstaclePlacement:
    """Four blades turning about the forward axis."""
    blades = []
    for i in range(4):
        angle = math.radians(i * 90.0)
        offset = Vec3(-math.sin(angle) * 2.0, math.cos(angle) * 2.0, 0.0)
        blades.append(_part(
            ShapeKind.CUBE, f"Blade_{i}", offset, Vec3(0.8, 3.5, 0.5),
            (0.2, 0.8, 1.0, 1.0), rotation=Vec3(0.0, 0.0, i * 90.0),
        ))
    blades.append(_part(ShapeKind.SPHERE, "Hub", ORIGIN, Vec3(0.8, 0.8, 0.8), (0.3, 0.3, 0.3, 1.0)))
    return ObstaclePlacement(
        archetype=ObstacleType.WINDMILL,
        position=position.up(2.0),
        params={
            "speed": 60.0 + difficulty * 15.0,
            "knockback_force": 10.0,
        },
        axis=AXIS_FORWARD,
        parts=tuple(blades),
    )


def emit_punch_wall(position: Vec3, difficulty: float, segment_width: float) -> ObstaclePlacement:
    """Wall block shuttling sideways across the track."""
    return ObstaclePlacement(
        archetype=ObstacleType.PUNCH_WALL,
        position=position,
        params={
            "amplitude_x": segment_width * 0.3,
            "amplitude_y": 0.0,
            "speed": 1.0 + difficulty * 0.2,
            "knockback_force": 8.0 + difficulty * 2.0,
        },
        axis=AXIS_RIGHT,
        parts=(
            _part(ShapeKind.CUBE, "PunchWall", ORIGIN, Vec3(segment_width * 0.4, 3.0, 0.8), (0.8, 0.2, 0.2, 1.0)),
        ),
    )


def emit_roller(position: Vec3, difficulty: float, segment_width: float) -> ObstaclePlacement:
    """Log lying across the track, spinning about its long axis."""
    return ObstaclePlacement(
        archetype=ObstacleType.ROLLER,
        position=position.up(1.0),
        params={
            "speed": 80.0 + difficulty * 10.0,
            "knockback_force": 6.0,
            "roller": 1.0,
        },
        axis=AXIS_UP,
        parts=(
            _part(
                ShapeKind.CYLINDER, "Roller", ORIGIN, Vec3(2.0, segment_width * 0.4, 2.0),
                (0.3, 0.9, 0.3, 1.0), rotation=Vec3(0.0, 0.0, 90.0),
            ),
        ),
    )


def emit_launcher(position: Vec3, difficulty: float, segment_width: float) -> ObstaclePlacement:
    """Floor pad that fires the player upward, then cools down."""
    return ObstaclePlacement(
        archetype=ObstacleType.LAUNCHER,
        position=position.up(0.25),
        params={
            "force": 15.0 + difficulty * 3.0,
            "cooldown": LAUNCHER_COOLDOWN,
        },
        parts=(
            _part(ShapeKind.CUBE, "Launcher", ORIGIN, Vec3(2.0, 0.5, 2.0), (1.0, 1.0, 0.2, 1.0)),
        ),
    )


EmitterFn = Callable[[Vec3, float, float], ObstaclePlacement]

EMITTERS: Dict[ObstacleType, EmitterFn] = {
    ObstacleType.SPINNING_BAR: emit_spinning_bar,
    ObstacleType.PENDULUM: emit_pendulum,
    ObstacleType.BUMPER: emit_bumper,
    ObstacleType.WINDMILL: emit_windmill,
    ObstacleType.PUNCH_WALL: emit_punch_wall,
    ObstacleType.ROLLER: emit_roller,
    ObstacleType.LAUNCHER: emit_launcher,
}


def emit_obstacle(
    archetype: ObstacleType, position: Vec3, difficulty: float, segment_width: float,
) -> ObstaclePlacement:
    """Route to the emitter for `archetype`. Unknown archetypes become bumpers."""
    emitter = EMITTERS.get(archetype, emit_bumper)
    return emitter(position, difficulty, segment_width)


# ---------------------------------------------------------------------------
# Builder-owned behaviours
# ---------------------------------------------------------------------------

def moving_platform(
    slab: GeometryDescriptor, amplitude: Vec3, speed: float,
) -> ObstaclePlacement:
    """Sub-platform oscillating between its rest position and rest + amplitude."""
    return ObstaclePlacement(
        archetype=ObstacleType.MOVING_PLATFORM,
        position=slab.position,
        params={
            "amplitude_x": amplitude.x,
            "amplitude_y": amplitude.y,
            "amplitude_z": amplitude.z,
            "speed": speed,
        },
        parts=(GeometryDescriptor(
            kind=slab.kind,
            role=slab.role,
            name=slab.name,
            position=ORIGIN,
            size=slab.size,
            rotation=slab.rotation,
            material=slab.material,
            color=slab.color,
        ),),
    )


def slime_zone(position: Vec3, width: float, length: float, material) -> ObstaclePlacement:
    """Thin trigger patch that makes the floor slippery and slow."""
    return ObstaclePlacement(
        archetype=ObstacleType.SLIME_ZONE,
        position=position,
        params={"width": width, "length": length},
        parts=(GeometryDescriptor(
            kind=ShapeKind.SLAB,
            role=GeometryRole.HAZARD_ZONE,
            name="SlimeZone",
            position=ORIGIN,
            size=Vec3(width, 0.05, length),
            material=material,
            color=(0.3, 0.9, 0.2, 0.8),
        ),),
    )


def falling_block(position: Vec3, size: float, material) -> ObstaclePlacement:
    """Cube that shakes, then drops, a fixed delay after being touched."""
    return ObstaclePlacement(
        archetype=ObstacleType.FALLING_TILE,
        position=position,
        params={
            "size": size,
            "warning_delay": FALLING_WARNING_DELAY,
            "respawn_delay": FALLING_RESPAWN_DELAY,
            "respawns": 1.0,
        },
        parts=(GeometryDescriptor(
            kind=ShapeKind.CUBE,
            role=GeometryRole.OBSTACLE,
            name="FallingBlock",
            position=ORIGIN,
            size=Vec3(size, size, size),
            material=material,
            color=(0.9, 0.3, 0.3, 0.9),
        ),),
    )


# ---------------------------------------------------------------------------
# Population
# ---------------------------------------------------------------------------

def standard_obstacle_count(difficulty: float, extra: int) -> int:
    return math.ceil(difficulty) + extra


def gauntlet_obstacle_count(difficulty: float) -> int:
    return math.ceil(difficulty * 2.0) + 2


def populate_standard(
    segment_type: SegmentType,
    length: float,
    width: float,
    difficulty: float,
    stream: RandomStream,
) -> List[ObstaclePlacement]:
    """Scatter ceil(d) + {0, 1} obstacles inside the segment's safe band.

    Draw order per obstacle: z, x, archetype roll.
    """
    count = standard_obstacle_count(difficulty, stream.uniform_int(0, 1))
    placements = []
    for _ in range(count):
        z = stream.uniform_range(STANDARD_Z_MARGIN, length - STANDARD_Z_MARGIN)
        x = stream.uniform_range(-width * STANDARD_X_FRACTION, width * STANDARD_X_FRACTION)
        archetype = pick_obstacle_type(segment_type, stream)
        placements.append(emit_obstacle(archetype, Vec3(x, 0.0, z), difficulty, width))
    return placements


def populate_gauntlet(
    length: float,
    width: float,
    difficulty: float,
    stream: RandomStream,
) -> List[ObstaclePlacement]:
    """Evenly space ceil(2d) + 2 obstacles along the segment.

    Draw order per obstacle: x, archetype roll.
    """
    count = gauntlet_obstacle_count(difficulty)
    spacing = length / (count + 1)
    placements = []
    for i in range(count):
        z = spacing * (i + 1)
        x = stream.uniform_range(-width * GAUNTLET_X_FRACTION, width * GAUNTLET_X_FRACTION)
        archetype = pick_obstacle_type(SegmentType.GAUNTLET, stream)
        placements.append(emit_obstacle(archetype, Vec3(x, 0.0, z), difficulty, width))
    return placements
