"""Segment builders, one per archetype.

A builder turns (length, width, difficulty, stream) into the segment's
geometry, any behaviours it owns (moving sub-platforms, slime zones,
falling blocks) and its elevation delta. Only ramps change elevation.
Generic obstacle population is not done here; the course generator
applies it afterwards to the archetypes that receive it.

Geometry positions are local to the segment start. Floors are centred
at z = length / 2 so a segment covers [0, length] along z.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from .config import GenerationConfig
from .course import (
    GeometryDescriptor,
    GeometryRole,
    ObstaclePlacement,
    SegmentType,
    ShapeKind,
    Vec3,
)
from .obstacles import falling_block, moving_platform, slime_zone
from .random_stream import RandomStream

LENGTH_PERTURBATION = (-3.0, 5.0)
WALL_THICKNESS = 0.5
WALL_WIDTH_FRACTION = 0.7  # Walls only on segments at least 0.7x the nominal width

RAMP_HEIGHT_RANGE = (2.0, 5.0)

BRIDGE_WIDE = 6.0
BRIDGE_NARROW = 3.0

GAUNTLET_STRETCH = 1.3

PLATFORM_COUNT_RANGE = (3, 5)
PLATFORM_GAP_RANGE = (1.5, 3.0)
PLATFORM_VERTICAL_JITTER = (-0.5, 1.5)
PLATFORM_MIN_DEPTH = 1.0
MOVING_DIFFICULTY_THRESHOLD = 1.5

SLIME_COUNT_RANGE = (2, 3)
TUMBLING_Z_MARGIN = 3.0


@dataclass
class SegmentContext:
    """Config and resolved materials a builder needs."""
    config: GenerationConfig
    floor_material: Any = None
    wall_material: Any = None
    slime_material: Any = None
    block_material: Any = None


@dataclass
class SegmentBuild:
    """What a builder produced for one segment."""
    length: float
    width: float
    elevation_delta: float = 0.0
    geometry: List[GeometryDescriptor] = field(default_factory=list)
    obstacles: List[ObstaclePlacement] = field(default_factory=list)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation with t clamped to [0, 1]."""
    t = max(0.0, min(1.0, t))
    return a + (b - a) * t


def perturbed_length(base_length: float, stream: RandomStream) -> float:
    """Base length plus the per-segment (-3..+5) perturbation (one draw)."""
    return base_length + stream.uniform_range(*LENGTH_PERTURBATION)


def _floor(ctx: SegmentContext, position: Vec3, size: Vec3, name: str = "Floor", rotation: Vec3 = Vec3()) -> GeometryDescriptor:
    return GeometryDescriptor(
        kind=ShapeKind.SLAB,
        role=GeometryRole.FLOOR,
        name=name,
        position=position,
        size=size,
        rotation=rotation,
        material=ctx.floor_material,
    )


def _walls(ctx: SegmentContext, width: float, length: float, height: float, center_y: float) -> List[GeometryDescriptor]:
    offset = width / 2.0 + WALL_THICKNESS / 2.0
    return [
        GeometryDescriptor(
            kind=ShapeKind.SLAB,
            role=GeometryRole.WALL,
            name=f"Wall_{side}",
            position=Vec3(x, center_y, length / 2.0),
            size=Vec3(WALL_THICKNESS, height, length),
            material=ctx.wall_material,
        )
        for side, x in (("L", -offset), ("R", offset))
    ]


def build_straight(ctx: SegmentContext, length: float, width: float, difficulty: float, stream: RandomStream) -> SegmentBuild:
    """Flat floor, walled when wide enough."""
    cfg = ctx.config
    build = SegmentBuild(length=length, width=width)
    build.geometry.append(_floor(ctx, Vec3(0.0, 0.0, length / 2.0), Vec3(width, cfg.platform_thickness, length)))
    if width >= cfg.segment_width * WALL_WIDTH_FRACTION:
        build.geometry.extend(_walls(ctx, width, length, cfg.wall_height, cfg.wall_height / 2.0))
    return build


def build_ramp(ctx: SegmentContext, length: float, width: float, difficulty: float, stream: RandomStream) -> SegmentBuild:
    """Inclined floor climbing or descending 2-5 units.

    Draws: height magnitude, then sign.
    """
    cfg = ctx.config
    height = stream.uniform_range(*RAMP_HEIGHT_RANGE) * stream.sign()
    pitch = math.degrees(math.atan2(height, length))

    build = SegmentBuild(length=length, width=width, elevation_delta=height)
    build.geometry.append(_floor(
        ctx,
        Vec3(0.0, height / 2.0, length / 2.0),
        # Slab depth is the slope length so the floor reaches the far end
        Vec3(width, cfg.platform_thickness, math.hypot(length, height)),
        name="Ramp",
        rotation=Vec3(pitch, 0.0, 0.0),
    ))
    wall_height = cfg.wall_height + abs(height)
    build.geometry.extend(_walls(ctx, width, length, wall_height, height / 2.0 + cfg.wall_height / 2.0))
    return build


def build_narrow_bridge(ctx: SegmentContext, length: float, width: float, difficulty: float, stream: RandomStream) -> SegmentBuild:
    """Straight floor that narrows from 6 to 3 as difficulty approaches max."""
    cfg = ctx.config
    bridge_width = lerp(BRIDGE_WIDE, BRIDGE_NARROW, difficulty / cfg.max_difficulty if cfg.max_difficulty > 0 else 1.0)
    return build_straight(ctx, length, bridge_width, difficulty, stream)


def build_platform(ctx: SegmentContext, length: float, width: float, difficulty: float, stream: RandomStream) -> SegmentBuild:
    """3-5 floating sub-platforms with gaps between them.

    Draws: count, gap, then per platform width, x, y, moving roll and,
    for moving ones, amplitude x, amplitude y, speed. The moving roll is
    drawn for every platform, even at difficulties too low to move.
    """
    cfg = ctx.config
    count = stream.uniform_int(*PLATFORM_COUNT_RANGE)
    spacing = length / count
    gap = stream.uniform_range(*PLATFORM_GAP_RANGE)
    # Floor of 1 keeps slabs non-degenerate when the gap exceeds the spacing
    depth = max(spacing - gap, PLATFORM_MIN_DEPTH)

    build = SegmentBuild(length=length, width=width)
    for i in range(count):
        platform_width = stream.uniform_range(3.0, width * 0.6)
        x = stream.uniform_range(-width * 0.3, width * 0.3)
        y = stream.uniform_range(*PLATFORM_VERTICAL_JITTER)
        z = i * spacing + spacing * 0.5
        slab = _floor(ctx, Vec3(x, y, z), Vec3(platform_width, cfg.platform_thickness, depth), name=f"Platform_{i}")

        roll = stream.uniform01()
        if roll > 0.5 and difficulty > MOVING_DIFFICULTY_THRESHOLD:
            amplitude = Vec3(stream.uniform_range(-2.0, 2.0), stream.uniform_range(-0.5, 0.5), 0.0)
            speed = stream.uniform_range(1.5, 3.0)
            build.obstacles.append(moving_platform(slab, amplitude, speed))
        else:
            build.geometry.append(slab)
    return build


def build_gauntlet(ctx: SegmentContext, length: float, width: float, difficulty: float, stream: RandomStream) -> SegmentBuild:
    """Straight floor stretched to 1.3x length; the stretch carries into the advance."""
    return build_straight(ctx, length * GAUNTLET_STRETCH, width, difficulty, stream)


def build_sliding_floor(ctx: SegmentContext, length: float, width: float, difficulty: float, stream: RandomStream) -> SegmentBuild:
    """Straight floor with 2-3 slime zones.

    Draws: count, then per zone z, zone length, zone width, x.
    """
    cfg = ctx.config
    build = build_straight(ctx, length, width, difficulty, stream)
    count = stream.uniform_int(*SLIME_COUNT_RANGE)
    for _ in range(count):
        z = stream.uniform_range(2.0, length - 2.0)
        zone_length = stream.uniform_range(3.0, 6.0)
        zone_width = stream.uniform_range(width * 0.4, width * 0.8)
        x = stream.uniform_range(-width * 0.2, width * 0.2)
        position = Vec3(x, cfg.platform_thickness * 0.5 + 0.02, z)
        build.obstacles.append(slime_zone(position, zone_width, zone_length, ctx.slime_material))
    return build


def build_tumbling_blocks(ctx: SegmentContext, length: float, width: float, difficulty: float, stream: RandomStream) -> SegmentBuild:
    """Straight floor with ceil(d) + 1 blocks hovering above it.

    Draws per block: z, x, size. Blocks float at three times their size.
    """
    build = build_straight(ctx, length, width, difficulty, stream)
    for _ in range(math.ceil(difficulty) + 1):
        z = stream.uniform_range(TUMBLING_Z_MARGIN, length - TUMBLING_Z_MARGIN)
        x = stream.uniform_range(-width * 0.3, width * 0.3)
        size = stream.uniform_range(1.5, 3.0)
        build.obstacles.append(falling_block(Vec3(x, size * 3.0, z), size, ctx.block_material))
    return build


BuilderFn = Callable[[SegmentContext, float, float, float, RandomStream], SegmentBuild]

BUILDERS: Dict[SegmentType, BuilderFn] = {
    SegmentType.STRAIGHT: build_straight,
    SegmentType.RAMP: build_ramp,
    SegmentType.NARROW_BRIDGE: build_narrow_bridge,
    SegmentType.PLATFORM: build_platform,
    SegmentType.GAUNTLET: build_gauntlet,
    SegmentType.SLIDING_FLOOR: build_sliding_floor,
    SegmentType.TUMBLING_BLOCKS: build_tumbling_blocks,
}

# Archetypes that skip generic obstacle population
SELF_POPULATED = frozenset({SegmentType.RAMP, SegmentType.PLATFORM, SegmentType.TUMBLING_BLOCKS})


def build_segment(
    segment_type: SegmentType,
    ctx: SegmentContext,
    length: float,
    difficulty: float,
    stream: RandomStream,
) -> SegmentBuild:
    return BUILDERS[segment_type](ctx, length, ctx.config.segment_width, difficulty, stream)
