"""Procedural course assembly.

CourseGenerator drives one generation run:

1. Reset: drop the previous course, zero the build position, set the
   difficulty to the start value, reseed the random stream.
2. Emit the start platform and advance past it.
3. For each segment index i: pick an archetype for the current
   difficulty, draw the perturbed length, build the segment, populate
   obstacles (except ramp, platform and tumbling-blocks segments),
   advance the build position by the segment length and elevation
   delta, record a checkpoint every `checkpoint_interval` segments,
   then recompute the difficulty from index i. The new value is used
   by segment i + 1.
4. Emit the finish platform at the final build position.

Generation is synchronous and single-threaded. The generator owns its
RandomStream; nothing else may draw from it during a run.
"""

import logging
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

from .config import CONFIGS, GenerationConfig
from .constraints import CourseConstraints
from .course import (
    CourseLayout,
    Fixture,
    GenerationState,
    GeometryDescriptor,
    GeometryRole,
    ORIGIN,
    SegmentRecord,
    SegmentType,
    ShapeKind,
    Vec3,
)
from .difficulty import DifficultyCurve
from .obstacles import populate_gauntlet, populate_standard
from .random_stream import RandomStream
from .segments import SELF_POPULATED, SegmentContext, build_segment, perturbed_length
from .selectors import pick_segment_type

if TYPE_CHECKING:
    from .emitters import CourseSink

logger = logging.getLogger(__name__)

# Fixed platform geometry
FIXED_PLATFORM_WIDTH_FACTOR = 1.5  # Start/finish platforms are 1.5x the segment width
FINISH_PLATFORM_LENGTH = 10.0
ARCH_HEIGHT = 5.0

START_ARCH_COLOR = (0.2, 0.8, 0.3, 1.0)
FINISH_COLOR = (1.0, 0.85, 0.0, 1.0)
CHECKPOINT_RING_COLOR = (0.2, 0.6, 1.0, 1.0)


class AssemblerState(Enum):
    IDLE = "idle"
    BUILDING = "building"
    FINISHING = "finishing"


class CourseGenerator:
    """Builds obstacle courses from a GenerationConfig.

    Usage:
        generator = CourseGenerator(GenerationConfig(segment_count=6))
        layout = generator.generate(seed=42)
        layout.checkpoints, layout.finish_position
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        sink: Optional["CourseSink"] = None,
        stream: Optional[RandomStream] = None,
    ):
        """
        Args:
            config: Generation parameters. Degenerate values are clamped.
            sink: Receives checkpoints and finish position after each run.
            stream: Random stream to draw from. A private one is created if None.
        """
        self.requested_config = config or GenerationConfig()
        self.config, self.violations = CourseConstraints.sanitize(self.requested_config)
        self.sink = sink
        self.stream = stream or RandomStream(seed=0)
        self.curve = DifficultyCurve.from_config(self.config)

        self.state = AssemblerState.IDLE
        self._gen = GenerationState()
        self._layout: Optional[CourseLayout] = None
        self._warned_materials: set = set()

    @classmethod
    def from_preset(cls, name: str, sink: Optional["CourseSink"] = None) -> "CourseGenerator":
        """Create a generator from one of the named CONFIGS presets."""
        if name not in CONFIGS:
            raise KeyError(f"Unknown preset {name!r}; available: {sorted(CONFIGS)}")
        return cls(CONFIGS[name], sink=sink)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def checkpoints(self) -> List[Vec3]:
        return list(self._gen.checkpoints)

    @property
    def start_position(self) -> Vec3:
        return ORIGIN.up(self.config.spawn_height)

    @property
    def finish_position(self) -> Optional[Vec3]:
        return self._gen.finish_position

    @property
    def segments(self) -> List[SegmentRecord]:
        return list(self._gen.segments)

    @property
    def layout(self) -> Optional[CourseLayout]:
        """Last completed course, or None if cleared / never generated."""
        return self._layout

    @property
    def last_seed(self) -> int:
        return self.stream.last_seed

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Discard the current (possibly partial) course."""
        self._gen = GenerationState()
        self._layout = None
        self._warned_materials = set()
        self.state = AssemblerState.IDLE

    def generate(self, seed: Optional[int] = None) -> CourseLayout:
        """Generate a full course.

        Args:
            seed: Random seed. If None a time-derived seed is used and the
                run is not reproducible; the seed used is in `last_seed`.

        Returns:
            The finished CourseLayout.
        """
        used_seed = self.stream.seed(seed)
        self.clear()

        cfg = self.config
        gen = self._gen
        gen.build_position = ORIGIN
        gen.difficulty = self.curve.start
        logger.debug("Generating course: seed=%d segments=%d", used_seed, cfg.segment_count)

        self.state = AssemblerState.BUILDING
        gen.fixtures.append(self._start_platform())
        gen.advance(cfg.start_platform_length)

        for i in range(cfg.segment_count):
            segment = self._build_segment(i)
            gen.segments.append(segment)

            if (i + 1) % cfg.checkpoint_interval == 0:
                gen.checkpoints.append(gen.build_position)
                gen.fixtures.append(self._checkpoint_marker(len(gen.checkpoints), gen.build_position))

            gen.difficulty = self.curve.at(i)

        self.state = AssemblerState.FINISHING
        gen.fixtures.append(self._finish_platform())
        gen.finish_position = gen.build_position.up(cfg.spawn_height)

        self._layout = CourseLayout(
            seed=used_seed,
            config=cfg,
            segments=tuple(gen.segments),
            checkpoints=tuple(gen.checkpoints),
            start_position=self.start_position,
            finish_position=gen.finish_position,
            fixtures=tuple(gen.fixtures),
        )
        self.state = AssemblerState.IDLE
        logger.debug(
            "Course ready: %d segments, %d obstacles, %d checkpoints, finish at %s",
            len(gen.segments), self._layout.obstacle_count(), len(gen.checkpoints),
            gen.finish_position.as_tuple(),
        )

        if self.sink is not None:
            self.sink.course_ready(list(gen.checkpoints), gen.finish_position)
        return self._layout

    def _build_segment(self, index: int) -> SegmentRecord:
        gen = self._gen
        difficulty = gen.difficulty
        segment_type = pick_segment_type(difficulty, self.stream)
        length = perturbed_length(self.config.base_segment_length, self.stream)

        ctx = SegmentContext(
            config=self.config,
            floor_material=self._material("segment", index),
            wall_material=self._material("wall"),
            slime_material=self._material("slime") if segment_type == SegmentType.SLIDING_FLOOR else None,
            block_material=self._material("block") if segment_type == SegmentType.TUMBLING_BLOCKS else None,
        )
        build = build_segment(segment_type, ctx, length, difficulty, self.stream)

        if segment_type == SegmentType.GAUNTLET:
            build.obstacles.extend(populate_gauntlet(build.length, build.width, difficulty, self.stream))
        elif segment_type not in SELF_POPULATED:
            build.obstacles.extend(
                populate_standard(segment_type, build.length, build.width, difficulty, self.stream)
            )

        start = gen.build_position
        end = gen.advance(build.length, build.elevation_delta)
        logger.debug(
            "Segment %d: %s length=%.2f difficulty=%.2f obstacles=%d",
            index, segment_type.value, build.length, difficulty, len(build.obstacles),
        )
        return SegmentRecord(
            index=index,
            archetype=segment_type,
            start_position=start,
            end_position=end,
            length=build.length,
            width=build.width,
            difficulty=difficulty,
            elevation_delta=build.elevation_delta,
            geometry=tuple(build.geometry),
            obstacles=tuple(build.obstacles),
        )

    def _material(self, kind: str, index: int = 0):
        return self.config.materials.resolve(kind, index, warned=self._warned_materials)

    # ------------------------------------------------------------------
    # Fixed platforms
    # ------------------------------------------------------------------

    def _start_platform(self) -> Fixture:
        cfg = self.config
        width = cfg.segment_width * FIXED_PLATFORM_WIDTH_FACTOR
        length = cfg.start_platform_length
        wall_x = width / 2.0 + 0.25
        wall_material = self._material("wall")
        geometry = [
            GeometryDescriptor(
                ShapeKind.SLAB, GeometryRole.FLOOR, "StartFloor",
                Vec3(0.0, 0.0, length / 2.0), Vec3(width, cfg.platform_thickness, length),
                material=self._material("segment", 0),
            ),
            GeometryDescriptor(
                ShapeKind.SLAB, GeometryRole.WALL, "StartWall_L",
                Vec3(-wall_x, 2.0, length / 2.0), Vec3(0.5, 4.0, length), material=wall_material,
            ),
            GeometryDescriptor(
                ShapeKind.SLAB, GeometryRole.WALL, "StartWall_R",
                Vec3(wall_x, 2.0, length / 2.0), Vec3(0.5, 4.0, length), material=wall_material,
            ),
            GeometryDescriptor(
                ShapeKind.CUBE, GeometryRole.DECOR, "StartArch",
                Vec3(0.0, ARCH_HEIGHT, 1.0), Vec3(width, 1.0, 0.5), color=START_ARCH_COLOR,
            ),
        ]
        return Fixture("start", self._gen.build_position, tuple(geometry))

    def _finish_platform(self) -> Fixture:
        cfg = self.config
        width = cfg.segment_width * FIXED_PLATFORM_WIDTH_FACTOR
        mid = FINISH_PLATFORM_LENGTH / 2.0
        geometry = [
            GeometryDescriptor(
                ShapeKind.SLAB, GeometryRole.FLOOR, "FinishFloor",
                Vec3(0.0, 0.0, mid), Vec3(width, cfg.platform_thickness, FINISH_PLATFORM_LENGTH),
                material=self._material("finish"), color=FINISH_COLOR,
            ),
            GeometryDescriptor(
                ShapeKind.TRIGGER, GeometryRole.TRIGGER, "FinishTrigger",
                Vec3(0.0, 2.0, mid), Vec3(width, 4.0, 1.0),
            ),
            GeometryDescriptor(
                ShapeKind.CUBE, GeometryRole.DECOR, "FinishArch",
                Vec3(0.0, ARCH_HEIGHT, mid), Vec3(width, 1.0, 0.5), color=FINISH_COLOR,
            ),
        ]
        for side in (-1, 1):
            geometry.append(GeometryDescriptor(
                ShapeKind.CYLINDER, GeometryRole.DECOR, f"FinishPillar_{'L' if side < 0 else 'R'}",
                Vec3(side * width / 2.0, 2.5, mid), Vec3(0.6, 2.5, 0.6), color=FINISH_COLOR,
            ))
        return Fixture("finish", self._gen.build_position, tuple(geometry))

    def _checkpoint_marker(self, number: int, position: Vec3) -> Fixture:
        geometry = (
            GeometryDescriptor(
                ShapeKind.CYLINDER, GeometryRole.DECOR, "CheckpointRing",
                Vec3(0.0, 3.0, 0.0), Vec3(3.0, 0.1, 3.0), color=CHECKPOINT_RING_COLOR,
            ),
            GeometryDescriptor(
                ShapeKind.TRIGGER, GeometryRole.TRIGGER, "CheckpointTrigger",
                Vec3(0.0, 2.0, 0.0), Vec3(self.config.segment_width, 4.0, 2.0),
            ),
        )
        return Fixture(f"checkpoint_{number}", position, geometry)
