"""Configuration for procedural course generation.

GenerationConfig holds every knob of one generation run: course shape
(segment count, length, width), difficulty curve, checkpoint cadence and
the material palette. A config is immutable for the duration of a run.

Materials are opaque handles. The generator never interprets them; it
only hands them through to the geometry emitter. Missing entries are
replaced by DEFAULT_MATERIALS.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Optional, Tuple
import random

logger = logging.getLogger(__name__)


DEFAULT_MATERIALS: Dict[str, str] = {
    "segment": "default/segment",
    "wall": "default/wall",
    "finish": "default/finish",
    "slime": "default/slime",
    "block": "default/block",
}


@dataclass(frozen=True)
class MaterialPalette:
    """Surface materials handed to the geometry emitter.

    segment_materials are cycled by segment index. Any entry may be empty.
    """
    segment_materials: Tuple[Any, ...] = ()
    wall_material: Any = None
    finish_material: Any = None
    slime_material: Any = None
    block_material: Any = None

    def _lookup(self, kind: str, index: int) -> Any:
        if kind == "segment":
            if not self.segment_materials:
                return None
            return self.segment_materials[index % len(self.segment_materials)]
        return getattr(self, f"{kind}_material", None)

    def resolve(self, kind: str, index: int = 0, warned: Optional[set] = None) -> Any:
        """Return the material for `kind`, substituting a default if absent.

        Args:
            kind: One of DEFAULT_MATERIALS' keys.
            index: Segment index (only used for segment materials).
            warned: Kinds already reported during this run. The substitution
                is logged once per kind when a set is passed.
        """
        material = self._lookup(kind, index)
        if material is not None:
            return material
        if warned is None or kind not in warned:
            logger.warning("No %s material configured, using %r", kind, DEFAULT_MATERIALS[kind])
            if warned is not None:
                warned.add(kind)
        return DEFAULT_MATERIALS[kind]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segment_materials": [str(m) for m in self.segment_materials],
            "wall_material": None if self.wall_material is None else str(self.wall_material),
            "finish_material": None if self.finish_material is None else str(self.finish_material),
            "slime_material": None if self.slime_material is None else str(self.slime_material),
            "block_material": None if self.block_material is None else str(self.block_material),
        }


@dataclass(frozen=True)
class GenerationConfig:
    """Parameters of one course generation run."""

    # Course shape
    segment_count: int = 8
    base_segment_length: float = 25.0  # Before the per-segment (-3..+5) perturbation
    segment_width: float = 12.0  # Nominal width; narrow bridges go below it
    wall_height: float = 4.0
    platform_thickness: float = 1.0

    # Difficulty curve
    start_difficulty: float = 1.0
    max_difficulty: float = 5.0
    difficulty_ramp: float = 0.5  # Added per segment index, clamped to max_difficulty

    # Checkpoints: one every N segments
    checkpoint_interval: int = 3

    # Fixed platforms
    start_platform_length: float = 10.0
    spawn_height: float = 2.0  # Spawn/finish points sit this far above the floor

    materials: MaterialPalette = field(default_factory=MaterialPalette)

    # Sampling ranges
    SEGMENT_COUNT_RANGE: ClassVar[Tuple[int, int]] = (4, 16)
    BASE_SEGMENT_LENGTH_RANGE: ClassVar[Tuple[float, float]] = (18.0, 35.0)
    SEGMENT_WIDTH_RANGE: ClassVar[Tuple[float, float]] = (8.0, 16.0)
    START_DIFFICULTY_RANGE: ClassVar[Tuple[float, float]] = (0.5, 2.0)
    MAX_DIFFICULTY_RANGE: ClassVar[Tuple[float, float]] = (3.0, 6.0)
    DIFFICULTY_RAMP_RANGE: ClassVar[Tuple[float, float]] = (0.2, 1.0)
    CHECKPOINT_INTERVAL_RANGE: ClassVar[Tuple[int, int]] = (2, 4)

    @classmethod
    def sample(cls) -> "GenerationConfig":
        """Sample a random (but valid) config from the class ranges."""
        start = random.uniform(*cls.START_DIFFICULTY_RANGE)
        return cls(
            segment_count=random.randint(*cls.SEGMENT_COUNT_RANGE),
            base_segment_length=random.uniform(*cls.BASE_SEGMENT_LENGTH_RANGE),
            segment_width=random.uniform(*cls.SEGMENT_WIDTH_RANGE),
            start_difficulty=start,
            max_difficulty=max(start, random.uniform(*cls.MAX_DIFFICULTY_RANGE)),
            difficulty_ramp=random.uniform(*cls.DIFFICULTY_RAMP_RANGE),
            checkpoint_interval=random.randint(*cls.CHECKPOINT_INTERVAL_RANGE),
        )

    def with_overrides(self, **overrides: Any) -> "GenerationConfig":
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segment_count": self.segment_count,
            "base_segment_length": self.base_segment_length,
            "segment_width": self.segment_width,
            "wall_height": self.wall_height,
            "platform_thickness": self.platform_thickness,
            "start_difficulty": self.start_difficulty,
            "max_difficulty": self.max_difficulty,
            "difficulty_ramp": self.difficulty_ramp,
            "checkpoint_interval": self.checkpoint_interval,
            "start_platform_length": self.start_platform_length,
            "spawn_height": self.spawn_height,
            "materials": self.materials.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GenerationConfig":
        """Create from dictionary. Missing keys fall back to defaults."""
        defaults = cls()
        mats = d.get("materials") or {}
        palette = MaterialPalette(
            segment_materials=tuple(mats.get("segment_materials", ())),
            wall_material=mats.get("wall_material"),
            finish_material=mats.get("finish_material"),
            slime_material=mats.get("slime_material"),
            block_material=mats.get("block_material"),
        )
        return cls(
            segment_count=int(d.get("segment_count", defaults.segment_count)),
            base_segment_length=d.get("base_segment_length", defaults.base_segment_length),
            segment_width=d.get("segment_width", defaults.segment_width),
            wall_height=d.get("wall_height", defaults.wall_height),
            platform_thickness=d.get("platform_thickness", defaults.platform_thickness),
            start_difficulty=d.get("start_difficulty", defaults.start_difficulty),
            max_difficulty=d.get("max_difficulty", defaults.max_difficulty),
            difficulty_ramp=d.get("difficulty_ramp", defaults.difficulty_ramp),
            checkpoint_interval=int(d.get("checkpoint_interval", defaults.checkpoint_interval)),
            start_platform_length=d.get("start_platform_length", defaults.start_platform_length),
            spawn_height=d.get("spawn_height", defaults.spawn_height),
            materials=palette,
        )


# Named presets
CONFIGS = {
    # Eight segments, checkpoint every three
    "default": GenerationConfig(),

    # Quick race: three segments, single checkpoint before the finish
    "short": GenerationConfig(segment_count=3, checkpoint_interval=3),

    # Long haul that spends most of its length at max difficulty
    "marathon": GenerationConfig(segment_count=16, checkpoint_interval=4, difficulty_ramp=0.4),

    # Starts in the top tier
    "brutal": GenerationConfig(
        segment_count=10, start_difficulty=4.0, max_difficulty=6.0,
        difficulty_ramp=0.3, segment_width=10.0,
    ),

    # Stays in the low tier the whole way
    "gentle": GenerationConfig(
        segment_count=6, start_difficulty=0.5, max_difficulty=1.9,
        difficulty_ramp=0.25, checkpoint_interval=2,
    ),
}
