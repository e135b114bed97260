"""Weighted archetype selection.

Each table is a list of (cumulative threshold, archetype) pairs in
ascending order. A single uniform roll picks the first entry whose
threshold exceeds it; the final entry has no threshold and takes the
remainder.
"""

from typing import Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from .course import ObstacleType, SegmentType
from .difficulty import difficulty_tier
from .random_stream import RandomStream

T = TypeVar("T")


class WeightedTable(Generic[T]):
    """Cumulative-probability table with an implicit remainder entry."""

    def __init__(self, thresholds: Sequence[Tuple[float, T]], remainder: T):
        bounds = [t for t, _ in thresholds]
        if bounds != sorted(bounds) or any(not 0.0 < t < 1.0 for t in bounds):
            raise ValueError(f"Thresholds must be ascending and inside (0, 1): {bounds}")
        self.thresholds = list(thresholds)
        self.remainder = remainder

    def pick(self, roll: float) -> T:
        for threshold, value in self.thresholds:
            if roll < threshold:
                return value
        return self.remainder

    def draw(self, stream: RandomStream) -> T:
        return self.pick(stream.uniform01())

    def probabilities(self) -> Dict[T, float]:
        """Probability of each entry."""
        probs: Dict[T, float] = {}
        previous = 0.0
        for threshold, value in self.thresholds:
            probs[value] = probs.get(value, 0.0) + threshold - previous
            previous = threshold
        probs[self.remainder] = probs.get(self.remainder, 0.0) + 1.0 - previous
        return probs

    def entries(self) -> List[T]:
        return [v for _, v in self.thresholds] + [self.remainder]


# Segment tables, indexed by difficulty tier
SEGMENT_TABLES: Tuple[WeightedTable[SegmentType], ...] = (
    WeightedTable([
        (0.3, SegmentType.STRAIGHT),
        (0.5, SegmentType.RAMP),
        (0.7, SegmentType.PLATFORM),
    ], SegmentType.SLIDING_FLOOR),
    WeightedTable([
        (0.2, SegmentType.STRAIGHT),
        (0.35, SegmentType.NARROW_BRIDGE),
        (0.5, SegmentType.GAUNTLET),
        (0.65, SegmentType.RAMP),
        (0.8, SegmentType.TUMBLING_BLOCKS),
    ], SegmentType.PLATFORM),
    WeightedTable([
        (0.2, SegmentType.NARROW_BRIDGE),
        (0.4, SegmentType.GAUNTLET),
        (0.6, SegmentType.TUMBLING_BLOCKS),
        (0.8, SegmentType.SLIDING_FLOOR),
    ], SegmentType.RAMP),
)

# Obstacle tables keyed by enclosing segment archetype
OBSTACLE_TABLES: Dict[SegmentType, WeightedTable[ObstacleType]] = {
    SegmentType.STRAIGHT: WeightedTable([
        (0.3, ObstacleType.SPINNING_BAR),
        (0.5, ObstacleType.BUMPER),
        (0.7, ObstacleType.PENDULUM),
    ], ObstacleType.WINDMILL),
    SegmentType.NARROW_BRIDGE: WeightedTable([
        (0.4, ObstacleType.PENDULUM),
        (0.7, ObstacleType.WINDMILL),
    ], ObstacleType.BUMPER),
    SegmentType.SLIDING_FLOOR: WeightedTable([
        (0.3, ObstacleType.SPINNING_BAR),
        (0.6, ObstacleType.BUMPER),
    ], ObstacleType.ROLLER),
    SegmentType.GAUNTLET: WeightedTable([
        (0.3, ObstacleType.SPINNING_BAR),
        (0.5, ObstacleType.PENDULUM),
        (0.7, ObstacleType.BUMPER),
        (0.85, ObstacleType.PUNCH_WALL),
    ], ObstacleType.ROLLER),
}

DEFAULT_OBSTACLE_TABLE: WeightedTable[ObstacleType] = WeightedTable([
    (0.25, ObstacleType.SPINNING_BAR),
    (0.5, ObstacleType.PENDULUM),
    (0.75, ObstacleType.BUMPER),
], ObstacleType.LAUNCHER)


def segment_table(difficulty: float) -> WeightedTable[SegmentType]:
    return SEGMENT_TABLES[difficulty_tier(difficulty)]


def obstacle_table(segment_type: Optional[SegmentType]) -> WeightedTable[ObstacleType]:
    return OBSTACLE_TABLES.get(segment_type, DEFAULT_OBSTACLE_TABLE)


def pick_segment_type(difficulty: float, stream: RandomStream) -> SegmentType:
    """Choose a segment archetype for the current difficulty (one draw)."""
    return segment_table(difficulty).draw(stream)


def pick_obstacle_type(segment_type: Optional[SegmentType], stream: RandomStream) -> ObstacleType:
    """Choose an obstacle archetype for the enclosing segment (one draw)."""
    return obstacle_table(segment_type).draw(stream)
