"""Difficulty curve: segment index -> clamped difficulty scalar.

The generator advances the curve only after a segment is fully built,
using that segment's index. Segment i therefore plays at
difficulty_at(i - 1), and segments 0 and 1 both play at the start value.
"""

from dataclasses import dataclass

from .config import GenerationConfig

LOW_TIER_CEILING = 2.0
MID_TIER_CEILING = 4.0


def difficulty_at(index: int, start: float, ramp: float, maximum: float) -> float:
    """clamp(start + index * ramp, start, maximum)."""
    value = start + index * ramp
    return max(start, min(maximum, value))


def difficulty_tier(difficulty: float) -> int:
    """0 below 2, 1 in [2, 4), 2 from 4 up."""
    if difficulty < LOW_TIER_CEILING:
        return 0
    if difficulty < MID_TIER_CEILING:
        return 1
    return 2


@dataclass(frozen=True)
class DifficultyCurve:
    start: float = 1.0
    ramp: float = 0.5
    maximum: float = 5.0

    @classmethod
    def from_config(cls, config: GenerationConfig) -> "DifficultyCurve":
        return cls(
            start=config.start_difficulty,
            ramp=config.difficulty_ramp,
            maximum=max(config.start_difficulty, config.max_difficulty),
        )

    def at(self, index: int) -> float:
        return difficulty_at(index, self.start, self.ramp, self.maximum)

    def played_at(self, index: int) -> float:
        """Difficulty segment `index` is built with (one-segment lag)."""
        if index <= 0:
            return self.start
        return self.at(index - 1)

    def normalized(self, difficulty: float) -> float:
        """difficulty / maximum clamped to [0, 1]."""
        if self.maximum <= 0:
            return 0.0
        return max(0.0, min(1.0, difficulty / self.maximum))
