"""Configuration constraints for course generation.

Generation never fails on a correctly-typed config. Degenerate values
(negative counts, tiny lengths or widths, a max difficulty below the
start difficulty) are clamped to the nearest usable value instead, and
each adjustment is reported as a ConstraintViolation.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Tuple

from .config import GenerationConfig

logger = logging.getLogger(__name__)


@dataclass
class ConstraintViolation:
    """Describes a constraint violation."""
    param: str
    message: str
    severity: str  # "clamped" = value replaced, "warning" = kept but unusual


@dataclass
class ConstraintResult:
    """Result of constraint validation."""
    valid: bool
    violations: List[ConstraintViolation]

    def __bool__(self) -> bool:
        return self.valid


class CourseConstraints:
    """Bounds on GenerationConfig values."""

    SEGMENT_COUNT_MIN = 0
    SEGMENT_COUNT_WARN = 64  # Valid, but a very long course
    BASE_SEGMENT_LENGTH_MIN = 10.0  # Keeps the (3, length - 3) placement band non-empty after perturbation
    SEGMENT_WIDTH_MIN = 4.0
    CHECKPOINT_INTERVAL_MIN = 1
    WALL_HEIGHT_MIN = 0.0
    DEFAULT_PLATFORM_THICKNESS = 1.0
    DEFAULT_START_PLATFORM_LENGTH = 10.0

    @classmethod
    def _check(cls, config: GenerationConfig) -> Tuple[List[ConstraintViolation], dict]:
        """Collect violations and the replacement values that fix them."""
        violations = []
        fixes = {}

        if config.segment_count < cls.SEGMENT_COUNT_MIN:
            violations.append(ConstraintViolation(
                "segment_count",
                f"Segment count {config.segment_count} < {cls.SEGMENT_COUNT_MIN}, building no segments",
                "clamped",
            ))
            fixes["segment_count"] = cls.SEGMENT_COUNT_MIN
        elif config.segment_count > cls.SEGMENT_COUNT_WARN:
            violations.append(ConstraintViolation(
                "segment_count",
                f"Segment count {config.segment_count} is very high",
                "warning",
            ))

        if config.base_segment_length < cls.BASE_SEGMENT_LENGTH_MIN:
            violations.append(ConstraintViolation(
                "base_segment_length",
                f"Base segment length {config.base_segment_length} < min {cls.BASE_SEGMENT_LENGTH_MIN}",
                "clamped",
            ))
            fixes["base_segment_length"] = cls.BASE_SEGMENT_LENGTH_MIN

        if config.segment_width < cls.SEGMENT_WIDTH_MIN:
            violations.append(ConstraintViolation(
                "segment_width",
                f"Segment width {config.segment_width} < min {cls.SEGMENT_WIDTH_MIN}",
                "clamped",
            ))
            fixes["segment_width"] = cls.SEGMENT_WIDTH_MIN

        if config.checkpoint_interval < cls.CHECKPOINT_INTERVAL_MIN:
            violations.append(ConstraintViolation(
                "checkpoint_interval",
                f"Checkpoint interval {config.checkpoint_interval} < {cls.CHECKPOINT_INTERVAL_MIN}",
                "clamped",
            ))
            fixes["checkpoint_interval"] = cls.CHECKPOINT_INTERVAL_MIN

        if config.max_difficulty < config.start_difficulty:
            violations.append(ConstraintViolation(
                "max_difficulty",
                f"Max difficulty {config.max_difficulty} < start difficulty {config.start_difficulty}",
                "clamped",
            ))
            fixes["max_difficulty"] = config.start_difficulty

        if config.difficulty_ramp < 0:
            violations.append(ConstraintViolation(
                "difficulty_ramp",
                f"Negative difficulty ramp {config.difficulty_ramp}; difficulty will stay at start",
                "warning",
            ))

        if config.platform_thickness <= 0:
            violations.append(ConstraintViolation(
                "platform_thickness",
                f"Platform thickness {config.platform_thickness} <= 0",
                "clamped",
            ))
            fixes["platform_thickness"] = cls.DEFAULT_PLATFORM_THICKNESS

        if config.wall_height < cls.WALL_HEIGHT_MIN:
            violations.append(ConstraintViolation(
                "wall_height",
                f"Wall height {config.wall_height} < {cls.WALL_HEIGHT_MIN}",
                "clamped",
            ))
            fixes["wall_height"] = cls.WALL_HEIGHT_MIN

        if config.start_platform_length <= 0:
            violations.append(ConstraintViolation(
                "start_platform_length",
                f"Start platform length {config.start_platform_length} <= 0",
                "clamped",
            ))
            fixes["start_platform_length"] = cls.DEFAULT_START_PLATFORM_LENGTH

        return violations, fixes

    @classmethod
    def validate(cls, config: GenerationConfig) -> ConstraintResult:
        """Validate a config. Invalid means at least one value would be clamped."""
        violations, _ = cls._check(config)
        clamped = [v for v in violations if v.severity == "clamped"]
        return ConstraintResult(valid=len(clamped) == 0, violations=violations)

    @classmethod
    def sanitize(cls, config: GenerationConfig) -> Tuple[GenerationConfig, List[ConstraintViolation]]:
        """Return a usable copy of `config` plus the violations that were fixed.

        Each violation is logged as a warning. A config without violations
        is returned unchanged (same object).
        """
        violations, fixes = cls._check(config)
        for v in violations:
            logger.warning("Config %s: %s", v.severity, v.message)
        if not fixes:
            return config, violations
        return replace(config, **fixes), violations
