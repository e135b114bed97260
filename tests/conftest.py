"""Pytest configuration and shared fixtures."""

import pytest

from procedural_obstacle_course.config import CONFIGS, GenerationConfig
from procedural_obstacle_course.course_gen import CourseGenerator
from procedural_obstacle_course.random_stream import RandomStream
from procedural_obstacle_course.segments import SegmentContext


@pytest.fixture
def config():
    """Default generation configuration."""
    return GenerationConfig()


@pytest.fixture
def short_config():
    """Three segments, one checkpoint."""
    return CONFIGS["short"]


@pytest.fixture
def generator(config):
    """Generator over the default config."""
    return CourseGenerator(config)


@pytest.fixture
def stream():
    """Freshly seeded random stream."""
    return RandomStream(seed=1234)


@pytest.fixture
def ctx(config):
    """Segment context with placeholder materials."""
    return SegmentContext(
        config=config,
        floor_material="floor",
        wall_material="wall",
        slime_material="slime",
        block_material="block",
    )
