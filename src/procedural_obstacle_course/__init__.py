"""procedural-obstacle-course: seeded obstacle-course generator for race levels.

Assembles a course from heterogeneous segments (floors, ramps, bridges,
floating platforms) and fills them with hazards whose density, speed and
force follow a difficulty curve. Checkpoints and the finish position are
recorded along the way. A fixed seed and config reproduce the course
exactly.
"""

from .config import GenerationConfig, MaterialPalette, CONFIGS, DEFAULT_MATERIALS
from .course import (
    Vec3,
    SegmentType,
    ObstacleType,
    ShapeKind,
    GeometryRole,
    GeometryDescriptor,
    ObstaclePlacement,
    SegmentRecord,
    Fixture,
    CourseLayout,
)
from .random_stream import RandomStream
from .difficulty import DifficultyCurve, difficulty_at, difficulty_tier
from .course_gen import CourseGenerator, AssemblerState
from .emitters import GeometryEmitter, CourseSink, build_course, RecordingEmitter, RecordingSink
from .constraints import CourseConstraints, ConstraintResult, ConstraintViolation

__all__ = [
    "GenerationConfig",
    "MaterialPalette",
    "CONFIGS",
    "DEFAULT_MATERIALS",
    "Vec3",
    "SegmentType",
    "ObstacleType",
    "ShapeKind",
    "GeometryRole",
    "GeometryDescriptor",
    "ObstaclePlacement",
    "SegmentRecord",
    "Fixture",
    "CourseLayout",
    "RandomStream",
    "DifficultyCurve",
    "difficulty_at",
    "difficulty_tier",
    "CourseGenerator",
    "AssemblerState",
    "GeometryEmitter",
    "CourseSink",
    "build_course",
    "RecordingEmitter",
    "RecordingSink",
    "CourseConstraints",
    "ConstraintResult",
    "ConstraintViolation",
]
