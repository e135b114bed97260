"""JSON export of generated courses.

The exported document is CourseLayout.to_dict() plus two derived blocks:
- summary: archetype sequence, obstacle count, length, elevation
- profile: the build path as numpy arrays (z, y, grade per leg), with
  the start platform as the first leg
"""

import json
import numpy as np
from pathlib import Path
from typing import Any, Dict, Union

from .course import CourseLayout


def _json_default(obj: Any) -> Any:
    """Convert numpy arrays and scalars left in course data."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()
    raise TypeError(f"{type(obj).__name__} is not JSON serializable")


def course_profile(layout: CourseLayout) -> Dict[str, np.ndarray]:
    """Build-path vertices and the grade (rise over run) of each leg.

    Vertices are the origin, the end of the start platform and each
    segment's end position.
    """
    start_z = layout.config.start_platform_length
    z = np.array([0.0, start_z] + [s.end_position.z for s in layout.segments])
    y = np.array([0.0, 0.0] + [s.end_position.y for s in layout.segments])
    return {"z": z, "y": y, "grade": np.diff(y) / np.diff(z)}


def course_to_dict(layout: CourseLayout) -> Dict[str, Any]:
    """Layout data with summary and profile blocks (profile values are numpy arrays)."""
    data = layout.to_dict()
    profile = course_profile(layout)
    data["summary"] = {
        "segment_types": [t.value for t in layout.segment_types()],
        "obstacle_count": layout.obstacle_count(),
        "total_length": layout.total_length(),
        "total_elevation": layout.total_elevation(),
        "checkpoint_count": len(layout.checkpoints),
        "max_grade": np.abs(profile["grade"]).max(),
    }
    data["profile"] = profile
    return data


def course_to_json(layout: CourseLayout, indent: int = 2) -> str:
    return json.dumps(course_to_dict(layout), indent=indent, default=_json_default)


def save_course(layout: CourseLayout, path: Union[str, Path]) -> Path:
    """Write a layout to `path` as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(course_to_json(layout))
    return path


def load_course_dict(path: Union[str, Path]) -> Dict[str, Any]:
    """Read back a saved course as plain data."""
    with open(path) as f:
        return json.load(f)
