"""Aggregate statistics over many generated courses.

Generates one course per seed, flattens every segment into a row of a
pandas DataFrame and produces:
1. Archetype frequency per difficulty tier (heatmap)
2. Obstacle count vs. difficulty, with the density bounds overlaid
3. Elevation profiles (build position y against z) for a sample of seeds
4. A JSON summary

Usage:
    from procedural_obstacle_course.analysis.course_report import compute_course_metrics, generate_report

    df = compute_course_metrics(range(200))
    generate_report(df, output_dir="reports/default")
"""

import json
import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")  # headless rendering
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Iterable, Optional

from ..config import GenerationConfig
from ..course import SegmentType
from ..course_gen import CourseGenerator
from ..difficulty import difficulty_tier
from ..segments import SELF_POPULATED


_SEGMENT_ORDER = [t.value for t in SegmentType]
_TIER_ORDER = [0, 1, 2]
_TIER_LABELS = ["d < 2", "2 <= d < 4", "d >= 4"]


def compute_course_metrics(
    seeds: Iterable[int],
    config: Optional[GenerationConfig] = None,
) -> pd.DataFrame:
    """Generate a course per seed and return one row per segment.

    Columns: seed, index, archetype, tier, difficulty, length, width,
    elevation_delta, hazard_count, obstacle_count, end_z, end_y.
    """
    generator = CourseGenerator(config)
    rows = []
    for seed in seeds:
        layout = generator.generate(seed=seed)
        for seg in layout.segments:
            rows.append({
                "seed": seed,
                "index": seg.index,
                "archetype": seg.archetype.value,
                "tier": difficulty_tier(seg.difficulty),
                "difficulty": seg.difficulty,
                "length": seg.length,
                "width": seg.width,
                "elevation_delta": seg.elevation_delta,
                "hazard_count": seg.hazard_count,
                "obstacle_count": len(seg.obstacles),
                "end_z": seg.end_position.z,
                "end_y": seg.end_position.y,
            })
    columns = [
        "seed", "index", "archetype", "tier", "difficulty", "length", "width",
        "elevation_delta", "hazard_count", "obstacle_count", "end_z", "end_y",
    ]
    return pd.DataFrame(rows, columns=columns)


def archetype_by_tier(df: pd.DataFrame) -> pd.DataFrame:
    """Fraction of segments of each archetype within each tier (columns sum to 1)."""
    counts = pd.crosstab(df["archetype"], df["tier"])
    counts = counts.reindex(index=_SEGMENT_ORDER, columns=_TIER_ORDER, fill_value=0)
    totals = counts.sum(axis=0).replace(0, np.nan)
    return counts / totals


def summarize(df: pd.DataFrame) -> dict:
    """Summary statistics as plain JSON-compatible data."""
    if df.empty:
        return {"courses": 0, "segments": 0}

    per_course = df.groupby("seed").agg(
        length=("length", "sum"),
        elevation=("elevation_delta", "sum"),
        hazards=("hazard_count", "sum"),
    )
    populated = df[~df["archetype"].isin([t.value for t in SELF_POPULATED])]

    return {
        "courses": int(df["seed"].nunique()),
        "segments": int(len(df)),
        "archetype_frequency": df["archetype"].value_counts(normalize=True).to_dict(),
        "archetype_by_tier": {
            str(tier): {k: float(v) for k, v in col.dropna().items()}
            for tier, col in archetype_by_tier(df).items()
        },
        "hazards_by_archetype": df.groupby("archetype")["hazard_count"].mean().to_dict(),
        "mean_hazards_populated": float(populated["hazard_count"].mean()) if len(populated) else 0.0,
        "course_length_mean": float(per_course["length"].mean()),
        "course_length_std": float(per_course["length"].std(ddof=0)),
        "elevation_p05": float(np.percentile(per_course["elevation"], 5)),
        "elevation_p95": float(np.percentile(per_course["elevation"], 95)),
        "hazards_per_course_mean": float(per_course["hazards"].mean()),
    }


def _save_fig(fig, output_dir, name):
    """Save figure and close it."""
    path = Path(output_dir) / f"{name}.png"
    fig.savefig(path, dpi=120, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    return str(path)


def plot_archetype_heatmap(df, output_dir):
    """Archetype share per difficulty tier."""
    grid = archetype_by_tier(df)
    fig, ax = plt.subplots(figsize=(7, 6))
    im = ax.imshow(grid.values.astype(float), cmap="YlGn", aspect="auto", vmin=0, vmax=1)
    for i in range(grid.shape[0]):
        for j in range(grid.shape[1]):
            val = grid.values[i, j]
            text = "-" if pd.isna(val) or val == 0 else f"{val:.0%}"
            ax.text(j, i, text, ha="center", va="center", fontsize=8)
    ax.set_xticks(range(len(_TIER_ORDER)))
    ax.set_xticklabels(_TIER_LABELS)
    ax.set_yticks(range(len(_SEGMENT_ORDER)))
    ax.set_yticklabels(_SEGMENT_ORDER)
    ax.set_title("Segment archetype share by difficulty tier")
    plt.colorbar(im, ax=ax, shrink=0.8)
    fig.tight_layout()
    return _save_fig(fig, output_dir, "archetype_by_tier")


def plot_obstacle_density(df, output_dir):
    """Hazards per segment against difficulty, with ceil(d) / ceil(2d)+2 guides."""
    fig, ax = plt.subplots(figsize=(8, 5))
    gauntlet = df[df["archetype"] == SegmentType.GAUNTLET.value]
    standard = df[~df["archetype"].isin([
        SegmentType.GAUNTLET.value, *(t.value for t in SELF_POPULATED),
    ])]
    ax.scatter(standard["difficulty"], standard["hazard_count"], s=12, alpha=0.4, label="standard")
    ax.scatter(gauntlet["difficulty"], gauntlet["hazard_count"], s=12, alpha=0.6, label="gauntlet")

    if len(df):
        d = np.linspace(df["difficulty"].min(), df["difficulty"].max(), 100)
        ax.plot(d, np.ceil(d), "k--", linewidth=1, label="ceil(d)")
        ax.plot(d, np.ceil(d) + 1, "k:", linewidth=1, label="ceil(d) + 1")
        ax.plot(d, np.ceil(2 * d) + 2, "r--", linewidth=1, label="ceil(2d) + 2")
    ax.set_xlabel("Difficulty")
    ax.set_ylabel("Hazards in segment")
    ax.set_title("Obstacle density vs. difficulty")
    ax.legend(fontsize=8)
    fig.tight_layout()
    return _save_fig(fig, output_dir, "obstacle_density")


def plot_elevation_profiles(df, output_dir, max_courses=20):
    """Build-position elevation along each course for the first `max_courses` seeds."""
    fig, ax = plt.subplots(figsize=(10, 5))
    for seed in list(df["seed"].unique())[:max_courses]:
        course = df[df["seed"] == seed].sort_values("index")
        ax.plot(course["end_z"], course["end_y"], marker="o", markersize=3, linewidth=1, alpha=0.7)
    ax.axhline(0.0, color="gray", linewidth=0.8)
    ax.set_xlabel("Forward distance (z)")
    ax.set_ylabel("Elevation (y)")
    ax.set_title("Elevation profiles")
    fig.tight_layout()
    return _save_fig(fig, output_dir, "elevation_profiles")


def generate_report(df: pd.DataFrame, output_dir) -> dict:
    """Write figures plus `course_summary.json` to `output_dir`.

    Returns:
        Summary dict (also saved as JSON), including figure paths.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"Generating course report in {output_dir}/")
    figures = {}

    print("  Plotting archetype heatmap...")
    figures["archetype_by_tier"] = plot_archetype_heatmap(df, output_dir)

    print("  Plotting obstacle density...")
    figures["obstacle_density"] = plot_obstacle_density(df, output_dir)

    print("  Plotting elevation profiles...")
    figures["elevation_profiles"] = plot_elevation_profiles(df, output_dir)

    summary = summarize(df)
    summary["figures"] = figures

    summary_path = output_dir / "course_summary.json"
    with open(summary_path, "w") as f:
        json.dump(summary, f, indent=2, default=str)
    print(f"  Summary saved to {summary_path}")

    metrics_path = output_dir / "segments.csv"
    df.to_csv(metrics_path, index=False)
    print(f"  Segment metrics saved to {metrics_path}")

    print()
    print("=== Course Report Summary ===")
    print(f"Courses: {summary.get('courses', 0)}  Segments: {summary.get('segments', 0)}")
    if summary.get("segments"):
        print(f"Mean course length: {summary['course_length_mean']:.1f}")
        print(f"Hazards per course: {summary['hazards_per_course_mean']:.1f}")
        print(f"Elevation 5-95%: {summary['elevation_p05']:.1f} .. {summary['elevation_p95']:.1f}")

    return summary
