"""Tests for obstacle emitters and population."""

import pytest

from procedural_obstacle_course.course import (
    AXIS_FORWARD,
    AXIS_RIGHT,
    AXIS_UP,
    GeometryDescriptor,
    GeometryRole,
    ObstacleType,
    SegmentType,
    ShapeKind,
    Vec3,
)
from procedural_obstacle_course.obstacles import (
    EMITTERS,
    emit_bumper,
    emit_launcher,
    emit_obstacle,
    emit_pendulum,
    emit_punch_wall,
    emit_roller,
    emit_spinning_bar,
    emit_windmill,
    falling_block,
    gauntlet_obstacle_count,
    moving_platform,
    populate_gauntlet,
    populate_standard,
    slime_zone,
    standard_obstacle_count,
)
from procedural_obstacle_course.random_stream import RandomStream


BASE = Vec3(1.0, 0.0, 10.0)


class TestEmitters:
    def test_spinning_bar(self):
        p = emit_spinning_bar(BASE, 2.0, 12.0)
        assert p.archetype == ObstacleType.SPINNING_BAR
        assert p.position == Vec3(1.0, 1.2, 10.0)
        assert p.axis == AXIS_UP
        assert p.params["speed"] == pytest.approx(90.0)
        assert p.params["knockback_force"] == pytest.approx(10.0)
        assert p.params["bar_length"] == pytest.approx(8.0)

    def test_spinning_bar_length_follows_narrow_width(self):
        p = emit_spinning_bar(BASE, 1.0, 5.0)
        assert p.params["bar_length"] == pytest.approx(4.0)

    def test_pendulum(self):
        p = emit_pendulum(BASE, 2.0, 12.0)
        assert p.position.y == pytest.approx(6.0)
        assert p.axis == AXIS_RIGHT
        assert p.params["speed"] == pytest.approx(2.1)
        assert p.params["swing_angle"] == pytest.approx(50.0)
        assert p.params["knockback_force"] == pytest.approx(14.0)

    def test_bumper(self):
        p = emit_bumper(BASE, 3.0, 12.0)
        assert p.position.y == pytest.approx(0.75)
        assert p.params["force"] == pytest.approx(18.0)
        assert p.params["upward_ratio"] == pytest.approx(0.4)

    def test_windmill_has_four_blades_and_hub(self):
        p = emit_windmill(BASE, 1.0, 12.0)
        assert p.axis == AXIS_FORWARD
        assert p.params["speed"] == pytest.approx(75.0)
        assert p.params["knockback_force"] == pytest.approx(10.0)
        names = [part.name for part in p.parts]
        assert sum(n.startswith("Blade_") for n in names) == 4
        assert "Hub" in names

    def test_punch_wall(self):
        p = emit_punch_wall(BASE, 2.0, 10.0)
        assert p.position == BASE
        assert p.params["amplitude_x"] == pytest.approx(3.0)
        assert p.params["speed"] == pytest.approx(1.4)
        assert p.params["knockback_force"] == pytest.approx(12.0)

    def test_roller(self):
        p = emit_roller(BASE, 2.0, 12.0)
        assert p.position.y == pytest.approx(1.0)
        assert p.params["speed"] == pytest.approx(100.0)
        assert p.params["knockback_force"] == pytest.approx(6.0)

    def test_launcher(self):
        p = emit_launcher(BASE, 2.0, 12.0)
        assert p.position.y == pytest.approx(0.25)
        assert p.params["force"] == pytest.approx(21.0)
        assert p.params["cooldown"] == pytest.approx(0.5)

    def test_params_scale_with_difficulty(self):
        for archetype, emitter in EMITTERS.items():
            easy = emitter(BASE, 1.0, 12.0).params
            hard = emitter(BASE, 4.0, 12.0).params
            for key in easy:
                assert hard[key] >= easy[key], (archetype, key)

    def test_every_part_is_obstacle_role(self):
        for emitter in EMITTERS.values():
            for part in emitter(BASE, 1.0, 12.0).parts:
                assert part.role == GeometryRole.OBSTACLE

    def test_unknown_archetype_falls_back_to_bumper(self):
        p = emit_obstacle(ObstacleType.SLIME_ZONE, BASE, 1.0, 12.0)
        assert p.archetype == ObstacleType.BUMPER


class TestBuilderOwnedBehaviours:
    def test_moving_platform_keeps_slab(self):
        slab = GeometryDescriptor(
            ShapeKind.SLAB, GeometryRole.FLOOR, "Platform_0", Vec3(1.0, 0.5, 4.0), Vec3(3.0, 1.0, 2.0),
        )
        p = moving_platform(slab, Vec3(1.5, -0.2, 0.0), 2.0)
        assert p.archetype == ObstacleType.MOVING_PLATFORM
        assert p.position == slab.position
        assert p.params["amplitude_x"] == pytest.approx(1.5)
        assert p.params["amplitude_y"] == pytest.approx(-0.2)
        assert p.parts[0].role == GeometryRole.FLOOR
        assert p.parts[0].size == slab.size

    def test_slime_zone(self):
        p = slime_zone(BASE, 4.0, 5.0, "goo")
        assert p.archetype == ObstacleType.SLIME_ZONE
        assert p.parts[0].role == GeometryRole.HAZARD_ZONE
        assert p.parts[0].material == "goo"

    def test_falling_block(self):
        p = falling_block(BASE, 2.0, "crate")
        assert p.archetype == ObstacleType.FALLING_TILE
        assert p.params["warning_delay"] == pytest.approx(1.5)
        assert p.params["respawn_delay"] == pytest.approx(3.0)
        assert p.parts[0].size == Vec3(2.0, 2.0, 2.0)


class TestCounts:
    @pytest.mark.parametrize("difficulty, expected", [(0.5, 1), (1.0, 1), (1.5, 2), (3.2, 4)])
    def test_standard_count(self, difficulty, expected):
        assert standard_obstacle_count(difficulty, 0) == expected
        assert standard_obstacle_count(difficulty, 1) == expected + 1

    @pytest.mark.parametrize("difficulty, expected", [(1.0, 4), (1.5, 5), (2.2, 7)])
    def test_gauntlet_count(self, difficulty, expected):
        assert gauntlet_obstacle_count(difficulty) == expected


class TestPopulateStandard:
    def test_count_and_band(self):
        stream = RandomStream(seed=21)
        for _ in range(30):
            placements = populate_standard(SegmentType.STRAIGHT, 24.0, 12.0, 2.5, stream)
            assert len(placements) in (3, 4)
            for p in placements:
                assert abs(p.position.x) <= 0.35 * 12.0
                assert 3.0 <= p.position.z <= 21.0

    def test_archetypes_come_from_segment_table(self):
        stream = RandomStream(seed=4)
        allowed = {ObstacleType.PENDULUM, ObstacleType.WINDMILL, ObstacleType.BUMPER}
        for _ in range(20):
            for p in populate_standard(SegmentType.NARROW_BRIDGE, 24.0, 6.0, 2.0, stream):
                assert p.archetype in allowed

    def test_draw_count(self):
        stream = RandomStream(seed=8)
        placements = populate_standard(SegmentType.STRAIGHT, 24.0, 12.0, 1.0, stream)
        assert stream.draws == 1 + 3 * len(placements)


class TestPopulateGauntlet:
    def test_evenly_spaced(self):
        stream = RandomStream(seed=3)
        placements = populate_gauntlet(30.0, 12.0, 1.0, stream)
        assert len(placements) == 4
        spacing = 30.0 / 5
        for i, p in enumerate(placements):
            assert p.position.z == pytest.approx(spacing * (i + 1))
            assert abs(p.position.x) <= 0.3 * 12.0

    def test_draw_count(self):
        stream = RandomStream(seed=3)
        placements = populate_gauntlet(30.0, 12.0, 2.0, stream)
        assert len(placements) == 6
        assert stream.draws == 2 * len(placements)

    def test_density_exceeds_standard(self):
        for d in (0.5, 1.0, 2.5, 4.0):
            assert gauntlet_obstacle_count(d) > standard_obstacle_count(d, 1)
