"""Tests for the pymunk side-profile world."""

import pytest
import pymunk

from procedural_obstacle_course.course import (
    GeometryDescriptor,
    GeometryRole,
    ObstacleType,
    ShapeKind,
    Vec3,
)
from procedural_obstacle_course.course_gen import CourseGenerator
from procedural_obstacle_course.emitters import build_course
from procedural_obstacle_course.physics import (
    COLLISION_FLOOR,
    COLLISION_TRIGGER,
    COLLISION_WALL,
    ProfileEmitter,
    ProfileWorld,
    obstacle_collision_type,
    profile_box,
)


class TestProfileBox:
    def test_unpitched_corners(self):
        corners = profile_box((5.0, 0.0), 10.0, 1.0)
        xs = sorted(x for x, _ in corners)
        ys = sorted(y for _, y in corners)
        assert xs[0] == pytest.approx(0.0)
        assert xs[-1] == pytest.approx(10.0)
        assert ys[0] == pytest.approx(-0.5)
        assert ys[-1] == pytest.approx(0.5)

    def test_positive_pitch_raises_forward_end(self):
        corners = profile_box((0.0, 0.0), 10.0, 0.0, pitch_deg=30.0)
        forward = max(corners, key=lambda c: c[0])
        assert forward[1] > 0


class TestProfileWorld:
    def test_create_static_box(self):
        world = ProfileWorld()
        shape = world.create_static_box((0.0, 0.0), 4.0, 1.0, name="Floor")
        assert isinstance(shape, pymunk.Poly)
        assert shape.collision_type == COLLISION_FLOOR
        assert world.shape_count == 1
        assert world.shape_name(shape) == "Floor"

    def test_floor_height(self):
        world = ProfileWorld()
        world.create_static_box((5.0, 0.0), 10.0, 1.0)
        assert world.floor_height_at(5.0) == pytest.approx(0.5)
        assert world.floor_height_at(50.0) is None

    def test_sensor_roles(self):
        world = ProfileWorld()
        trigger = GeometryDescriptor(ShapeKind.TRIGGER, GeometryRole.TRIGGER, "T", Vec3(), Vec3(1, 1, 1))
        wall = GeometryDescriptor(ShapeKind.SLAB, GeometryRole.WALL, "W", Vec3(), Vec3(1, 1, 1))
        t = world.add_descriptor(trigger, Vec3(0.0, 0.0, 2.0))
        w = world.add_descriptor(wall, Vec3(0.0, 0.0, 4.0))
        assert t.sensor
        assert t.collision_type == COLLISION_TRIGGER
        assert not w.sensor
        assert w.collision_type == COLLISION_WALL

    def test_triggers_do_not_count_as_floor(self):
        world = ProfileWorld()
        trigger = GeometryDescriptor(ShapeKind.TRIGGER, GeometryRole.TRIGGER, "T", Vec3(), Vec3(2, 2, 2))
        world.add_descriptor(trigger, Vec3(0.0, 0.0, 0.0))
        assert world.floor_height_at(0.0) is None

    def test_bounds_empty(self):
        assert ProfileWorld().bounds() == (0.0, 0.0, 0.0, 0.0)


class TestObstacleCollisionTypes:
    def test_unique_per_archetype(self):
        types = {obstacle_collision_type(a) for a in ObstacleType}
        assert len(types) == len(ObstacleType)
        assert min(types) >= 10


class TestProfileEmitter:
    @pytest.fixture
    def built(self, config):
        layout = CourseGenerator(config).generate(seed=13)
        emitter = ProfileEmitter()
        build_course(emitter, layout)
        return layout, emitter.world

    def test_shape_count(self, built):
        layout, world = built
        expected = sum(len(f.geometry) for f in layout.fixtures)
        for seg in layout.segments:
            expected += len(seg.geometry)
            expected += sum(len(o.parts) for o in seg.obstacles)
        assert world.shape_count == expected

    def test_start_floor_height(self, built, config):
        _, world = built
        assert world.floor_height_at(config.start_platform_length / 2.0) == pytest.approx(
            config.platform_thickness / 2.0
        )

    def test_finish_floor_height(self, built, config):
        layout, world = built
        finish = layout.finish_position
        expected = finish.y - config.spawn_height + config.platform_thickness / 2.0
        assert world.floor_height_at(finish.z + 5.0) == pytest.approx(expected)

    def test_bounds_cover_course(self, built):
        layout, world = built
        min_z, _, max_z, _ = world.bounds()
        assert min_z <= 0.0
        assert max_z >= layout.finish_position.z

