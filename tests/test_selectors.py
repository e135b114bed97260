"""Tests for weighted archetype selection."""

import pytest

from procedural_obstacle_course.course import ObstacleType, SegmentType
from procedural_obstacle_course.random_stream import RandomStream
from procedural_obstacle_course.selectors import (
    DEFAULT_OBSTACLE_TABLE,
    OBSTACLE_TABLES,
    SEGMENT_TABLES,
    WeightedTable,
    obstacle_table,
    pick_obstacle_type,
    pick_segment_type,
    segment_table,
)


class TestWeightedTable:
    def test_pick_boundaries(self):
        table = WeightedTable([(0.3, "a"), (0.5, "b")], "c")
        assert table.pick(0.0) == "a"
        assert table.pick(0.29) == "a"
        assert table.pick(0.3) == "b"
        assert table.pick(0.5) == "c"
        assert table.pick(0.999) == "c"

    def test_probabilities(self):
        table = WeightedTable([(0.3, "a"), (0.5, "b")], "c")
        probs = table.probabilities()
        assert probs["a"] == pytest.approx(0.3)
        assert probs["b"] == pytest.approx(0.2)
        assert probs["c"] == pytest.approx(0.5)

    def test_rejects_unsorted_thresholds(self):
        with pytest.raises(ValueError):
            WeightedTable([(0.5, "a"), (0.3, "b")], "c")

    def test_rejects_out_of_range_thresholds(self):
        with pytest.raises(ValueError):
            WeightedTable([(1.2, "a")], "b")

    def test_draw_uses_one_roll(self):
        stream = RandomStream(seed=0)
        WeightedTable([(0.5, "a")], "b").draw(stream)
        assert stream.draws == 1


class TestSegmentTables:
    def test_tier_routing(self):
        assert segment_table(0.5) is SEGMENT_TABLES[0]
        assert segment_table(2.0) is SEGMENT_TABLES[1]
        assert segment_table(4.5) is SEGMENT_TABLES[2]

    @pytest.mark.parametrize("table", SEGMENT_TABLES)
    def test_probabilities_sum_to_one(self, table):
        assert sum(table.probabilities().values()) == pytest.approx(1.0)

    def test_low_tier_has_no_hard_archetypes(self):
        entries = set(SEGMENT_TABLES[0].entries())
        assert SegmentType.GAUNTLET not in entries
        assert SegmentType.NARROW_BRIDGE not in entries
        assert SegmentType.TUMBLING_BLOCKS not in entries

    def test_low_tier_weights(self):
        probs = SEGMENT_TABLES[0].probabilities()
        assert probs[SegmentType.STRAIGHT] == pytest.approx(0.3)
        assert probs[SegmentType.RAMP] == pytest.approx(0.2)
        assert probs[SegmentType.PLATFORM] == pytest.approx(0.2)
        assert probs[SegmentType.SLIDING_FLOOR] == pytest.approx(0.3)

    def test_high_tier_has_no_straight_or_platform(self):
        entries = set(SEGMENT_TABLES[2].entries())
        assert SegmentType.STRAIGHT not in entries
        assert SegmentType.PLATFORM not in entries

    def test_pick_segment_type_deterministic(self):
        a = RandomStream(seed=9)
        b = RandomStream(seed=9)
        assert [pick_segment_type(3.0, a) for _ in range(20)] == [pick_segment_type(3.0, b) for _ in range(20)]


class TestObstacleTables:
    def test_unlisted_segment_uses_default_table(self):
        assert obstacle_table(SegmentType.TUMBLING_BLOCKS) is DEFAULT_OBSTACLE_TABLE
        assert obstacle_table(None) is DEFAULT_OBSTACLE_TABLE

    @pytest.mark.parametrize("segment_type", sorted(OBSTACLE_TABLES, key=lambda t: t.value))
    def test_probabilities_sum_to_one(self, segment_type):
        assert sum(OBSTACLE_TABLES[segment_type].probabilities().values()) == pytest.approx(1.0)

    def test_gauntlet_weights(self):
        probs = OBSTACLE_TABLES[SegmentType.GAUNTLET].probabilities()
        assert probs[ObstacleType.PUNCH_WALL] == pytest.approx(0.15)
        assert probs[ObstacleType.ROLLER] == pytest.approx(0.15)

    def test_tables_only_hold_population_obstacles(self):
        builder_owned = {ObstacleType.MOVING_PLATFORM, ObstacleType.SLIME_ZONE, ObstacleType.FALLING_TILE}
        for table in list(OBSTACLE_TABLES.values()) + [DEFAULT_OBSTACLE_TABLE]:
            assert not builder_owned & set(table.entries())

    def test_pick_obstacle_type_returns_table_entry(self):
        stream = RandomStream(seed=2)
        entries = set(OBSTACLE_TABLES[SegmentType.NARROW_BRIDGE].entries())
        for _ in range(50):
            assert pick_obstacle_type(SegmentType.NARROW_BRIDGE, stream) in entries
