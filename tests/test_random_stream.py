"""Tests for the seeded random stream."""

import random

from procedural_obstacle_course.random_stream import RandomStream, time_seed


class TestRandomStream:
    def test_same_seed_same_sequence(self):
        a = RandomStream(seed=7)
        b = RandomStream(seed=7)
        assert [a.uniform01() for _ in range(10)] == [b.uniform01() for _ in range(10)]

    def test_different_seeds_differ(self):
        a = RandomStream(seed=1)
        b = RandomStream(seed=2)
        assert [a.uniform01() for _ in range(5)] != [b.uniform01() for _ in range(5)]

    def test_reseed_restarts_sequence(self):
        s = RandomStream(seed=3)
        first = [s.uniform_range(0, 10) for _ in range(4)]
        s.seed(3)
        assert [s.uniform_range(0, 10) for _ in range(4)] == first

    def test_seed_returns_value_used(self):
        s = RandomStream()
        assert s.seed(99) == 99
        assert s.last_seed == 99
        used = s.seed(None)
        assert isinstance(used, int)
        assert s.last_seed == used

    def test_time_seed_is_non_negative_int(self):
        value = time_seed()
        assert isinstance(value, int)
        assert 0 <= value <= 0x7FFFFFFF

    def test_draw_counter(self):
        s = RandomStream(seed=0)
        s.uniform01()
        s.uniform_range(1, 2)
        s.uniform_int(0, 3)
        s.sign()
        assert s.draws == 4
        s.seed(0)
        assert s.draws == 0

    def test_uniform01_range(self):
        s = RandomStream(seed=5)
        for _ in range(200):
            assert 0.0 <= s.uniform01() < 1.0

    def test_uniform_range_bounds(self):
        s = RandomStream(seed=5)
        for _ in range(200):
            assert -3.0 <= s.uniform_range(-3.0, 5.0) <= 5.0

    def test_uniform_int_is_inclusive(self):
        s = RandomStream(seed=11)
        values = {s.uniform_int(3, 5) for _ in range(300)}
        assert values == {3, 4, 5}

    def test_sign_values(self):
        s = RandomStream(seed=11)
        values = {s.sign() for _ in range(100)}
        assert values == {1.0, -1.0}

    def test_does_not_touch_global_random(self):
        random.seed(123)
        expected = random.random()
        random.seed(123)
        s = RandomStream(seed=4)
        for _ in range(10):
            s.uniform01()
        assert random.random() == expected
