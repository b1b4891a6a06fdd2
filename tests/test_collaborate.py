"""Tests for the producer/participants pipeline."""

from __future__ import annotations

import pytest

from middleware import collaborate


def collector(out):
    def participant(value):
        out.append(value)

    return participant


@pytest.mark.unit
class TestPlainParticipants:
    def test_values_flow_through_participants(self):
        out = []
        collaborate([1, 2, 3], lambda n: n + 1, lambda n: n * 10, collector(out))()
        assert out == [20, 30, 40]

    def test_none_and_true_keep_current_value(self):
        out = []
        collaborate(["a"], lambda v: None, lambda v: True, collector(out))()
        assert out == ["a"]

    def test_false_drops_value_for_remaining_participants(self):
        out = []
        keep_even = lambda n: None if n % 2 == 0 else False
        collaborate(range(5), keep_even, collector(out))()
        assert out == [0, 2, 4]

    def test_falsy_participants_are_skipped(self):
        out = []
        collaborate([1], None, collector(out))()
        assert out == [1]

    def test_returns_none(self):
        assert collaborate([1], lambda n: n)() is None


@pytest.mark.unit
class TestStarter:
    def test_callable_starter_receives_arguments(self):
        out = []

        def numbers(limit, *, step=1):
            yield from range(0, limit, step)

        collaborate(numbers, collector(out))(6, step=2)
        assert out == [0, 2, 4]

    def test_callable_starter_must_return_iterable(self):
        run = collaborate(lambda: 42, collector([]))
        with pytest.raises(TypeError, match="MUST return an iterable"):
            run()

    @pytest.mark.parametrize("starter", [None, 42, 1.5])
    def test_invalid_starter(self, starter):
        with pytest.raises(TypeError, match="starter"):
            collaborate(starter)

    def test_invalid_participant(self):
        with pytest.raises(TypeError, match="participant"):
            collaborate([1], 42)


@pytest.mark.unit
class TestGeneratorParticipants:
    def test_generator_function_keeps_state_across_values(self):
        out = []

        def numbering(_first):
            count = 0
            while True:
                value = yield
                count += 1
                yield f"{count}:{value}"

        collaborate(["a", "b", "c"], numbering, collector(out))()
        assert out == ["1:a", "2:b", "3:c"]

    def test_generator_false_drops_value(self):
        out = []

        def odd_filter(_first):
            while True:
                value = yield
                yield None if value % 2 else False

        collaborate(range(6), odd_filter, collector(out))()
        assert out == [1, 3, 5]

    def test_finished_generator_leaves_rotation(self):
        seen, out = [], []

        def first_only(_first):
            value = yield
            seen.append(value)
            yield value * 10

        collaborate([1, 2, 3], first_only, collector(out))()
        assert seen == [1]
        assert out == [10, 2, 3]

    def test_generator_object_participant(self):
        out = []

        def doubler():
            while True:
                value = yield
                yield value * 2

        collaborate([1, 2], doubler(), collector(out))()
        assert out == [2, 4]

    def test_replacement_is_per_invocation(self):
        out = []

        def numbering(_first):
            count = 0
            while True:
                value = yield
                count += 1
                yield count

        run = collaborate(["x", "y"], numbering, collector(out))
        run()
        run()
        assert out == [1, 2, 1, 2]
