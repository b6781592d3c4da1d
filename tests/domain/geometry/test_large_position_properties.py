"""
Property-based tests for LargePosition.

Uses Hypothesis to check the conversion and equality invariants over
generated positions.
"""
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from large_coordinates.domain.geometry.constants import (
    CELL_SIZE,
    HYSTERESIS_THRESHOLD,
    MAX_COORDINATE,
    MAX_EQUAL_CELL_DISTANCE,
    MIN_COORDINATE,
    MIN_PRECISION,
    TYPICAL_PRECISION,
)
from large_coordinates.domain.geometry.large_position import LargePosition
from large_coordinates.domain.geometry.vectors import IntTriple

coordinates = st.floats(min_value=MIN_COORDINATE, max_value=MAX_COORDINATE, allow_nan=False)
world_points = st.tuples(coordinates, coordinates, coordinates)

cell_indices = st.integers(min_value=-1000, max_value=1000)
cells = st.tuples(cell_indices, cell_indices, cell_indices)

in_band = st.floats(min_value=-HYSTERESIS_THRESHOLD, max_value=HYSTERESIS_THRESHOLD, width=32)
offsets = st.tuples(in_band, in_band, in_band)

# Quarter units are exact in single precision at these magnitudes, so
# reprojection between neighbouring cells introduces no rounding
quarter = st.integers(min_value=-6144, max_value=6144).map(lambda n: n / 4.0)
exact_offsets = st.tuples(quarter, quarter, quarter)

steps = st.integers(min_value=-2, max_value=2)
neighbour_steps = st.tuples(steps, steps, steps)


class TestAbsoluteRoundTrip:
    @given(world=world_points)
    @settings(max_examples=200)
    def test_round_trip(self, world):
        pos = LargePosition.from_absolute(world)
        reconstructed = pos.to_absolute()

        for original, value in zip(world, reconstructed.as_tuple()):
            assert value == pytest.approx(original, abs=TYPICAL_PRECISION)

    @given(world=world_points)
    @settings(max_examples=200)
    def test_offset_is_within_half_a_cell(self, world):
        pos = LargePosition.from_absolute(world)

        for value in pos.local.as_tuple():
            assert abs(value) <= CELL_SIZE / 2.0

    @given(world=world_points)
    @settings(max_examples=100)
    def test_reconstructed_value_is_stable(self, world):
        reconstructed = LargePosition.from_absolute(world).to_absolute()
        again = LargePosition.from_absolute(reconstructed).to_absolute()

        for first, second in zip(reconstructed.as_tuple(), again.as_tuple()):
            assert second == pytest.approx(first, abs=MIN_PRECISION)


class TestRelativeRoundTrip:
    @given(cell=cells, local=offsets, step=neighbour_steps)
    @settings(max_examples=200)
    def test_round_trip(self, cell, local, step):
        pos = LargePosition(cell=cell, local=local)
        reference = pos.cell + IntTriple.model_validate(step)

        reconstructed = LargePosition.from_relative(reference, pos.to_relative(reference))

        for expected, value in zip(pos.to_absolute().as_tuple(), reconstructed.to_absolute().as_tuple()):
            assert value == pytest.approx(expected, abs=MIN_PRECISION)

    @given(cell=cells, axis=st.integers(min_value=0, max_value=2), sign=st.sampled_from([-1.0, 1.0]))
    def test_threshold_keeps_origin(self, cell, axis, sign):
        offset = [0.0, 0.0, 0.0]
        offset[axis] = sign * HYSTERESIS_THRESHOLD

        pos = LargePosition.from_relative(cell, offset)
        assert pos.cell == IntTriple.model_validate(cell)


class TestEqualityProperties:
    @given(cell=cells, local=exact_offsets, step=st.tuples(*[st.integers(-1, 1)] * 3))
    @settings(max_examples=200)
    def test_same_location_is_equal_both_ways(self, cell, local, step):
        a = LargePosition(cell=cell, local=local)
        reference = a.cell + IntTriple.model_validate(step)
        b = LargePosition.from_relative(reference, a.to_relative(reference))

        assert a == b
        assert b == a

    @given(cell=cells, local_a=exact_offsets, local_b=exact_offsets,
           step=st.tuples(*[st.integers(-3, 3)] * 3))
    @settings(max_examples=200)
    def test_symmetry(self, cell, local_a, local_b, step):
        a = LargePosition(cell=cell, local=local_a)
        b = LargePosition(cell=a.cell + IntTriple.model_validate(step), local=local_b)

        assert (a == b) == (b == a)
        assert (a != b) == (not (a == b))

    @given(cell=cells, local_a=offsets, local_b=offsets, step=neighbour_steps)
    @settings(max_examples=500)
    def test_symmetry_with_rounded_offsets(self, cell, local_a, local_b, step):
        a = LargePosition(cell=cell, local=local_a)
        b = LargePosition(cell=a.cell + IntTriple.model_validate(step), local=local_b)

        assert (a == b) == (b == a)

    @given(cell=cells, local=offsets, step=st.tuples(*[st.integers(-1, 1)] * 3))
    @settings(max_examples=200)
    def test_symmetry_after_reprojection(self, cell, local, step):
        a = LargePosition(cell=cell, local=local)
        reference = a.cell + IntTriple.model_validate(step)
        b = LargePosition.from_relative(reference, a.to_relative(reference))

        assert (a == b) == (b == a)

    @given(cell=cells, local_a=offsets, local_b=offsets,
           distance=st.integers(min_value=MAX_EQUAL_CELL_DISTANCE + 1, max_value=10_000),
           axis=st.integers(min_value=0, max_value=2))
    def test_distant_cells_never_equal(self, cell, local_a, local_b, distance, axis):
        step = [0, 0, 0]
        step[axis] = distance
        a = LargePosition(cell=cell, local=local_a)
        b = LargePosition(cell=a.cell + IntTriple.model_validate(step), local=local_b)

        assert a != b
        assert b != a
