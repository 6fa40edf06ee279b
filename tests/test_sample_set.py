"""Tests for concurrent sample collection, bounds tracking and projection."""

import random
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from fnplot.core.axis import Scaled, Std
from fnplot.core.errors import (
    AxisAlreadyCalibrated,
    CalibrationError,
    ConversionFailure,
    UnsupportedType,
)
from fnplot.core.sample_set import Bounds, SampleSet
from fnplot.core.values import Values

FINITE_FLOATS = st.floats(allow_nan=False, allow_infinity=False, width=64)


def test_empty_set():
    sample_set = SampleSet()
    assert len(sample_set) == 0
    assert sample_set.bounds == Bounds()
    assert sample_set.samples == ()


def test_points_on_empty_set_returns_no_points(log_messages):
    x, y = Std(), Std()
    assert SampleSet().points_on(x, y) == []
    assert not x.calibrated
    assert "No samples to project" in log_messages


def test_insert_widens_bounds():
    sample_set = SampleSet()
    sample_set.insert((1,), (10,))
    sample_set.insert((3,), (5,))
    sample_set.insert((2,), (20,))
    assert len(sample_set) == 3
    assert sample_set.bounds == Bounds(
        min_input=Decimal(1),
        max_input=Decimal(3),
        min_output=Decimal(5),
        max_output=Decimal(20),
    )


def test_samples_are_stored_as_values():
    sample_set = SampleSet()
    sample_set.insert([1, 2], [3])
    sample = sample_set.samples[0]
    assert isinstance(sample.input, Values)
    assert sample.input == (1, 2)
    assert sample.output == (3,)


@pytest.mark.parametrize(
    "input, output, side",
    [((object(),), (1,), "input"), ((1,), (object(),), "output")],
)
def test_failed_insert_leaves_set_untouched(input, output, side):
    sample_set = SampleSet()
    sample_set.insert((4,), (4,))
    with pytest.raises(ConversionFailure, match=side) as excinfo:
        sample_set.insert(input, output)
    assert isinstance(excinfo.value.__cause__.__cause__, UnsupportedType)
    assert len(sample_set) == 1
    assert sample_set.bounds == Bounds(Decimal(4), Decimal(4), Decimal(4), Decimal(4))


def test_points_on_sorts_by_x_and_calibrates_axes():
    sample_set = SampleSet()
    for i in reversed(range(10)):
        sample_set.insert((i,), (i * 3,))

    x, y = Scaled(100), Scaled(10)
    points = sample_set.points_on(x, y)

    assert [p[0] for p in points] == sorted(p[0] for p in points)
    assert points[-1] == (pytest.approx(100), pytest.approx(10))
    assert points[0] == (0.0, 0.0)
    assert x.calibrated and y.calibrated


def test_points_on_needs_fresh_axes():
    sample_set = SampleSet()
    sample_set.insert((1,), (1,))
    x, y = Std(), Std()
    sample_set.points_on(x, y)
    with pytest.raises(AxisAlreadyCalibrated):
        sample_set.points_on(x, y)
    assert len(sample_set.points_on(x.fresh(), y.fresh())) == 1


def test_infinite_coordinates_are_reported_not_raised(log_messages):
    sample_set = SampleSet()
    sample_set.insert(("x" * 400,), (1,))
    points = sample_set.points_on(Std(), Std())
    assert points[0][0] == float("inf")
    assert any(m.startswith("Infinity found at value 0") for m in log_messages)


@given(pairs=st.lists(st.tuples(FINITE_FLOATS, FINITE_FLOATS), min_size=1, max_size=50))
def test_points_are_non_decreasing_in_x(pairs):
    sample_set = SampleSet()
    for x, y in pairs:
        sample_set.insert((x,), (y,))
    points = sample_set.points_on(Std(), Std())
    assert len(points) == len(pairs)
    assert all(a[0] <= b[0] for a, b in zip(points, points[1:]))


def _insert_concurrently(sample_set, samples, workers):
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for future in [pool.submit(sample_set.insert, i, o) for i, o in samples]:
            future.result()


def test_bounds_do_not_depend_on_insert_order():
    samples = [((i,), (i * 2 % 97,)) for i in range(500)]
    results = set()
    for seed in range(3):
        shuffled = samples[:]
        random.Random(seed).shuffle(shuffled)
        sample_set = SampleSet()
        _insert_concurrently(sample_set, shuffled, workers=8)
        results.add(sample_set.bounds)
    assert results == {Bounds(Decimal(0), Decimal(499), Decimal(0), Decimal(96))}


def test_concurrent_workers_lose_no_updates():
    workers, per_worker = 8, 250
    sample_set = SampleSet()

    def insert_range(k):
        for i in range(k * per_worker, (k + 1) * per_worker):
            sample_set.insert((i,), (i * 2,))

    with ThreadPoolExecutor(max_workers=workers) as pool:
        for future in [pool.submit(insert_range, k) for k in range(workers)]:
            future.result()

    total = workers * per_worker
    assert len(sample_set) == total
    assert sample_set.bounds == Bounds(
        Decimal(0), Decimal(total - 1), Decimal(0), Decimal(2 * (total - 1))
    )


def test_mutating_inserted_objects_does_not_change_samples():
    sample_set = SampleSet()
    arg = [1]
    arr = np.array([1, 2], dtype=np.uint8)
    sample_set.insert((arg,), (1,))
    sample_set.insert((2,), (arr,))
    arg.append(255)
    arr[0] = 9

    first, second = sample_set.samples
    assert first.input == ([1],)
    assert first.input_scalar == Decimal(1)
    assert second.output[0].tolist() == [1, 2]
    assert second.output_scalar == Decimal(0x0102)

    points = sample_set.points_on(Scaled(100), Std())
    assert max(p[0] for p in points) == pytest.approx(100)
    assert sorted(p[1] for p in points) == [1.0, 258.0]


def test_failed_calibration_leaves_both_axes_unspent():
    sample_set = SampleSet()
    sample_set.insert((1,), (0,))
    x, y = Scaled(5), Scaled(10)
    with pytest.raises(CalibrationError):
        sample_set.points_on(x, y)
    assert not x.calibrated
    assert not y.calibrated
    assert sample_set.points_on(x, Std()) == [(pytest.approx(5), 0.0)]
