"""
Tests for the ROI engine.

These tests verify:
    1. ROI is exactly revenue / time_taken for valid inputs
    2. NOT_APPLICABLE for non-positive time, negative revenue, non-finite or missing input
    3. The engine never raises
    4. Annotation recomputes from current task fields
"""

import math
from datetime import datetime, timezone
from fractions import Fraction

import pytest

from roiboard.metrics.roi import (
    NOT_APPLICABLE,
    AnnotatedTask,
    annotate,
    compute_roi,
    is_applicable,
    roi_for,
)
from roiboard.models.task import Priority, Task

NAN = float("nan")
INF = float("inf")


def make_task(**overrides) -> Task:
    """Helper to create a task with sensible defaults."""
    defaults = dict(
        id="t1", title="Task", revenue=10.0, time_taken=2.0,
        priority=Priority.HIGH, created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    defaults.update(overrides)
    return Task(**defaults)


class TestComputeROI:
    """Tests for compute_roi()."""

    @pytest.mark.parametrize("revenue, time_taken, expected", [
        (10, 2, 5.0),
        (0, 3, 0.0),
        (7.5, 2.5, 3.0),
        (1, 3, 1 / 3),
        (1e6, 1e-3, 1e9),
    ])
    def test_valid_inputs_divide_exactly(self, revenue, time_taken, expected):
        assert compute_roi(revenue, time_taken) == revenue / time_taken
        assert compute_roi(revenue, time_taken) == pytest.approx(expected)

    def test_result_is_float(self):
        assert isinstance(compute_roi(10, 2), float)

    def test_zero_revenue_is_applicable_zero(self):
        """0 is a real ROI, distinct from NOT_APPLICABLE."""
        roi = compute_roi(0, 5)
        assert roi == 0.0
        assert roi is not NOT_APPLICABLE
        assert is_applicable(roi)

    @pytest.mark.parametrize("time_taken", [0, 0.0, -0.0, -1, -0.001])
    def test_non_positive_time_is_not_applicable(self, time_taken):
        assert compute_roi(10, time_taken) is NOT_APPLICABLE

    @pytest.mark.parametrize("revenue", [-1, -0.01, -1e9])
    def test_negative_revenue_is_not_applicable(self, revenue):
        assert compute_roi(revenue, 2) is NOT_APPLICABLE

    @pytest.mark.parametrize("revenue, time_taken", [
        (NAN, 2), (10, NAN), (INF, 2), (10, INF), (-INF, 2), (10, -INF),
        (None, 2), (10, None), (None, None),
        ("10", 2), (10, "2"), (True, 1), (10, True),
    ])
    def test_non_finite_or_non_numeric_is_not_applicable(self, revenue, time_taken):
        assert compute_roi(revenue, time_taken) is NOT_APPLICABLE

    def test_overflowing_quotient_is_not_applicable(self):
        """A finite/finite division that overflows must not surface as inf."""
        assert compute_roi(1e308, 1e-308) is NOT_APPLICABLE

    def test_other_real_numbers_accepted(self):
        assert compute_roi(Fraction(10), 4) == 2.5

    def test_applicable_results_are_finite(self):
        for revenue in (0, 1, 123.45, 1e300):
            for time_taken in (1e-9, 1, 1e9):
                roi = compute_roi(revenue, time_taken)
                if is_applicable(roi):
                    assert math.isfinite(roi)


class TestAnnotation:
    """Tests for per-task ROI annotation."""

    def test_roi_for_task(self):
        assert roi_for(make_task(revenue=10, time_taken=2)) == 5.0

    def test_annotate_pairs_task_and_roi(self):
        task = make_task(revenue=9, time_taken=3)
        row = annotate(task)
        assert isinstance(row, AnnotatedTask)
        assert row.task is task
        assert row.roi == 3.0
        assert row.has_roi
        assert row.id == "t1"
        assert row.priority == Priority.HIGH

    def test_annotate_not_applicable(self):
        row = annotate(make_task(revenue=None))
        assert row.roi is NOT_APPLICABLE
        assert not row.has_roi

    def test_roi_tracks_field_changes(self):
        """ROI is derived on demand, so it can never go stale."""
        task = make_task(revenue=10, time_taken=2)
        assert roi_for(task) == 5.0
        task.time_taken = 5.0
        assert roi_for(task) == 2.0
        task.time_taken = 0.0
        assert roi_for(task) is NOT_APPLICABLE
