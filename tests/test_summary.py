"""
Tests for dashboard summary figures and display formatting.

These tests verify:
    1. format_roi uses fixed decimals and an explicit "N/A"
    2. ROI buckets put NOT_APPLICABLE in its own bucket, never with zero
    3. SummaryCollector totals ignore unusable numbers
    4. The rich report renders without error
"""

from datetime import datetime, timezone

import pytest
from rich.console import Console

from roiboard.metrics.collector import DashboardSummary, SummaryCollector
from roiboard.metrics.formatting import NA_LABEL, bucket_labels, format_roi, roi_bucket
from roiboard.metrics.roi import NOT_APPLICABLE, annotate
from roiboard.models.task import Priority, Task
from roiboard.ordering.comparator import sort_tasks


def make_task(id: str, revenue=10.0, time_taken=2.0, priority=Priority.HIGH,
              status: str = "open") -> Task:
    """Helper to create a task with sensible defaults."""
    return Task(
        id=id, title=f"Task {id}", revenue=revenue, time_taken=time_taken,
        priority=priority, status=status,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class TestFormatting:
    """Tests for ROI display helpers."""

    def test_two_decimals(self):
        assert format_roi(5.0) == "5.00"
        assert format_roi(1 / 3) == "0.33"
        assert format_roi(0.0) == "0.00"

    def test_custom_places(self):
        assert format_roi(2.5, places=0) == "2"
        assert format_roi(2.5, places=3) == "2.500"

    def test_places_from_settings(self, monkeypatch):
        monkeypatch.setenv("ROIBOARD_ROI_DECIMAL_PLACES", "1")
        assert format_roi(2.25) == "2.2"

    @pytest.mark.parametrize("value", [NOT_APPLICABLE, float("nan"), float("inf"), float("-inf")])
    def test_not_applicable_text(self, value):
        assert format_roi(value) == NA_LABEL

    def test_bucket_labels(self):
        assert bucket_labels([0, 1, 5]) == ["<0", "0-1", "1-5", "5+", "N/A"]
        assert bucket_labels([0.5]) == ["<0.5", "0.5+", "N/A"]

    @pytest.mark.parametrize("roi, label", [
        (0.0, "0-1"), (0.99, "0-1"), (1.0, "1-5"), (4.2, "1-5"), (5.0, "5+"), (900.0, "5+"),
    ])
    def test_roi_bucket(self, roi, label):
        assert roi_bucket(roi, [0, 1, 5]) == label

    def test_not_applicable_never_in_zero_bucket(self):
        assert roi_bucket(NOT_APPLICABLE, [0, 1, 5]) == NA_LABEL
        assert roi_bucket(float("nan"), [0, 1, 5]) == NA_LABEL
        assert roi_bucket(0.0, [0, 1, 5]) != NA_LABEL


class TestSummaryCollector:
    """Tests for SummaryCollector."""

    def _rows(self):
        tasks = [
            make_task("a", revenue=10, time_taken=2),                     # 5.0
            make_task("b", revenue=3, time_taken=1, priority=Priority.LOW),  # 3.0
            make_task("c", revenue=0, time_taken=4, status="done"),        # 0.0
            make_task("d", revenue=None, time_taken=2),                    # N/A
            make_task("e", revenue=10, time_taken=0, priority=Priority.MEDIUM),  # N/A
            make_task("f", revenue=float("inf"), time_taken=1),            # N/A
        ]
        return sort_tasks(annotate(t) for t in tasks)

    def test_counts(self):
        summary = SummaryCollector(bucket_edges=[0, 1, 5]).calculate(self._rows())
        assert isinstance(summary, DashboardSummary)
        assert summary.total_tasks == 6
        assert summary.tasks_with_roi == 3
        assert summary.tasks_without_roi == 3

    def test_roi_statistics(self):
        summary = SummaryCollector(bucket_edges=[0, 1, 5]).calculate(self._rows())
        assert summary.mean_roi == pytest.approx(8 / 3)
        assert summary.median_roi == pytest.approx(3.0)
        assert summary.max_roi == pytest.approx(5.0)

    def test_totals_skip_unusable_numbers(self):
        summary = SummaryCollector(bucket_edges=[0, 1, 5]).calculate(self._rows())
        assert summary.total_revenue == pytest.approx(23.0)
        assert summary.total_time == pytest.approx(10.0)

    def test_breakdowns(self):
        summary = SummaryCollector(bucket_edges=[0, 1, 5]).calculate(self._rows())
        assert summary.per_priority == {"High": 4, "Medium": 1, "Low": 1}
        assert summary.per_status == {"open": 5, "done": 1}

    def test_buckets_keep_na_separate(self):
        summary = SummaryCollector(bucket_edges=[0, 1, 5]).calculate(self._rows())
        assert summary.roi_buckets == {"<0": 0, "0-1": 1, "1-5": 1, "5+": 1, "N/A": 3}

    def test_buckets_agree_with_roi_bucket(self):
        rows = self._rows()
        summary = SummaryCollector(bucket_edges=[0, 1, 5]).calculate(rows)
        expected: dict[str, int] = {}
        for row in rows:
            label = roi_bucket(row.roi, [0, 1, 5])
            expected[label] = expected.get(label, 0) + 1
        assert {k: v for k, v in summary.roi_buckets.items() if v} == expected

    def test_top_ids_follow_display_order(self):
        summary = SummaryCollector(bucket_edges=[0, 1, 5], top_n=2).calculate(self._rows())
        assert summary.top_task_ids == ["a", "b"]

    def test_empty_rows(self):
        summary = SummaryCollector(bucket_edges=[0, 1, 5]).calculate([])
        assert summary.total_tasks == 0
        assert summary.mean_roi is NOT_APPLICABLE
        assert summary.roi_buckets["N/A"] == 0
        assert sum(summary.roi_buckets.values()) == 0

    def test_edges_from_settings(self):
        collector = SummaryCollector()
        assert collector.bucket_edges == [0.0, 1.0, 5.0, 10.0]

    def test_print_report(self):
        collector = SummaryCollector(bucket_edges=[0, 1, 5])
        collector.calculate(self._rows())
        console = Console(record=True, width=100)
        collector.print_report(console)
        text = console.export_text()
        assert "N/A" in text
        assert "2.67" in text
        assert "nan" not in text.lower().replace("n/a", "")

    def test_print_report_requires_calculate(self):
        with pytest.raises(RuntimeError):
            SummaryCollector().print_report()
