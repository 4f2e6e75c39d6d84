"""Summary Collector — aggregate numbers behind the dashboard charts."""

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from roiboard.config import get_settings
from roiboard.metrics.formatting import NA_LABEL, bucket_labels, format_roi
from roiboard.metrics.roi import NOT_APPLICABLE, AnnotatedTask, ROI
from roiboard.models.task import Priority


@dataclass
class DashboardSummary:
    """Container for all computed summary figures."""
    total_tasks: int = 0
    tasks_with_roi: int = 0
    tasks_without_roi: int = 0
    mean_roi: ROI = NOT_APPLICABLE
    median_roi: ROI = NOT_APPLICABLE
    max_roi: ROI = NOT_APPLICABLE
    total_revenue: float = 0.0
    total_time: float = 0.0
    per_priority: dict[str, int] = field(default_factory=dict)
    per_status: dict[str, int] = field(default_factory=dict)
    roi_buckets: dict[str, int] = field(default_factory=dict)
    top_task_ids: list[str] = field(default_factory=list)


class SummaryCollector:
    """Computes and reports summary figures over annotated task rows."""

    def __init__(self, bucket_edges: Optional[Sequence[float]] = None, top_n: int = 5):
        self.bucket_edges = list(bucket_edges if bucket_edges is not None
                                 else get_settings().roi_bucket_edges)
        self.top_n = top_n
        self.summary: Optional[DashboardSummary] = None

    def calculate(self, rows: Sequence[AnnotatedTask]) -> DashboardSummary:
        """Compute every figure from rows already ordered for display."""
        summary = DashboardSummary(total_tasks=len(rows))

        rois = np.array([r.roi for r in rows if r.has_roi], dtype=float)
        summary.tasks_with_roi = int(rois.size)
        summary.tasks_without_roi = len(rows) - summary.tasks_with_roi
        if rois.size:
            summary.mean_roi = float(np.mean(rois))
            summary.median_roi = float(np.median(rois))
            summary.max_roi = float(np.max(rois))

        # Totals only count usable numbers; NaN/inf/None never leak into a sum
        revenues = np.array([_or_nan(r.task.revenue) for r in rows], dtype=float)
        times = np.array([_or_nan(r.task.time_taken) for r in rows], dtype=float)
        summary.total_revenue = float(revenues[np.isfinite(revenues)].sum())
        summary.total_time = float(times[np.isfinite(times) & (times > 0)].sum())

        summary.per_priority = {p.value: 0 for p in Priority}
        for r in rows:
            summary.per_priority[r.task.priority.value] += 1
            summary.per_status[r.task.status] = summary.per_status.get(r.task.status, 0) + 1

        labels = bucket_labels(self.bucket_edges)
        counts = np.bincount(
            np.digitize(rois, self.bucket_edges, right=False),
            minlength=len(self.bucket_edges) + 1,
        )
        summary.roi_buckets = {label: int(n) for label, n in zip(labels[:-1], counts)}
        summary.roi_buckets[NA_LABEL] = summary.tasks_without_roi

        summary.top_task_ids = [r.id for r in rows[: self.top_n]]

        self.summary = summary
        return summary

    def print_report(self, console: Optional[Console] = None) -> None:
        """Render the summary as rich tables."""
        if self.summary is None:
            raise RuntimeError("No summary calculated yet. Run calculate() first.")

        s = self.summary
        console = console or Console()

        console.print(Panel(
            f"[bold cyan]Task ROI Dashboard[/bold cyan]\n"
            f"Tasks: [bold yellow]{s.total_tasks}[/bold yellow]  "
            f"with ROI: [green]{s.tasks_with_roi}[/green]  "
            f"N/A: [red]{s.tasks_without_roi}[/red]",
            border_style="cyan",
        ))

        roi_table = Table(title="ROI", border_style="green")
        roi_table.add_column("Metric", style="bold")
        roi_table.add_column("Value", justify="right")
        roi_table.add_row("Mean ROI", format_roi(s.mean_roi))
        roi_table.add_row("Median ROI", format_roi(s.median_roi))
        roi_table.add_row("Max ROI", format_roi(s.max_roi))
        roi_table.add_row("Total Revenue", f"{s.total_revenue:.2f}")
        roi_table.add_row("Total Time", f"{s.total_time:.2f}")
        console.print(roi_table)

        bucket_table = Table(title="ROI Distribution", border_style="magenta")
        bucket_table.add_column("Bucket", style="bold")
        bucket_table.add_column("Tasks", justify="right")
        peak = max(s.roi_buckets.values(), default=0) or 1
        for label, count in s.roi_buckets.items():
            bar_len = int(count / peak * 20)
            bar = "█" * bar_len + "░" * (20 - bar_len)
            bucket_table.add_row(label, f"{bar} {count}")
        console.print(bucket_table)

        split_table = Table(title="Breakdown", border_style="blue")
        split_table.add_column("Group", style="bold")
        split_table.add_column("Value")
        split_table.add_column("Tasks", justify="right")
        for name, count in s.per_priority.items():
            split_table.add_row("priority", name, str(count))
        for name, count in sorted(s.per_status.items()):
            split_table.add_row("status", name, str(count))
        console.print(split_table)


def _or_nan(value: Optional[float]) -> float:
    return float("nan") if value is None else value
