"""Entry point for a terminal rendition of the task ROI dashboard.

Usage:
    python scripts/run_dashboard.py --tasks 20 --seed 42
    python scripts/run_dashboard.py --no-sort --status open
"""

import argparse
import asyncio
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rich.console import Console
from rich.table import Table

from roiboard.config import get_settings
from roiboard.metrics.collector import SummaryCollector
from roiboard.metrics.formatting import format_roi
from roiboard.metrics.roi import AnnotatedTask
from roiboard.observability import setup_logging
from roiboard.simulator.generator import ScenarioGenerator
from roiboard.store.task_store import TaskStore
from roiboard.store.undo_window import UndoWindow

console = Console()


def print_task_table(rows: list[AnnotatedTask], title: str) -> None:
    """Print the task table the way the dashboard renders it."""
    table = Table(title=title, border_style="blue")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Priority")
    table.add_column("Status")
    table.add_column("Revenue", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("ROI", justify="right")

    for position, row in enumerate(rows, start=1):
        task = row.task
        roi_text = format_roi(row.roi)
        table.add_row(
            str(position),
            task.title,
            task.priority.value,
            task.status,
            "-" if task.revenue is None else f"{task.revenue:.2f}",
            "-" if task.time_taken is None else f"{task.time_taken:g}",
            roi_text if row.has_roi else f"[red]{roi_text}[/red]",
        )
    console.print(table)


async def run_session(args: argparse.Namespace) -> None:
    """Load a scenario, walk through an edit/delete/undo session, report."""
    generator = ScenarioGenerator(seed=args.seed)
    records = generator.generate_records(num_tasks=args.tasks, invalid_share=args.invalid_share)

    async def fetch_tasks():
        return records

    store = TaskStore(fetch_tasks)
    window = UndoWindow(store, delay=args.undo_seconds)

    # A second mount trigger is a no-op
    await asyncio.gather(store.load(), store.load())

    created = store.create({
        "title": "Write launch notes", "revenue": 10, "timeTaken": 2,
        "priority": "High", "status": "open", "notes": "",
    })
    store.update(created.id, {"status": "in-progress"})

    first = store.view()[0]
    store.delete(first.id)
    window.open()
    console.print(f"[yellow]Deleted[/yellow] {first.title!r}; undo available")
    restored = store.restore()
    window.cancel()
    if restored is not None:
        console.print(f"[green]Restored[/green] {restored.title!r}")

    remaining = store.view()
    if len(remaining) > 1:
        second = remaining[1]
        store.delete(second.id)
        window.open()
        await asyncio.sleep(args.undo_seconds + 0.05)
        console.print(
            f"[yellow]Deleted[/yellow] {second.title!r}; undo window expired, "
            f"restore -> {store.restore()}"
        )

    sort_enabled = not args.no_sort
    rows = store.view(sort_enabled, status=args.status, priority=args.priority)
    print_task_table(rows, "Tasks (sorted)" if sort_enabled else "Tasks (insertion order)")

    collector = SummaryCollector()
    collector.calculate(store.view())
    collector.print_report(console)

    store.close()


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Task ROI dashboard — sorted task table and summary charts"
    )
    parser.add_argument("--tasks", type=int, default=20, help="Number of generated tasks (default: 20)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--invalid-share", type=float, default=0.2, help="Share of tasks with unusable ROI inputs (default: 0.2)")
    parser.add_argument("--undo-seconds", type=float, default=0.2, help="Undo window length for the demo (default: 0.2)")
    parser.add_argument("--status", type=str, default=None, help="Only show tasks with this status")
    parser.add_argument("--priority", type=str, default=None, help="Only show High, Medium or Low tasks")
    parser.add_argument("--no-sort", action="store_true", default=not settings.sort_enabled, help="Show insertion order")

    args = parser.parse_args()

    setup_logging(settings.log_level, settings.log_format)
    console.print("[bold]roiboard[/bold] — Loading tasks...\n")
    asyncio.run(run_session(args))


if __name__ == "__main__":
    main()
