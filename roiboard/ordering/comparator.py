"""Task Comparator — deterministic total order for the dashboard table.

Keys, each consulted only when all earlier keys tie:
  1. ROI, descending; NOT_APPLICABLE ranks below every numeric ROI
  2. Priority weight, descending (High, Medium, Low)
  3. Title, ascending, case-insensitive
  4. id, ascending in natural order (9 before 10); unique, so two
     distinct tasks never compare EQUAL

Nothing here reads the clock or a random source: the same two tasks
compare the same way on every call, in every process.
"""

from enum import IntEnum
from typing import Iterable

from roiboard.metrics.roi import AnnotatedTask, is_applicable

IdKey = tuple[int, int, str]
SortKey = tuple[int, float, int, str, IdKey]


def id_key(task_id: str) -> IdKey:
    """Natural id order: numeric ids by value and ahead of the rest, then plain text."""
    if task_id.isdecimal():
        return (0, int(task_id), task_id)
    return (1, 0, task_id)


class Ordering(IntEnum):
    """Result of compare(a, b), usable directly as a cmp value."""
    BEFORE = -1
    EQUAL = 0
    AFTER = 1


def sort_key(item: AnnotatedTask) -> SortKey:
    """Ascending tuple key equivalent to compare()."""
    if is_applicable(item.roi):
        roi_rank, roi_value = 0, -item.roi
    else:
        roi_rank, roi_value = 1, 0.0
    return (
        roi_rank,
        roi_value,
        -item.task.priority.weight,
        item.task.title.casefold(),
        id_key(item.task.id),
    )


def compare(a: AnnotatedTask, b: AnnotatedTask) -> Ordering:
    """Where a sits relative to b in display order."""
    key_a, key_b = sort_key(a), sort_key(b)
    if key_a < key_b:
        return Ordering.BEFORE
    if key_a > key_b:
        return Ordering.AFTER
    return Ordering.EQUAL


def sort_tasks(items: Iterable[AnnotatedTask]) -> list[AnnotatedTask]:
    """New list in display order. Stable and idempotent."""
    return sorted(items, key=sort_key)
