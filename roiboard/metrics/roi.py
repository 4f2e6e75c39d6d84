"""ROI Engine — validated return-on-investment for a single task.

ROI = revenue / time_taken, but only when the inputs make sense:

  - both inputs are real, finite numbers (None, bool, strings, NaN, ±inf are not)
  - time_taken is strictly positive
  - revenue is non-negative

Anything else is NOT_APPLICABLE. That is a normal outcome, not a fault:
the engine never raises, and NOT_APPLICABLE is a category of its own,
never folded into 0.0.
"""

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Union

from roiboard.models.task import Priority, Task


class NotApplicable(Enum):
    """Marker for 'no meaningful ROI'. Compare by identity: ``roi is NOT_APPLICABLE``."""
    NOT_APPLICABLE = "N/A"

    def __repr__(self) -> str:
        return "NOT_APPLICABLE"


NOT_APPLICABLE = NotApplicable.NOT_APPLICABLE

ROI = Union[float, NotApplicable]


def _as_finite(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def compute_roi(revenue: object, time_taken: object) -> ROI:
    """Return revenue / time_taken, or NOT_APPLICABLE for unusable inputs."""
    rev = _as_finite(revenue)
    duration = _as_finite(time_taken)
    if rev is None or duration is None:
        return NOT_APPLICABLE
    if duration <= 0 or rev < 0:
        return NOT_APPLICABLE

    roi = rev / duration
    # Tiny durations can overflow to inf
    if not math.isfinite(roi):
        return NOT_APPLICABLE
    return roi


def is_applicable(roi: ROI) -> bool:
    return roi is not NOT_APPLICABLE


def roi_for(task: Task) -> ROI:
    """ROI of a task, recomputed from its current fields."""
    return compute_roi(task.revenue, task.time_taken)


@dataclass(frozen=True)
class AnnotatedTask:
    """Immutable view row: a task paired with the ROI computed for it."""
    task: Task
    roi: ROI

    @property
    def id(self) -> str:
        return self.task.id

    @property
    def title(self) -> str:
        return self.task.title

    @property
    def priority(self) -> Priority:
        return self.task.priority

    @property
    def has_roi(self) -> bool:
        return is_applicable(self.roi)


def annotate(task: Task) -> AnnotatedTask:
    return AnnotatedTask(task=task, roi=roi_for(task))
