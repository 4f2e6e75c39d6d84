"""Undo Buffer — single-slot holder for the most recently deleted task.

Not a stack: capture() overwrites, so a second delete before the slot is
cleared makes the first one unrecoverable. Every snapshot carries a token
naming the delete it came from, so a restore aimed at an old delete cannot
consume a newer capture.
"""

import itertools
import threading
from dataclasses import dataclass
from typing import Optional

from roiboard.models.task import Task


@dataclass(frozen=True)
class UndoEntry:
    """Snapshot of a deleted task plus the token of that delete."""
    task: Task
    token: str


class UndoBuffer:
    """At most one captured task. All operations are atomic."""

    def __init__(self) -> None:
        self._slot: Optional[UndoEntry] = None
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)

    def capture(self, task: Task) -> str:
        """Replace whatever is held with a snapshot of ``task``; return its token."""
        entry = UndoEntry(task=task.model_copy(deep=True), token=f"undo-{next(self._tokens)}")
        with self._lock:
            self._slot = entry
        return entry.token

    def clear(self) -> None:
        with self._lock:
            self._slot = None

    def peek(self) -> Optional[Task]:
        """A copy of the held snapshot; editing it never changes what restore returns."""
        entry = self._slot
        return entry.task.model_copy(deep=True) if entry is not None else None

    def take_and_clear(self, token: Optional[str] = None) -> Optional[Task]:
        """Return the held task and empty the slot.

        With ``token``, only an entry captured under that token is taken;
        a mismatch returns None and leaves the slot untouched.
        """
        with self._lock:
            entry = self._slot
            if entry is None:
                return None
            if token is not None and token != entry.token:
                return None
            self._slot = None
            return entry.task

    @property
    def token(self) -> Optional[str]:
        entry = self._slot
        return entry.token if entry is not None else None

    @property
    def is_empty(self) -> bool:
        return self._slot is None

    def __repr__(self) -> str:
        entry = self._slot
        held = f"{entry.task.id!r} ({entry.token})" if entry is not None else "empty"
        return f"UndoBuffer({held})"
