"""Task Store — owns the task collection and routes every mutation.

The store is an explicit object handed to whoever needs it; there is no
module-level instance. Storage order is insertion order. Display order is
always derived in view() and never written back.

Concurrency model: one logical actor. CRUD and undo operations are atomic
with respect to each other (one RLock guards the collection and the undo
slot). load() is the only operation that suspends; it flips LoadState under
the lock but never holds the lock across the await.
"""

import inspect
import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from threading import RLock
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from pydantic import ValidationError

from roiboard.errors import (
    DuplicateTaskIdError,
    ImmutableFieldError,
    InvalidFilterError,
    InvalidTaskError,
    TaskBoardError,
    TaskLoadError,
    TaskNotFoundError,
)
from roiboard.metrics.roi import AnnotatedTask, annotate
from roiboard.models.task import Priority, Task, TaskInput, TaskPatch
from roiboard.ordering.comparator import sort_tasks
from roiboard.store.undo import UndoBuffer

logger = logging.getLogger(__name__)

TaskRecord = Union[Task, Mapping[str, Any]]
FetchTasks = Callable[[], Union[Iterable[TaskRecord], Awaitable[Iterable[TaskRecord]]]]

WRITE_ONCE_FIELDS = frozenset({"id", "created_at", "createdAt"})


class LoadState(str, Enum):
    """IDLE → LOADING → LOADED. A failed or cancelled fetch falls back to IDLE."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"


def _new_id() -> str:
    return uuid.uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TaskStore:
    """In-memory task collection with create/update/delete/restore and undo."""

    def __init__(
        self,
        fetch_tasks: Optional[FetchTasks] = None,
        *,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _utc_now,
        undo_buffer: Optional[UndoBuffer] = None,
    ):
        """
        Args:
            fetch_tasks: Sync or async callable returning Task objects or raw
                         records. Called at most once, by load(). None means
                         the store starts empty and load() only marks it loaded.
            id_factory: Produces a fresh id for each create().
            clock: Produces created_at for each create().
            undo_buffer: Single-slot buffer for the last delete.
        """
        self._fetch_tasks = fetch_tasks
        self._id_factory = id_factory
        self._clock = clock
        self._undo = undo_buffer if undo_buffer is not None else UndoBuffer()

        self._tasks: dict[str, Task] = {}
        self._issued_ids: set[str] = set()
        self._lock = RLock()
        self._load_state = LoadState.IDLE
        self._closed = False

    # ── Loading ───────────────────────────────────────────────────────

    async def load(self) -> bool:
        """Fetch the initial collection. Returns True only for the call that applied it.

        Redundant calls (while loading, after loading, after close) are no-ops.
        """
        with self._lock:
            if self._closed:
                logger.info("Store closed; load skipped")
                return False
            if self._load_state is not LoadState.IDLE:
                logger.info(
                    "Ignoring redundant load",
                    extra={"load_state": self._load_state.value},
                )
                return False
            self._load_state = LoadState.LOADING

        try:
            fetched = await self._fetch()
        except BaseException:
            with self._lock:
                self._load_state = LoadState.IDLE
            raise

        with self._lock:
            if self._closed:
                logger.info(
                    "Store closed while loading; discarding fetched tasks",
                    extra={"count": len(fetched)},
                )
                self._load_state = LoadState.IDLE
                return False
            applied = 0
            for task in fetched:
                if task.id in self._issued_ids:
                    logger.warning("Skipping duplicate task id from fetch", extra={"task_id": task.id})
                    continue
                self._tasks[task.id] = task
                self._issued_ids.add(task.id)
                applied += 1
            self._load_state = LoadState.LOADED

        logger.info("Loaded %d task(s)", applied, extra={"count": applied})
        return True

    async def _fetch(self) -> list[Task]:
        if self._fetch_tasks is None:
            return []
        try:
            result = self._fetch_tasks()
            if inspect.isawaitable(result):
                result = await result
            records = list(result)
        except Exception as exc:
            raise TaskLoadError(f"Fetching tasks failed: {exc}") from exc
        try:
            return [self._coerce(record) for record in records]
        except ValidationError as exc:
            raise TaskLoadError(f"Fetched records are not valid tasks: {InvalidTaskError(exc).message}") from exc

    @staticmethod
    def _coerce(record: TaskRecord) -> Task:
        if isinstance(record, Task):
            return record.model_copy()
        return Task.model_validate(record)

    def close(self) -> None:
        """Tear the store down. An in-flight load() will discard its result."""
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    # ── Mutations ─────────────────────────────────────────────────────

    def create(self, data: Union[TaskInput, Mapping[str, Any]]) -> Task:
        """Add a task. id and created_at are generated here, never taken from input."""
        try:
            payload = data if isinstance(data, TaskInput) else TaskInput.model_validate(data)
        except ValidationError as exc:
            raise InvalidTaskError(exc) from exc

        with self._lock:
            task_id = self._id_factory()
            if not task_id:
                raise TaskBoardError("id factory returned an empty id", code="INVALID_ID")
            if task_id in self._issued_ids:
                raise DuplicateTaskIdError(task_id)
            task = Task(id=task_id, created_at=self._clock(), **payload.model_dump())
            self._tasks[task.id] = task
            self._issued_ids.add(task.id)

        logger.debug("Created task", extra={"task_id": task.id})
        return task.model_copy()

    def update(self, task_id: str, patch: Union[TaskPatch, Mapping[str, Any]]) -> Task:
        """Merge ``patch`` into an existing task, keeping its storage position."""
        with self._lock:
            current = self._tasks.get(task_id)
            if current is None:
                raise TaskNotFoundError(task_id)

            changes = self._patch_changes(patch)
            try:
                updated = Task.model_validate({**current.model_dump(), **changes})
            except ValidationError as exc:
                raise InvalidTaskError(exc) from exc
            self._tasks[task_id] = updated

        logger.debug("Updated task", extra={"task_id": task_id})
        return updated.model_copy()

    @staticmethod
    def _patch_changes(patch: Union[TaskPatch, Mapping[str, Any]]) -> dict[str, Any]:
        if isinstance(patch, TaskPatch):
            return patch.changes()
        locked = WRITE_ONCE_FIELDS.intersection(patch)
        if locked:
            raise ImmutableFieldError(locked)
        try:
            return TaskPatch.model_validate(patch).changes()
        except ValidationError as exc:
            raise InvalidTaskError(exc) from exc

    def delete(self, task_id: str) -> Task:
        """Remove a task and capture it for undo. Replaces any earlier capture."""
        with self._lock:
            task = self._tasks.pop(task_id, None)
            if task is None:
                raise TaskNotFoundError(task_id)
            token = self._undo.capture(task)

        logger.info("Deleted task", extra={"task_id": task_id, "undo_token": token})
        return task.model_copy()

    def restore(self, token: Optional[str] = None) -> Optional[Task]:
        """Re-append the last deleted task. None when there is nothing to restore.

        With ``token``, restores only if the held capture came from that delete.
        """
        with self._lock:
            task = self._undo.take_and_clear(token)
            if task is None:
                logger.debug("Nothing to restore")
                return None
            self._tasks[task.id] = task

        logger.info("Restored task", extra={"task_id": task.id})
        return task.model_copy()

    def dismiss_undo(self) -> None:
        """End the undo window. Manual dismissal and timer expiry both land here."""
        with self._lock:
            token = self._undo.token
            self._undo.clear()
        if token is not None:
            logger.debug("Undo dismissed", extra={"undo_token": token})

    # ── Queries ───────────────────────────────────────────────────────

    def view(
        self,
        sort_enabled: bool = True,
        *,
        status: Optional[str] = None,
        priority: Optional[Union[Priority, str]] = None,
        search: Optional[str] = None,
    ) -> list[AnnotatedTask]:
        """Rows for display: ROI-annotated, optionally filtered, ordered when sort_enabled."""
        wanted_priority = None
        if priority is not None:
            try:
                wanted_priority = Priority(priority)
            except ValueError as exc:
                raise InvalidFilterError("priority", priority) from exc
        needle = search.casefold() if search else None

        with self._lock:
            snapshot = [task.model_copy() for task in self._tasks.values()]

        rows = [
            annotate(task) for task in snapshot
            if (status is None or task.status == status)
            and (wanted_priority is None or task.priority == wanted_priority)
            and (needle is None or needle in task.title.casefold())
        ]
        return sort_tasks(rows) if sort_enabled else rows

    def get(self, task_id: str) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(task_id)
            return task.model_copy() if task is not None else None

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Snapshot in storage (insertion) order."""
        with self._lock:
            return tuple(task.model_copy() for task in self._tasks.values())

    @property
    def pending_undo(self) -> Optional[Task]:
        with self._lock:
            task = self._undo.peek()
            return task.model_copy() if task is not None else None

    @property
    def undo_token(self) -> Optional[str]:
        with self._lock:
            return self._undo.token

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __repr__(self) -> str:
        return (
            f"TaskStore(tasks={len(self._tasks)}, load_state={self._load_state.value}, "
            f"undo={self._undo.token or 'empty'})"
        )
