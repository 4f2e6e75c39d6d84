"""Error hierarchy for task store operations.

Every error has a stable ``code`` so the presentation layer can tell a
failed operation apart from a successful no-op (those return False/None
and never raise).
"""

from typing import Any, Iterable, Optional

from pydantic import ValidationError


class TaskBoardError(Exception):
    """Base exception for all roiboard failures."""

    code = "TASK_BOARD_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class TaskNotFoundError(TaskBoardError):
    """update/delete named an id that is not in the collection."""

    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id!r} not found")
        self.task_id = task_id

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "task_id": self.task_id}


class ImmutableFieldError(TaskBoardError):
    """A patch tried to rewrite a write-once field."""

    code = "IMMUTABLE_FIELD"

    def __init__(self, fields: Iterable[str]):
        self.fields = sorted(fields)
        super().__init__(f"Write-once field(s) cannot be changed: {', '.join(self.fields)}")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "fields": self.fields}


class InvalidTaskError(TaskBoardError):
    """Task input failed model validation."""

    code = "INVALID_TASK"

    def __init__(self, error: ValidationError):
        self.errors = error.errors(include_url=False)
        fields = sorted({".".join(str(p) for p in e["loc"]) for e in self.errors})
        super().__init__(f"Invalid task data: {', '.join(fields) or 'record'}")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "errors": self.errors}


class DuplicateTaskIdError(TaskBoardError):
    """The id factory handed out an id the store has already seen."""

    code = "DUPLICATE_TASK_ID"

    def __init__(self, task_id: str):
        super().__init__(f"Task id {task_id!r} was already issued")
        self.task_id = task_id


class TaskLoadError(TaskBoardError):
    """The initial fetch failed or returned unusable records."""

    code = "LOAD_FAILED"


class InvalidFilterError(TaskBoardError):
    """A view() filter value is not one the store can match against."""

    code = "INVALID_FILTER"

    def __init__(self, field: str, value: Any):
        super().__init__(f"Invalid {field} filter: {value!r}")
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field}
