from roiboard.store.undo import UndoBuffer, UndoEntry
from roiboard.store.task_store import LoadState, TaskStore
from roiboard.store.undo_window import UndoWindow

__all__ = ["UndoBuffer", "UndoEntry", "LoadState", "TaskStore", "UndoWindow"]
