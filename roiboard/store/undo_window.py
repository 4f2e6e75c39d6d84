"""Undo Window — the timer behind the "Undo" affordance.

The window is an external collaborator of the store: when it expires it
calls TaskStore.dismiss_undo(), the very same entry point a manual
dismissal uses. There is no second clearing path.
"""

import asyncio
import logging
from typing import Optional

from roiboard.config import get_settings
from roiboard.store.task_store import TaskStore

logger = logging.getLogger(__name__)


class UndoWindow:
    """One pending expiry timer per window, driven by the running event loop.

    Usage:
        window = UndoWindow(store)
        store.delete(task_id)
        window.open()          # expires -> store.dismiss_undo()
        ...
        window.dismiss()       # user closed the toast
    """

    def __init__(self, store: TaskStore, delay: Optional[float] = None):
        self.store = store
        self.delay = delay if delay is not None else get_settings().undo_window_seconds
        self._handle: Optional[asyncio.TimerHandle] = None

    def open(self, delay: Optional[float] = None) -> None:
        """Start (or restart) the window. A previous pending expiry is cancelled."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(
            self.delay if delay is None else delay, self._expire,
        )

    def dismiss(self) -> None:
        """Close the window now and drop the pending undo."""
        self.cancel()
        self.store.dismiss_undo()

    def cancel(self) -> None:
        """Stop the timer without touching the buffer (e.g. after a restore)."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def _expire(self) -> None:
        self._handle = None
        logger.debug("Undo window expired")
        self.store.dismiss_undo()
