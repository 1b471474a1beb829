"""
Auto-save — debounce bursts of edits into one persistence call per key.

Each schedule() for a key cancels that key's pending save and starts a new
asyncio task that sleeps for the debounce delay, then runs the callback.
Last write wins. Failures are logged and kept in `last_error` so the API can
report "save failed" instead of silently dropping the edit.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from jobtracker.config import settings
from jobtracker.utils.date_utils import now_iso

logger = logging.getLogger(__name__)

SaveCallback = Callable[[], Union[None, Awaitable[None]]]


class DebouncedSaver:
    def __init__(self, delay: Optional[float] = None):
        self._delay = delay
        self._tasks: dict[str, asyncio.Task] = {}
        self._callbacks: dict[str, SaveCallback] = {}
        self.last_error: dict[str, str] = {}
        self.last_saved_at: dict[str, str] = {}

    @property
    def delay(self) -> float:
        return settings.autosave_delay_seconds if self._delay is None else self._delay

    def schedule(self, key: str, callback: SaveCallback) -> None:
        """(Re)start the debounce timer for `key`. Must be called from a running event loop."""
        self._cancel(key)
        self._callbacks[key] = callback
        self._tasks[key] = asyncio.get_running_loop().create_task(self._run_later(key))
        logger.debug(f"Auto-save scheduled for {key} in {self.delay}s")

    def is_pending(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    async def flush(self, key: Optional[str] = None) -> None:
        """Run pending saves now (one key, or all of them)."""
        keys = [key] if key is not None else list(self._callbacks)
        for k in keys:
            if k not in self._callbacks:
                continue
            self._cancel(k)
            await self._save(k)

    def cancel(self, key: str) -> None:
        """Drop the pending save for `key` without running it."""
        self._cancel(key)
        self._callbacks.pop(key, None)

    def cancel_all(self) -> None:
        for key in list(self._tasks):
            self._cancel(key)
        self._callbacks.clear()

    def record_success(self, key: str) -> None:
        self.last_error.pop(key, None)
        self.last_saved_at[key] = now_iso()

    def status(self, key: str) -> dict[str, Any]:
        return {
            "pending": self.is_pending(key),
            "lastSavedAt": self.last_saved_at.get(key),
            "error": self.last_error.get(key),
        }

    # ── Internals ────────────────────────────────────────────────────────

    def _cancel(self, key: str) -> None:
        task = self._tasks.pop(key, None)
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run_later(self, key: str) -> None:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            return
        self._tasks.pop(key, None)
        await self._save(key)

    async def _save(self, key: str) -> None:
        callback = self._callbacks.pop(key, None)
        if callback is None:
            return
        try:
            result = callback()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Auto-save failed for {key}: {e}")
            self.last_error[key] = str(e)
            return
        self.record_success(key)
        logger.info(f"Auto-saved {key}")


# Shared saver for master-resume edits (one key per user)
resume_saver = DebouncedSaver()
