"""
Update Batcher for grid results.

Finished checks enqueue their outcome here instead of touching the grid.
A periodic task drains the buffer every flush interval, coalesces the
updates per cell (last write wins) and applies them to the grid in one
mutation, so consumers see a few bulk changes instead of thousands of
single-cell transitions.
"""

import asyncio
from typing import Callable, Optional

from .audit_logger import AuditLogger
from .enums import LogLevel
from .grid import ResultGrid
from .models import GridRow, PendingUpdate


FlushListener = Callable[[tuple[GridRow, ...]], None]


class UpdateBatcher:
    """
    Buffers PendingUpdates and flushes them into a ResultGrid.

    flush() is synchronous and swaps the buffer out before processing, so an
    enqueue can never interleave with a drain.
    """

    def __init__(
        self,
        grid: ResultGrid,
        flush_interval_seconds: float = 0.3,
        on_flush: Optional[FlushListener] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the batcher.

        Args:
            grid: Grid receiving the flushed updates
            flush_interval_seconds: Period of the background flush task
            on_flush: Called with the new rows after every effective flush
            logger: Optional audit logger
        """
        self._grid = grid
        self._interval = flush_interval_seconds
        self._on_flush = on_flush
        self._logger = logger
        self._buffer: list[PendingUpdate] = []
        self._task: Optional[asyncio.Task] = None
        self._flush_count = 0

    @property
    def pending_count(self) -> int:
        return len(self._buffer)

    @property
    def flush_count(self) -> int:
        """Number of flushes that changed the grid."""
        return self._flush_count

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def enqueue(self, update: PendingUpdate) -> None:
        self._buffer.append(update)

    def flush(self) -> int:
        """
        Drain the buffer into the grid.

        Returns:
            Number of grid rows replaced; 0 (and no grid mutation) for an
            empty buffer
        """
        if not self._buffer:
            return 0

        pending, self._buffer = self._buffer, []

        grouped: dict[str, dict[str, PendingUpdate]] = {}
        for update in pending:
            grouped.setdefault(update.base_name, {})[update.tld] = update

        changed = self._grid.apply(grouped)
        self._log(
            LogLevel.DEBUG,
            "Flushed pending updates",
            {"updates": len(pending), "rows_changed": changed, "version": self._grid.version},
        )

        if changed:
            self._flush_count += 1
            if self._on_flush is not None:
                self._on_flush(self._grid.rows)

        return changed

    def discard(self) -> int:
        """Drop pending updates without applying them; returns how many were dropped."""
        dropped = len(self._buffer)
        self._buffer = []
        return dropped

    def start(self) -> None:
        """Begin flushing periodically on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        self._task.add_done_callback(self._on_task_done)

    def stop(self) -> None:
        """Cancel the periodic flush task; pending updates stay buffered."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.flush()

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None and self._logger:
            self._logger.log_error("batcher", "Periodic flush task crashed", error)

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, "batcher", message, data)
