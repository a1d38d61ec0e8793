"""
Check Orchestrator for the domain grid system.

This module provides the orchestration layer that turns a submission into a
run: it validates the input, builds the grid, schedules one classification
task per domain combination under the dispatch limiter, routes each outcome
through the update batcher, and detects terminal completion.

Every run owns its own RunContext (grid, batcher, counters, timing and a
cancellation flag). Starting a new run or clearing cancels the previous
context; its tasks check the flag before touching shared state, and are
cancelled outright so their HTTP requests are aborted.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .audit_logger import AuditLogger
from .batcher import UpdateBatcher
from .classifier import StatusClassifier
from .config import SystemConfig
from .dispatch_limiter import DispatchLimiter
from .doh_client import DoHClient
from .domain_validator import DomainValidator, normalize_tokens
from .enums import DomainStatus, LogLevel
from .exceptions import ValidationError
from .grid import ResultGrid
from .models import CheckOutcome, Combination, GridRow, PendingUpdate, ProgressCounters, RunSummary
from .view import format_summary, summarize


CHECK_ERROR_REASON = "Error during check"

RowsListener = Callable[[tuple[GridRow, ...]], None]


@dataclass
class RunContext:
    """State owned by a single run, discarded on clear or the next submission."""

    generation: int
    combinations: list[Combination]
    grid: ResultGrid
    batcher: UpdateBatcher
    counters: ProgressCounters
    started_at: float
    done: asyncio.Event
    elapsed_seconds: Optional[float] = None
    finished: bool = False
    cancelled: bool = False
    tasks: set[asyncio.Task] = field(default_factory=set)

    @property
    def is_active(self) -> bool:
        return not (self.finished or self.cancelled)


class CheckOrchestrator:
    """
    Main orchestrator for domain grid runs.

    Coordinates validation, bounded concurrent classification, batched grid
    updates and completion detection. Consumers read the output through
    ``rows``, ``tlds``, ``is_running``, ``summary()`` and ``summary_text()``,
    and may register listeners that are called after each effective flush.
    """

    async def __aenter__(self) -> "CheckOrchestrator":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def __init__(
        self,
        config: SystemConfig,
        classifier: Optional[StatusClassifier] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the check orchestrator.

        Args:
            config: System configuration
            classifier: Optional classifier; built from config when omitted
            logger: Optional audit logger for logging
        """
        self._config = config
        self._logger = logger

        if classifier is None:
            client = DoHClient(
                timeout=config.request_timeout_seconds,
                simulation_mode=config.simulation_mode,
            )
            classifier = StatusClassifier(
                client=client,
                providers=config.providers,
                record_types=config.parsed_record_types,
                logger=logger,
            )
        self._classifier = classifier

        self._validator = DomainValidator(language=config.language)
        self._limiter = DispatchLimiter(config.max_concurrent_checks)

        self._generation = 0
        self._context: Optional[RunContext] = None
        self._listeners: list[RowsListener] = []
        self._abandoned_tasks: set[asyncio.Task] = set()

    def start(self, base_names: Iterable[str], tlds: Iterable[str]) -> RunContext:
        """
        Validate a submission and start checking every combination.

        Must be called with a running event loop. Any previous run is
        cancelled first, but only once the new submission has been accepted.

        Args:
            base_names: Base names (normalized and deduplicated here as well)
            tlds: TLDs (normalized and deduplicated here as well)

        Returns:
            The RunContext of the new run

        Raises:
            ValidationError: If the submission is rejected; no state is created
        """
        names = normalize_tokens(base_names)
        suffixes = normalize_tokens(tlds)

        try:
            combinations = self._validator.validate_submission(
                names, suffixes, self._config.max_combinations
            )
        except ValidationError as e:
            self._log(
                LogLevel.WARN,
                "Submission rejected",
                {"code": e.code, "message": e.message, "details": e.details},
            )
            raise

        self.clear()

        self._generation += 1
        generation = self._generation
        grid = ResultGrid(names, suffixes)
        batcher = UpdateBatcher(
            grid,
            flush_interval_seconds=self._config.flush_interval_seconds,
            on_flush=lambda rows: self._notify(generation, rows),
            logger=self._logger.bind(generation=generation) if self._logger else None,
        )
        context = RunContext(
            generation=generation,
            combinations=combinations,
            grid=grid,
            batcher=batcher,
            counters=ProgressCounters(total_checks=len(combinations)),
            started_at=time.perf_counter(),
            done=asyncio.Event(),
        )
        self._context = context

        self._log(
            LogLevel.INFO,
            "Run started",
            {
                "generation": context.generation,
                "base_names": len(names),
                "tlds": len(suffixes),
                "combinations": len(combinations),
                "max_concurrent_checks": self._limiter.max_concurrent,
            },
        )

        context.batcher.start()
        loop = asyncio.get_running_loop()
        for combination in combinations:
            task = loop.create_task(self._check(context, combination))
            context.tasks.add(task)
            task.add_done_callback(context.tasks.discard)

        return context

    async def run(self, base_names: Iterable[str], tlds: Iterable[str]) -> RunSummary:
        """Start a run and wait for it to finish."""
        self.start(base_names, tlds)
        return await self.wait()

    async def wait(self) -> RunSummary:
        """
        Wait until the current run completes or is cleared.

        Returns:
            RunSummary of the run that was current when waiting began
            (empty if nothing was submitted)
        """
        context = self._context
        if context is None:
            return self.summary()
        await context.done.wait()
        return self._summarize(context)

    async def _check(self, context: RunContext, combination: Combination) -> None:
        """Classify one combination and report the outcome to its run."""
        try:
            async with self._limiter.acquire():
                if context.cancelled:
                    return
                outcome = await self._classifier.classify(combination.full_domain)
        except Exception as e:
            if self._logger:
                self._logger.log_error(
                    "orchestrator",
                    "Check failed",
                    e,
                    {"domain": combination.full_domain, "generation": context.generation},
                )
            outcome = CheckOutcome(status=DomainStatus.INVALID, reason=CHECK_ERROR_REASON)

        if context.cancelled:
            return

        context.batcher.enqueue(
            PendingUpdate(
                base_name=combination.base_name,
                tld=combination.tld,
                status=outcome.status,
                reason=outcome.reason,
            )
        )
        context.counters.record_completion()

        if context.counters.is_complete:
            self._finish(context)

    def _finish(self, context: RunContext) -> None:
        context.batcher.stop()
        try:
            context.batcher.flush()
        finally:
            context.elapsed_seconds = time.perf_counter() - context.started_at
            context.finished = True
            context.done.set()

        summary = self._summarize(context)
        self._log(
            LogLevel.INFO,
            "Run completed",
            {
                "generation": context.generation,
                "total": summary.total,
                "available": summary.available,
                "taken": summary.taken,
                "invalid": summary.invalid,
                "elapsed_seconds": round(context.elapsed_seconds, 3),
                "peak_in_flight": self._limiter.peak_in_flight,
            },
        )
        self._notify(context.generation, context.grid.rows)

    def clear(self) -> None:
        """
        Cancel the current run and drop its state.

        Pending updates are discarded, the flush timer is stopped and
        in-flight tasks are cancelled. Safe to call when nothing is running.
        """
        context = self._context
        if context is None:
            return

        self._context = None
        if context.is_active:
            context.cancelled = True
            context.batcher.stop()
            dropped = context.batcher.discard()
            tasks = [task for task in context.tasks if not task.done()]
            for task in tasks:
                task.cancel()
                self._abandoned_tasks.add(task)
                task.add_done_callback(self._abandoned_tasks.discard)
            self._log(
                LogLevel.INFO,
                "Run cancelled",
                {
                    "generation": context.generation,
                    "completed": context.counters.completed_checks,
                    "total": context.counters.total_checks,
                    "dropped_updates": dropped,
                    "cancelled_tasks": len(tasks),
                },
            )
        context.done.set()

    async def close(self) -> None:
        """Cancel any run, let cancelled tasks unwind and close the resolver client."""
        self.clear()
        if self._abandoned_tasks:
            await asyncio.gather(*list(self._abandoned_tasks), return_exceptions=True)
        await self._classifier.client.close()

    def add_listener(self, callback: RowsListener) -> None:
        """Register a callback receiving the rows after every effective flush."""
        self._listeners.append(callback)

    def remove_listener(self, callback: RowsListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, generation: int, rows: tuple[GridRow, ...]) -> None:
        if self._context is None or self._context.generation != generation:
            return
        for callback in list(self._listeners):
            try:
                callback(rows)
            except Exception as e:
                if self._logger:
                    self._logger.log_error(
                        "orchestrator",
                        "Listener failed",
                        e,
                        {
                            "generation": generation,
                            "listener": getattr(callback, "__qualname__", repr(callback)),
                        },
                    )

    @property
    def rows(self) -> tuple[GridRow, ...]:
        """Current grid rows, empty when nothing is submitted."""
        if self._context is None:
            return ()
        return self._context.grid.rows

    @property
    def tlds(self) -> tuple[str, ...]:
        if self._context is None:
            return ()
        return self._context.grid.tlds

    @property
    def is_running(self) -> bool:
        return self._context is not None and self._context.is_active

    @property
    def context(self) -> Optional[RunContext]:
        """The current run's context, if any."""
        return self._context

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def limiter(self) -> DispatchLimiter:
        return self._limiter

    @property
    def config(self) -> SystemConfig:
        """Get the system configuration."""
        return self._config

    def summary(self) -> RunSummary:
        """Snapshot of the current run's counts and progress."""
        context = self._context
        if context is None:
            return summarize((), total=0, running=False)
        return self._summarize(context)

    def _summarize(self, context: RunContext) -> RunSummary:
        return summarize(
            context.grid.rows,
            total=context.counters.total_checks,
            running=context.is_active,
            elapsed_seconds=context.elapsed_seconds,
        )

    def summary_text(self) -> Optional[str]:
        """Localized one-line summary, or None when nothing is submitted."""
        return format_summary(self.summary(), self._config.language)

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        """Log a message if logger is available."""
        if self._logger:
            self._logger.log(level, "orchestrator", message, data)
