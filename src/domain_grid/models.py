"""
Data models for the domain grid system.

This module defines the value types that flow between the validator,
classifier, orchestrator, batcher and view layer. Everything that crosses a
component boundary is immutable; the only mutable record is the run-scoped
ProgressCounters owned by the orchestrator.
"""

from dataclasses import dataclass
from typing import Optional

from .enums import DomainStatus


@dataclass(frozen=True)
class Combination:
    """One (base name, TLD) pair under evaluation."""

    base_name: str
    tld: str

    @property
    def full_domain(self) -> str:
        return f"{self.base_name}.{self.tld}"


@dataclass(frozen=True)
class CheckOutcome:
    """Verdict for a single combination."""

    status: DomainStatus
    reason: Optional[str] = None


@dataclass(frozen=True)
class GridCell:
    """One TLD column of a grid row."""

    tld: str
    status: DomainStatus
    id: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class GridRow:
    """All TLD results for one base name, in TLD submission order."""

    base_name: str
    cells: tuple[GridCell, ...]

    def cell_for(self, tld: str) -> Optional[GridCell]:
        for cell in self.cells:
            if cell.tld == tld:
                return cell
        return None

    def has_status(self, status: DomainStatus) -> bool:
        return any(cell.status == status for cell in self.cells)


@dataclass(frozen=True)
class PendingUpdate:
    """A queued cell update waiting for the next flush."""

    base_name: str
    tld: str
    status: DomainStatus
    reason: Optional[str] = None


@dataclass
class ProgressCounters:
    """Run-scoped completion counters."""

    total_checks: int = 0
    completed_checks: int = 0

    @property
    def is_complete(self) -> bool:
        return self.total_checks > 0 and self.completed_checks == self.total_checks

    def record_completion(self) -> int:
        """Count one settled combination and return the new total."""
        if self.completed_checks >= self.total_checks:
            raise RuntimeError(
                f"Completion count would exceed total ({self.total_checks})"
            )
        self.completed_checks += 1
        return self.completed_checks


@dataclass(frozen=True)
class RunSummary:
    """Snapshot of a run's progress and per-status counts."""

    total: int
    available: int
    taken: int
    invalid: int
    checking: int
    running: bool
    elapsed_seconds: Optional[float] = None

    @property
    def processed(self) -> int:
        return self.total - self.checking

    @property
    def percent_processed(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.processed / self.total * 100
