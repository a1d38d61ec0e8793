"""
Aggregation and view helpers over grid rows.

Everything here is pure: filters, sort and summary are recomputed from the
current rows whenever the grid changes, and never mutate it.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .enums import DomainStatus, SortDirection
from .i18n import get_message
from .models import GridRow, RunSummary


BASE_NAME_SORT_KEY = "baseName"
VOWELS = frozenset("aeiou")
ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyz")


@dataclass(frozen=True)
class FilterOptions:
    """Row filters; all active filters must hold for a row to be shown."""

    base_name_query: str = ""
    has_available: bool = False
    no_taken: bool = False
    no_invalid: bool = False
    best_consonant: bool = False

    @property
    def is_active(self) -> bool:
        return bool(
            self.base_name_query
            or self.has_available
            or self.no_taken
            or self.no_invalid
            or self.best_consonant
        )


@dataclass(frozen=True)
class SortConfig:
    """Sort key ('baseName' or a TLD column) and direction."""

    key: str
    direction: SortDirection = SortDirection.ASCENDING


def is_brandable(name: str) -> bool:
    """
    Check the "best consonant" heuristic for a base name.

    The name must start with an ASCII consonant and, unless it is a single
    character, contain at least one vowel.
    """
    if not name:
        return False
    first = name[0].lower()
    if first not in ASCII_LETTERS or first in VOWELS:
        return False
    if len(name) == 1:
        return True
    return any(ch in VOWELS for ch in name.lower())


def filter_rows(rows: Iterable[GridRow], options: FilterOptions) -> list[GridRow]:
    """Return the rows matching every active filter, in input order."""
    results = list(rows)

    if options.base_name_query:
        query = options.base_name_query.lower()
        results = [row for row in results if query in row.base_name.lower()]

    if options.has_available:
        results = [row for row in results if row.has_status(DomainStatus.AVAILABLE)]

    if options.no_taken:
        results = [row for row in results if not row.has_status(DomainStatus.TAKEN)]

    if options.no_invalid:
        results = [row for row in results if not row.has_status(DomainStatus.INVALID)]

    if options.best_consonant:
        results = [row for row in results if is_brandable(row.base_name)]

    return results


def next_sort_config(current: Optional[SortConfig], key: str) -> SortConfig:
    """
    Compute the sort after a column header is requested.

    Requesting the current key again while ascending flips to descending;
    anything else sorts ascending by the requested key.
    """
    if current is not None and current.key == key and current.direction == SortDirection.ASCENDING:
        return SortConfig(key=key, direction=SortDirection.DESCENDING)
    return SortConfig(key=key, direction=SortDirection.ASCENDING)


def sort_rows(rows: Iterable[GridRow], config: Optional[SortConfig]) -> list[GridRow]:
    """
    Sort rows by base name or by the status of one TLD column.

    Rows without a cell for the requested TLD are placed last in either
    direction. A None config keeps the input order.
    """
    rows = list(rows)
    if config is None:
        return rows

    descending = config.direction == SortDirection.DESCENDING

    if config.key == BASE_NAME_SORT_KEY:
        return sorted(rows, key=lambda row: row.base_name.casefold(), reverse=descending)

    present = [row for row in rows if row.cell_for(config.key) is not None]
    missing = [row for row in rows if row.cell_for(config.key) is None]
    present.sort(key=lambda row: row.cell_for(config.key).status.display_rank, reverse=descending)
    return present + missing


def summarize(
    rows: Sequence[GridRow],
    total: int,
    running: bool,
    elapsed_seconds: Optional[float] = None,
) -> RunSummary:
    """Count cell statuses across rows into a RunSummary."""
    counts = {status: 0 for status in DomainStatus}
    for row in rows:
        for cell in row.cells:
            counts[cell.status] += 1

    return RunSummary(
        total=total,
        available=counts[DomainStatus.AVAILABLE],
        taken=counts[DomainStatus.TAKEN],
        invalid=counts[DomainStatus.INVALID],
        checking=counts[DomainStatus.CHECKING],
        running=running,
        elapsed_seconds=elapsed_seconds,
    )


def format_summary(summary: RunSummary, language: str = "en") -> Optional[str]:
    """
    Render the one-line run summary.

    Returns:
        Progress text while running, the final tally once finished, or None
        when nothing has been submitted
    """
    if summary.total <= 0 and not summary.running:
        return None

    if summary.running:
        return get_message(
            "summary.running",
            language,
            total=summary.total,
            percent=f"{summary.percent_processed:.0f}",
            checking=summary.checking,
        )

    text = get_message(
        "summary.finished",
        language,
        total=summary.total,
        available=summary.available,
        taken=summary.taken,
        invalid=summary.invalid,
    )
    if summary.elapsed_seconds is not None:
        text += get_message("summary.time_taken", language, seconds=summary.elapsed_seconds)
    return text
