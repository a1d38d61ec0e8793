"""
Result grid for one run.

The grid holds one GridRow per base name and one GridCell per TLD, in
submission order. Rows are immutable values: an update rebuilds only the rows
it touches and leaves every other row object in place, so consumers can
detect changes by identity.
"""

import uuid
from typing import Mapping

from .enums import DomainStatus
from .models import GridCell, GridRow, PendingUpdate


def generate_cell_id() -> str:
    """Return a unique identifier for a grid cell."""
    return uuid.uuid4().hex


class ResultGrid:
    """Authoritative per-run grid of cell statuses."""

    def __init__(self, base_names: list[str], tlds: list[str]) -> None:
        self._tlds = tuple(tlds)
        self._rows: tuple[GridRow, ...] = tuple(
            GridRow(
                base_name=base,
                cells=tuple(
                    GridCell(tld=tld, status=DomainStatus.CHECKING, id=generate_cell_id())
                    for tld in self._tlds
                ),
            )
            for base in base_names
        )
        self._row_index = {row.base_name: i for i, row in enumerate(self._rows)}
        self._version = 0

    @property
    def rows(self) -> tuple[GridRow, ...]:
        return self._rows

    @property
    def tlds(self) -> tuple[str, ...]:
        return self._tlds

    @property
    def version(self) -> int:
        """Incremented once per mutation that changed at least one row."""
        return self._version

    def __len__(self) -> int:
        return len(self._rows)

    def count(self, status: DomainStatus) -> int:
        return sum(1 for row in self._rows for cell in row.cells if cell.status == status)

    def apply(self, grouped: Mapping[str, Mapping[str, PendingUpdate]]) -> int:
        """
        Apply coalesced updates in one mutation.

        Args:
            grouped: base name -> TLD -> latest update for that cell

        Returns:
            Number of rows replaced; updates for unknown cells are ignored
        """
        rows = list(self._rows)
        changed = 0

        for base_name, updates in grouped.items():
            index = self._row_index.get(base_name)
            if index is None:
                continue

            row = rows[index]
            new_cells = []
            touched = False
            for cell in row.cells:
                update = updates.get(cell.tld)
                if update is None:
                    new_cells.append(cell)
                    continue
                new_cells.append(
                    GridCell(tld=cell.tld, status=update.status, id=cell.id, reason=update.reason)
                )
                touched = True

            if touched:
                rows[index] = GridRow(base_name=row.base_name, cells=tuple(new_cells))
                changed += 1

        if changed:
            self._rows = tuple(rows)
            self._version += 1

        return changed
