# file: sector_runtime/session.py
"""
Dashboard Session — runs the sector pipeline for one caller.

Pipeline order (one pass per request/refresh):
  1. index_units(units)      — may raise ValidationError
  2. consolidate(tree)       — never raises
  3. sort_units(...)         — advances this session's SortState

A ValidationError aborts the whole pass before step 3, so the sort
cursor is only advanced by passes that produce a view.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from sector_kernel.consolidation import consolidate
from sector_kernel.constants import SORT_ASC
from sector_kernel.domain_types import ConsolidatedMetrics, OrgUnit
from sector_kernel.hierarchical_sort import (
    SortMetric,
    SortState,
    order_by_path,
    sort_units,
)
from sector_kernel.tree_index import index_units

from .observability import PassMetrics


@dataclass(frozen=True)
class DashboardView:
    """Renderable result of one pipeline pass."""

    units: List[OrgUnit]
    consolidated: Dict[int, ConsolidatedMetrics]
    root_ids: List[int]
    sort_column: str
    sort_direction: str

    def to_dict(self) -> dict:
        return {
            "units": [u.to_dict() for u in self.units],
            "root_ids": list(self.root_ids),
            "sort_column": self.sort_column,
            "sort_direction": self.sort_direction,
        }


class DashboardSession:
    """
    Owns one SortState and re-runs the full pipeline on every build.

    Not thread-safe: callers sharing a session across requests must
    serialise access.
    """

    def __init__(self, sort_state: Optional[SortState] = None) -> None:
        self._sort_state = sort_state or SortState()
        self._last_metrics: Optional[PassMetrics] = None

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def sort_state(self) -> SortState:
        return self._sort_state

    @property
    def last_metrics(self) -> Optional[PassMetrics]:
        return self._last_metrics

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def build(
        self,
        units: Sequence[OrgUnit],
        column: Optional[str] = None,
        direction: Optional[str] = None,
    ) -> DashboardView:
        """
        Index, consolidate and sort ``units``.

        Without a column the pass is a first render: Setor ascending, and
        the cursor moves to Setor/asc so the next header click on any
        metric starts from that metric's default direction.
        """
        start = time.perf_counter()

        tree = index_units(units)
        consolidated = consolidate(tree)

        if column is None:
            ordered = order_by_path(tree, SORT_ASC)
            self._sort_state.column = SortMetric.SETOR.label
            self._sort_state.direction = SORT_ASC
        else:
            ordered = sort_units(tree, column, self._sort_state, direction)
        sort_column = self._sort_state.column
        sort_direction = self._sort_state.direction

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        self._last_metrics = PassMetrics(
            latency_ms=round(elapsed_ms, 3),
            unit_count=len(tree.units),
            root_count=len(tree.root_ids),
            sort_column=sort_column,
            sort_direction=sort_direction,
        )

        return DashboardView(
            units=ordered,
            consolidated=consolidated,
            root_ids=list(tree.root_ids),
            sort_column=sort_column,
            sort_direction=sort_direction,
        )
