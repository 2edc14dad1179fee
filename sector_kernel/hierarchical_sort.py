"""
Sector Kernel — Hierarchical Sorter v1.0

Reorders the flat unit list for display while keeping the forest shape:

  Setor   -> whole list ordered by path (ancestor paths are prefixes of
             descendant paths, so the tree shape survives on its own).
  metric  -> only roots are ordered by the metric (ties: ascending path);
             each root's descendants follow it depth-first, siblings
             always in ascending path order whatever the direction.

The sort cursor (column + direction) is an explicit SortState owned by
the caller. Toggle rule: sorting by the current column flips the
direction; a new column takes the given direction or its default.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from .constants import (
    DEFAULT_SORT_COLUMN,
    DEFAULT_SORT_DIRECTION,
    SORT_ASC,
    SORT_DESC,
)
from .domain_types import OrgTree, OrgUnit


# ---------------------------------------------------------------------------
# Sortable columns
# ---------------------------------------------------------------------------

class SortMetric(Enum):
    """Closed set of sortable columns: (column label, default direction)."""

    SETOR = ("Setor", SORT_ASC)
    USUARIOS = ("Usuarios", SORT_DESC)
    SERVICOS = ("Servicos", SORT_DESC)
    EFICIENCIA = ("Eficiencia", SORT_DESC)
    ENGAJAMENTO = ("Engajamento", SORT_DESC)
    QUALIDADE = ("Qualidade", SORT_DESC)

    def __init__(self, label: str, default_direction: str) -> None:
        self.label = label
        self.default_direction = default_direction

    @property
    def is_identity(self) -> bool:
        return self is SortMetric.SETOR

    @classmethod
    def parse(cls, column: Union[str, "SortMetric", None]) -> Optional["SortMetric"]:
        """Resolve a column label (or member) to a metric; None if unknown."""
        if isinstance(column, SortMetric):
            return column
        for member in cls:
            if member.label == column:
                return member
        return None

    def value_of(self, unit: OrgUnit) -> float:
        """
        Numeric sort value taken from the unit's own row. Roots are
        compared on their own counters, never on consolidated figures.
        """
        return _ACCESSORS[self](unit)


def _users(unit: OrgUnit) -> float:
    return unit.users_total


def _services(unit: OrgUnit) -> float:
    return unit.services_total


def _efficiency(unit: OrgUnit) -> float:
    return unit.efficiency_pct * 100


def _engagement(unit: OrgUnit) -> float:
    return unit.engagement_pct * 100


def _quality(unit: OrgUnit) -> float:
    return unit.quality_mean or 0.0


_ACCESSORS: Dict[SortMetric, Callable[[OrgUnit], float]] = {
    SortMetric.SETOR: lambda unit: 0.0,
    SortMetric.USUARIOS: _users,
    SortMetric.SERVICOS: _services,
    SortMetric.EFICIENCIA: _efficiency,
    SortMetric.ENGAJAMENTO: _engagement,
    SortMetric.QUALIDADE: _quality,
}


# ---------------------------------------------------------------------------
# Sort cursor
# ---------------------------------------------------------------------------

@dataclass
class SortState:
    """Per-caller sort cursor. Single writer."""

    column: str = DEFAULT_SORT_COLUMN
    direction: str = DEFAULT_SORT_DIRECTION

    def resolve(self, metric: SortMetric, direction: Optional[str] = None) -> str:
        """Effective direction for the next sort by ``metric``."""
        if metric.label == self.column:
            return SORT_DESC if self.direction == SORT_ASC else SORT_ASC
        if direction in (SORT_ASC, SORT_DESC):
            return direction
        return metric.default_direction


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sort_units(
    tree: OrgTree,
    column: Union[str, SortMetric],
    state: SortState,
    direction: Optional[str] = None,
) -> List[OrgUnit]:
    """
    Return a new flat list ordered for display and advance ``state``.

    Unknown columns return the units in their current order and leave
    ``state`` untouched.
    """
    metric = SortMetric.parse(column)
    if metric is None:
        return list(tree.units)

    effective = state.resolve(metric, direction)
    if metric.is_identity:
        ordered = order_by_path(tree, effective)
    else:
        ordered = order_by_root_metric(tree, metric, effective)

    state.column = metric.label
    state.direction = effective
    return ordered


def order_by_path(tree: OrgTree, direction: str = SORT_ASC) -> List[OrgUnit]:
    """Whole-list path ordering."""
    return sorted(
        tree.units,
        key=lambda u: path_key(u.path),
        reverse=direction == SORT_DESC,
    )


def order_by_root_metric(
    tree: OrgTree,
    metric: SortMetric,
    direction: str = SORT_DESC,
) -> List[OrgUnit]:
    """Roots ordered by ``metric``; every subtree re-attached beneath its root."""
    roots = sorted(tree.roots(), key=lambda u: path_key(u.path))
    # sorted() stays stable under reverse=True, so equal values keep
    # ascending path order in both directions.
    roots = sorted(roots, key=metric.value_of, reverse=direction == SORT_DESC)

    ordered: List[OrgUnit] = []
    for root in roots:
        ordered.append(root)
        ordered.extend(_descendants(tree, root.id))
    return ordered


def path_key(path: str) -> str:
    """
    Collation key for path comparison.

    Only valid for paths made of ASCII digits and commas, which
    ``parse_path`` enforces for every indexed unit. For those, pt-BR
    collation and code-point order agree (comma sorts before every
    digit), so the raw string is its own key. Any other character would
    need a real collation key here.
    """
    return path


# ---------------------------------------------------------------------------
# Helpers (private)
# ---------------------------------------------------------------------------

def _descendants(tree: OrgTree, unit_id: int) -> List[OrgUnit]:
    """Depth-first descendants, siblings in ascending path order."""
    out: List[OrgUnit] = []
    stack: List[int] = list(reversed(_sorted_children(tree, unit_id)))
    while stack:
        child_id = stack.pop()
        out.append(tree.by_id[child_id])
        stack.extend(reversed(_sorted_children(tree, child_id)))
    return out


def _sorted_children(tree: OrgTree, unit_id: int) -> List[int]:
    return sorted(
        tree.children.get(unit_id, []),
        key=lambda cid: path_key(tree.by_id[cid].path),
    )
