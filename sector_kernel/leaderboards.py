"""
Sector Kernel — Root Leaderboards v1.0

Top-N secretariats per consolidated metric, plus the colour band used
for efficiency/engagement percentages.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .constants import BAND_GOOD_MIN_PCT, BAND_MEDIUM_MIN_PCT, LEADERBOARD_LIMIT
from .domain_types import OrgTree, OrgUnit
from .hierarchical_sort import SortMetric, path_key

# Metrics where a zero means "no data" rather than "worst".
_SKIP_ZERO = {SortMetric.EFICIENCIA, SortMetric.ENGAJAMENTO, SortMetric.QUALIDADE}

LEADERBOARD_METRICS = (
    SortMetric.SERVICOS,
    SortMetric.EFICIENCIA,
    SortMetric.ENGAJAMENTO,
    SortMetric.QUALIDADE,
)


def consolidated_value(metric: SortMetric, unit: OrgUnit) -> float:
    """Leaderboard value: the root's consolidated figure, else its own row."""
    c = unit.consolidated
    if c is None:
        return metric.value_of(unit)
    return {
        SortMetric.USUARIOS: c.users,
        SortMetric.SERVICOS: c.services,
        SortMetric.EFICIENCIA: c.efficiency_pct,
        SortMetric.ENGAJAMENTO: c.engagement_pct,
        SortMetric.QUALIDADE: c.quality_mean,
    }[metric]


def top_roots(
    tree: OrgTree,
    metric: SortMetric,
    limit: int = LEADERBOARD_LIMIT,
) -> List[OrgUnit]:
    """Root units ordered by ``metric`` descending, ties by path."""
    if metric.is_identity:
        raise ValueError("Setor is not a ranking metric")

    def value(unit: OrgUnit) -> float:
        return consolidated_value(metric, unit)

    roots = sorted(tree.roots(), key=lambda u: path_key(u.path))
    if metric in _SKIP_ZERO:
        roots = [u for u in roots if value(u) > 0]
    roots.sort(key=value, reverse=True)
    return roots[:max(limit, 0)]


def build_leaderboards(
    tree: OrgTree,
    limit: int = LEADERBOARD_LIMIT,
) -> Dict[str, List[OrgUnit]]:
    """One leaderboard per ranking metric, keyed by column label."""
    return {m.label: top_roots(tree, m, limit) for m in LEADERBOARD_METRICS}


def performance_band(pct: Optional[float]) -> Optional[str]:
    """good >= 70, medium >= 40, bad otherwise; None for missing values."""
    if pct is None:
        return None
    if pct >= BAND_GOOD_MIN_PCT:
        return "good"
    if pct >= BAND_MEDIUM_MIN_PCT:
        return "medium"
    return "bad"
