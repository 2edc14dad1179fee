"""
Sector Kernel — Metrics Consolidation v1.0

Folds per-unit counters into consolidated figures on each root unit.

Formulas (per root r, over every unit under r, r included):
  services        = sum(services_primary + services_participant)
  users           = r.root_users_total (site-wide figure, never summed)
  efficiency_pct  = mean(unit efficiency) * 100
                    over units with requests_total > 0 and efficiency > 0
  engagement_pct  = mean(unit engagement) * 100
                    over units with requests_total > 0 and engagement > 0
  quality_mean    = sum(mean_i * votes_i) / sum(votes_i) over votes_i > 0
  quality_votes   = sum(votes_i)

Efficiency and engagement are unweighted means of unit percentages while
quality is votes-weighted. Keep both as they are.

Never raises: missing or zero inputs degrade to 0.
"""

from __future__ import annotations

from typing import Dict, List

from .domain_types import ConsolidatedMetrics, OrgTree, OrgUnit


def consolidate(tree: OrgTree) -> Dict[int, ConsolidatedMetrics]:
    """
    Compute consolidated metrics for every root and attach them to the
    root units. Non-root units are left unchanged.
    """
    result: Dict[int, ConsolidatedMetrics] = {}
    for root_id in tree.root_ids:
        root = tree.by_id[root_id]
        members = [tree.by_id[uid] for uid in tree.groups.get(root_id, [])]
        metrics = consolidate_group(root, members)
        root.consolidated = metrics
        result[root_id] = metrics
    return result


def consolidate_group(root: OrgUnit, members: List[OrgUnit]) -> ConsolidatedMetrics:
    """Fold one root's member units (root included) into a single record."""
    services = 0
    efficiencies: List[float] = []
    engagements: List[float] = []
    weighted_points = 0.0
    total_votes = 0

    for unit in members:
        services += unit.services_total

        if unit.requests_total > 0:
            efficiency = unit.efficiency_pct
            if efficiency > 0:
                efficiencies.append(efficiency)
            engagement = unit.engagement_pct
            if engagement > 0:
                engagements.append(engagement)

        if unit.quality_votes > 0 and unit.quality_mean is not None:
            weighted_points += unit.quality_mean * unit.quality_votes
            total_votes += unit.quality_votes

    users = root.root_users_total
    if users is None:
        users = root.users_total

    return ConsolidatedMetrics(
        users=users or 0,
        services=services,
        efficiency_pct=_mean_pct(efficiencies),
        engagement_pct=_mean_pct(engagements),
        quality_mean=weighted_points / total_votes if total_votes > 0 else 0.0,
        quality_votes=total_votes,
    )


def _mean_pct(ratios: List[float]) -> float:
    if not ratios:
        return 0.0
    return sum(ratios) / len(ratios) * 100
