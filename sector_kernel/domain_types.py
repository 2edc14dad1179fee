"""
Sector Kernel — Core Domain Types v1.0

Pure data. No aggregation, ordering or ranking logic.
Records are read-only snapshots rebuilt on every request from the
external data-access layer.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Root unit:
    Organizational unit with no parent (level 0). A top-level
    secretariat.

Consolidated metric:
    Root-level value aggregating every descendant unit's raw counters.

Bayesian ranking:
    Score blending an entity's own mean rating with the population-wide
    mean, weighted by how many votes the entity has.

Minimum-evidence threshold (min_votes):
    Prior strength controlling how far low-vote entities are pulled
    toward the global mean.

────────────────────────────────────────────────
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


PATH_SEPARATOR: str = ","


# ── Organizational Units ──────────────────────────────────────

@dataclass(frozen=True)
class ConsolidatedMetrics:
    """Root-level figures folded from every unit under the root."""

    users: int = 0
    services: int = 0
    efficiency_pct: float = 0.0   # 0..100
    engagement_pct: float = 0.0   # 0..100
    quality_mean: float = 0.0     # 0..5, votes-weighted
    quality_votes: int = 0


@dataclass
class OrgUnit:
    """
    One organizational unit (a "sector").

    path: comma-joined ancestor ids ending with the unit's own id.
    level: depth, 0 for roots. Computed from path when omitted.
    root_users_total: site-wide user figure for the unit's root.
    """

    id: int
    path: str
    parent_id: Optional[int] = None
    level: Optional[int] = None
    title: str = ""

    users_total: int = 0
    root_users_total: Optional[int] = None
    services_primary: int = 0
    services_participant: int = 0
    requests_total: int = 0
    requests_completed: int = 0
    requests_answered: int = 0
    quality_mean: Optional[float] = None
    quality_votes: int = 0

    consolidated: Optional[ConsolidatedMetrics] = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def services_total(self) -> int:
        return self.services_primary + self.services_participant

    @property
    def efficiency_pct(self) -> float:
        """Completed / total requests as a ratio (0..1). 0 with no requests."""
        if self.requests_total <= 0:
            return 0.0
        return self.requests_completed / self.requests_total

    @property
    def engagement_pct(self) -> float:
        """
        Share of still-open requests that already got an answer (0..1).

        opened_not_completed    = max(total - completed, 0)
        responded_not_completed = max(answered - completed, 0)
        """
        opened_not_completed = max(self.requests_total - self.requests_completed, 0)
        if opened_not_completed == 0:
            return 0.0
        responded_not_completed = max(self.requests_answered - self.requests_completed, 0)
        return responded_not_completed / opened_not_completed

    def to_dict(self) -> dict:
        """Serialise for the presentation layer."""
        consolidated = None
        if self.consolidated is not None:
            c = self.consolidated
            consolidated = {
                "users": c.users,
                "services": c.services,
                "efficiency_pct": c.efficiency_pct,
                "engagement_pct": c.engagement_pct,
                "quality_mean": c.quality_mean,
                "quality_votes": c.quality_votes,
            }
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "path": self.path,
            "level": self.level,
            "title": self.title,
            "users_total": self.users_total,
            "services_primary": self.services_primary,
            "services_participant": self.services_participant,
            "requests_total": self.requests_total,
            "requests_completed": self.requests_completed,
            "requests_answered": self.requests_answered,
            "efficiency_pct": self.efficiency_pct * 100,
            "engagement_pct": self.engagement_pct * 100,
            "quality_mean": self.quality_mean,
            "quality_votes": self.quality_votes,
            "consolidated": consolidated,
        }


@dataclass
class OrgTree:
    """
    Validated forest built by the tree indexer.

    units: deduplicated units, in input order.
    by_id: arena of units indexed by id.
    paths: parsed path segments per unit id (cached, parsed once).
    children: id -> direct child ids (unordered).
    root_ids: root unit ids, in input order.
    groups: root id -> ids of every unit under that root (root included).
    """

    units: List[OrgUnit] = field(default_factory=list)
    by_id: Dict[int, OrgUnit] = field(default_factory=dict)
    paths: Dict[int, Tuple[int, ...]] = field(default_factory=dict)
    children: Dict[int, List[int]] = field(default_factory=dict)
    root_ids: List[int] = field(default_factory=list)
    groups: Dict[int, List[int]] = field(default_factory=dict)

    def root_of(self, unit_id: int) -> int:
        return self.paths[unit_id][0]

    def depth_of(self, unit_id: int) -> int:
        return len(self.paths[unit_id]) - 1

    def roots(self) -> List[OrgUnit]:
        return [self.by_id[rid] for rid in self.root_ids]


# ── Rated Entities ────────────────────────────────────────────

@dataclass(frozen=True)
class RatedEntity:
    """
    A sector or service subject to quality ranking.

    mean_score: arithmetic mean of 1-5 ratings, None without votes.
    bayesian_score: set by the ranking engine, None on raw input.
    """

    id: int
    title: str = ""
    mean_score: Optional[float] = None
    vote_count: int = 0
    bayesian_score: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "mean_score": self.mean_score,
            "vote_count": self.vote_count,
            "bayesian_score": self.bayesian_score,
        }


@dataclass(frozen=True)
class RatingDistribution:
    """Star counts for one rated entity (1..5 stars)."""

    entity_id: int
    count_1: int = 0
    count_2: int = 0
    count_3: int = 0
    count_4: int = 0
    count_5: int = 0

    @property
    def total_votes(self) -> int:
        return self.count_1 + self.count_2 + self.count_3 + self.count_4 + self.count_5

    @property
    def points(self) -> int:
        return (
            self.count_1
            + 2 * self.count_2
            + 3 * self.count_3
            + 4 * self.count_4
            + 5 * self.count_5
        )

    def mean(self) -> Optional[float]:
        """Weighted star mean; None when nobody voted."""
        total = self.total_votes
        if total == 0:
            return None
        return self.points / total
