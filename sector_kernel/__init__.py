"""
Sector Kernel v1.0
Hierarchical metrics aggregation and ranking for the sector dashboard.
Pure, synchronous, in-memory transforms. No I/O.
"""

from .domain_types import (
    ConsolidatedMetrics, OrgTree, OrgUnit, RatedEntity, RatingDistribution,
    PATH_SEPARATOR,
)
from .errors import InvalidArgumentError, ValidationError
from .tree_index import index_units, parse_path
from .consolidation import consolidate, consolidate_group
from .hierarchical_sort import (
    SortMetric,
    SortState,
    order_by_path,
    order_by_root_metric,
    path_key,
    sort_units,
)
from .ranking import (
    bayesian_score,
    best_worst,
    eligible_for_leaderboard,
    entity_from_distribution,
    global_mean_from_distributions,
    global_mean_from_entities,
    rank_entities,
)
from .leaderboards import (
    LEADERBOARD_METRICS,
    build_leaderboards,
    consolidated_value,
    performance_band,
    top_roots,
)
from .constants import (
    DEFAULT_MIN_VOTES,
    DEFAULT_MIN_EVIDENCE,
    DEFAULT_SORT_COLUMN,
    DEFAULT_SORT_DIRECTION,
    LEADERBOARD_LIMIT,
    SORT_ASC,
    SORT_DESC,
)

__all__ = [
    "ConsolidatedMetrics",
    "OrgTree",
    "OrgUnit",
    "RatedEntity",
    "RatingDistribution",
    "PATH_SEPARATOR",
    "InvalidArgumentError",
    "ValidationError",
    "index_units",
    "parse_path",
    "consolidate",
    "consolidate_group",
    "SortMetric",
    "SortState",
    "order_by_path",
    "order_by_root_metric",
    "path_key",
    "sort_units",
    "bayesian_score",
    "best_worst",
    "eligible_for_leaderboard",
    "entity_from_distribution",
    "global_mean_from_distributions",
    "global_mean_from_entities",
    "rank_entities",
    "LEADERBOARD_METRICS",
    "build_leaderboards",
    "consolidated_value",
    "performance_band",
    "top_roots",
    "DEFAULT_MIN_VOTES",
    "DEFAULT_MIN_EVIDENCE",
    "DEFAULT_SORT_COLUMN",
    "DEFAULT_SORT_DIRECTION",
    "LEADERBOARD_LIMIT",
    "SORT_ASC",
    "SORT_DESC",
]
