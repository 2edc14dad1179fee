"""
Sector Kernel — Bayesian Ranking v1.0

Quality ranking with shrinkage toward the population mean:

    score(e) = (v / (v + m)) * R + (m / (v + m)) * C

    v = e.vote_count, R = e.mean_score,
    C = global mean over the same period/scope, m = min_votes prior.

A single 5-star vote no longer outranks a 4.6 average over 500 votes:
low-evidence entities are pulled toward C in proportion to how little
evidence they carry.

Entities with zero votes are excluded. Ties break by id ascending.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import DEFAULT_MIN_EVIDENCE, DEFAULT_MIN_VOTES
from .domain_types import RatedEntity, RatingDistribution
from .errors import InvalidArgumentError


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------

def bayesian_score(
    mean_score: float,
    vote_count: int,
    global_mean: float,
    min_votes: int = DEFAULT_MIN_VOTES,
) -> float:
    """Shrunk score for a single entity. Caller guarantees vote_count > 0."""
    total = vote_count + min_votes
    return (vote_count / total) * mean_score + (min_votes / total) * global_mean


def global_mean_from_distributions(
    distributions: Iterable[RatingDistribution],
) -> float:
    """Population mean star rating across every distribution; 0.0 if empty."""
    points = 0
    votes = 0
    for d in distributions:
        points += d.points
        votes += d.total_votes
    if votes == 0:
        return 0.0
    return points / votes


def global_mean_from_entities(entities: Iterable[RatedEntity]) -> float:
    """Votes-weighted mean of entity means; 0.0 without votes."""
    points = 0.0
    votes = 0
    for e in entities:
        if e.vote_count > 0 and e.mean_score is not None:
            points += e.mean_score * e.vote_count
            votes += e.vote_count
    if votes == 0:
        return 0.0
    return points / votes


def entity_from_distribution(
    distribution: RatingDistribution,
    title: str = "",
) -> RatedEntity:
    """Build a RatedEntity from star counts."""
    return RatedEntity(
        id=distribution.entity_id,
        title=title,
        mean_score=distribution.mean(),
        vote_count=distribution.total_votes,
    )


def eligible_for_leaderboard(
    entity: RatedEntity,
    minimum: int = DEFAULT_MIN_EVIDENCE,
) -> bool:
    """True when the entity has at least ``minimum`` votes (and at least one)."""
    return entity.vote_count >= max(minimum, 1) and entity.mean_score is not None


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

def rank_entities(
    entities: Sequence[RatedEntity],
    global_mean: float,
    min_votes: int = DEFAULT_MIN_VOTES,
    min_evidence: int = DEFAULT_MIN_EVIDENCE,
) -> List[RatedEntity]:
    """
    Return entities with ``bayesian_score`` set, best first.

    Raises InvalidArgumentError on min_votes <= 0 or a negative
    vote_count anywhere in the input.
    """
    _validate(entities, min_votes)

    scored = [
        replace(
            e,
            bayesian_score=bayesian_score(e.mean_score, e.vote_count, global_mean, min_votes),
        )
        for e in entities
        if eligible_for_leaderboard(e, min_evidence)
    ]
    scored.sort(key=lambda e: (-e.bayesian_score, e.id))
    return scored


def best_worst(
    entities: Sequence[RatedEntity],
    global_mean: float,
    min_votes: int = DEFAULT_MIN_VOTES,
    min_evidence: int = DEFAULT_MIN_EVIDENCE,
) -> Tuple[Optional[RatedEntity], Optional[RatedEntity]]:
    """Highest and lowest ranked entity, or (None, None)."""
    ranked = rank_entities(entities, global_mean, min_votes, min_evidence)
    if not ranked:
        return None, None
    return ranked[0], ranked[-1]


def _validate(entities: Sequence[RatedEntity], min_votes: int) -> None:
    if min_votes <= 0:
        raise InvalidArgumentError("min_votes", f"must be positive, got {min_votes}")
    for e in entities:
        if e.vote_count < 0:
            raise InvalidArgumentError(
                "vote_count",
                f"entity {e.id} has negative vote_count {e.vote_count}"
            )
