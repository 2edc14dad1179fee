# file: backend/main.py
"""
FastAPI Backend — Sector Dashboard API v1.

Stateless aggregation: every request carries the already-aggregated
records from the data-access layer and gets back the processed view.
The only server-side state is each session's sort cursor.

Endpoints:
  POST /sectors/view          — index + consolidate + sort
  POST /sectors/leaderboards  — top-N roots per consolidated metric
  POST /ratings/ranking       — Bayesian ranking
  POST /ratings/best-worst    — best/worst ranked entity
  GET  /periods/{key}         — resolve a reporting window
  GET  /health
"""
from __future__ import annotations

import os
import sys
import threading
from collections import OrderedDict
from typing import List, Optional

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Add project root to path for kernel imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sector_kernel.consolidation import consolidate
from sector_kernel.constants import DEFAULT_MIN_EVIDENCE, LEADERBOARD_LIMIT
from sector_kernel.domain_types import OrgUnit, RatedEntity, RatingDistribution
from sector_kernel.errors import InvalidArgumentError, ValidationError
from sector_kernel.leaderboards import build_leaderboards, performance_band
from sector_kernel.ranking import (
    best_worst,
    global_mean_from_distributions,
    global_mean_from_entities,
    rank_entities,
)
from sector_kernel.tree_index import index_units

from sector_runtime.periods import resolve_period
from sector_runtime.session import DashboardSession

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
DEFAULT_MIN_VOTES = int(os.environ.get("DEFAULT_MIN_VOTES", "5"))
MAX_SESSIONS = max(1, int(os.environ.get("MAX_SESSIONS", "1000")))
API_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Sector Dashboard API",
    version=API_VERSION,
    description="Hierarchical sector metrics and Bayesian quality rankings",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Sort cursors per client session, least recently used first. Capped at
# MAX_SESSIONS; the oldest cursor is evicted when a new id arrives.
_sessions: OrderedDict[str, DashboardSession] = OrderedDict()
_sessions_lock = threading.Lock()

# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class UnitIn(BaseModel):
    id: int
    path: str
    parent_id: Optional[int] = None
    level: Optional[int] = None
    title: str = ""
    users_total: int = Field(0, ge=0)
    root_users_total: Optional[int] = Field(None, ge=0)
    services_primary: int = Field(0, ge=0)
    services_participant: int = Field(0, ge=0)
    requests_total: int = Field(0, ge=0)
    requests_completed: int = Field(0, ge=0)
    requests_answered: int = Field(0, ge=0)
    quality_mean: Optional[float] = Field(None, ge=0, le=5)
    quality_votes: int = Field(0, ge=0)

    def to_unit(self) -> OrgUnit:
        return OrgUnit(
            id=self.id,
            path=self.path,
            parent_id=self.parent_id,
            level=self.level,
            title=self.title,
            users_total=self.users_total,
            root_users_total=self.root_users_total,
            services_primary=self.services_primary,
            services_participant=self.services_participant,
            requests_total=self.requests_total,
            requests_completed=self.requests_completed,
            requests_answered=self.requests_answered,
            quality_mean=self.quality_mean,
            quality_votes=self.quality_votes,
        )


class SectorViewRequest(BaseModel):
    session_id: str = "default"
    units: List[UnitIn]
    column: Optional[str] = None
    direction: Optional[str] = None


class LeaderboardRequest(BaseModel):
    units: List[UnitIn]
    limit: int = Field(LEADERBOARD_LIMIT, ge=0)


class EntityIn(BaseModel):
    id: int
    title: str = ""
    mean_score: Optional[float] = None
    vote_count: int = 0


class DistributionIn(BaseModel):
    entity_id: int
    count_1: int = Field(0, ge=0)
    count_2: int = Field(0, ge=0)
    count_3: int = Field(0, ge=0)
    count_4: int = Field(0, ge=0)
    count_5: int = Field(0, ge=0)


class RankingRequest(BaseModel):
    entities: List[EntityIn]
    global_mean: Optional[float] = None
    distributions: Optional[List[DistributionIn]] = None
    min_votes: Optional[int] = None
    min_evidence: int = DEFAULT_MIN_EVIDENCE


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _get_session(session_id: str) -> DashboardSession:
    with _sessions_lock:
        session = _sessions.get(session_id)
        if session is not None:
            _sessions.move_to_end(session_id)
            return session
        session = DashboardSession()
        _sessions[session_id] = session
        while len(_sessions) > MAX_SESSIONS:
            evicted, _ = _sessions.popitem(last=False)
            print(f"WARN: session cap {MAX_SESSIONS} reached, evicted {evicted!r}")
        return session


def _to_units(items: List[UnitIn]) -> List[OrgUnit]:
    return [item.to_unit() for item in items]


def _ranking_inputs(req: RankingRequest):
    """Resolve entities, global mean and prior strength for a ranking call."""
    entities = [
        RatedEntity(
            id=e.id,
            title=e.title,
            mean_score=e.mean_score,
            vote_count=e.vote_count,
        )
        for e in req.entities
    ]
    if req.global_mean is not None:
        global_mean = req.global_mean
    elif req.distributions:
        global_mean = global_mean_from_distributions(
            RatingDistribution(**d.model_dump()) for d in req.distributions
        )
    else:
        global_mean = global_mean_from_entities(entities)
    min_votes = DEFAULT_MIN_VOTES if req.min_votes is None else req.min_votes
    return entities, global_mean, min_votes


def _unit_row(unit: OrgUnit) -> dict:
    """Unit dict plus colour bands (roots banded on consolidated figures)."""
    row = unit.to_dict()
    if unit.consolidated is not None:
        efficiency = unit.consolidated.efficiency_pct
        engagement = unit.consolidated.engagement_pct
    elif unit.requests_total > 0:
        efficiency = row["efficiency_pct"]
        engagement = row["engagement_pct"]
    else:
        efficiency = engagement = None
    row["efficiency_band"] = performance_band(efficiency)
    row["engagement_band"] = performance_band(engagement)
    return row


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post("/sectors/view")
def sector_view(req: SectorViewRequest):
    """
    Index → consolidate → sort. Repeating a column flips its direction
    for the same session_id.
    """
    session = _get_session(req.session_id)
    try:
        with _sessions_lock:
            view = session.build(_to_units(req.units), req.column, req.direction)
    except ValidationError as exc:
        print(f"WARN: sector view rejected for session {req.session_id!r}: {exc}")
        raise HTTPException(status_code=422, detail=str(exc))

    payload = view.to_dict()
    payload["units"] = [_unit_row(u) for u in view.units]
    if session.last_metrics is not None:
        payload["metrics"] = session.last_metrics.to_dict()
    return payload


@app.post("/sectors/leaderboards")
def sector_leaderboards(req: LeaderboardRequest):
    """Top-N secretariats per consolidated metric."""
    try:
        tree = index_units(_to_units(req.units))
    except ValidationError as exc:
        print(f"WARN: leaderboards rejected: {exc}")
        raise HTTPException(status_code=422, detail=str(exc))
    consolidate(tree)
    boards = build_leaderboards(tree, req.limit)
    return {
        label: [_unit_row(u) for u in units]
        for label, units in boards.items()
    }


@app.post("/ratings/ranking")
def ratings_ranking(req: RankingRequest):
    """Entities ranked by Bayesian score, best first."""
    entities, global_mean, min_votes = _ranking_inputs(req)
    try:
        ranked = rank_entities(entities, global_mean, min_votes, req.min_evidence)
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {
        "global_mean": global_mean,
        "min_votes": min_votes,
        "ranking": [e.to_dict() for e in ranked],
    }


@app.post("/ratings/best-worst")
def ratings_best_worst(req: RankingRequest):
    entities, global_mean, min_votes = _ranking_inputs(req)
    try:
        best, worst = best_worst(entities, global_mean, min_votes, req.min_evidence)
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {
        "best": best.to_dict() if best else None,
        "worst": worst.to_dict() if worst else None,
    }


@app.get("/periods/{key}")
def period(key: str):
    """Resolve a reporting-period key; unknown keys fall back to 30d."""
    return resolve_period(key).to_dict()


@app.get("/health")
def health():
    return {"status": "ok", "version": API_VERSION}
