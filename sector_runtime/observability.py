# file: sector_runtime/observability.py
"""
Observability — per-pass metrics for the dashboard pipeline.

No external dependencies.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class PassMetrics:
    """Snapshot of one index/consolidate/sort pass."""

    latency_ms: float
    unit_count: int
    root_count: int
    sort_column: str
    sort_direction: str

    def to_dict(self) -> dict:
        return asdict(self)
