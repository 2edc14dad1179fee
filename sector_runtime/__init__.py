# file: sector_runtime/__init__.py
"""
Sector Runtime — request-scoped orchestration around the Sector Kernel.

Per-session sort cursor, reporting periods, pass observability.
"""

from .session import DashboardSession, DashboardView
from .periods import ReportingPeriod, resolve_period
from .observability import PassMetrics

__all__ = [
    "DashboardSession",
    "DashboardView",
    "ReportingPeriod",
    "resolve_period",
    "PassMetrics",
]
