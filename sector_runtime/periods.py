# file: sector_runtime/periods.py
"""
Reporting periods — resolve a named filter window to concrete dates.

Keys: today, 7d, 30d, 90d, 6m, 1y (since Jan 1), ano_passado
(previous calendar year), all (since 2000-01-01).
Unknown keys fall back to 30d.
"""

from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass
from typing import Optional

DEFAULT_PERIOD: str = "30d"
EPOCH: dt.date = dt.date(2000, 1, 1)

_ROLLING_DAYS = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
}


@dataclass(frozen=True)
class ReportingPeriod:
    key: str
    start: dt.date
    end: dt.date

    @property
    def days(self) -> int:
        return max(1, (self.end - self.start).days + 1)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "days": self.days,
        }


def resolve_period(key: Optional[str], today: Optional[dt.date] = None) -> ReportingPeriod:
    """Return the inclusive [start, end] window for ``key``."""
    today = today or dt.date.today()
    key = key if key in _known_keys() else DEFAULT_PERIOD

    if key == "today":
        return ReportingPeriod(key, today, today)
    if key in _ROLLING_DAYS:
        start = today - dt.timedelta(days=_ROLLING_DAYS[key] - 1)
        return ReportingPeriod(key, start, today)
    if key == "6m":
        return ReportingPeriod(key, _months_back(today, 6), today)
    if key == "1y":
        return ReportingPeriod(key, dt.date(today.year, 1, 1), today)
    if key == "ano_passado":
        year = today.year - 1
        return ReportingPeriod(key, dt.date(year, 1, 1), dt.date(year, 12, 31))
    return ReportingPeriod(key, EPOCH, today)


def _known_keys() -> set:
    return {"today", "6m", "1y", "ano_passado", "all"} | set(_ROLLING_DAYS)


def _months_back(day: dt.date, months: int) -> dt.date:
    """Same day ``months`` earlier, clamped to the end of shorter months."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    return dt.date(year, month, min(day.day, calendar.monthrange(year, month)[1]))
