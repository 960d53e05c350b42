"""Gestational progress calculator — pure business logic.

Derives week, day, trimester and pregnancy month from the LMP reference
date and "now". Nothing is persisted; callers recompute on every render.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

NOT_STARTED = "-"


@dataclass
class ProgressSnapshot:
    """Where the pregnancy stands on a given day."""

    day_delta: int
    week_number: int
    day_of_week: int
    trimester: str             # "1st Trimester" | "2nd Trimester" | "3rd Trimester" | "-"
    pregnancy_month: int | str  # 1.. or "-"
    week_start: date
    week_end: date
    range_label: str           # e.g. "Dec 1, 2025 - Dec 7, 2025"
    today_key: str             # YYYY-MM-DD

    def contains(self, day: date) -> bool:
        """Whether ``day`` falls inside the current pregnancy week."""
        return self.week_start <= day <= self.week_end


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _format_day(d: date) -> str:
    """Format as 'Mon D, YYYY' (platform-safe, no zero-padding)."""
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def trimester_for(week_number: int) -> str:
    if week_number <= 0:
        return NOT_STARTED
    if week_number <= 12:
        return "1st Trimester"
    if week_number <= 27:
        return "2nd Trimester"
    return "3rd Trimester"


def compute_progress(
    reference: date | datetime | str,
    now: date | datetime | str | None = None,
) -> ProgressSnapshot:
    """Compute the progress snapshot for ``now`` (default: today)."""
    lmp = _as_date(reference)
    today = _as_date(now) if now is not None else date.today()

    day_delta = (today - lmp).days
    if day_delta >= 0:
        week_number, day_of_week = divmod(day_delta, 7)
    else:
        week_number, day_of_week = 0, 0

    week_start = lmp + timedelta(days=week_number * 7)
    week_end = week_start + timedelta(days=6)
    pregnancy_month: int | str = (
        NOT_STARTED if week_number <= 0 else math.ceil(week_number / 4)
    )

    return ProgressSnapshot(
        day_delta=day_delta,
        week_number=week_number,
        day_of_week=day_of_week,
        trimester=trimester_for(week_number),
        pregnancy_month=pregnancy_month,
        week_start=week_start,
        week_end=week_end,
        range_label=f"{_format_day(week_start)} - {_format_day(week_end)}",
        today_key=today.isoformat(),
    )
