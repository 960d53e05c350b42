"""Event normalizer — pure coercion of raw records into Events.

Rows come from spreadsheets, JSON files and user forms, so field names vary
in casing and dates may be native date values or free text. Coercion is
best-effort and never raises: one garbage row must not abort a whole load.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from planner.data.models import Event

logger = logging.getLogger(__name__)


def _pick(raw: Mapping[str, Any], name: str) -> Any:
    """Return the value for ``name`` regardless of key casing, or None.

    Exact lowercase and Capitalized keys win over any other casing.
    """
    for key in (name, name.capitalize()):
        value = raw.get(key)
        if value is not None:
            return value
    for key, value in raw.items():
        if value is not None and str(key).strip().lower() == name:
            return value
    return None


def parse_event_date(value: Any) -> date | None:
    """Parse a date value, returning None when it isn't a usable date.

    Accepts date/datetime objects and ISO-8601 strings
    ("2026-01-08", "2026-01-08T09:30:00", "20260108").
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def format_date_input(value: Any) -> str:
    """Format any date-ish value as YYYY-MM-DD, or "" if unparseable."""
    parsed = parse_event_date(value)
    return parsed.isoformat() if parsed else ""


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_event(raw: Mapping[str, Any] | Event) -> Event:
    """Coerce a raw record into a canonical Event.

    Idempotent: normalizing an already-canonical Event returns an equal Event.
    """
    if isinstance(raw, Event):
        raw = asdict(raw)

    return Event(
        date=format_date_input(_pick(raw, "date")),
        type=_text(_pick(raw, "type")),
        title=_text(_pick(raw, "title")),
        notes=_text(_pick(raw, "notes")),
    )


def normalize_events(rows: Iterable[Mapping[str, Any]]) -> list[Event]:
    """Normalize a batch of rows, dropping those without a usable date."""
    events: list[Event] = []
    skipped = 0
    for row in rows:
        event = normalize_event(row)
        if event.date:
            events.append(event)
        else:
            skipped += 1
    if skipped:
        logger.debug("Skipped %d rows without a valid date", skipped)
    return events
