"""In-memory event store — the session's authoritative event list.

User-entered events go through ``add`` (normalize, validate, insert, sort).
Loaded events replace the list wholesale via ``replace_all``. Every read
view is recomputed from the current list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from datetime import date
from typing import Any

from planner.core.normalizer import format_date_input, normalize_event
from planner.data.models import Event

logger = logging.getLogger(__name__)

UPCOMING_LIMIT = 5
TOP_LIMIT = 3
TYPE_FILTER_LIMIT = 2


class EventValidationError(ValueError):
    """Raised when a user-added event lacks a date or title."""


def _sorted(events: Iterable[Event]) -> list[Event]:
    # ISO dates sort chronologically as strings; sort is stable per date
    return sorted(events, key=lambda ev: ev.date)


def _day_key(day: date | str | None) -> str:
    key = format_date_input(day) if day is not None else ""
    return key or date.today().isoformat()


class EventStore:
    """Ordered collection of normalized events."""

    def __init__(self, events: Iterable[Event] | None = None) -> None:
        self._events: list[Event] = []
        if events is not None:
            self.replace_all(events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    @property
    def events(self) -> list[Event]:
        """A copy of the current list, in store order."""
        return list(self._events)

    def snapshot(self) -> tuple[Event, ...]:
        """Frozen view of the current events, used for uploads."""
        return tuple(self._events)

    # -- mutations ---------------------------------------------------------

    def replace_all(self, events: Iterable[Event]) -> None:
        """Set the canonical list. Events without a date are dropped."""
        self._events = [ev for ev in events if ev.date]
        logger.info("Event store replaced: %d events", len(self._events))

    def add(self, raw_form: Mapping[str, Any] | Event) -> Event:
        """Normalize and insert a user-entered event.

        Raises EventValidationError when date or title is missing.
        Never deduplicates: a day can hold several appointments.
        """
        event = normalize_event(raw_form)
        if not event.date or not event.title:
            raise EventValidationError("Please add at least a date and title.")

        self._events = _sorted([*self._events, event])
        logger.info("Event added: '%s' on %s", event.title, event.date)
        return event

    # -- views -------------------------------------------------------------

    def by_date(self) -> dict[str, list[Event]]:
        """Group events by date, keeping insertion order within a date."""
        grouped: dict[str, list[Event]] = {}
        for event in self._events:
            grouped.setdefault(event.date, []).append(event)
        return grouped

    def events_on(self, day: date | str) -> list[Event]:
        """All events for a single day (the selected-day panel)."""
        key = format_date_input(day)
        return [ev for ev in self._events if ev.date == key] if key else []

    def upcoming(
        self, today: date | str | None = None, limit: int = UPCOMING_LIMIT
    ) -> list[Event]:
        """Events on or after today, earliest first."""
        today_key = _day_key(today)
        return _sorted(ev for ev in self._events if ev.date >= today_key)[:limit]

    def top(self, today: date | str | None = None) -> list[Event]:
        """The next few events, shown as quick-jump chips."""
        return self.upcoming(today)[:TOP_LIMIT]

    def filter_by_type(
        self, substring: str, limit: int = TYPE_FILTER_LIMIT
    ) -> list[Event]:
        """Events whose type contains ``substring`` (case-insensitive)."""
        needle = substring.lower()
        return _sorted(ev for ev in self._events if needle in ev.type.lower())[:limit]

    def ultrasounds(self) -> list[Event]:
        return self.filter_by_type("ultrasound")
