"""
Pregnancy Planner — Data Models.

Events are the milestones shown on the calendar (scans, injections, checkups).
Sync settings are the per-user GitHub credentials, persisted locally.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

# Spreadsheet column order and JSON key order
EVENT_FIELDS = ("date", "type", "title", "notes")

# Persisted record key -> attribute name
_RECORD_KEYS = {
    "owner": "owner",
    "repo": "repo",
    "branch": "branch",
    "jsonPath": "json_path",
    "xlsxPath": "xlsx_path",
    "token": "token",
}


@dataclass
class Event:
    """A single dated milestone.

    Events in the store always carry a canonical YYYY-MM-DD date.
    Several events may share the same date.
    """

    date: str = ""     # ISO date YYYY-MM-DD, "" when unparseable
    type: str = ""     # e.g. "Ultrasound 1"
    title: str = ""
    notes: str = ""

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in EVENT_FIELDS}


@dataclass
class SyncSettings:
    """GitHub target for pushing the event list.

    Loaded once at startup and written through on every field change.
    """

    owner: str = ""
    repo: str = ""
    branch: str = "main"
    token: str = ""
    json_path: str = "public/data/pregnancy-data.json"
    xlsx_path: str = "public/data/pregnancy-data.xlsx"

    def is_sync_ready(self) -> bool:
        """Owner, repo and token are the minimum needed to talk to GitHub."""
        return bool(self.owner and self.repo and self.token)

    def to_record(self) -> dict[str, str]:
        return {key: getattr(self, attr) for key, attr in _RECORD_KEYS.items()}

    @classmethod
    def from_record(cls, record: dict) -> SyncSettings:
        """Build settings from a stored record, keeping defaults for missing keys."""
        known = {f.name for f in fields(cls)}
        values: dict[str, str] = {}
        for key, value in record.items():
            attr = _RECORD_KEYS.get(key, key)
            if attr in known and value is not None:
                values[attr] = str(value)
        return cls(**values)

    @staticmethod
    def attribute_for(name: str) -> str:
        """Resolve a record key or attribute name to the attribute name.

        Raises ValueError for unknown names.
        """
        if name in _RECORD_KEYS:
            return _RECORD_KEYS[name]
        if name in _RECORD_KEYS.values():
            return name
        raise ValueError(f"Unknown setting: {name!r}")
