"""Settings port — abstract interface for persisting sync settings.

Core modules depend on this protocol, never on a specific storage backend.
"""

from __future__ import annotations

from typing import Protocol

from planner.data.models import SyncSettings


class SettingsPort(Protocol):
    """Abstract load/save interface used by the planner service."""

    def load(self) -> SyncSettings: ...

    def save(self, sync_settings: SyncSettings) -> None: ...
