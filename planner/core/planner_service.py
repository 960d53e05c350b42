"""
Pregnancy Planner — UI-Agnostic Planner Service.

Orchestrates the session: load events -> add events -> edit sync settings
-> push to GitHub, and converts every failure into a user-visible message.

Each UI (web page, bot, desktop widget) calls this service and renders the
response objects and status in its own way. Nothing raised below this layer
is fatal to the UI.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from planner.config import settings
from planner.core.event_store import EventStore, EventValidationError
from planner.core.loader import EventSourceLoader, LoadError
from planner.core.progress import ProgressSnapshot, compute_progress
from planner.core.sync import SyncPreconditionError, sync_events
from planner.data.models import Event, SyncSettings
from planner.ports.file_store_port import SyncError

if TYPE_CHECKING:
    from planner.ports.file_store_port import FileStorePort
    from planner.ports.settings_port import SettingsPort

logger = logging.getLogger(__name__)

MSG_ADD_INVALID = "Please add at least a date and title."
MSG_ADDED = "Event added locally."
MSG_SYNC_NOT_READY = "Add GitHub owner, repo, and token before syncing."
MSG_SYNCED = "Synced data to GitHub."
MSG_SYNC_FAILED = "Sync failed."
MSG_SYNC_BUSY = "Sync already in progress."
MSG_LOAD_FAILED = "Unable to load data"


# ---------------------------------------------------------------------------
# Response types
# ---------------------------------------------------------------------------


class ResponseKind(Enum):
    SUCCESS = "success"
    ERROR = "error"
    NO_ACTION = "no_action"


@dataclass
class ServiceResponse:
    kind: ResponseKind
    message: str
    event: Event | None = None

    @property
    def ok(self) -> bool:
        return self.kind is ResponseKind.SUCCESS


@dataclass
class PlannerStatus:
    """What the UI shows besides the calendar itself.

    ``error`` is persistent (load failures); ``message`` is transient.
    """

    loading: bool = False
    error: str = ""
    saving: bool = False
    message: str = ""


def _default_file_store(sync_settings: SyncSettings) -> FileStorePort:
    from planner.adapters.github_contents import GitHubContentsAdapter

    return GitHubContentsAdapter.from_settings(sync_settings)


class PlannerService:
    """One planner session: event store, sync settings and status."""

    def __init__(
        self,
        settings_port: SettingsPort,
        loader: EventSourceLoader | None = None,
        store: EventStore | None = None,
        file_store_factory: Callable[[SyncSettings], FileStorePort] | None = None,
        lmp_date: str | date | None = None,
    ) -> None:
        self._settings_port = settings_port
        self._loader = loader or EventSourceLoader()
        self._file_store_factory = file_store_factory or _default_file_store
        self.store = store or EventStore()
        self.lmp_date = lmp_date or settings.LMP_DATE
        self.status = PlannerStatus()
        self.sync_settings = settings_port.load()

    # -- events ------------------------------------------------------------

    async def load_events(self) -> ServiceResponse:
        """Populate the store from the published sources.

        On failure the store keeps whatever it held before.
        """
        self.status.loading = True
        self.status.error = ""
        try:
            events = await self._loader.load()
        except LoadError as exc:
            logger.error("Event load failed: %s", exc)
            self.status.error = str(exc) or MSG_LOAD_FAILED
            return ServiceResponse(ResponseKind.ERROR, self.status.error)
        finally:
            self.status.loading = False

        self.store.replace_all(events)
        return ServiceResponse(ResponseKind.SUCCESS, f"Loaded {len(self.store)} events.")

    def add_event(self, form: Mapping[str, Any]) -> ServiceResponse:
        try:
            event = self.store.add(form)
        except EventValidationError:
            self.status.message = MSG_ADD_INVALID
            return ServiceResponse(ResponseKind.ERROR, MSG_ADD_INVALID)

        self.status.message = MSG_ADDED
        return ServiceResponse(ResponseKind.SUCCESS, MSG_ADDED, event=event)

    def progress(self, now: date | datetime | str | None = None) -> ProgressSnapshot:
        return compute_progress(self.lmp_date, now)

    # -- settings ----------------------------------------------------------

    def update_setting(self, name: str, value: str) -> SyncSettings:
        """Change one sync field and persist the whole record immediately.

        ``name`` may be an attribute (``json_path``) or a stored key
        (``jsonPath``). Raises ValueError for unknown names.
        """
        attr = SyncSettings.attribute_for(name)
        self.sync_settings = replace(self.sync_settings, **{attr: value})
        self._settings_port.save(self.sync_settings)
        return self.sync_settings

    # -- sync --------------------------------------------------------------

    async def sync(self) -> ServiceResponse:
        """Push the current events to GitHub as JSON, then as a workbook."""
        if self.status.saving:
            logger.info("Sync requested while another sync is running; ignored")
            return ServiceResponse(ResponseKind.NO_ACTION, MSG_SYNC_BUSY)

        sync_settings = self.sync_settings
        if not sync_settings.is_sync_ready():
            self.status.message = MSG_SYNC_NOT_READY
            return ServiceResponse(ResponseKind.ERROR, MSG_SYNC_NOT_READY)

        self.status.saving = True
        self.status.message = ""
        try:
            file_store = self._file_store_factory(sync_settings)
            await sync_events(self.store.snapshot(), sync_settings, file_store)
        except SyncPreconditionError as exc:
            self.status.message = str(exc)
            return ServiceResponse(ResponseKind.ERROR, self.status.message)
        except SyncError as exc:
            logger.error("Sync failed: %s", exc)
            self.status.message = str(exc) or MSG_SYNC_FAILED
            return ServiceResponse(ResponseKind.ERROR, self.status.message)
        except Exception as exc:
            logger.exception("Unexpected sync error: %s", exc)
            self.status.message = str(exc) or MSG_SYNC_FAILED
            return ServiceResponse(ResponseKind.ERROR, self.status.message)
        finally:
            self.status.saving = False

        self.status.message = MSG_SYNCED
        return ServiceResponse(ResponseKind.SUCCESS, MSG_SYNCED)
