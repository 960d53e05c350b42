"""Remote sync client — push the event list to a versioned file store.

Each target file is written in two steps: read its current revision
marker, then write the new content together with that marker. The store
rejects stale markers; conflicts surface as SyncError and are not retried.

The JSON file is written first, then the spreadsheet. A failure on the
JSON write aborts before the spreadsheet is attempted. There is no
rollback when the spreadsheet write fails after the JSON succeeded.
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Iterable
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

from planner.data.models import EVENT_FIELDS, Event, SyncSettings
from planner.ports.file_store_port import FileFound, FileStorePort, SyncError

logger = logging.getLogger(__name__)

JSON_COMMIT_MESSAGE = "Update pregnancy data JSON"
XLSX_COMMIT_MESSAGE = "Update pregnancy data Excel"
SHEET_TITLE = "Events"


class SyncPreconditionError(Exception):
    """Raised before any network call when sync settings are incomplete."""


def build_json_payload(events: Iterable[Event]) -> bytes:
    """Pretty-printed ``{"events": [...]}`` document, UTF-8 encoded."""
    body = {"events": [event.to_dict() for event in events]}
    return json.dumps(body, indent=2, ensure_ascii=False).encode("utf-8")


def build_xlsx_payload(events: Iterable[Event]) -> bytes:
    """Single-sheet workbook with a header row and one row per event."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(list(EVENT_FIELDS))
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for event in events:
        ws.append([getattr(event, name) for name in EVENT_FIELDS])

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def encode_content(raw: bytes) -> str:
    """Base64 text, as the Contents API expects for file bodies."""
    return base64.b64encode(raw).decode("ascii")


async def write_file(
    file_store: FileStorePort,
    path: str,
    branch: str,
    content: str,
    message: str,
) -> dict:
    """Read the current revision marker for ``path``, then overwrite it."""
    lookup = await file_store.get_revision(path, branch)
    sha = lookup.sha if isinstance(lookup, FileFound) else None
    return await file_store.put_file(path, branch, content, sha, message)


async def sync_events(
    events: Iterable[Event],
    sync_settings: SyncSettings,
    file_store: FileStorePort,
) -> None:
    """Write the JSON and spreadsheet renditions of ``events``.

    Raises SyncPreconditionError if owner, repo or token is missing,
    and SyncError when a payload cannot be built or the file store fails.
    """
    if not sync_settings.is_sync_ready():
        raise SyncPreconditionError(
            "Add GitHub owner, repo, and token before syncing."
        )

    events = list(events)
    try:
        json_content = encode_content(build_json_payload(events))
        xlsx_content = encode_content(build_xlsx_payload(events))
    except Exception as exc:
        logger.error("Payload build failed: %s", exc)
        raise SyncError(f"Failed to prepare sync files: {exc}") from exc

    await write_file(
        file_store,
        sync_settings.json_path,
        sync_settings.branch,
        json_content,
        JSON_COMMIT_MESSAGE,
    )
    await write_file(
        file_store,
        sync_settings.xlsx_path,
        sync_settings.branch,
        xlsx_content,
        XLSX_COMMIT_MESSAGE,
    )
    logger.info(
        "Synced %d events to %s/%s@%s",
        len(events), sync_settings.owner, sync_settings.repo, sync_settings.branch,
    )
