"""Event source loader — fetch published events at startup.

Primary source is the spreadsheet (pregnancy-data.xlsx). On any failure
(network error, non-success status, unreadable workbook) the JSON export
(pregnancy-data.json) is used instead. Both failing raises LoadError.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any

import httpx
from openpyxl import load_workbook

from planner.config import settings
from planner.core.normalizer import normalize_events
from planner.data.models import Event

logger = logging.getLogger(__name__)

XLSX_NAME = "pregnancy-data.xlsx"
JSON_NAME = "pregnancy-data.json"


class LoadError(Exception):
    """Raised when neither the spreadsheet nor the JSON source could be loaded."""


def parse_workbook(content: bytes) -> list[dict[str, Any]]:
    """Read the first worksheet into row dicts keyed by the header row.

    Missing cells become "". Completely empty rows are skipped.
    Date cells stay as date/datetime objects for the normalizer.
    """
    workbook = load_workbook(BytesIO(content), read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        rows = sheet.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return []

        headers = [
            str(cell).strip() if cell is not None and str(cell).strip() else f"col{i}"
            for i, cell in enumerate(header_row, start=1)
        ]

        records: list[dict[str, Any]] = []
        for row in rows:
            if all(cell is None or str(cell).strip() == "" for cell in row):
                continue
            record = {header: "" for header in headers}
            for i, cell in enumerate(row):
                key = headers[i] if i < len(headers) else f"col{i + 1}"
                record[key] = "" if cell is None else cell
            records.append(record)
        return records
    finally:
        workbook.close()


def parse_json_payload(data: Any) -> list[dict[str, Any]]:
    """Extract the ``events`` array from the JSON export."""
    if not isinstance(data, dict):
        return []
    rows = data.get("events")
    if not isinstance(rows, list):
        return []
    return [row for row in rows if isinstance(row, dict)]


class EventSourceLoader:
    """Loads events from the spreadsheet, falling back to the JSON export."""

    def __init__(
        self,
        xlsx_url: str | None = None,
        json_url: str | None = None,
    ) -> None:
        self.xlsx_url = xlsx_url or f"{settings.DATA_BASE_URL}data/{XLSX_NAME}"
        self.json_url = json_url or f"{settings.DATA_BASE_URL}data/{JSON_NAME}"

    async def fetch_sheet_events(self) -> list[Event]:
        async with httpx.AsyncClient(timeout=None) as client:
            resp = await client.get(self.xlsx_url)
        if not resp.is_success:
            raise LoadError(f"Unable to load {XLSX_NAME}")
        return normalize_events(parse_workbook(resp.content))

    async def fetch_json_events(self) -> list[Event]:
        async with httpx.AsyncClient(timeout=None) as client:
            resp = await client.get(self.json_url)
        if not resp.is_success:
            raise LoadError(f"Unable to load {JSON_NAME}")
        return normalize_events(parse_json_payload(resp.json()))

    async def load(self) -> list[Event]:
        """Return events in source order.

        Raises LoadError when both sources fail.
        """
        try:
            events = await self.fetch_sheet_events()
            logger.info("Loaded %d events from %s", len(events), self.xlsx_url)
            return events
        except Exception as exc:
            logger.warning("Spreadsheet load failed (%s), trying JSON", exc)

        try:
            events = await self.fetch_json_events()
        except LoadError:
            raise
        except Exception as exc:
            logger.error("JSON load failed: %s", exc)
            raise LoadError(f"Unable to load {JSON_NAME}") from exc

        logger.info("Loaded %d events from %s", len(events), self.json_url)
        return events
