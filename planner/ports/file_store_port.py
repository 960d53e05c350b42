"""File store port — abstract interface for a remote versioned file store.

Writes use optimistic concurrency: read the current revision marker (SHA),
then submit it with the new content. The store rejects a stale marker.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union


class SyncError(Exception):
    """Raised when any remote file store operation fails."""


@dataclass(frozen=True)
class FileFound:
    """The file exists; ``sha`` is its current revision marker."""

    sha: str


@dataclass(frozen=True)
class FileNotFound:
    """The file does not exist yet (first write)."""


RevisionLookup = Union[FileFound, FileNotFound]


class FileStorePort(Protocol):
    """Abstract remote file store used by the sync client."""

    async def get_revision(self, path: str, branch: str) -> RevisionLookup: ...

    async def put_file(
        self,
        path: str,
        branch: str,
        content: str,
        sha: str | None,
        message: str,
    ) -> dict: ...
