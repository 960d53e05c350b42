"""GitHub file store adapter — implements FileStorePort via the Contents API.

All GitHub-specific logic lives here. Core modules never import this
directly; they depend on the FileStorePort protocol.
"""

from __future__ import annotations

import logging

import httpx

from planner.config import settings
from planner.data.models import SyncSettings
from planner.ports.file_store_port import (
    FileFound,
    FileNotFound,
    RevisionLookup,
    SyncError,
)

logger = logging.getLogger(__name__)


class GitHubContentsAdapter:
    """GitHub repository implementation of FileStorePort."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str | None = None,
    ) -> None:
        self._owner = owner
        self._repo = repo
        self._token = token
        self._api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")

    @classmethod
    def from_settings(cls, sync_settings: SyncSettings) -> GitHubContentsAdapter:
        return cls(
            owner=sync_settings.owner,
            repo=sync_settings.repo,
            token=sync_settings.token,
        )

    def _contents_url(self, path: str) -> str:
        return f"{self._api_url}/repos/{self._owner}/{self._repo}/contents/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self._token}",
            "Accept": "application/vnd.github+json",
        }

    async def get_revision(self, path: str, branch: str) -> RevisionLookup:
        try:
            async with httpx.AsyncClient(timeout=None) as client:
                resp = await client.get(
                    self._contents_url(path),
                    params={"ref": branch},
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            logger.error("GitHub API error (get_revision %s): %s", path, exc)
            raise SyncError(f"Failed to read {path}: {exc}") from exc

        if resp.status_code == 404:
            logger.info("No existing file at %s on %s", path, branch)
            return FileNotFound()

        if not resp.is_success:
            raise SyncError(f"Failed to read {path}: {resp.status_code}")

        try:
            sha = resp.json()["sha"]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Unexpected GitHub response for %s: %s", path, exc)
            raise SyncError(f"Failed to read {path}: unexpected response") from exc
        if not isinstance(sha, str) or not sha:
            raise SyncError(f"Failed to read {path}: unexpected response")

        return FileFound(sha=sha)

    async def put_file(
        self,
        path: str,
        branch: str,
        content: str,
        sha: str | None,
        message: str,
    ) -> dict:
        body = {"message": message, "content": content, "branch": branch}
        if sha is not None:
            body["sha"] = sha

        try:
            async with httpx.AsyncClient(timeout=None) as client:
                resp = await client.put(
                    self._contents_url(path),
                    json=body,
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            logger.error("GitHub API error (put_file %s): %s", path, exc)
            raise SyncError(f"Failed to update {path}: {exc}") from exc

        if not resp.is_success:
            raise SyncError(
                f"Failed to update {path}: {resp.status_code} {resp.text}"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            logger.error("Unexpected GitHub response for %s: %s", path, exc)
            raise SyncError(f"Failed to update {path}: unexpected response") from exc
        if not isinstance(data, dict):
            raise SyncError(f"Failed to update {path}: unexpected response")

        logger.info("GitHub file written: %s on %s", path, branch)
        return data
