"""Tests for the GitHub Contents API file store adapter.

All httpx calls are mocked.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from planner.adapters.github_contents import GitHubContentsAdapter
from planner.data.models import SyncSettings
from planner.ports.file_store_port import FileFound, FileNotFound, SyncError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_PATCH_CLIENT = "planner.adapters.github_contents.httpx.AsyncClient"
_URL = "https://api.github.test/repos/dana/baby/contents/public/data/pregnancy-data.json"


def _response(status_code=200, json_data=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.is_success = 200 <= status_code < 300
    resp.json.return_value = json_data
    resp.text = text
    return resp


def _mock_client(**methods):
    client = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    for name, mock in methods.items():
        setattr(client, name, mock)
    return client


def _adapter():
    return GitHubContentsAdapter(owner="dana", repo="baby", token="ghp_test")


# ---------------------------------------------------------------------------
# get_revision
# ---------------------------------------------------------------------------


class TestGetRevision:
    @pytest.mark.asyncio
    async def test_existing_file_returns_sha(self):
        client = _mock_client(get=AsyncMock(return_value=_response(json_data={"sha": "abc123"})))

        with patch(_PATCH_CLIENT, return_value=client):
            result = await _adapter().get_revision("public/data/pregnancy-data.json", "main")

        assert result == FileFound(sha="abc123")

    @pytest.mark.asyncio
    async def test_missing_file_returns_not_found(self):
        client = _mock_client(get=AsyncMock(return_value=_response(status_code=404)))

        with patch(_PATCH_CLIENT, return_value=client):
            result = await _adapter().get_revision("public/data/pregnancy-data.json", "main")

        assert isinstance(result, FileNotFound)

    @pytest.mark.asyncio
    async def test_other_error_raises(self):
        client = _mock_client(get=AsyncMock(return_value=_response(status_code=401)))

        with patch(_PATCH_CLIENT, return_value=client):
            with pytest.raises(SyncError, match="Failed to read public/data/pregnancy-data.json: 401"):
                await _adapter().get_revision("public/data/pregnancy-data.json", "main")

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self):
        client = _mock_client(get=AsyncMock(side_effect=httpx.ConnectError("offline")))

        with patch(_PATCH_CLIENT, return_value=client):
            with pytest.raises(SyncError):
                await _adapter().get_revision("public/data/pregnancy-data.json", "main")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [[{"name": "a.json"}], {"name": "no sha"}, {"sha": None}],
    )
    async def test_malformed_success_body_raises(self, body):
        """A directory listing or shapeless 200 body becomes SyncError."""
        client = _mock_client(get=AsyncMock(return_value=_response(json_data=body)))

        with patch(_PATCH_CLIENT, return_value=client):
            with pytest.raises(SyncError, match="unexpected response"):
                await _adapter().get_revision("public/data", "main")

    @pytest.mark.asyncio
    async def test_non_json_success_body_raises(self):
        resp = _response()
        resp.json.side_effect = ValueError("Expecting value")
        client = _mock_client(get=AsyncMock(return_value=resp))

        with patch(_PATCH_CLIENT, return_value=client):
            with pytest.raises(SyncError, match="unexpected response"):
                await _adapter().get_revision("public/data/pregnancy-data.json", "main")

    @pytest.mark.asyncio
    async def test_sends_branch_and_auth_headers(self):
        client = _mock_client(get=AsyncMock(return_value=_response(json_data={"sha": "s"})))

        with patch(_PATCH_CLIENT, return_value=client):
            await _adapter().get_revision("public/data/pregnancy-data.json", "gh-pages")

        call = client.get.await_args
        assert call.args[0] == _URL
        assert call.kwargs["params"] == {"ref": "gh-pages"}
        assert call.kwargs["headers"]["Authorization"] == "token ghp_test"
        assert call.kwargs["headers"]["Accept"] == "application/vnd.github+json"


# ---------------------------------------------------------------------------
# put_file
# ---------------------------------------------------------------------------


class TestPutFile:
    @pytest.mark.asyncio
    async def test_update_includes_sha(self):
        client = _mock_client(put=AsyncMock(return_value=_response(json_data={"content": {"sha": "new"}})))

        with patch(_PATCH_CLIENT, return_value=client):
            result = await _adapter().put_file(
                "public/data/pregnancy-data.json", "main", "e30=", "abc123", "Update"
            )

        assert result == {"content": {"sha": "new"}}
        call = client.put.await_args
        assert call.args[0] == _URL
        assert call.kwargs["json"] == {
            "message": "Update",
            "content": "e30=",
            "branch": "main",
            "sha": "abc123",
        }

    @pytest.mark.asyncio
    async def test_create_omits_sha(self):
        client = _mock_client(put=AsyncMock(return_value=_response(status_code=201, json_data={})))

        with patch(_PATCH_CLIENT, return_value=client):
            await _adapter().put_file("public/data/pregnancy-data.json", "main", "e30=", None, "Create")

        assert "sha" not in client.put.await_args.kwargs["json"]

    @pytest.mark.asyncio
    async def test_stale_sha_conflict_raises(self):
        client = _mock_client(
            put=AsyncMock(return_value=_response(status_code=409, text="sha does not match"))
        )

        with patch(_PATCH_CLIENT, return_value=client):
            with pytest.raises(SyncError, match="409 sha does not match"):
                await _adapter().put_file(
                    "public/data/pregnancy-data.json", "main", "e30=", "stale", "Update"
                )

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self):
        client = _mock_client(put=AsyncMock(side_effect=httpx.ReadError("reset")))

        with patch(_PATCH_CLIENT, return_value=client):
            with pytest.raises(SyncError, match="Failed to update"):
                await _adapter().put_file("p.json", "main", "e30=", None, "Update")


    @pytest.mark.asyncio
    async def test_non_object_success_body_raises(self):
        client = _mock_client(put=AsyncMock(return_value=_response(json_data=["x"])))

        with patch(_PATCH_CLIENT, return_value=client):
            with pytest.raises(SyncError, match="unexpected response"):
                await _adapter().put_file("p.json", "main", "e30=", None, "Update")

    @pytest.mark.asyncio
    async def test_non_json_success_body_raises(self):
        resp = _response()
        resp.json.side_effect = ValueError("Expecting value")
        client = _mock_client(put=AsyncMock(return_value=resp))

        with patch(_PATCH_CLIENT, return_value=client):
            with pytest.raises(SyncError, match="unexpected response"):
                await _adapter().put_file("p.json", "main", "e30=", None, "Update")


class TestFromSettings:
    def test_builds_from_sync_settings(self):
        adapter = GitHubContentsAdapter.from_settings(
            SyncSettings(owner="dana", repo="baby", token="ghp_x")
        )
        assert adapter._owner == "dana"
        assert adapter._repo == "baby"
        assert adapter._token == "ghp_x"
        assert adapter._api_url == "https://api.github.test"
