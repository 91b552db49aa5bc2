"""GitHub repository contents API backend.

The bank lives as a JSON file in a repository; the blob ``sha`` GitHub
reports for it is the version token. Reads need no token for public repos,
writes always do.

    GET /repos/{owner}/{repo}/contents/{path}   -> {"content": base64, "sha": ...}
    PUT /repos/{owner}/{repo}/contents/{path}   <- {"message", "content", "sha"}
"""

from __future__ import annotations

import base64
import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from membank.errors import InvalidDocument, StorageError, VersionConflict
from membank.storage.base import Snapshot

if TYPE_CHECKING:
    from membank.config import GitHubConfig

logger = logging.getLogger(__name__)

_ACCEPT = "application/vnd.github.v3+json"


class GitHubContentsStorage:
    """Fetch and replace a JSON document through the GitHub contents API."""

    def __init__(
        self,
        config: GitHubConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        headers = {"Accept": _ACCEPT}
        if config.token:
            headers["Authorization"] = f"token {config.token}"
        self._client = httpx.AsyncClient(
            base_url=config.api_url,
            headers=headers,
            timeout=httpx.Timeout(config.timeout),
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "github"

    def _url(self, path: str) -> str:
        return f"/repos/{self._config.owner}/{self._config.repo}/contents/{path.lstrip('/')}"

    async def fetch(self, path: str) -> Snapshot:
        params = {"ref": self._config.branch} if self._config.branch else None
        try:
            response = await self._client.get(self._url(path), params=params)
        except httpx.HTTPError as e:
            raise StorageError(f"GitHub request failed: {e}") from e

        if response.status_code == 404:
            logger.info("No memory bank at %s yet, starting empty", path)
            return Snapshot()
        if not response.is_success:
            raise StorageError(f"GitHub API error: {response.status_code}", response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise StorageError(f"GitHub returned a non-JSON body for {path}") from e
        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            raise StorageError(f"{path} is not a file")
        if data.get("encoding", "base64") != "base64":
            raise StorageError(f"{path} is too large for the contents API")

        document = _decode_document(data["content"], path)
        logger.debug("Fetched %s (sha=%s)", path, data.get("sha"))
        return Snapshot(document=document, version=data.get("sha"))

    async def write(
        self,
        path: str,
        document: dict[str, Any],
        version: str | None,
        message: str,
    ) -> str:
        if not self._config.token:
            raise StorageError("GITHUB_TOKEN is required to write the memory bank")

        text = json.dumps(document, indent=2, ensure_ascii=False)
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
        }
        if version:
            body["sha"] = version
        if self._config.branch:
            body["branch"] = self._config.branch

        try:
            response = await self._client.put(self._url(path), json=body)
        except httpx.HTTPError as e:
            raise StorageError(f"GitHub request failed: {e}") from e

        if _is_conflict(response):
            raise VersionConflict(
                f"{path} changed since it was read (sha={version})", response.status_code
            )
        if not response.is_success:
            raise StorageError(f"GitHub API error: {response.status_code}", response.status_code)

        new_sha = _written_sha(response)
        logger.info("Wrote %s: %s (sha=%s)", path, message, new_sha)
        return new_sha

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubContentsStorage:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def _decode_document(content: str, path: str) -> dict[str, Any]:
    try:
        text = base64.b64decode(content).decode("utf-8")
        document = json.loads(text) if text.strip() else {}
    except (ValueError, TypeError) as e:
        raise InvalidDocument(f"{path} is not valid JSON: {e}") from e
    if not isinstance(document, dict):
        raise InvalidDocument(f"{path} must contain a JSON object")
    return document


def _written_sha(response: httpx.Response) -> str:
    # The write already landed; an unreadable body only costs us the new sha.
    try:
        content = response.json().get("content") or {}
        return content.get("sha", "")
    except (ValueError, AttributeError):
        logger.warning("Could not read the new sha from the GitHub response")
        return ""


def _is_conflict(response: httpx.Response) -> bool:
    # GitHub answers 409 for a stale sha, 422 when the sha is missing for an
    # existing file.
    if response.status_code == 409:
        return True
    if response.status_code == 422:
        try:
            detail = response.json().get("message", "")
        except (ValueError, AttributeError):
            return False
        return "sha" in detail
    return False
