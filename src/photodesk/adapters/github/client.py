"""``RemoteFileStore`` backed by the GitHub repository contents API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from photodesk.adapters.http_resilience import ResilientClient
from photodesk.domain.errors import ConflictError, NotFoundError, TransportError
from photodesk.domain.ports import RemoteFile

from .schema import ContentPayload, ErrorResponse, WriteResponse, encode_content

if TYPE_CHECKING:
    from collections.abc import Callable

    from photodesk.config.github import GitHubConfig
    from photodesk.config.http_resilience import ResilienceConfig
    from photodesk.domain.model import RemotePath, VersionTag

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = ErrorResponse.model_validate(response.json())
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    return payload.message or response.reason_phrase or f"HTTP {response.status_code}"


def _is_version_conflict(response: httpx.Response, message: str) -> bool:
    if response.status_code == httpx.codes.CONFLICT:
        return True
    # A missing or malformed sha is reported as 422 rather than 409.
    return response.status_code == httpx.codes.UNPROCESSABLE_ENTITY and "sha" in message.lower()


def _raise_for_status(response: httpx.Response, path: RemotePath) -> None:
    if response.is_success:
        return
    message = f"GitHub: {_error_message(response)}"
    if response.status_code == httpx.codes.NOT_FOUND:
        raise NotFoundError(message, key=path)
    if _is_version_conflict(response, message):
        raise ConflictError(message)
    raise TransportError(message, status_code=response.status_code)


@dataclass(slots=True)
class GitHubContentsStore:
    """Reads and writes files on one branch of a GitHub repository.

    Every call opens a short-lived :class:`ResilientClient`; the store itself
    keeps no connection state between awaits.
    """

    config: GitHubConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def get_file(self, path: RemotePath) -> RemoteFile:
        payload = await self._describe(path)
        try:
            content = payload.decoded()
        except ValueError as exc:
            raise TransportError(f"GitHub: {exc}") from exc
        return RemoteFile(path=path, content=content, version_tag=payload.sha)

    async def put_file(
        self,
        path: RemotePath,
        content: bytes,
        *,
        version_tag: VersionTag | None = None,
        message: str | None = None,
    ) -> VersionTag:
        body: dict[str, str] = {
            "message": message or f"Update {path}",
            "content": encode_content(content),
            "branch": self.config.branch,
        }
        if version_tag:
            body["sha"] = version_tag
        response = await self._request("PUT", path, json=body)
        written = self._parse(WriteResponse, response, path)
        log.debug(f"Wrote {path} at {written.content.sha}")
        return written.content.sha

    async def delete_file(self, path: RemotePath, *, message: str | None = None) -> None:
        current = await self._describe(path)
        body = {
            "message": message or f"Remove {path}",
            "sha": current.sha,
            "branch": self.config.branch,
        }
        await self._request("DELETE", path, json=body)
        log.debug(f"Deleted {path}")

    async def _describe(self, path: RemotePath) -> ContentPayload:
        response = await self._request("GET", path, params={"ref": self.config.branch})
        payload = self._parse(ContentPayload, response, path)
        if payload.type != "file":
            raise TransportError(f"GitHub: {path} is a {payload.type}, not a file")
        return payload

    def _url(self, path: RemotePath) -> str:
        return f"{self.config.contents_prefix}/{quote(path.lstrip('/'))}"

    async def _request(
        self,
        method: str,
        path: RemotePath,
        *,
        params: dict[str, str] | None = None,
        json: object = None,
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.config.token}"}
        try:
            async with self.client_factory(self.config.resilience) as client:
                response = await client.request(
                    method,
                    self._url(path),
                    params=params,
                    json=json,
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            log.warning(f"{method} {path} failed: {exc}")
            raise TransportError(f"GitHub: {exc}") from exc
        _raise_for_status(response, path)
        return response

    @staticmethod
    def _parse[M: (ContentPayload, WriteResponse)](
        model: type[M],
        response: httpx.Response,
        path: RemotePath,
    ) -> M:
        try:
            return model.model_validate(response.json())
        except ValueError as exc:
            raise TransportError(f"GitHub: unexpected response for {path}") from exc
