from __future__ import annotations

import asyncio
import base64
import json
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from photodesk.adapters.github import GitHubContentsStore
from photodesk.adapters.http_resilience import ResilienceConfig, ResilientClient
from photodesk.config import GitHubConfig
from photodesk.domain.errors import ConflictError, NotFoundError, TransportError
from photodesk.domain.ports import RemoteFileStore

CONTENTS = "https://api.github.com/repos/octo/gallery/contents"


def _store(handler: Callable[[httpx.Request], httpx.Response]) -> GitHubContentsStore:
    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(handler))

    config = GitHubConfig(owner="octo", repo="gallery", token="secret-token", branch="live")
    return GitHubContentsStore(config=config, client_factory=factory)


def _file_payload(path: str, content: bytes, sha: str) -> dict[str, object]:
    encoded = base64.b64encode(content).decode("ascii")
    # GitHub wraps base64 content at 60 characters
    wrapped = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
    return {"type": "file", "path": path, "sha": sha, "encoding": "base64", "content": wrapped}


def test_store_satisfies_port() -> None:
    assert isinstance(_store(lambda _request: httpx.Response(200)), RemoteFileStore)


def test_get_file_decodes_content_and_sends_auth() -> None:
    seen: list[httpx.Request] = []
    content = json.dumps({"photos": [{"id": "x" * 80}]}).encode("utf-8")

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_file_payload("photos.json", content, "abc123"))

    remote_file = asyncio.run(_store(handler).get_file("photos.json"))

    assert remote_file.content == content
    assert remote_file.version_tag == "abc123"
    (request,) = seen
    assert str(request.url) == f"{CONTENTS}/photos.json?ref=live"
    assert request.headers["Authorization"] == "Bearer secret-token"
    assert request.headers["Accept"] == "application/vnd.github+json"


def test_get_file_quotes_paths() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode("ascii"))
        return httpx.Response(200, json=_file_payload("p", b"", "s"))

    asyncio.run(_store(handler).get_file("photos/uploads/IMG 1.jpg"))

    assert seen[0].startswith("/repos/octo/gallery/contents/photos/uploads/IMG%201.jpg")


def test_get_file_not_found() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    with pytest.raises(NotFoundError, match="GitHub: Not Found") as excinfo:
        asyncio.run(_store(handler).get_file("photos.json"))
    assert excinfo.value.key == "photos.json"


def test_get_file_rejects_directories_and_bad_payloads() -> None:
    def directory(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"type": "dir", "path": "photos", "sha": "d"})

    def garbage(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with pytest.raises(TransportError, match="not a file"):
        asyncio.run(_store(directory).get_file("photos"))
    with pytest.raises(TransportError, match="unexpected response"):
        asyncio.run(_store(garbage).get_file("photos.json"))


def test_put_file_sends_sha_and_returns_new_tag() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PUT"
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"content": {"path": "photos.json", "sha": "new-sha"}})

    tag = asyncio.run(
        _store(handler).put_file("photos.json", b"{}\n", version_tag="old-sha", message="msg")
    )

    assert tag == "new-sha"
    assert bodies == [
        {
            "message": "msg",
            "content": base64.b64encode(b"{}\n").decode("ascii"),
            "branch": "live",
            "sha": "old-sha",
        }
    ]


def test_put_file_without_tag_omits_sha() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json={"content": {"path": "a.jpg", "sha": "s1"}})

    asyncio.run(_store(handler).put_file("a.jpg", b"data"))

    assert "sha" not in bodies[0]
    assert bodies[0]["message"] == "Update a.jpg"


@pytest.mark.parametrize(
    ("status", "message"),
    [
        (409, "photos.json does not match abc"),
        (422, "Invalid request.\n\n\"sha\" wasn't supplied."),
    ],
)
def test_put_file_version_conflicts(status: int, message: str) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"message": message})

    with pytest.raises(ConflictError):
        asyncio.run(_store(handler).put_file("photos.json", b"{}", version_tag="abc"))


def test_put_file_is_not_retried_on_server_error() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.method)
        return httpx.Response(503, json={"message": "Service Unavailable"})

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(_store(handler).put_file("photos.json", b"{}", version_tag="abc"))
    assert excinfo.value.status_code == 503
    assert calls == ["PUT"]


def test_auth_failure_is_transport_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Bad credentials"})

    with pytest.raises(TransportError, match="Bad credentials") as excinfo:
        asyncio.run(_store(handler).get_file("photos.json"))
    assert excinfo.value.status_code == 401


def test_network_errors_are_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.UnsupportedProtocol("no route", request=request)

    with pytest.raises(TransportError, match="no route"):
        asyncio.run(_store(handler).put_file("photos.json", b"{}"))


def test_delete_file_uses_current_sha() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "GET":
            return httpx.Response(200, json=_file_payload("a.jpg", b"img", "blob-sha"))
        return httpx.Response(200, json={"commit": {"sha": "c"}, "content": None})

    asyncio.run(_store(handler).delete_file("a.jpg", message="Remove a upload"))

    assert [request.method for request in requests] == ["GET", "DELETE"]
    assert json.loads(requests[1].content) == {
        "message": "Remove a upload",
        "sha": "blob-sha",
        "branch": "live",
    }


def test_delete_missing_file_raises_not_found() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    with pytest.raises(NotFoundError):
        asyncio.run(_store(handler).delete_file("gone.jpg"))


def test_get_file_too_large_for_inline_content_fails_loudly() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        payload = {"type": "file", "path": "photos.json", "sha": "big", "encoding": "none"}
        return httpx.Response(200, json={**payload, "content": ""})

    with pytest.raises(TransportError, match="too large"):
        asyncio.run(_store(handler).get_file("photos.json"))


def test_delete_large_file_only_needs_its_sha() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "GET":
            return httpx.Response(
                200,
                json={
                    "type": "file",
                    "path": "photos/uploads/big.jpg",
                    "sha": "big-sha",
                    "encoding": "none",
                    "content": "",
                },
            )
        return httpx.Response(200, json={"commit": {"sha": "c"}, "content": None})

    asyncio.run(_store(handler).delete_file("photos/uploads/big.jpg"))

    assert json.loads(requests[1].content)["sha"] == "big-sha"
