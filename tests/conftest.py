"""Shared fixtures: in-memory tarballs and a fake GitHub."""

import io
import json
import tarfile
from collections.abc import Callable

import httpx
import pytest

from sprout.templates.github import GitHubClient

Handler = Callable[[httpx.Request], httpx.Response]


def build_tarball(files: dict[str, bytes], top: str = "repo-main") -> bytes:
    """Build a gzip tarball shaped like a GitHub archive.

    Keys of ``files`` are paths below ``top``; a trailing slash marks a directory.
    """
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        root = tarfile.TarInfo(f"{top}/")
        root.type = tarfile.DIRTYPE
        root.mode = 0o755
        archive.addfile(root)
        for name, content in files.items():
            if name.endswith("/"):
                info = tarfile.TarInfo(f"{top}/{name}")
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                archive.addfile(info)
                continue
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(content)
            info.mode = 0o644
            archive.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


@pytest.fixture
def tarball() -> Callable[..., bytes]:
    return build_tarball


@pytest.fixture
def package_json() -> bytes:
    return json.dumps({"name": "template", "version": "0.0.0"}).encode()


class FakeGitHub:
    """Routes requests to canned responses and records what was asked."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, url: str, handler: Handler) -> None:
        self.routes[(method, url)] = handler

    def json(self, method: str, url: str, payload: object, status: int = 200) -> None:
        self.on(method, url, lambda _req: httpx.Response(status, json=payload))

    def status(self, method: str, url: str, status: int) -> None:
        self.on(method, url, lambda _req: httpx.Response(status))

    def archive(self, url: str, body: bytes) -> None:
        self.status("HEAD", url, 200)
        self.on("GET", url, lambda _req: httpx.Response(200, content=body))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        handler = self.routes.get((request.method, url))
        if handler is None:
            return httpx.Response(404)
        return handler(request)

    def called(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def client(github: FakeGitHub) -> GitHubClient:
    http = httpx.Client(transport=httpx.MockTransport(github))
    return GitHubClient(http)
