import io
import os
from collections import Counter
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from tools_dist.errors import NotFoundError


class MemoryStorage:
    """In-memory storage tier that counts the calls made to it."""

    def __init__(self, names: Iterable[str] = (), base_url: str = "http://storage.invalid/"):
        self.files: Dict[str, bytes] = {name: b"" for name in names}
        self.base_url = base_url
        self.calls: Counter = Counter()
        self.bad_urls: set = set()

    async def list(self, prefix: str) -> List[str]:
        self.calls["list"] += 1
        return sorted(name for name in self.files if name.startswith(prefix))

    async def get(self, name: str) -> BinaryIO:
        self.calls["get"] += 1
        if name not in self.files:
            raise NotFoundError(f"file {name!r} not found")
        return io.BytesIO(self.files[name])

    async def url(self, name: str) -> str:
        self.calls["url"] += 1
        if name in self.bad_urls:
            raise RuntimeError(f"no URL for {name!r}")
        if name not in self.files:
            raise NotFoundError(f"file {name!r} not found")
        return self.base_url + name

    async def put(self, name: str, data: BinaryIO, size: int) -> None:
        self.calls["put"] += 1
        content = data.read()
        assert len(content) == size
        self.files[name] = content


class BrokenStorage(MemoryStorage):
    """Storage whose listing always fails."""

    def __init__(self, error: Optional[Exception] = None):
        super().__init__()
        self.error = error or OSError("storage unavailable")

    async def list(self, prefix: str) -> List[str]:
        self.calls["list"] += 1
        raise self.error


class FakeBuilder:
    """Build collaborator writing fixed executables, or failing."""

    def __init__(self, files: Optional[Dict[str, bytes]] = None, error: Optional[Exception] = None):
        self.files = files if files is not None else {"jujud": b"#!/bin/sh\necho jujud\n"}
        self.error = error
        self.out_dirs: List[Path] = []

    async def __call__(self, out_dir: Path) -> None:
        self.out_dirs.append(out_dir)
        if self.error is not None:
            raise self.error
        for name, content in self.files.items():
            path = out_dir / name
            path.write_bytes(content)
            path.chmod(0o755)


def write_executable(path: Path, content: bytes, mode: int = 0o755) -> Path:
    path.write_bytes(content)
    os.chmod(path, mode)
    return path


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def executables_dir(tmp_path):
    """Directory holding two executables."""
    src = tmp_path / "src"
    src.mkdir()
    write_executable(src / "a", b"perms=0755")
    write_executable(src / "b", b"perms=0755")
    return src


@pytest_asyncio.fixture
async def served_storage():
    """MemoryStorage whose URLs are served over HTTP."""
    storage = MemoryStorage()

    async def handler(request: web.Request) -> web.Response:
        name = request.match_info["name"]
        if name not in storage.files:
            raise web.HTTPNotFound()
        return web.Response(body=storage.files[name])

    app = web.Application()
    app.router.add_get("/{name:.+}", handler)
    server = TestServer(app)
    await server.start_server()
    storage.base_url = str(server.make_url("/"))
    try:
        yield storage
    finally:
        await server.close()
