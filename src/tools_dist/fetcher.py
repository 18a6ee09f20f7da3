"""Downloading and unpacking tools archives."""

import asyncio
import os
import shutil
import tarfile
import tempfile
import zlib
from contextlib import nullcontext
from pathlib import Path, PurePosixPath
from typing import BinaryIO, List, Optional

import aiohttp
import appdirs

from tools_dist.constants import APP_NAME, DOWNLOAD_CHUNK_SIZE, TOOLS_DIR
from tools_dist.errors import ArchiveError, TransportError, log_error
from tools_dist.logging import get_logger
from tools_dist.types import Tools

logger = get_logger(__name__)

_OPEN_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_NOFOLLOW", 0)


def tools_dir(tools: Tools, data_dir: Optional[Path] = None) -> Path:
    """Return the directory the given tools are unpacked into on a node."""
    data_dir = Path(data_dir or appdirs.user_data_dir(APP_NAME))
    return data_dir / TOOLS_DIR / str(tools)


def member_path(dest_dir: Path, name: str) -> Path:
    """Return where the archive entry called name goes under dest_dir.

    Raises ArchiveError for names that could escape dest_dir.
    """
    if not name or "\\" in name or name.startswith("/") or (len(name) > 1 and name[1] == ":"):
        raise ArchiveError(f"bad name {name!r} in tools archive", path=name)

    if any(part in ("", ".", "..") for part in name.split("/")):
        raise ArchiveError(f"bad name {name!r} in tools archive", path=name)

    root = Path(dest_dir).resolve()
    target = root.joinpath(*PurePosixPath(name).parts)
    if not target.resolve().is_relative_to(root):
        raise ArchiveError(f"bad name {name!r} in tools archive", path=name)
    return target


def write_file(path: Path, mode: int, src: BinaryIO) -> None:
    """Write src to path, never following a symlink already at path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, _OPEN_FLAGS, mode)
    with os.fdopen(fd, "wb") as f:
        shutil.copyfileobj(src, f)
    os.chmod(path, mode)


def extract_tools(fileobj: BinaryIO, dest_dir: Path) -> List[Path]:
    """Unpack a gzipped tools tar read from fileobj into dest_dir.

    Records are processed one at a time. A bad record aborts the
    extraction; files written for earlier records are left in place.
    """
    extracted = []
    try:
        with tarfile.open(fileobj=fileobj, mode="r|gz") as tar:
            for member in tar:
                target = member_path(dest_dir, member.name)
                if not member.isreg():
                    raise ArchiveError(
                        f"unsupported entry {member.name!r} in tools archive", path=member.name
                    )
                src = tar.extractfile(member)
                try:
                    write_file(target, member.mode & 0o777, src)
                except OSError as e:
                    raise ArchiveError(
                        f"tar extract {str(target)!r} failed: {e}", path=str(target)
                    ) from e
                extracted.append(target)
    except (tarfile.TarError, zlib.error, EOFError) as e:
        raise ArchiveError(f"cannot read tools archive: {e}") from e

    logger.info(
        {
            "event": "tools_extracted",
            "dest": str(dest_dir),
            "files": [p.name for p in extracted],
        }
    )
    return extracted


async def download(
    url: str, dest: BinaryIO, session: Optional[aiohttp.ClientSession] = None
) -> int:
    """Stream the body at url into dest and return the number of bytes written."""
    try:
        async with (aiohttp.ClientSession() if session is None else nullcontext(session)) as s:
            async with s.get(url) as response:
                if response.status != 200:
                    error = TransportError(
                        f"cannot get tools from {url}: status {response.status}",
                        url=url,
                        status=response.status,
                    )
                    log_error(error, {"op": "download", "reason": response.reason}, logger)
                    raise error

                downloaded = 0
                async for chunk in response.content.iter_chunked(DOWNLOAD_CHUNK_SIZE):
                    dest.write(chunk)
                    downloaded += len(chunk)

    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        error = TransportError(f"cannot get tools from {url}: {str(e) or 'timed out'}", url=url)
        log_error(error, {"op": "download"}, logger)
        raise error from e

    logger.debug({"event": "download_complete", "url": url, "size": downloaded})
    return downloaded


async def get_tools(
    url: str, dest_dir: Path, session: Optional[aiohttp.ClientSession] = None
) -> List[Path]:
    """Fetch the tools archive at url and unpack it into dest_dir.

    The compressed body is buffered on disk in an anonymous temporary
    file, not in memory, and then unpacked one record at a time.
    """
    logger.info({"event": "fetching_tools", "url": url, "dest": str(dest_dir)})
    with tempfile.TemporaryFile(prefix=f"{APP_NAME}-") as f:
        await download(url, f, session)
        f.seek(0)
        return extract_tools(f, Path(dest_dir))
