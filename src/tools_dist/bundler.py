"""Bundling and publishing tools archives."""

import gzip
import os
import stat
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional

from tools_dist.builder import Builder, GoInstallBuilder
from tools_dist.constants import (
    APP_NAME,
    ARCHIVE_FILE_MODE,
    ARCHIVE_GROUP,
    ARCHIVE_OWNER,
)
from tools_dist.errors import ArchiveError
from tools_dist.logging import get_logger
from tools_dist.naming import tools_path
from tools_dist.platforms import current_context
from tools_dist.storage import StorageWriter
from tools_dist.types import HostContext

logger = get_logger(__name__)


def is_executable(st: os.stat_result) -> bool:
    """Whether st is a regular file executable by (at least) its owner."""
    return stat.S_ISREG(st.st_mode) and bool(st.st_mode & stat.S_IXUSR)


@contextmanager
def closing_first_error(closeable) -> Iterator:
    """Close closeable on exit without letting its close error mask an earlier one."""
    try:
        yield closeable
    except BaseException:
        try:
            closeable.close()
        except Exception as e:
            logger.warning({"event": "close_failed", "error": str(e)})
        raise
    closeable.close()


def tar_header(path: Path, st: os.stat_result) -> tarfile.TarInfo:
    """Return the tar record header for an executable."""
    info = tarfile.TarInfo(name=path.name)
    info.type = tarfile.REGTYPE
    info.size = st.st_size
    info.mtime = int(st.st_mtime)
    # ignore local umask
    info.mode = ARCHIVE_FILE_MODE
    info.uid = info.gid = 0
    info.uname = ARCHIVE_OWNER
    info.gname = ARCHIVE_GROUP
    return info


def archive(out: BinaryIO, source_dir: Path) -> None:
    """Write the executables in source_dir to out as a gzipped tar.

    Raises ArchiveError, before anything is written, if an entry of
    source_dir is not a regular executable file.
    """
    entries = []
    for path in sorted(Path(source_dir).iterdir()):
        st = path.lstat()
        if not is_executable(st):
            raise ArchiveError(f"archive: found non-executable file {str(path)!r}", path=str(path))
        entries.append((path, st))

    with closing_first_error(
        gzip.GzipFile(filename="", mode="wb", fileobj=out, mtime=0)
    ) as gz, closing_first_error(
        tarfile.open(fileobj=gz, mode="w", format=tarfile.GNU_FORMAT)
    ) as tar:
        for path, st in entries:
            with open(path, "rb") as f:
                tar.addfile(tar_header(path, st), f)

    logger.debug({"event": "tools_archived", "source": str(source_dir), "entries": len(entries)})


async def bundle_tools(out: BinaryIO, builder: Optional[Builder] = None) -> List[str]:
    """Build the tools and write them to out as a gzipped tar.

    Returns the names of the bundled executables.
    """
    builder = builder or GoInstallBuilder()
    with tempfile.TemporaryDirectory(prefix=f"{APP_NAME}-") as tmpdir:
        build_dir = Path(tmpdir)
        await builder(build_dir)
        archive(out, build_dir)
        return sorted(p.name for p in build_dir.iterdir())


async def put_tools(
    storage: StorageWriter,
    builder: Optional[Builder] = None,
    context: Optional[HostContext] = None,
) -> str:
    """Build the current tools and upload them to storage.

    The whole archive is built before storage is contacted, so a failed
    build never leaves a partial entry behind. Returns the storage name.
    """
    context = context or current_context()
    path = tools_path(context.version, context.series, context.arch)

    with tempfile.TemporaryFile(prefix=f"{APP_NAME}-") as f:
        names = await bundle_tools(f, builder)
        size = f.tell()
        f.seek(0)
        logger.info({"event": "putting_tools", "path": path, "size": size, "executables": names})
        await storage.put(path, f, size)

    return path
