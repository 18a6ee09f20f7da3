"""Finding the best tools for a node across storage tiers."""

from typing import AsyncIterator, Callable, Iterable, List, Optional, Tuple

from tools_dist.errors import MalformedEntryError, NotFoundError
from tools_dist.logging import get_logger
from tools_dist.naming import parse_tools_path, tools_list_prefix
from tools_dist.storage import StorageReader
from tools_dist.types import Tools, ToolsSpec
from tools_dist.version import Version

logger = get_logger(__name__)

SkipSink = Callable[[str, MalformedEntryError], None]


def log_skipped(name: str, error: MalformedEntryError) -> None:
    """Default sink for storage entries that are not usable tools."""
    logger.warning(
        {"event": "tools_entry_skipped", "name": name, "reason": error.details["reason"]}
    )


async def iter_tools(
    storage: StorageReader, major: int, on_skip: Optional[SkipSink] = None
) -> AsyncIterator[Tools]:
    """Yield the tools in storage with the given major version.

    Entries that are not tools names, that sit in the wrong major version
    bucket or whose URL cannot be resolved are passed to on_skip and
    skipped; shared storage may hold unrelated content.
    """
    on_skip = on_skip or log_skipped
    prefix = tools_list_prefix(major)
    names = await storage.list(prefix)

    for name in names:
        tools = parse_tools_path(name)
        if tools is None:
            on_skip(name, MalformedEntryError(name, "unexpected tools file"))
            continue
        if tools.version.major != major:
            on_skip(name, MalformedEntryError(name, f"found in wrong directory {prefix!r}"))
            continue
        try:
            url = await storage.url(name)
        except Exception as e:
            on_skip(name, MalformedEntryError(name, f"cannot get URL: {e}"))
            continue
        yield Tools(version=tools.version, series=tools.series, arch=tools.arch, url=url)


async def list_tools(storage: StorageReader, major: int) -> List[Tools]:
    """Return all the tools found in storage with the given major version."""
    tools_list = [tools async for tools in iter_tools(storage, major)]
    logger.debug({"event": "tools_listed", "major": major, "count": len(tools_list)})
    return tools_list


def best_tools(
    tools_list: Iterable[Tools], version: Version, series: str, arch: str
) -> Tools:
    """Return the most recent tools compatible with version, series and arch.

    Raises NotFoundError if none are.
    """
    best = None
    for tools in tools_list:
        if (
            tools.version.major != version.major
            or tools.series != series
            or tools.arch != arch
        ):
            continue
        if best is None or best.version < tools.version:
            best = tools

    if best is None:
        raise NotFoundError(
            f"no compatible tools found for {version.major}.x-{series}-{arch}",
            details={"major": version.major, "series": series, "arch": arch},
        )
    return best


async def find_tools_path(storage: StorageReader, spec: ToolsSpec) -> str:
    """Return the storage name of the best tools matching spec.

    Works on raw names so that only the winner's URL ever needs resolving.
    """
    names = await storage.list(tools_list_prefix(spec.version.major))
    logger.debug({"event": "find_tools", "spec": str(spec), "names": names})

    best_version = None
    best_name = None
    for name in names:
        tools = parse_tools_path(name)
        if tools is None:
            log_skipped(name, MalformedEntryError(name, "unexpected tools file"))
            continue
        if (
            tools.series != spec.series
            or tools.arch != spec.arch
            or tools.version.major != spec.version.major
        ):
            continue
        if best_version is None or best_version < tools.version:
            best_version = tools.version
            best_name = name

    if best_name is None:
        raise NotFoundError(
            f"no compatible tools found for {spec}",
            details={"spec": str(spec), "listed": len(names)},
        )
    return best_name


async def find_tools(
    private: StorageReader, public: StorageReader, spec: ToolsSpec
) -> Tuple[StorageReader, str]:
    """Return the storage holding the best tools for spec and their name there.

    The public storage is only searched when the private one has no
    matching tools; any other failure of the private storage is raised.
    """
    try:
        return private, await find_tools_path(private, spec)
    except NotFoundError:
        logger.info({"event": "tools_fallback_to_public", "spec": str(spec)})

    return public, await find_tools_path(public, spec)


async def find_best_tools(
    private: StorageReader, public: StorageReader, spec: ToolsSpec
) -> Tools:
    """Return the best tools for spec with the URL of the storage they came from."""
    storage, path = await find_tools(private, public, spec)
    tools = parse_tools_path(path)
    assert tools is not None, path
    url = await storage.url(path)
    logger.info({"event": "tools_found", "path": path, "url": url})
    return Tools(version=tools.version, series=tools.series, arch=tools.arch, url=url)
