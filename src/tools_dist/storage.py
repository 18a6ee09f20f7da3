"""Storage interfaces the tools are read from and written to."""

from typing import BinaryIO, List, Protocol, runtime_checkable

from tools_dist.errors import NotFoundError


@runtime_checkable
class StorageReader(Protocol):
    """Read access to a storage tier."""

    async def list(self, prefix: str) -> List[str]:
        """Return the names of all entries starting with prefix."""
        ...

    async def get(self, name: str) -> BinaryIO:
        """Open the named entry for reading."""
        ...

    async def url(self, name: str) -> str:
        """Return a URL the named entry can be fetched from."""
        ...


@runtime_checkable
class StorageWriter(Protocol):
    """Write access to a storage tier.

    A put must become visible atomically: readers never observe a
    partially written entry.
    """

    async def put(self, name: str, data: BinaryIO, size: int) -> None:
        ...


class EmptyStorage:
    """A StorageReader that contains nothing."""

    async def list(self, prefix: str) -> List[str]:
        return []

    async def get(self, name: str) -> BinaryIO:
        raise NotFoundError(
            f"file {name!r} not found in empty storage", details={"name": name}
        )

    async def url(self, name: str) -> str:
        raise NotFoundError(
            f"file {name!r} not found in empty storage", details={"name": name}
        )


EMPTY_STORAGE = EmptyStorage()
