"""Core type definitions"""

from dataclasses import dataclass

from tools_dist.version import Version


@dataclass(frozen=True)
class Tools:
    """A published tools build and where to fetch it from."""

    version: Version
    series: str
    arch: str
    url: str = ""

    def __str__(self) -> str:
        return f"{self.version}-{self.series}-{self.arch}"


@dataclass(frozen=True)
class ToolsSpec:
    """Tools being looked for; only the major version is matched."""

    version: Version
    series: str
    arch: str

    def __str__(self) -> str:
        return f"{self.version}-{self.series}-{self.arch}"


@dataclass(frozen=True)
class HostContext:
    """Version, series and architecture of the running node."""

    version: Version
    series: str
    arch: str
