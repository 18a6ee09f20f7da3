"""Tools distribution: naming, resolution, bundling and fetching of tools."""

__version__ = "1.18.2"

from tools_dist.types import HostContext, Tools, ToolsSpec
from tools_dist.version import Version
from tools_dist.errors import (
    ArchiveError,
    BuildError,
    ErrorKind,
    MalformedEntryError,
    NotFoundError,
    ToolsError,
    TransportError,
)
from tools_dist.naming import parse_tools_path, tools_path
from tools_dist.storage import EMPTY_STORAGE, EmptyStorage, StorageReader, StorageWriter
from tools_dist.resolver import (
    best_tools,
    find_best_tools,
    find_tools,
    find_tools_path,
    iter_tools,
    list_tools,
)
from tools_dist.bundler import archive, bundle_tools, put_tools
from tools_dist.fetcher import extract_tools, get_tools, tools_dir

__all__ = [
    # Types
    "HostContext",
    "Tools",
    "ToolsSpec",
    "Version",

    # Errors
    "ArchiveError",
    "BuildError",
    "ErrorKind",
    "MalformedEntryError",
    "NotFoundError",
    "ToolsError",
    "TransportError",

    # Naming
    "parse_tools_path",
    "tools_path",

    # Storage
    "EMPTY_STORAGE",
    "EmptyStorage",
    "StorageReader",
    "StorageWriter",

    # Resolution
    "best_tools",
    "find_best_tools",
    "find_tools",
    "find_tools_path",
    "iter_tools",
    "list_tools",

    # Bundling and fetching
    "archive",
    "bundle_tools",
    "put_tools",
    "extract_tools",
    "get_tools",
    "tools_dir",
]
