"""Mapping between tools descriptors and their storage names."""

import re
from typing import Optional

from tools_dist.constants import TOOLS_PREFIX, TOOLS_SUFFIX
from tools_dist.types import Tools
from tools_dist.version import VERSION_PATTERN, Version

TOOLS_FILE_RE = re.compile(
    rf"{re.escape(TOOLS_PREFIX)}({VERSION_PATTERN})-([^-/]+)-([^-/]+){re.escape(TOOLS_SUFFIX)}"
)


def _check_component(kind: str, value: str) -> None:
    if not value or "-" in value or "/" in value:
        raise ValueError(f"invalid tools {kind} {value!r}")


def tools_path(version: Version, series: str, arch: str) -> str:
    """Return the storage name used to put and get the given tools."""
    if min(version) < 0:
        raise ValueError(f"invalid tools version {version!r}")
    _check_component("series", series)
    _check_component("arch", arch)
    return f"{TOOLS_PREFIX}{version}-{series}-{arch}{TOOLS_SUFFIX}"


def tools_list_prefix(major: int) -> str:
    """Return the storage prefix holding every tools build of a major version."""
    return f"{TOOLS_PREFIX}{major}."


def parse_tools_path(name: str) -> Optional[Tools]:
    """Decode a storage name, or return None if it does not name tools."""
    m = TOOLS_FILE_RE.fullmatch(name)
    if m is None:
        return None
    version_text, series, arch = m.groups()
    try:
        version = Version.parse(version_text)
    except ValueError:
        return None
    return Tools(version=version, series=series, arch=arch)
