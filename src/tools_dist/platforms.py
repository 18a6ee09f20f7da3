"""Host platform detection."""

import os
import platform
from typing import Optional

from tools_dist.constants import ENV_ARCH, ENV_SERIES, ENV_VERSION
from tools_dist.types import HostContext
from tools_dist.version import Version

# platform.machine() values mapped to tools architecture names
ARCH_MAPPINGS = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "i386",
    "i686": "i386",
    "armv7l": "armhf",
    "ppc64le": "ppc64el",
    "s390x": "s390x",
}


def get_series() -> str:
    """Return the OS release series (e.g. "precise") of this host."""
    try:
        values = platform.freedesktop_os_release()
    except OSError as e:
        raise RuntimeError(f"Cannot determine series: {e}") from e

    series = values.get("VERSION_CODENAME") or values.get("UBUNTU_CODENAME")
    if not series:
        raise RuntimeError("Cannot determine series from os-release")
    return series


def get_arch(machine: Optional[str] = None) -> str:
    """Return the tools architecture name of this host."""
    machine = (machine or platform.machine()).lower()
    if machine not in ARCH_MAPPINGS:
        raise RuntimeError(f"Unsupported architecture: {machine}")
    return ARCH_MAPPINGS[machine]


def current_context() -> HostContext:
    """Get the version, series and architecture of the running node.

    Each value can be overridden through the environment, which is how
    tools for another series or architecture are published.
    """
    from tools_dist import __version__

    version = Version.parse(os.environ.get(ENV_VERSION) or __version__)
    series = os.environ.get(ENV_SERIES) or get_series()
    arch = os.environ.get(ENV_ARCH) or get_arch()
    return HostContext(version=version, series=series, arch=arch)
