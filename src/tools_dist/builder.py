"""Building the tools executables."""

import asyncio
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

from tools_dist.constants import DEFAULT_BUILD_PACKAGE
from tools_dist.errors import BuildError
from tools_dist.logging import get_logger

logger = get_logger(__name__)


class Builder(Protocol):
    """Builds the tools executables into an output directory."""

    async def __call__(self, out_dir: Path) -> None:
        ...


def setenv(env: Dict[str, str], key: str, value: str) -> Dict[str, str]:
    """Return a copy of env with key set to value."""
    return {**env, key: value}


async def run_combined(*args: str, env: Optional[Dict[str, str]] = None) -> tuple[int, str]:
    """Run a command and return its exit code and combined stdout/stderr."""
    proc = await asyncio.create_subprocess_exec(
        *args,
        env=env,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    stdout, _ = await proc.communicate()
    return proc.returncode, stdout.decode(errors="replace")


class GoInstallBuilder:
    """Builds tools with `go install`, placing the binaries in GOBIN."""

    def __init__(self, package: str = DEFAULT_BUILD_PACKAGE, go: str = "go"):
        self.package = package
        self.go = go

    async def __call__(self, out_dir: Path) -> None:
        env = setenv(dict(os.environ), "GOBIN", str(out_dir))
        logger.debug({"event": "build_tools", "package": self.package, "out_dir": str(out_dir)})

        try:
            returncode, output = await run_combined(self.go, "install", self.package, env=env)
        except OSError as e:
            raise BuildError(f"cannot run {self.go}: {e}") from e

        if returncode != 0:
            raise BuildError(f"exit status {returncode}", output)
