"""Tools version numbers."""

import re
from typing import NamedTuple

VERSION_PATTERN = r"[0-9]+\.[0-9]+\.[0-9]+"

_VERSION_RE = re.compile(VERSION_PATTERN)


class Version(NamedTuple):
    """A major.minor.patch version; tuple ordering gives the total order."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a dotted version string such as "1.18.2"."""
        if not _VERSION_RE.fullmatch(text):
            raise ValueError(f"invalid version {text!r}")
        major, minor, patch = (int(part) for part in text.split("."))
        return cls(major, minor, patch)
