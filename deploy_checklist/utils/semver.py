"""Release versions of the form MAJOR.MINOR.PATCH[-BUILD].

BUILD is a numeric pre-release identifier, so ``1.2.3-4`` sorts before
``1.2.3`` and after ``1.2.2``. Numbers follow semver and carry no leading
zeros. Other pre-release shapes (``1.0.0-rc.1``) are not release tags here
and parse as None.
"""

import re
from dataclasses import dataclass
from functools import total_ordering

_NUM = r"(0|[1-9][0-9]*)"
VERSION_PATTERN = rf"{_NUM}\.{_NUM}\.{_NUM}(?:-{_NUM})?"

_TAG_RE = re.compile(rf"^v?{VERSION_PATTERN}$")
VERSION_RE = re.compile(VERSION_PATTERN)


@total_ordering
@dataclass(frozen=True)
class Version:
    """Parsed release version; ordered by semver precedence."""

    major: int
    minor: int
    patch: int
    build: int | None = None

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.build is None:
            return base
        return f"{base}-{self.build}"

    @property
    def _precedence(self) -> tuple[int, int, int, int, int]:
        # A release without build outranks every build of the same triple
        if self.build is None:
            return (self.major, self.minor, self.patch, 1, 0)
        return (self.major, self.minor, self.patch, 0, self.build)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence < other._precedence

    def without_build(self) -> "Version":
        return Version(self.major, self.minor, self.patch)


def parse_version(text: str) -> Version | None:
    """Parse a full version string (leading ``v`` allowed).

    Returns None if the text is not a version.
    """
    m = _TAG_RE.match(text.strip()) if text else None
    if m is None:
        return None
    build = m.group(4)
    return Version(
        int(m.group(1)),
        int(m.group(2)),
        int(m.group(3)),
        int(build) if build is not None else None,
    )


def find_version(text: str) -> str | None:
    """Return the first version-shaped substring of text, or None."""
    m = VERSION_RE.search(text or "")
    return m.group(0) if m else None
