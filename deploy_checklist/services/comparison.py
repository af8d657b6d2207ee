"""Pick the previous release tag to compare a release against.

Tags are scanned in the order the forge lists them and the first tag that
satisfies the level's range is taken. That is not necessarily the closest
previous version; callers relying on "closest" must pass tags newest first.
"""

from enum import Enum
from typing import Iterable

from deploy_checklist.errors import ComparisonUnavailableError
from deploy_checklist.utils.semver import Version, parse_version


class SemverLevel(str, Enum):
    """Granularity at which the comparison baseline is selected."""

    MAJOR = "MAJOR"
    MINOR = "MINOR"
    PATCH = "PATCH"
    BUILD = "BUILD"


def _satisfies(name: str, candidate: Version, anchor: Version, level: SemverLevel) -> bool:
    if level is SemverLevel.MAJOR:
        # < MAJOR.x.x
        return candidate.major < anchor.major
    if level is SemverLevel.MINOR:
        # < MAJOR.MINOR.x
        return (candidate.major, candidate.minor) < (anchor.major, anchor.minor)
    if level is SemverLevel.PATCH:
        return candidate < anchor
    # BUILD: <= MAJOR.MINOR.PATCH, excluding the anchor itself
    return name != str(anchor) and candidate <= anchor.without_build()


def select_comparison_tag(
    known_tags: Iterable[str],
    anchor: str | Version,
    level: SemverLevel | str,
) -> str:
    """Return the first tag in known_tags satisfying level's range relative to anchor.

    Args:
        known_tags: Tag names in listing order. Names that are not versions never match.
        anchor: The release version being compared.
        level: MAJOR, MINOR, PATCH or BUILD.

    Returns:
        The matching tag name, as listed.

    Raises:
        ComparisonUnavailableError: If anchor is not a version or no tag matches.
    """
    level = SemverLevel(level)
    anchor_version = anchor if isinstance(anchor, Version) else parse_version(anchor)
    if anchor_version is None:
        raise ComparisonUnavailableError(f"{anchor!r} is not a release version")

    for name in known_tags:
        candidate = parse_version(name)
        if candidate is None:
            continue
        if _satisfies(name, candidate, anchor_version, level):
            return name

    raise ComparisonUnavailableError(f"No tag found to compare {anchor_version} at {level.value} level")


def build_comparison_url(repo_url: str, previous_tag: str, tag: str | Version) -> str:
    """Render the GitHub compare link between two tags."""
    current = tag if isinstance(tag, Version) else parse_version(tag) or tag
    return f"{repo_url.rstrip('/')}/compare/{previous_tag}...{current}"
