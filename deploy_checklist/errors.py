"""Errors raised while reading or writing the deploy checklist."""


class ChecklistError(Exception):
    """Base class for deploy checklist errors."""

    pass


class NotFoundError(ChecklistError):
    """Raised when no matching checklist issue (or tag) exists."""

    pass


class AmbiguousResultError(ChecklistError):
    """Raised when more than one open checklist issue exists."""

    pass


class MalformedChecklistError(ChecklistError):
    """Raised when an issue body does not have the checklist structure."""

    pass


class InvalidURLError(ChecklistError, ValueError):
    """Raised when a URL is not the expected GitHub issue or pull request."""

    pass


class ComparisonUnavailableError(NotFoundError):
    """Raised when no listed tag can serve as the comparison baseline."""

    pass
