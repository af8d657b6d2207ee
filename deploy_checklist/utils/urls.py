"""Extract pull request and issue numbers from GitHub URLs."""

import re

from deploy_checklist.errors import InvalidURLError

GITHUB_BASE_URL_PATTERN = r"https?://(?:github\.com|api\.github\.com)"

PULL_REQUEST_RE = re.compile(rf"{GITHUB_BASE_URL_PATTERN}/\S*/\S*/pull/([0-9]+)\S*")
ISSUE_RE = re.compile(rf"{GITHUB_BASE_URL_PATTERN}/\S*/\S*/issues/([0-9]+)\S*")
ISSUE_OR_PULL_REQUEST_RE = re.compile(rf"{GITHUB_BASE_URL_PATTERN}/\S*/\S*/(?:pull|issues)/([0-9]+)\S*")


def _number_from_url(pattern: re.Pattern[str], url: str, expected: str) -> int:
    match = pattern.search(url or "")
    if match is None or match.group(1) is None:
        raise InvalidURLError(f"Provided URL {url} is not {expected}!")
    return int(match.group(1), 10)


def get_pull_request_number_from_url(url: str) -> int:
    """Parse the pull request number from a URL.

    Raises:
        InvalidURLError: If the URL is not a GitHub pull request.
    """
    return _number_from_url(PULL_REQUEST_RE, url, "a Github Pull Request")


def get_issue_number_from_url(url: str) -> int:
    """Parse the issue number from a URL.

    Raises:
        InvalidURLError: If the URL is not a GitHub issue.
    """
    return _number_from_url(ISSUE_RE, url, "a Github Issue")


def get_issue_or_pull_request_number_from_url(url: str) -> int:
    """Parse the issue or pull request number from a URL.

    Raises:
        InvalidURLError: If the URL is neither a GitHub issue nor a pull request.
    """
    return _number_from_url(ISSUE_OR_PULL_REQUEST_RE, url, "a valid Github Issue or Pull Request")
