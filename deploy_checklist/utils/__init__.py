"""Shared utilities (URL number parsing, release versions)."""

from deploy_checklist.utils.semver import Version, find_version, parse_version
from deploy_checklist.utils.urls import (
    get_issue_number_from_url,
    get_issue_or_pull_request_number_from_url,
    get_pull_request_number_from_url,
)

__all__ = [
    "Version",
    "find_version",
    "parse_version",
    "get_issue_number_from_url",
    "get_issue_or_pull_request_number_from_url",
    "get_pull_request_number_from_url",
]
