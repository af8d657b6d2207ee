"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from typing import List

from deploy_checklist.models import Issue, Tag


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class GitPlatformAdapter(ABC):
    """Abstract interface for the issue and tag operations the checklist needs."""

    @abstractmethod
    def list_issues_by_label(self, repo: str, label: str, state: str = "open") -> List[Issue]:
        """List issues (not pull requests) carrying label."""
        ...

    @abstractmethod
    def list_tags(self, repo: str) -> List[Tag]:
        """List repository tags in the order the platform returns them."""
        ...

    @abstractmethod
    def create_issue(
        self,
        repo: str,
        title: str,
        body: str,
        labels: List[str] | None = None,
        assignees: List[str] | None = None,
    ) -> Issue:
        """Create an issue."""
        ...

    def update_issue_body(self, repo: str, issue_number: int, body: str) -> Issue:
        """Replace an issue body. Override if needed."""
        raise NotImplementedError("update_issue_body")
