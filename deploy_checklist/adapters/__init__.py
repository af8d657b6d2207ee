"""Git platform adapters."""

from deploy_checklist.adapters.base import GitPlatformAdapter, GitPlatformError
from deploy_checklist.adapters.github import GitHubAdapter

__all__ = ["GitPlatformAdapter", "GitPlatformError", "GitHubAdapter"]
