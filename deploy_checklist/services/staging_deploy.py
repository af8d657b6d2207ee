"""
Find, create, and update the staging deploy checklist issue.

The checklist is the single open issue labelled with the configured label
(StagingDeployCash by default) in the issue repository. Its body lists the
release tag, a compare link against the previous build, the pull requests
in the release and any deploy blockers.
"""

import logging
from typing import Iterable

from deploy_checklist.adapters.base import GitPlatformAdapter
from deploy_checklist.config import ChecklistConfig
from deploy_checklist.errors import AmbiguousResultError, ComparisonUnavailableError, NotFoundError
from deploy_checklist.models import ChecklistIssue, Issue
from deploy_checklist.services.checklist_body import parse_checklist_body, render_checklist_body
from deploy_checklist.services.comparison import SemverLevel, build_comparison_url, select_comparison_tag

DEFAULT_HTML_URL = "https://github.com"


class StagingDeployService:
    """Deploy checklist operations on top of a GitPlatformAdapter."""

    def __init__(
        self,
        adapter: GitPlatformAdapter,
        config: ChecklistConfig,
        html_url: str = DEFAULT_HTML_URL,
        log: logging.Logger | None = None,
    ) -> None:
        self._adapter = adapter
        self._config = config
        self._html_url = html_url.rstrip("/")
        self._log = log or logging.getLogger("deploy_checklist.staging_deploy")

    def repo_url(self, repo_slug: str) -> str:
        return f"{self._html_url}/{repo_slug}"

    @property
    def app_repo_url(self) -> str:
        return self.repo_url(self._config.app_repo_slug)

    def get_staging_deploy_checklist(self) -> ChecklistIssue:
        """Find the one open checklist issue and decode it.

        Raises:
            NotFoundError: No open issue carries the checklist label.
            AmbiguousResultError: More than one open issue carries it.
            MalformedChecklistError: The issue body cannot be decoded.
        """
        label = self._config.label
        issues = self._adapter.list_issues_by_label(self._config.issue_repo_slug, label, state="open")
        if not issues:
            raise NotFoundError(f"Unable to find {label} issue.")
        if len(issues) > 1:
            raise AmbiguousResultError(f"Found more than one {label} issue.")
        self._log.debug("Found %s issue #%s", label, issues[0].number)
        return self.checklist_from_issue(issues[0])

    def checklist_from_issue(self, issue: Issue) -> ChecklistIssue:
        """Decode an issue into a ChecklistIssue."""
        body = parse_checklist_body(issue.body, repo_url=self.app_repo_url)
        return ChecklistIssue.from_issue(issue, body)

    def generate_version_comparison_url(self, repo_slug: str, tag: str, level: SemverLevel | str) -> str:
        """Compare link from the previous tag at level to tag.

        Tags are listed from repo_slug and the first one satisfying the level
        range is used.

        Raises:
            ComparisonUnavailableError: If no listed tag qualifies.
            GitPlatformError: If listing tags fails.
        """
        tags = [t.name for t in self._adapter.list_tags(repo_slug)]
        previous = select_comparison_tag(tags, tag, level)
        return build_comparison_url(self.repo_url(repo_slug), previous, tag)

    def generate_checklist_body(
        self,
        tag: str,
        pr_list: Iterable[str],
        verified_pr_list: Iterable[str] = (),
        deploy_blockers: Iterable[str] = (),
        resolved_deploy_blockers: Iterable[str] = (),
    ) -> str:
        """Render the checklist body for tag, comparing against the previous build.

        Raises:
            ComparisonUnavailableError: If no previous tag exists to compare with.
        """
        try:
            comparison_url = self.generate_version_comparison_url(
                self._config.app_repo_slug, tag, SemverLevel.BUILD
            )
        except ComparisonUnavailableError as e:
            self._log.warning("Error generating comparison URL for %s: %s", tag, e)
            raise
        return render_checklist_body(
            tag,
            comparison_url,
            pr_list,
            verified_pr_list=verified_pr_list,
            deploy_blockers=deploy_blockers,
            resolved_deploy_blockers=resolved_deploy_blockers,
        )

    def create_staging_deploy_checklist(self, title: str, tag: str, pr_list: Iterable[str]) -> Issue:
        """Create a new checklist issue for tag listing pr_list (all unverified)."""
        body = self.generate_checklist_body(tag, pr_list)
        assignees = [self._config.assignee] if self._config.assignee else None
        issue = self._adapter.create_issue(
            self._config.issue_repo_slug,
            title=title,
            body=body,
            labels=[self._config.label],
            assignees=assignees,
        )
        self._log.info("Created %s issue #%s for %s", self._config.label, issue.number, tag)
        return issue

    def update_staging_deploy_checklist(
        self,
        checklist: ChecklistIssue,
        verified_pr_list: Iterable[str] = (),
        new_pr_list: Iterable[str] = (),
        deploy_blockers: Iterable[str] = (),
        resolved_deploy_blockers: Iterable[str] = (),
        tag: str | None = None,
    ) -> ChecklistIssue:
        """Rewrite an existing checklist issue body and return the new state.

        PRs and deploy blockers already on the checklist are kept; new_pr_list
        and deploy_blockers are added. Checkbox state is taken from
        verified_pr_list and resolved_deploy_blockers only.
        """
        release_tag = tag or checklist.tag
        body = self.generate_checklist_body(
            release_tag,
            [*checklist.pr_list, *new_pr_list],
            verified_pr_list=verified_pr_list,
            deploy_blockers=[*checklist.deploy_blockers, *deploy_blockers],
            resolved_deploy_blockers=resolved_deploy_blockers,
        )
        issue = self._adapter.update_issue_body(self._config.issue_repo_slug, checklist.number, body)
        self._log.info("Updated %s issue #%s", self._config.label, checklist.number)
        return self.checklist_from_issue(issue)
