"""Tests for StagingDeployService (adapter mocked)."""

import logging
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from deploy_checklist.adapters.base import GitPlatformAdapter
from deploy_checklist.config import ChecklistConfig
from deploy_checklist.errors import (
    AmbiguousResultError,
    ComparisonUnavailableError,
    MalformedChecklistError,
    NotFoundError,
)
from deploy_checklist.models import ChecklistIssue, Issue, Tag
from deploy_checklist.services.checklist_body import render_checklist_body
from deploy_checklist.services.comparison import SemverLevel
from deploy_checklist.services.staging_deploy import StagingDeployService

APP_URL = "https://github.com/Org/App"
PR_1 = f"{APP_URL}/pull/1"
PR_2 = f"{APP_URL}/pull/2"
BLOCKER = "https://github.com/Org/Issues/issues/9"
TAGS = [Tag(name="1.0.2"), Tag(name="1.0.1-3"), Tag(name="1.0.1-2"), Tag(name="1.0.0")]


@pytest.fixture
def config() -> ChecklistConfig:
    return ChecklistConfig(owner="Org", issue_repo="Issues", app_repo="App", label="StagingDeployCash", assignee="qa")


@pytest.fixture
def adapter() -> Mock:
    mock = Mock(spec=GitPlatformAdapter)
    mock.list_tags.return_value = TAGS
    return mock


@pytest.fixture
def service(adapter: Mock, config: ChecklistConfig) -> StagingDeployService:
    return StagingDeployService(adapter, config)


def _issue(number: int, body: str) -> Issue:
    return Issue(
        number=number,
        title="Deploy Checklist: 1.0.1-3",
        body=body,
        url=f"https://github.com/Org/Issues/issues/{number}",
        labels=["StagingDeployCash"],
    )


def _body(pr_list: list[str], deploy_blockers: list[str] | None = None) -> str:
    return render_checklist_body(
        "1.0.1-3",
        f"{APP_URL}/compare/1.0.1-2...1.0.1-3",
        pr_list,
        deploy_blockers=deploy_blockers or [],
    )


class TestGetChecklist:
    """get_staging_deploy_checklist finds exactly one labelled issue."""

    def test_single_issue_decoded(self, service: StagingDeployService, adapter: Mock) -> None:
        adapter.list_issues_by_label.return_value = [_issue(5, _body([PR_2, PR_1], [BLOCKER]))]

        checklist = service.get_staging_deploy_checklist()

        assert isinstance(checklist, ChecklistIssue)
        assert checklist.number == 5
        assert checklist.tag == "1.0.1-3"
        assert checklist.comparison_url == f"{APP_URL}/compare/1.0.1-2...1.0.1-3"
        assert checklist.pr_list == (PR_1, PR_2)
        assert checklist.deploy_blockers == (BLOCKER,)
        assert checklist.labels == frozenset({"StagingDeployCash"})
        adapter.list_issues_by_label.assert_called_once_with("Org/Issues", "StagingDeployCash", state="open")

    def test_no_issue_raises_not_found(self, service: StagingDeployService, adapter: Mock) -> None:
        adapter.list_issues_by_label.return_value = []
        with pytest.raises(NotFoundError, match="Unable to find StagingDeployCash issue"):
            service.get_staging_deploy_checklist()

    def test_two_issues_raise_ambiguous(self, service: StagingDeployService, adapter: Mock) -> None:
        adapter.list_issues_by_label.return_value = [_issue(5, _body([PR_1])), _issue(6, _body([PR_2]))]
        with pytest.raises(AmbiguousResultError):
            service.get_staging_deploy_checklist()

    def test_malformed_body_raises(self, service: StagingDeployService, adapter: Mock) -> None:
        adapter.list_issues_by_label.return_value = [_issue(5, "just some text")]
        with pytest.raises(MalformedChecklistError):
            service.get_staging_deploy_checklist()

    def test_checklist_is_frozen(self, service: StagingDeployService, adapter: Mock) -> None:
        adapter.list_issues_by_label.return_value = [_issue(5, _body([PR_1]))]
        checklist = service.get_staging_deploy_checklist()
        with pytest.raises(ValidationError):
            checklist.tag = "2.0.0"
        derived = checklist.model_copy(update={"pr_list": (PR_1, PR_2)})
        assert checklist.pr_list == (PR_1,)
        assert derived.pr_list == (PR_1, PR_2)


class TestComparisonURL:
    """generate_version_comparison_url uses the live tag list."""

    def test_build_level(self, service: StagingDeployService, adapter: Mock) -> None:
        url = service.generate_version_comparison_url("Org/App", "1.0.1-3", SemverLevel.BUILD)
        assert url == f"{APP_URL}/compare/1.0.1-2...1.0.1-3"
        adapter.list_tags.assert_called_once_with("Org/App")

    def test_patch_level(self, service: StagingDeployService) -> None:
        url = service.generate_version_comparison_url("Org/App", "1.0.2", "PATCH")
        assert url == f"{APP_URL}/compare/1.0.1-3...1.0.2"

    def test_no_previous_tag(self, service: StagingDeployService, adapter: Mock) -> None:
        adapter.list_tags.return_value = [Tag(name="1.0.0")]
        with pytest.raises(ComparisonUnavailableError):
            service.generate_version_comparison_url("Org/App", "1.0.0", SemverLevel.BUILD)


class TestGenerateBody:
    """generate_checklist_body renders with a BUILD-level compare link."""

    def test_renders_body(self, service: StagingDeployService) -> None:
        body = service.generate_checklist_body("1.0.1-3", [PR_2, PR_1], verified_pr_list=[PR_2])
        assert body == (
            "**Release Version:** 1.0.1-3\r\n"
            f"**Compare Changes:** {APP_URL}/compare/1.0.1-2...1.0.1-3\r\n"
            "**This release contains changes from the following pull requests:**\r\n"
            f"- [ ] {PR_1}\r\n"
            f"- [x] {PR_2}\r\n"
        )

    def test_comparison_failure_logged_and_raised(
        self,
        service: StagingDeployService,
        adapter: Mock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """No previous build is an error, not a silently missing body."""
        adapter.list_tags.return_value = []
        with caplog.at_level(logging.WARNING, logger="deploy_checklist.staging_deploy"):
            with pytest.raises(ComparisonUnavailableError):
                service.generate_checklist_body("1.0.1-3", [PR_1])
        assert "Error generating comparison URL" in caplog.text


class TestCreateAndUpdate:
    """create_ and update_staging_deploy_checklist write through the adapter."""

    def test_create(self, service: StagingDeployService, adapter: Mock) -> None:
        created = _issue(11, "")
        adapter.create_issue.return_value = created

        issue = service.create_staging_deploy_checklist("Deploy Checklist: 1.0.1-3", "1.0.1-3", [PR_1])

        assert issue is created
        kwargs = adapter.create_issue.call_args.kwargs
        assert adapter.create_issue.call_args.args == ("Org/Issues",)
        assert kwargs["title"] == "Deploy Checklist: 1.0.1-3"
        assert kwargs["labels"] == ["StagingDeployCash"]
        assert kwargs["assignees"] == ["qa"]
        assert f"- [ ] {PR_1}\r\n" in kwargs["body"]

    def test_create_without_assignee(self, adapter: Mock) -> None:
        no_assignee = ChecklistConfig(owner="Org", issue_repo="Issues", app_repo="App", assignee=None)
        service = StagingDeployService(adapter, no_assignee)
        adapter.create_issue.return_value = _issue(12, "")
        service.create_staging_deploy_checklist("T", "1.0.1-3", [PR_1])
        assert adapter.create_issue.call_args.kwargs["assignees"] is None

    def test_create_does_not_call_api_when_comparison_fails(self, service: StagingDeployService, adapter: Mock) -> None:
        adapter.list_tags.return_value = []
        with pytest.raises(ComparisonUnavailableError):
            service.create_staging_deploy_checklist("T", "1.0.1-3", [PR_1])
        adapter.create_issue.assert_not_called()

    def test_update_merges_and_checks(self, service: StagingDeployService, adapter: Mock) -> None:
        current = service.checklist_from_issue(_issue(5, _body([PR_1])))
        adapter.update_issue_body.side_effect = lambda repo, number, body: _issue(number, body)

        updated = service.update_staging_deploy_checklist(
            current,
            verified_pr_list=[PR_1],
            new_pr_list=[PR_2, PR_1],
            deploy_blockers=[BLOCKER],
        )

        repo, number, body = adapter.update_issue_body.call_args.args
        assert (repo, number) == ("Org/Issues", 5)
        assert f"- [x] {PR_1}\r\n- [ ] {PR_2}\r\n" in body
        assert f"- [ ] {BLOCKER}\r\n" in body
        assert updated.pr_list == (PR_1, PR_2)
        assert updated.deploy_blockers == (BLOCKER,)
        assert current.pr_list == (PR_1,)
