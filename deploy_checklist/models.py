"""Data models for forge issues, tags, and the decoded deploy checklist."""

from datetime import datetime
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Issue(BaseModel):
    """Git hosting platform issue."""

    number: int
    title: str
    body: str = ""
    url: str = ""
    author: str = ""
    labels: List[str] = Field(default_factory=list)
    state: str = "open"
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Tag(BaseModel):
    """Repository tag as returned by the tag listing."""

    name: str


class ChecklistBody(BaseModel):
    """Structured fields decoded from a checklist issue body.

    Checkbox state is not part of the model: only which URLs are listed,
    in the order they appear.
    """

    model_config = ConfigDict(frozen=True)

    tag: str
    comparison_url: str
    pr_list: Tuple[str, ...] = ()
    deploy_blockers: Tuple[str, ...] = ()


class ChecklistIssue(BaseModel):
    """Open deploy checklist issue with its decoded body.

    Never mutated in place; derive a new instance with ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    url: str
    labels: frozenset[str] = Field(default_factory=frozenset)
    tag: str
    comparison_url: str
    pr_list: Tuple[str, ...] = ()
    deploy_blockers: Tuple[str, ...] = ()

    @classmethod
    def from_issue(cls, issue: Issue, body: ChecklistBody) -> "ChecklistIssue":
        """Combine issue metadata with the decoded body fields."""
        return cls(
            number=issue.number,
            title=issue.title,
            url=issue.url,
            labels=frozenset(issue.labels),
            tag=body.tag,
            comparison_url=body.comparison_url,
            pr_list=body.pr_list,
            deploy_blockers=body.deploy_blockers,
        )
