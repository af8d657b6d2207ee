"""GitHub API adapter."""

from datetime import datetime
from typing import Any, Dict, List

import requests

from deploy_checklist.adapters.base import GitPlatformAdapter, GitPlatformError
from deploy_checklist.models import Issue, Tag

PER_PAGE = 100


def _parse_iso(s: str | None) -> datetime | None:
    if not s:
        return None
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _issue_from_api(data: Dict[str, Any]) -> Issue:
    user = data.get("user") or {}
    labels = [lb["name"] for lb in (data.get("labels") or []) if isinstance(lb, dict) and "name" in lb]
    return Issue(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        url=data.get("html_url") or data.get("url") or "",
        author=user.get("login", ""),
        labels=labels,
        state=data.get("state", "open"),
        created_at=_parse_iso(data.get("created_at")),
        updated_at=_parse_iso(data.get("updated_at")),
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub API implementation."""

    def __init__(self, token: str | None = None, api_url: str = "https://api.github.com") -> None:
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = path if path.startswith("http") else f"{self._api_url}{path}"
        resp = self._session.request(method, url, params=params, json=json, timeout=30)
        if resp.status_code == 404:
            raise GitPlatformError(f"Not found: {path}")
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                data = resp.json()
            except ValueError:
                data = None
            if isinstance(data, dict) and data.get("message"):
                msg = data["message"]
            raise GitPlatformError(f"GitHub API error {resp.status_code}: {msg}")
        return resp

    def _get_all_pages(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """GET path and follow Link rel="next" pages, keeping API order."""
        items: List[Dict[str, Any]] = []
        resp = self._request("GET", path, params={**params, "per_page": PER_PAGE})
        items.extend(resp.json() or [])
        next_link = resp.links.get("next")
        while next_link:
            # The next URL already carries the query string
            resp = self._request("GET", next_link["url"])
            items.extend(resp.json() or [])
            next_link = resp.links.get("next")
        return items

    def list_issues_by_label(self, repo: str, label: str, state: str = "open") -> List[Issue]:
        """List issues with the given label and state.

        GitHub /repos/{owner}/{repo}/issues returns both issues and PRs;
        items that have pull_request set are skipped.
        """
        data_list = self._get_all_pages(f"/repos/{repo}/issues", {"labels": label, "state": state})
        return [_issue_from_api(d) for d in data_list if d.get("pull_request") is None]

    def list_tags(self, repo: str) -> List[Tag]:
        """List tags as returned by /repos/{owner}/{repo}/tags."""
        data_list = self._get_all_pages(f"/repos/{repo}/tags", {})
        return [Tag(name=d["name"]) for d in data_list if d.get("name")]

    def create_issue(
        self,
        repo: str,
        title: str,
        body: str,
        labels: List[str] | None = None,
        assignees: List[str] | None = None,
    ) -> Issue:
        """Create an issue.

        Args:
            repo: Repository in format owner/repo
            title: Issue title
            body: Issue body (markdown)
            labels: Label names to apply
            assignees: Logins to assign

        Returns:
            The created Issue

        Raises:
            GitPlatformError: If the API call fails
        """
        payload: Dict[str, Any] = {"title": title, "body": body}
        if labels:
            payload["labels"] = list(labels)
        if assignees:
            payload["assignees"] = list(assignees)
        resp = self._request("POST", f"/repos/{repo}/issues", json=payload)
        return _issue_from_api(resp.json())

    def update_issue_body(self, repo: str, issue_number: int, body: str) -> Issue:
        """Replace the body of an existing issue."""
        resp = self._request("PATCH", f"/repos/{repo}/issues/{issue_number}", json={"body": body})
        return _issue_from_api(resp.json())
