"""Read and write the markdown body of the deploy checklist issue.

Body layout (lines end with CRLF, a blank line separates sections)::

    **Release Version:** 1.0.3-2
    **Compare Changes:** https://github.com/owner/app/compare/1.0.3-1...1.0.3-2
    **This release contains changes from the following pull requests:**
    - [ ] https://github.com/owner/app/pull/21
    - [x] https://github.com/owner/app/pull/24

    **Deploy Blockers:**
    - [ ] https://github.com/owner/app/issues/7

Both checklist sections are optional.
"""

import re
from typing import Callable, Iterable, List

from deploy_checklist.errors import MalformedChecklistError
from deploy_checklist.models import ChecklistBody
from deploy_checklist.utils.semver import VERSION_PATTERN, find_version
from deploy_checklist.utils.urls import (
    ISSUE_OR_PULL_REQUEST_RE,
    get_issue_or_pull_request_number_from_url,
    get_pull_request_number_from_url,
)

RELEASE_VERSION_HEADER = "**Release Version:**"
COMPARE_CHANGES_HEADER = "**Compare Changes:**"
PULL_REQUESTS_HEADER = "**This release contains changes from the following pull requests:**"
DEPLOY_BLOCKERS_HEADER = "**Deploy Blockers:**"

LINE_ENDING = "\r\n"

_ANY_REPO_URL_PATTERN = r"https://github\.com/[^/\s]+/[^/\s]+"
_SECTION_HEADER_RE = re.compile(r"^\*\*.*:\*\*")
CHECKLIST_ITEM_RE = re.compile(rf"- \[[ x]\] ({ISSUE_OR_PULL_REQUEST_RE.pattern})")


def _compare_url_re(repo_url: str | None) -> re.Pattern[str]:
    base = re.escape(repo_url.rstrip("/")) if repo_url else _ANY_REPO_URL_PATTERN
    version = rf"v?{VERSION_PATTERN}"
    return re.compile(rf"{base}/compare/{version}\.\.\.{version}")


def _split_lines(body: str) -> List[str]:
    # GitHub stores CRLF; bodies edited through the API may carry bare LF
    return body.replace("\r\n", "\n").split("\n")


def _find_header(lines: List[str], suffix: str) -> int | None:
    for i, line in enumerate(lines):
        if line.rstrip().endswith(suffix):
            return i
    return None


def _section_lines(lines: List[str], suffix: str, bounded: bool) -> List[str]:
    """Lines following the header ending in suffix.

    A bounded section ends at the first blank line or the next section
    header; otherwise it runs to the end of the body.
    """
    start = _find_header(lines, suffix)
    if start is None:
        return []
    section: List[str] = []
    for line in lines[start + 1 :]:
        if bounded and (not line.strip() or _SECTION_HEADER_RE.match(line.strip())):
            break
        section.append(line)
    return section


def _checklist_urls(section: Iterable[str]) -> tuple[str, ...]:
    urls = []
    for line in section:
        m = CHECKLIST_ITEM_RE.search(line)
        if m:
            urls.append(m.group(1))
    return tuple(urls)


def parse_checklist_body(body: str, repo_url: str | None = None) -> ChecklistBody:
    """Decode a checklist issue body.

    Args:
        body: Issue body text.
        repo_url: Repository HTML URL the compare link must point at; any
            GitHub repository when None.

    Returns:
        ChecklistBody with tag, comparison URL, and the PR and deploy blocker
        URLs in the order they appear. Checkbox state is discarded.

    Raises:
        MalformedChecklistError: If the release version or compare link is missing.
    """
    if not body:
        raise MalformedChecklistError("Checklist body is empty")
    lines = _split_lines(body)

    version_line = next((ln for ln in lines if RELEASE_VERSION_HEADER in ln), None)
    tag = find_version(version_line.replace("`", "")) if version_line else None
    if not tag:
        raise MalformedChecklistError("Checklist body has no release version")

    compare_match = _compare_url_re(repo_url).search(body)
    if compare_match is None:
        raise MalformedChecklistError("Checklist body has no comparison link")

    pr_list = _checklist_urls(_section_lines(lines, "pull requests:**", bounded=True))
    deploy_blockers = _checklist_urls(_section_lines(lines, "Deploy Blockers:**", bounded=False))

    return ChecklistBody(
        tag=tag,
        comparison_url=compare_match.group(0),
        pr_list=pr_list,
        deploy_blockers=deploy_blockers,
    )


def _unique_sorted(urls: Iterable[str], key: Callable[[str], int]) -> List[str]:
    # dict keeps first-seen order so equal keys sort the same way every run
    return sorted(dict.fromkeys(urls), key=key)


def _checklist_line(url: str, checked: Iterable[str]) -> str:
    box = "- [x]" if url in checked else "- [ ]"
    return f"{box} {url}"


def render_checklist_body(
    tag: str,
    comparison_url: str,
    pr_list: Iterable[str],
    verified_pr_list: Iterable[str] = (),
    deploy_blockers: Iterable[str] = (),
    resolved_deploy_blockers: Iterable[str] = (),
) -> str:
    """Render the checklist issue body.

    PRs are sorted by pull request number and deploy blockers by issue or
    pull request number, duplicates dropped. A section is omitted when its
    list is empty. A line is checked when its URL is verified (PRs) or
    resolved (deploy blockers).

    Raises:
        InvalidURLError: If a PR URL is not a pull request, or a deploy
            blocker URL is neither an issue nor a pull request.
    """
    prs = _unique_sorted(pr_list, get_pull_request_number_from_url)
    blockers = _unique_sorted(deploy_blockers, get_issue_or_pull_request_number_from_url)
    verified = set(verified_pr_list)
    resolved = set(resolved_deploy_blockers)

    lines = [
        f"{RELEASE_VERSION_HEADER} {tag}",
        f"{COMPARE_CHANGES_HEADER} {comparison_url}",
    ]
    if prs:
        lines.append(PULL_REQUESTS_HEADER)
        lines.extend(_checklist_line(url, verified) for url in prs)
    if blockers:
        lines.append("")
        lines.append(DEPLOY_BLOCKERS_HEADER)
        lines.extend(_checklist_line(url, resolved) for url in blockers)
    return "".join(f"{line}{LINE_ENDING}" for line in lines)
