"""Deploy checklist entry point.

Usage: deploy-checklist [--config PATH] show | compare TAG [--level L] | create TITLE TAG PR_URL...
"""

import argparse
import logging
import sys
from pathlib import Path

from deploy_checklist.adapters import GitHubAdapter, GitPlatformError
from deploy_checklist.config import AppConfig, load_config
from deploy_checklist.errors import ChecklistError
from deploy_checklist.logging import ChecklistLogging
from deploy_checklist.models import ChecklistIssue
from deploy_checklist.services import SemverLevel, StagingDeployService


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="deploy-checklist",
        description="Read or create the staging deploy checklist issue",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("show", help="Print the open checklist")

    compare = sub.add_parser("compare", help="Print the compare link for a tag")
    compare.add_argument("tag", help="Release tag, e.g. 1.0.3-2")
    compare.add_argument(
        "--level",
        type=str.upper,
        choices=[lv.value for lv in SemverLevel],
        default=SemverLevel.BUILD.value,
        help="Semver level of the previous tag (default BUILD)",
    )

    create = sub.add_parser("create", help="Create a new checklist issue")
    create.add_argument("title", help="Issue title")
    create.add_argument("tag", help="Release tag")
    create.add_argument("pr_urls", nargs="*", help="Pull request URLs in the release")

    return parser.parse_args(argv if argv is not None else sys.argv[1:])


def build_service(config: AppConfig) -> StagingDeployService:
    adapter = GitHubAdapter(token=config.github_token_resolved, api_url=config.github.api_url)
    return StagingDeployService(
        adapter,
        config.checklist,
        html_url=config.github.html_url,
        log=logging.getLogger("deploy_checklist.staging_deploy"),
    )


def format_checklist(checklist: ChecklistIssue) -> str:
    """Plain-text summary of a decoded checklist."""
    lines = [
        f"#{checklist.number} {checklist.title}",
        f"URL: {checklist.url}",
        f"Tag: {checklist.tag}",
        f"Compare: {checklist.comparison_url}",
        f"Pull requests ({len(checklist.pr_list)}):",
    ]
    lines.extend(f"  {url}" for url in checklist.pr_list)
    lines.append(f"Deploy blockers ({len(checklist.deploy_blockers)}):")
    lines.extend(f"  {url}" for url in checklist.deploy_blockers)
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = load_config(args.config)
    logging_setup = ChecklistLogging(config.logging)
    logging_setup.setup()
    log = logging_setup.get_logger("deploy_checklist")

    if args.check:
        print("Config OK:", config.checklist.issue_repo_slug, config.checklist.label)
        return 0

    if not args.command:
        log.error("No command given (show, compare, create)")
        return 2

    service = build_service(config)
    try:
        if args.command == "show":
            print(format_checklist(service.get_staging_deploy_checklist()))
        elif args.command == "compare":
            print(service.generate_version_comparison_url(config.checklist.app_repo_slug, args.tag, args.level))
        elif args.command == "create":
            issue = service.create_staging_deploy_checklist(args.title, args.tag, args.pr_urls)
            print(issue.url)
    except (ChecklistError, GitPlatformError) as e:
        log.error("%s failed: %s", args.command, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
