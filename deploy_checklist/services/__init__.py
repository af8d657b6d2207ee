"""Checklist services: body codec, tag comparison, and the issue workflow."""

from deploy_checklist.services.checklist_body import parse_checklist_body, render_checklist_body
from deploy_checklist.services.comparison import SemverLevel, build_comparison_url, select_comparison_tag
from deploy_checklist.services.staging_deploy import StagingDeployService

__all__ = [
    "parse_checklist_body",
    "render_checklist_body",
    "SemverLevel",
    "build_comparison_url",
    "select_comparison_tag",
    "StagingDeployService",
]
