"""
GitHub Integration for PRFlow.

Handles:
- REST calls (repository, branches, refs, user, pulls)
- Feature branch provisioning
- PR description rendering
"""

from prflow.github.client import GitHubClient, PullRequestRef
from prflow.github.branches import BranchProvisioner
from prflow.github.pr_body import FileStore, TemplateRenderer, build_context, substitute

__all__ = [
    "GitHubClient",
    "PullRequestRef",
    "BranchProvisioner",
    "FileStore",
    "TemplateRenderer",
    "build_context",
    "substitute",
]
