"""
Repository context detection for PRFlow.

Derives ``owner/name`` and the checked-out branch from the local clone.
"""

import re
from typing import Optional

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from prflow.errors import DetachedHeadError, RepositoryDetectionError

# SSH: git@github.com:owner/repo.git
# SSH URL: ssh://git@github.com/owner/repo.git
# HTTPS: https://github.com/owner/repo.git (optionally with credentials)
GITHUB_REMOTE = re.compile(
    r"^(?:git@|ssh://git@|https?://(?:[^@/]+@)?)github\.com[:/]"
    r"(?P<owner>[^/\s]+)/(?P<name>[^/\s]+?)(?:\.git)?/?$"
)


def parse_github_remote(remote_url: str) -> Optional[str]:
    """
    Extract the repository identifier from a GitHub remote URL.

    Args:
        remote_url: Value of ``git remote get-url``

    Returns:
        "owner/name", or None if the URL is not a GitHub remote
    """
    match = GITHUB_REMOTE.match(remote_url.strip())
    if not match:
        return None
    return f"{match.group('owner')}/{match.group('name')}"


class RepositoryContextProbe:
    """Read-only view of the local checkout."""

    def __init__(self, repo_path: str = ".", remote: str = "origin", repo: Optional[Repo] = None):
        self.repo_path = repo_path
        self.remote = remote
        self._repo = repo

    @property
    def repo(self) -> Repo:
        if self._repo is None:
            try:
                self._repo = Repo(self.repo_path, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError):
                raise RepositoryDetectionError(
                    "Failed to detect the GitHub repository. "
                    "Ensure you are inside a Git repository."
                )
        return self._repo

    def current_repository(self) -> str:
        """
        Resolve the GitHub repository the ``origin`` remote points at.

        Returns:
            Repository identifier in "owner/name" form

        Raises:
            RepositoryDetectionError: Not a repo, no remote, or not GitHub
        """
        try:
            remote_url = self.repo.git.remote("get-url", self.remote)
        except GitCommandError:
            raise RepositoryDetectionError(
                f"Failed to detect the GitHub repository: no '{self.remote}' remote configured."
            )

        identifier = parse_github_remote(remote_url)
        if identifier is None:
            raise RepositoryDetectionError(
                f"Remote '{self.remote}' is not a GitHub repository: {remote_url}"
            )
        return identifier

    def current_branch(self) -> str:
        """
        Name of the checked-out branch.

        Raises:
            DetachedHeadError: HEAD is detached or does not resolve
        """
        try:
            branch = self.repo.git.rev_parse("--abbrev-ref", "HEAD").strip()
        except GitCommandError:
            raise DetachedHeadError("Could not resolve the current branch (no commits yet?).")

        if not branch or branch == "HEAD":
            raise DetachedHeadError("HEAD is detached. Check out a branch before creating a PR.")
        return branch
