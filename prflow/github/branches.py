"""
Remote branch provisioning for PRFlow.

Makes sure the feature branch exists on GitHub before a PR is opened.
"""

from rich.console import Console

from prflow.errors import BranchCreationError
from prflow.github.client import GitHubClient

console = Console()


class BranchProvisioner:
    """Creates the feature branch from the base branch when it is missing."""

    def __init__(self, client: GitHubClient, verbose: bool = False):
        self.client = client
        self.verbose = verbose
        self.created = False
        self.last_error = None

    def ensure_branch(self, repo: str, feature: str, base: str) -> bool:
        """
        Ensure ``feature`` exists on the remote.

        Args:
            repo: Repository in "owner/name" form
            feature: Branch the PR is opened from
            base: Branch to fork ``feature`` from if it is missing

        Returns:
            True if the branch exists (already or newly created),
            False if creation failed (see ``last_error``)
        """
        self.created = False
        self.last_error = None

        if self.client.branch_exists(repo, feature):
            if self.verbose:
                console.print(f"[dim]Branch '{feature}' already exists on GitHub[/dim]")
            return True

        console.print(f"[yellow]⚠ Branch '{feature}' does not exist. Creating it...[/yellow]")
        try:
            sha = self.client.create_branch_ref(repo, feature, base)
        except BranchCreationError as e:
            self.last_error = e
            return False

        self.created = True
        if self.verbose:
            console.print(f"[dim]Created '{feature}' at {sha[:7]} from '{base}'[/dim]")
        return True
