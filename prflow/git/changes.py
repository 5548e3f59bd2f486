"""
Local change reconciliation for PRFlow.

Detects a dirty working tree and, when asked, stages, commits and pushes
it. Each step must succeed before the next one runs.
"""

from git import Repo
from git.exc import GitCommandError
from rich.console import Console

from prflow.errors import ChangeReconciliationError

console = Console()


class ChangeReconciler:
    """Commit-and-push helper bound to one repository."""

    def __init__(self, repo: Repo, remote: str = "origin", verbose: bool = False):
        self.repo = repo
        self.remote = remote
        self.verbose = verbose

    def has_uncommitted_changes(self) -> bool:
        """
        True iff ``git status --porcelain`` reports anything.

        Raises:
            ChangeReconciliationError: If git status itself fails
        """
        try:
            status = self.repo.git.status(porcelain=True)
        except GitCommandError as e:
            detail = (e.stderr or e.stdout or str(e)).strip()
            raise ChangeReconciliationError(f"git status failed: {detail}", step="status")
        return bool(status.strip())

    def commit_and_push(self, message: str, branch: str) -> None:
        """
        Stage everything, commit, and push to the remote branch.

        Args:
            message: Commit message
            branch: Branch to push to on the remote

        Raises:
            ChangeReconciliationError: On the first step that fails
        """
        steps = (
            ("add", lambda: self.repo.git.add(all=True)),
            ("commit", lambda: self.repo.git.commit(m=message)),
            ("push", lambda: self.repo.git.push(self.remote, branch)),
        )

        for step, run in steps:
            try:
                run()
            except GitCommandError as e:
                detail = (e.stderr or e.stdout or str(e)).strip()
                raise ChangeReconciliationError(f"git {step} failed: {detail}", step=step)

            if self.verbose:
                console.print(f"[dim]git {step} ok[/dim]")
