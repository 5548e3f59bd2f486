"""
Error types for PRFlow.

Every component raises a subclass of PRFlowError. The orchestrator is the
only place that catches them and turns them into a failed run.
"""

from typing import Optional


class PRFlowError(Exception):
    """Base class for all workflow failures."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ConfigError(PRFlowError):
    """Configuration could not be loaded."""


class MissingCredentialError(PRFlowError):
    """No GitHub token was supplied."""


class RepositoryDetectionError(PRFlowError):
    """The origin remote is missing or does not point at GitHub."""


class DetachedHeadError(PRFlowError):
    """HEAD does not resolve to a branch name."""


class ChangeReconciliationError(PRFlowError):
    """A stage/commit/push step failed."""

    def __init__(self, reason: str, step: str):
        super().__init__(reason)
        self.step = step


class UncommittedChangesError(PRFlowError):
    """The user declined to commit local changes."""


class InputError(PRFlowError):
    """A required answer was left empty."""


class TemplateNotFoundError(PRFlowError):
    """The PR template path does not exist."""


class TemplateReadError(PRFlowError):
    """The PR template exists but could not be read as UTF-8 text."""


class BranchProvisioningError(PRFlowError):
    """The feature branch could not be made available on the remote."""


class GitHubAPIError(PRFlowError):
    """
    A GitHub API call did not succeed.

    ``status`` is None when the request never got a response
    (timeout or connection failure).
    """

    def __init__(self, reason: str, status: Optional[int] = None, body: str = ""):
        super().__init__(reason)
        self.status = status
        self.body = body

    @property
    def transient(self) -> bool:
        return self.status is None


class DefaultBranchError(GitHubAPIError):
    """Repository metadata could not be fetched."""


class IdentityResolutionError(GitHubAPIError):
    """The authenticated user could not be resolved."""


class BranchLookupError(GitHubAPIError):
    """A branch tip SHA could not be resolved."""


class BranchCreationError(GitHubAPIError):
    """A new branch ref was rejected."""


class PullRequestCreationError(GitHubAPIError):
    """The pulls endpoint rejected the submission."""
