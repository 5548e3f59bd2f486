"""
GitHub API Client for PRFlow.

Thin wrapper over PyGithub exposing exactly the calls the workflow needs:
- GET  /repos/{repo}                   default branch
- GET  /repos/{repo}/branches/{branch} existence probe and tip SHA
- POST /repos/{repo}/git/refs          branch creation
- GET  /user                           authenticated login
- POST /repos/{repo}/pulls             pull request creation

A single failed call is final; retries are disabled on the underlying client.
"""

import json
from dataclasses import dataclass
from typing import Optional

from github import Auth, Github, GithubException
from requests.exceptions import RequestException
from rich.console import Console

from prflow.config import DEFAULT_API_URL, DEFAULT_TIMEOUT, PRFlowConfig
from prflow.errors import (
    BranchCreationError,
    BranchLookupError,
    DefaultBranchError,
    GitHubAPIError,
    IdentityResolutionError,
    MissingCredentialError,
    PullRequestCreationError,
)
from prflow.state import PullRequestPayload

console = Console()


@dataclass(frozen=True)
class PullRequestRef:
    """A pull request that now exists on GitHub."""

    number: int
    html_url: str


def error_body(exc: GithubException) -> str:
    """Raw response body of a failed call, for display."""
    data = exc.data
    if isinstance(data, (dict, list)):
        return json.dumps(data)
    return str(data) if data is not None else ""


class GitHubClient:
    """
    Authenticated access to the GitHub REST API.

    The token is injected at construction; nothing is read from the
    environment here.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
        verbose: bool = False,
        github: Optional[Github] = None,
    ):
        if not token:
            raise MissingCredentialError(
                "GitHub token not set. Please add GITHUB_TOKEN to .env"
            )
        self.verbose = verbose
        self._gh = github or Github(
            auth=Auth.Token(token),
            base_url=api_url,
            timeout=timeout,
            retry=None,
        )

    @classmethod
    def from_config(cls, config: PRFlowConfig) -> "GitHubClient":
        return cls(
            token=config.github_token,
            api_url=config.api_url,
            timeout=config.timeout,
            verbose=config.verbose,
        )

    def _trace(self, method: str, path: str) -> None:
        if self.verbose:
            console.print(f"[dim]{method} {path}[/dim]")

    def _repo(self, repo: str):
        # No request is issued until an attribute or sub-resource is used
        return self._gh.get_repo(repo, lazy=True)

    def get_default_branch(self, repo: str) -> str:
        """
        Fetch the repository's default branch.

        Args:
            repo: Repository in "owner/name" form

        Returns:
            Default branch name

        Raises:
            DefaultBranchError: If repository metadata cannot be fetched
        """
        self._trace("GET", f"/repos/{repo}")
        try:
            return self._gh.get_repo(repo).default_branch
        except GithubException as e:
            raise DefaultBranchError(
                f"Could not fetch repository {repo} (HTTP {e.status})",
                status=e.status,
                body=error_body(e),
            )
        except RequestException as e:
            raise DefaultBranchError(f"Could not reach GitHub: {e}")

    def get_username(self) -> str:
        """
        Login of the user the token belongs to.

        Raises:
            IdentityResolutionError: If the user cannot be resolved
        """
        self._trace("GET", "/user")
        try:
            login = self._gh.get_user().login
        except GithubException as e:
            raise IdentityResolutionError(
                f"Could not resolve the authenticated GitHub user (HTTP {e.status})",
                status=e.status,
                body=error_body(e),
            )
        except RequestException as e:
            raise IdentityResolutionError(f"Could not reach GitHub: {e}")

        if not login:
            raise IdentityResolutionError("GitHub returned no login for the token")
        return login

    def branch_exists(self, repo: str, branch: str) -> bool:
        """Any failure, including transport errors, counts as "does not exist"."""
        self._trace("GET", f"/repos/{repo}/branches/{branch}")
        try:
            self._repo(repo).get_branch(branch)
            return True
        except (GithubException, RequestException):
            return False

    def branch_sha(self, repo: str, branch: str) -> str:
        """
        Tip commit SHA of a branch.

        Raises:
            BranchLookupError: If the branch cannot be resolved
        """
        self._trace("GET", f"/repos/{repo}/branches/{branch}")
        try:
            return self._repo(repo).get_branch(branch).commit.sha
        except GithubException as e:
            raise BranchLookupError(
                f"Could not resolve branch '{branch}' (HTTP {e.status})",
                status=e.status,
                body=error_body(e),
            )
        except RequestException as e:
            raise BranchLookupError(f"Could not reach GitHub: {e}")

    def create_branch_ref(self, repo: str, new_branch: str, base_branch: str) -> str:
        """
        Create ``refs/heads/{new_branch}`` at the tip of ``base_branch``.

        Not idempotent: creating a branch that already exists fails.

        Returns:
            SHA the new branch points at

        Raises:
            BranchCreationError: If the SHA lookup or ref creation fails
        """
        try:
            sha = self.branch_sha(repo, base_branch)
        except BranchLookupError as e:
            raise BranchCreationError(
                f"Cannot create '{new_branch}': {e.reason}",
                status=e.status,
                body=e.body,
            )

        self._trace("POST", f"/repos/{repo}/git/refs")
        try:
            self._repo(repo).create_git_ref(ref=f"refs/heads/{new_branch}", sha=sha)
        except GithubException as e:
            raise BranchCreationError(
                f"GitHub rejected branch '{new_branch}' (HTTP {e.status})",
                status=e.status,
                body=error_body(e),
            )
        except RequestException as e:
            raise BranchCreationError(f"Could not reach GitHub: {e}")
        return sha

    def create_pull_request(self, repo: str, payload: PullRequestPayload) -> PullRequestRef:
        """
        Open a pull request.

        Args:
            repo: Repository in "owner/name" form
            payload: Title, head, base and body

        Returns:
            Number and web URL of the new pull request

        Raises:
            PullRequestCreationError: Carries the raw response body
        """
        self._trace("POST", f"/repos/{repo}/pulls")
        try:
            # The pulls endpoint ignores assignees; see assign_pull_request
            pr = self._repo(repo).create_pull(
                title=payload.title,
                body=payload.body,
                head=payload.head,
                base=payload.base,
            )
        except GithubException as e:
            raise PullRequestCreationError(
                f"Failed to create pull request (HTTP {e.status})",
                status=e.status,
                body=error_body(e),
            )
        except RequestException as e:
            raise PullRequestCreationError(f"Could not reach GitHub: {e}")

        return PullRequestRef(number=pr.number, html_url=pr.html_url)

    def assign_pull_request(self, repo: str, number: int, assignees: tuple[str, ...]) -> None:
        """
        Set the assignees of a pull request.

        Raises:
            GitHubAPIError: If the assignment is rejected
        """
        self._trace("POST", f"/repos/{repo}/issues/{number}/assignees")
        try:
            self._repo(repo).get_issue(number).add_to_assignees(*assignees)
        except GithubException as e:
            raise GitHubAPIError(
                f"Could not assign pull request #{number} (HTTP {e.status})",
                status=e.status,
                body=error_body(e),
            )
        except RequestException as e:
            raise GitHubAPIError(f"Could not reach GitHub: {e}")
