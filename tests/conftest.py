"""
Shared fakes for PRFlow tests.

The fakes record every call so tests can assert on exactly which git
steps and GitHub API calls a run performed.
"""

from pathlib import Path

import pytest

from prflow.config import PRFlowConfig
from prflow.errors import (
    BranchCreationError,
    BranchLookupError,
    ChangeReconciliationError,
    DefaultBranchError,
    DetachedHeadError,
    IdentityResolutionError,
    PullRequestCreationError,
    RepositoryDetectionError,
)
from prflow.github.client import PullRequestRef

TEMPLATE = """# [#ticketId] #title

#description

Compare: #url
Author: @#username
Branch: #featureBranch
"""


class FakePrompter:
    """Scripted answers in, recorded lines out."""

    def __init__(self, answers=None, confirms=None):
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.questions = []
        self.lines = []

    def ask(self, question, default=None, required=True):
        self.questions.append(question)
        answer = self.answers.pop(0) if self.answers else ""
        # rich's Prompt returns the default on an empty answer
        return answer or default or ""

    def confirm(self, question, default=False):
        self.questions.append(question)
        return self.confirms.pop(0) if self.confirms else default

    def info(self, message):
        self.lines.append(("info", message))

    def warn(self, message):
        self.lines.append(("warn", message))

    def error(self, message):
        self.lines.append(("error", message))


class MemoryStore:
    """In-memory TextStore."""

    def __init__(self, files=None, fail_writes=False):
        self.files = {str(k): v for k, v in (files or {}).items()}
        self.fail_writes = fail_writes

    def exists(self, path):
        return str(path) in self.files

    def read(self, path):
        return self.files[str(path)]

    def write(self, path, content):
        if self.fail_writes:
            raise PermissionError(f"read-only: {path}")
        self.files[str(path)] = content


class FakeProbe:
    def __init__(self, repo="acme/widgets", branch="feature-x", repo_error=None, branch_error=None):
        self._repo_id = repo
        self._branch = branch
        self.repo_error = repo_error
        self.branch_error = branch_error

    def current_repository(self):
        if self.repo_error:
            raise RepositoryDetectionError(self.repo_error)
        return self._repo_id

    def current_branch(self):
        if self.branch_error:
            raise DetachedHeadError(self.branch_error)
        return self._branch


class FakeReconciler:
    def __init__(self, dirty=False, fail_step=None):
        self.dirty = dirty
        self.fail_step = fail_step
        self.commits = []

    def has_uncommitted_changes(self):
        return self.dirty

    def commit_and_push(self, message, branch):
        if self.fail_step:
            raise ChangeReconciliationError(f"git {self.fail_step} failed", step=self.fail_step)
        self.commits.append((message, branch))


class FakeGitHubClient:
    """Records calls in the order they were issued."""

    def __init__(
        self,
        default_branch="main",
        username="octocat",
        remote_branches=("main",),
        default_branch_fails=False,
        username_fails=False,
        ref_creation_fails=False,
        pr_error_body=None,
        assign_fails=False,
    ):
        self.default_branch = default_branch
        self.username = username
        self.remote_branches = set(remote_branches)
        self.default_branch_fails = default_branch_fails
        self.username_fails = username_fails
        self.ref_creation_fails = ref_creation_fails
        self.pr_error_body = pr_error_body
        self.assign_fails = assign_fails
        self.calls = []
        self.payloads = []

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]

    def get_default_branch(self, repo):
        self.calls.append(("get_default_branch", repo))
        if self.default_branch_fails:
            raise DefaultBranchError("Could not fetch repository (HTTP 404)", status=404)
        return self.default_branch

    def get_username(self):
        self.calls.append(("get_username",))
        if self.username_fails:
            raise IdentityResolutionError("Could not resolve the authenticated GitHub user", status=401)
        return self.username

    def branch_exists(self, repo, branch):
        self.calls.append(("branch_exists", repo, branch))
        return branch in self.remote_branches

    def branch_sha(self, repo, branch):
        self.calls.append(("branch_sha", repo, branch))
        if branch not in self.remote_branches:
            raise BranchLookupError(f"Could not resolve branch '{branch}'", status=404)
        return "abc1234def5678"

    def create_branch_ref(self, repo, new_branch, base_branch):
        try:
            sha = self.branch_sha(repo, base_branch)
        except BranchLookupError as e:
            raise BranchCreationError(e.reason, status=e.status)
        self.calls.append(("create_branch_ref", repo, new_branch, sha))
        if self.ref_creation_fails:
            raise BranchCreationError("Reference already exists", status=422)
        self.remote_branches.add(new_branch)
        return sha

    def create_pull_request(self, repo, payload):
        self.calls.append(("create_pull_request", repo, payload.head, payload.base))
        self.payloads.append(payload)
        if self.pr_error_body:
            raise PullRequestCreationError(
                "Failed to create pull request (HTTP 422)", status=422, body=self.pr_error_body
            )
        return PullRequestRef(number=7, html_url=f"https://github.com/{repo}/pull/7")

    def assign_pull_request(self, repo, number, assignees):
        self.calls.append(("assign_pull_request", repo, number, assignees))
        if self.assign_fails:
            raise IdentityResolutionError("Could not assign pull request #7", status=422)


@pytest.fixture
def config(tmp_path: Path) -> PRFlowConfig:
    return PRFlowConfig(
        github_token="ghp_test",
        repo_path=tmp_path,
        template_path=Path("pr_template.md"),
        output_path=Path("out/pr_body.md"),
        metrics_path=None,
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore({"pr_template.md": TEMPLATE})
