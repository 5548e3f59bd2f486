"""
Workflow state for PRFlow.

The orchestrator graph threads a single WorkflowState through every node.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class WorkflowInput:
    """Answers collected from the user."""

    ticket_id: str
    title: str
    description: str
    commit_message: Optional[str] = None


@dataclass(frozen=True)
class PullRequestPayload:
    """The pull request submitted at the end of a run."""

    title: str
    head: str
    base: str
    body: str
    assignees: tuple[str, ...]

    @classmethod
    def build(
        cls,
        ticket_id: str,
        title: str,
        head: str,
        base: str,
        body: str,
        assignee: str,
    ) -> "PullRequestPayload":
        return cls(
            title=format_title(ticket_id, title),
            head=head,
            base=base,
            body=body,
            assignees=(assignee,),
        )


def format_title(ticket_id: str, title: str) -> str:
    """PR titles are always ``[ticket] - title``."""
    return f"[{ticket_id}] - {title}"


def compare_url(repo: str, base: str, feature: str) -> str:
    return f"https://github.com/{repo}/compare/{base}...{feature}"


@dataclass
class WorkflowState:
    """State passed between orchestrator nodes."""

    # Context
    repo: Optional[str] = None
    feature_branch: Optional[str] = None
    base_branch: Optional[str] = None

    # Reconciliation
    committed: bool = False
    commit_message: Optional[str] = None

    # User input
    workflow_input: Optional[WorkflowInput] = None
    username: Optional[str] = None

    # Remote
    branch_created: bool = False

    # Rendering
    body: Optional[str] = None
    artifact_path: Optional[str] = None

    # Outcome
    pr_url: Optional[str] = None
    failed_state: Optional[str] = None
    reason: Optional[str] = None
    error_body: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.failed_state is not None


@dataclass(frozen=True)
class WorkflowResult:
    """Terminal outcome of a run: Succeeded or Failed(reason)."""

    succeeded: bool
    pr_url: Optional[str] = None
    failed_state: Optional[str] = None
    reason: Optional[str] = None
    error_body: Optional[str] = None
    repo: Optional[str] = None
    feature_branch: Optional[str] = None
    base_branch: Optional[str] = None
    committed: bool = False
    branch_created: bool = False

    @classmethod
    def from_state(cls, state: WorkflowState) -> "WorkflowResult":
        return cls(
            succeeded=not state.failed and state.pr_url is not None,
            pr_url=state.pr_url,
            failed_state=state.failed_state,
            reason=state.reason,
            error_body=state.error_body,
            repo=state.repo,
            feature_branch=state.feature_branch,
            base_branch=state.base_branch,
            committed=state.committed,
            branch_created=state.branch_created,
        )
