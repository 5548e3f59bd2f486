"""
LangGraph Orchestration for PRFlow.

Implements PR creation as a linear state machine where:
- Every node is a gate that either advances or records a failure
- A failed gate routes straight to END
- No step is retried
"""

from functools import wraps
from typing import Callable, Literal, Optional

from langgraph.graph import END, StateGraph

from prflow.config import PRFlowConfig
from prflow.console import ConsolePrompter
from prflow.errors import (
    BranchProvisioningError,
    GitHubAPIError,
    InputError,
    MissingCredentialError,
    PRFlowError,
    UncommittedChangesError,
)
from prflow.git.changes import ChangeReconciler
from prflow.git.probe import RepositoryContextProbe
from prflow.github.branches import BranchProvisioner
from prflow.github.client import GitHubClient
from prflow.github.pr_body import FileStore, TemplateRenderer, TextStore, build_context
from prflow.state import (
    PullRequestPayload,
    WorkflowInput,
    WorkflowResult,
    WorkflowState,
    compare_url,
)

DEFAULT_COMMIT_MESSAGE = "Auto commit"

# Gate order
STEPS = (
    "credential_check",
    "context_detection",
    "change_reconciliation",
    "base_branch_resolution",
    "input_collection",
    "identity_resolution",
    "branch_provisioning",
    "template_rendering",
    "artifact_persistence",
    "submission",
)


def gate(step: str) -> Callable:
    """Turn a PRFlowError raised by a node into a recorded failure."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(self, state: WorkflowState) -> WorkflowState:
            try:
                return func(self, state)
            except PRFlowError as e:
                state.failed_state = step
                state.reason = e.reason
                if step == "submission" and isinstance(e, GitHubAPIError):
                    state.error_body = e.body
                self.prompter.error(f"❌ {e.reason}")
                return state

        return wrapper

    return decorator


def should_continue(state: WorkflowState) -> Literal["stop", "continue"]:
    """Stop as soon as any gate has failed."""
    if state.failed:
        return "stop"
    return "continue"


class PullRequestOrchestrator:
    """
    Sequences detection, reconciliation, provisioning and submission.

    Collaborators are injectable; anything left as None is built from
    ``config`` when first needed.
    """

    def __init__(
        self,
        config: PRFlowConfig,
        prompter: Optional[ConsolePrompter] = None,
        client: Optional[GitHubClient] = None,
        probe: Optional[RepositoryContextProbe] = None,
        reconciler: Optional[ChangeReconciler] = None,
        store: Optional[TextStore] = None,
        answers: Optional[dict] = None,
        assume_yes: bool = False,
    ):
        self.config = config
        self.prompter = prompter or ConsolePrompter()
        self.client = client
        self.probe = probe or RepositoryContextProbe(str(config.repo_path), remote=config.remote)
        self.reconciler = reconciler
        self.store = store or FileStore()
        self.renderer = TemplateRenderer(self.store)
        self.answers = answers or {}
        self.assume_yes = assume_yes

    # ========================================================================
    # Nodes
    # ========================================================================

    @gate("credential_check")
    def credential_check(self, state: WorkflowState) -> WorkflowState:
        if not self.config.github_token:
            raise MissingCredentialError("GitHub token not set. Please add GITHUB_TOKEN to .env")
        if self.client is None:
            self.client = GitHubClient.from_config(self.config)
        return state

    @gate("context_detection")
    def context_detection(self, state: WorkflowState) -> WorkflowState:
        state.repo = self.probe.current_repository()
        state.feature_branch = self.probe.current_branch()
        self.prompter.info(f"Current repository detected: {state.repo}")
        self.prompter.info(f"Feature branch detected: {state.feature_branch}")
        return state

    @gate("change_reconciliation")
    def change_reconciliation(self, state: WorkflowState) -> WorkflowState:
        reconciler = self.reconciler or ChangeReconciler(
            self.probe.repo, remote=self.config.remote, verbose=self.config.verbose
        )

        if not reconciler.has_uncommitted_changes():
            self.prompter.info("✅ No uncommitted changes found.")
            return state

        self.prompter.warn("⚠️ Uncommitted changes detected!")
        if not (
            self.assume_yes
            or self.prompter.confirm("Would you like to commit and push changes before creating the PR?")
        ):
            raise UncommittedChangesError("PR cannot be created with uncommitted changes.")

        message = self.answers.get("commit_message") or self.prompter.ask(
            "Enter commit message", default=DEFAULT_COMMIT_MESSAGE
        )
        reconciler.commit_and_push(message, state.feature_branch)
        state.committed = True
        state.commit_message = message
        self.prompter.info("✅ Changes committed and pushed.")
        return state

    @gate("base_branch_resolution")
    def base_branch_resolution(self, state: WorkflowState) -> WorkflowState:
        if self.config.base_branch:
            state.base_branch = self.config.base_branch
        else:
            try:
                state.base_branch = self.client.get_default_branch(state.repo)
            except GitHubAPIError as e:
                fallback = self.config.fallback_base_branch
                if not fallback:
                    raise
                warning = f"{e.reason}; falling back to base branch '{fallback}'"
                self.prompter.warn(f"⚠️ {warning}")
                state.warnings = state.warnings + [warning]
                state.base_branch = fallback

        self.prompter.info(f"Base branch detected: {state.base_branch}")
        return state

    @gate("input_collection")
    def input_collection(self, state: WorkflowState) -> WorkflowState:
        values = {}
        for key, question in (
            ("ticket_id", "Enter Ticket ID"),
            ("title", "Enter PR Title"),
            ("description", "Enter Description"),
        ):
            value = (self.answers.get(key) or self.prompter.ask(question)).strip()
            if not value:
                raise InputError(f"{question[len('Enter '):]} is required.")
            values[key] = value

        state.workflow_input = WorkflowInput(**values, commit_message=state.commit_message)
        return state

    @gate("identity_resolution")
    def identity_resolution(self, state: WorkflowState) -> WorkflowState:
        state.username = self.client.get_username()
        return state

    @gate("branch_provisioning")
    def branch_provisioning(self, state: WorkflowState) -> WorkflowState:
        provisioner = BranchProvisioner(self.client, verbose=self.config.verbose)
        if not provisioner.ensure_branch(state.repo, state.feature_branch, state.base_branch):
            detail = f": {provisioner.last_error.reason}" if provisioner.last_error else ""
            raise BranchProvisioningError(f"Failed to create feature branch{detail}")
        state.branch_created = provisioner.created
        return state

    @gate("template_rendering")
    def template_rendering(self, state: WorkflowState) -> WorkflowState:
        answers = state.workflow_input
        context = build_context(
            ticket_id=answers.ticket_id,
            title=answers.title,
            description=answers.description,
            url=compare_url(state.repo, state.base_branch, state.feature_branch),
            username=state.username,
            feature_branch=state.feature_branch,
        )
        state.body = self.renderer.render(self.config.template_path, context)
        return state

    @gate("artifact_persistence")
    def artifact_persistence(self, state: WorkflowState) -> WorkflowState:
        path = self.config.output_path
        try:
            self.store.write(path, state.body)
        except OSError as e:
            warning = f"Could not save PR body to {path}: {e}"
            self.prompter.warn(f"⚠️ {warning}")
            state.warnings = state.warnings + [warning]
            return state

        state.artifact_path = str(path)
        self.prompter.info(f"✅ PR template saved to {path}")
        return state

    @gate("submission")
    def submission(self, state: WorkflowState) -> WorkflowState:
        answers = state.workflow_input
        payload = PullRequestPayload.build(
            ticket_id=answers.ticket_id,
            title=answers.title,
            head=state.feature_branch,
            base=state.base_branch,
            body=state.body,
            assignee=state.username,
        )

        pr = self.client.create_pull_request(state.repo, payload)
        state.pr_url = pr.html_url
        self.prompter.info(f"✅ Pull request created successfully: {pr.html_url}")

        try:
            self.client.assign_pull_request(state.repo, pr.number, payload.assignees)
        except GitHubAPIError as e:
            warning = f"{e.reason}; the PR was created without an assignee"
            self.prompter.warn(f"⚠️ {warning}")
            state.warnings = state.warnings + [warning]

        return state

    # ========================================================================
    # Graph
    # ========================================================================

    def build_graph(self):
        """
        Build the PR creation graph.

        Returns:
            Compiled LangGraph state machine
        """
        graph = StateGraph(WorkflowState)

        for step in STEPS:
            graph.add_node(step, getattr(self, step))

        graph.set_entry_point(STEPS[0])

        for step, next_step in zip(STEPS, STEPS[1:]):
            graph.add_conditional_edges(
                step,
                should_continue,
                {
                    "stop": END,
                    "continue": next_step,
                },
            )

        graph.add_edge(STEPS[-1], END)

        return graph.compile()

    def run(self) -> WorkflowResult:
        """Execute one workflow run and return its terminal outcome."""
        final = self.build_graph().invoke(WorkflowState())
        return WorkflowResult.from_state(WorkflowState(**final))
