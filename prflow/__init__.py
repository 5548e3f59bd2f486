"""
PRFlow

Interactive pull request creation from the current git checkout.
"""

__version__ = "0.1.0"

from prflow.state import WorkflowState, WorkflowResult
from prflow.orchestrator import PullRequestOrchestrator

__all__ = ["WorkflowState", "WorkflowResult", "PullRequestOrchestrator", "__version__"]
