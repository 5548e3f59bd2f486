"""
Local git access for PRFlow.

Handles:
- Repository and branch detection
- Uncommitted change detection
- Stage / commit / push of local changes
"""

from prflow.git.probe import RepositoryContextProbe, parse_github_remote
from prflow.git.changes import ChangeReconciler

__all__ = ["RepositoryContextProbe", "parse_github_remote", "ChangeReconciler"]
