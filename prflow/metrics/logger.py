"""
Metrics Logger for PRFlow.

Stores one structured record per workflow run.
"""

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from prflow.state import WorkflowResult


@dataclass
class RunMetrics:
    """Metrics for a single PRFlow run."""

    timestamp: str
    repo: Optional[str]
    feature_branch: Optional[str]
    base_branch: Optional[str]

    # Outcome
    success: bool
    pr_url: Optional[str]
    failed_state: Optional[str]
    reason: Optional[str]

    # Side effects
    committed: bool
    branch_created: bool

    duration_seconds: Optional[float] = None


class MetricsLogger:
    """
    Persistent metrics logger.

    Writes JSON lines to a file for later analysis.
    """

    def __init__(self, path: str = ".prflow/runs.jsonl"):
        self.path = Path(path)
        self.skipped = 0

    def log(self, metrics: RunMetrics) -> None:
        """
        Append metrics to the log file.

        Args:
            metrics: Run metrics to log
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(asdict(metrics)) + "\n")

    def read_all(self) -> list[RunMetrics]:
        """
        Read all logged metrics.

        Returns:
            List of RunMetrics objects; unreadable lines are counted
            in ``skipped``
        """
        if not self.path.exists():
            return []

        metrics = []
        self.skipped = 0
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    metrics.append(RunMetrics(**json.loads(line)))
                except (ValueError, TypeError):
                    # Truncated, hand-edited or older-schema record
                    self.skipped += 1

        return metrics

    def summary(self) -> dict:
        """
        Generate summary statistics.

        Returns:
            Dictionary of summary stats
        """
        all_metrics = self.read_all()

        if not all_metrics:
            return {"total_runs": 0}

        total = len(all_metrics)
        successful = sum(1 for m in all_metrics if m.success)

        failures: dict[str, int] = {}
        for m in all_metrics:
            if m.failed_state:
                failures[m.failed_state] = failures.get(m.failed_state, 0) + 1

        return {
            "total_runs": total,
            "successful": successful,
            "success_rate": successful / total,
            "branches_created": sum(1 for m in all_metrics if m.branch_created),
            "auto_commits": sum(1 for m in all_metrics if m.committed),
            "failures_by_state": failures,
            "skipped_records": self.skipped,
        }


def log_run(
    result: WorkflowResult,
    path: Path,
    duration_seconds: Optional[float] = None,
) -> None:
    """
    Log metrics from a completed run.

    Args:
        result: Terminal workflow outcome
        path: JSONL file to append to
        duration_seconds: Optional run duration
    """
    metrics = RunMetrics(
        timestamp=datetime.now(timezone.utc).isoformat(),
        repo=result.repo,
        feature_branch=result.feature_branch,
        base_branch=result.base_branch,
        success=result.succeeded,
        pr_url=result.pr_url,
        failed_state=result.failed_state,
        reason=result.reason,
        committed=result.committed,
        branch_created=result.branch_created,
        duration_seconds=duration_seconds,
    )

    MetricsLogger(path).log(metrics)
