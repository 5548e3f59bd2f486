"""
Run history for PRFlow.

Every workflow run appends one JSON line describing its outcome.
"""

from prflow.metrics.logger import log_run, MetricsLogger, RunMetrics

__all__ = ["log_run", "MetricsLogger", "RunMetrics"]
