"""
Configuration for PRFlow.

Values come from, in increasing priority:
- Built-in defaults
- A ``.env`` file / process environment
- Command-line overrides
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from prflow.errors import ConfigError

DEFAULT_API_URL = "https://api.github.com"

# Seconds per HTTP call
DEFAULT_TIMEOUT = 30

# Bundled template used when none is configured
DEFAULT_TEMPLATE_PATH = Path(__file__).parent / "templates" / "pr_template.md"

# Rendered PR body, relative to the repository root
DEFAULT_OUTPUT_PATH = ".prflow/pr_body.md"

DEFAULT_METRICS_PATH = ".prflow/runs.jsonl"


@dataclass
class PRFlowConfig:
    """
    Settings for a single workflow run.

    ``base_branch`` skips the default-branch lookup entirely.
    ``fallback_base_branch`` is only used when that lookup fails; when it
    is None a failed lookup ends the run.
    """

    github_token: str = ""
    api_url: str = DEFAULT_API_URL
    timeout: int = DEFAULT_TIMEOUT

    repo_path: Path = field(default_factory=Path.cwd)
    remote: str = "origin"

    template_path: Path = DEFAULT_TEMPLATE_PATH
    output_path: Path = Path(DEFAULT_OUTPUT_PATH)
    metrics_path: Optional[Path] = Path(DEFAULT_METRICS_PATH)

    base_branch: Optional[str] = None
    fallback_base_branch: Optional[str] = None

    verbose: bool = False

    def with_overrides(self, **overrides) -> "PRFlowConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _resolve(repo_path: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else repo_path / path


def find_repo_root(path: str) -> Path:
    """Work-tree root containing ``path``, or ``path`` itself outside a repository."""
    start = Path(path).resolve()
    try:
        repo = Repo(start, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return start
    return Path(repo.working_tree_dir or start).resolve()


def load_config(repo_path: str = ".", **overrides) -> PRFlowConfig:
    """
    Build the configuration for a repository.

    Args:
        repo_path: Path inside the repository the PR is created from
        **overrides: Values from the command line (None means "not given")

    Returns:
        Populated PRFlowConfig

    Raises:
        ConfigError: If PRFLOW_TIMEOUT is not a positive integer
    """
    root = find_repo_root(repo_path)
    load_dotenv(root / ".env")

    raw_timeout = os.getenv("PRFLOW_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = int(raw_timeout)
    except ValueError:
        raise ConfigError(f"PRFLOW_TIMEOUT must be an integer, got {raw_timeout!r}")
    if timeout <= 0:
        raise ConfigError(f"PRFLOW_TIMEOUT must be positive, got {timeout}")

    template = os.getenv("PRFLOW_TEMPLATE")
    metrics = os.getenv("PRFLOW_METRICS", DEFAULT_METRICS_PATH)

    config = PRFlowConfig(
        github_token=os.getenv("GITHUB_TOKEN", "").strip(),
        api_url=os.getenv("GITHUB_API_URL", DEFAULT_API_URL).rstrip("/"),
        timeout=timeout,
        repo_path=root,
        template_path=_resolve(root, template) if template else DEFAULT_TEMPLATE_PATH,
        output_path=_resolve(root, os.getenv("PRFLOW_OUTPUT", DEFAULT_OUTPUT_PATH)),
        metrics_path=_resolve(root, metrics) if metrics else None,
        base_branch=os.getenv("PRFLOW_BASE_BRANCH") or None,
        fallback_base_branch=os.getenv("PRFLOW_FALLBACK_BASE") or None,
    )

    for key in ("template_path", "output_path"):
        if overrides.get(key) is not None:
            overrides[key] = _resolve(root, str(overrides[key]))

    return config.with_overrides(**overrides)
