"""Tests for the command-line entry point."""

import pytest

from prflow import main as cli
from prflow.state import WorkflowResult


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
    monkeypatch.setenv("PRFLOW_METRICS", str(tmp_path / "runs.jsonl"))


def run_cli(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


class FakeOrchestrator:
    result = None
    kwargs = None

    def __init__(self, config, **kwargs):
        FakeOrchestrator.config = config
        FakeOrchestrator.kwargs = kwargs

    def run(self):
        return FakeOrchestrator.result


class TestMain:
    def test_success_exit_code_and_metrics(self, monkeypatch, tmp_path):
        FakeOrchestrator.result = WorkflowResult(succeeded=True, pr_url="https://github.com/a/b/pull/1")
        monkeypatch.setattr(cli, "PullRequestOrchestrator", FakeOrchestrator)

        assert run_cli(["--repo", str(tmp_path), "create", "--quiet", "--ticket", "T-1"]) == 0
        assert FakeOrchestrator.kwargs["answers"]["ticket_id"] == "T-1"
        assert (tmp_path / "runs.jsonl").exists()

    def test_failure_exit_code(self, monkeypatch, tmp_path):
        FakeOrchestrator.result = WorkflowResult(
            succeeded=False, failed_state="submission", reason="rejected", error_body="{}"
        )
        monkeypatch.setattr(cli, "PullRequestOrchestrator", FakeOrchestrator)

        assert run_cli(["--repo", str(tmp_path), "create", "--quiet"]) == 1

    def test_bare_command_defaults_to_create(self, monkeypatch, tmp_path):
        FakeOrchestrator.result = WorkflowResult(succeeded=True, pr_url="u")
        monkeypatch.setattr(cli, "PullRequestOrchestrator", FakeOrchestrator)

        assert run_cli(["--repo", str(tmp_path)]) == 0
        assert FakeOrchestrator.kwargs["assume_yes"] is False

    def test_base_flag_reaches_config(self, monkeypatch, tmp_path):
        FakeOrchestrator.result = WorkflowResult(succeeded=True, pr_url="u")
        monkeypatch.setattr(cli, "PullRequestOrchestrator", FakeOrchestrator)

        run_cli(["--repo", str(tmp_path), "create", "--quiet", "--base", "develop"])

        assert FakeOrchestrator.config.base_branch == "develop"

    def test_invalid_config(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PRFLOW_TIMEOUT", "never")
        assert run_cli(["--repo", str(tmp_path), "create", "--quiet"]) == 1

    def test_stats(self, tmp_path):
        assert run_cli(["--repo", str(tmp_path), "stats"]) == 0

    def test_commands(self, capsys):
        assert run_cli(["commands"]) == 0
        assert "prflow create" in capsys.readouterr().out
