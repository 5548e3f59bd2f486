"""
PRFlow CLI Entry Point.

Usage:
    prflow
    prflow create --base develop --ticket ABC-123
    prflow stats
    prflow commands
"""

import argparse
import sys
import time

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from prflow import __version__
from prflow.config import load_config
from prflow.console import ConsolePrompter
from prflow.errors import ConfigError
from prflow.metrics import MetricsLogger, log_run
from prflow.orchestrator import PullRequestOrchestrator

console = Console()

COMMANDS_HELP = """
[bold]PRFlow commands:[/bold]

1. Create a pull request from the current branch:
    prflow create
    example: prflow create --ticket ABC-123 --title "Add login page"

2. Target a branch other than the repository default:
    prflow create --base develop

3. Commit and push local changes without being asked:
    prflow create --yes --commit-message "WIP"

4. Show statistics of previous runs:
    prflow stats

5. Show this list:
    prflow commands

The GitHub token is read from GITHUB_TOKEN (environment or .env).
"""


def print_banner():
    """Print the PRFlow banner."""
    console.print(
        Panel.fit(
            f"[bold]PRFlow[/bold] v{__version__}\nInteractive GitHub pull request creation",
            border_style="blue",
        )
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prflow",
        description="PRFlow - create a GitHub pull request from the current branch",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  prflow
  prflow create --base develop
  prflow create --ticket ABC-123 --title "Fix login" --description "..."
  prflow stats
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"PRFlow {__version__}",
    )
    parser.add_argument(
        "--repo",
        default=".",
        help="Path inside the git repository (default: current directory)",
    )

    subparsers = parser.add_subparsers(dest="command")

    create = subparsers.add_parser("create", help="Create a pull request (default)")
    create.add_argument("--base", help="Base branch (default: repository default branch)")
    create.add_argument(
        "--fallback-base",
        help="Base branch to use if the default branch cannot be fetched",
    )
    create.add_argument("--template", help="PR description template")
    create.add_argument("--output", help="Where to save the rendered PR body")
    create.add_argument("--ticket", help="Ticket ID (skips the prompt)")
    create.add_argument("--title", help="PR title (skips the prompt)")
    create.add_argument("--description", help="PR description (skips the prompt)")
    create.add_argument("--commit-message", help="Commit message for uncommitted changes")
    create.add_argument(
        "--yes",
        action="store_true",
        help="Commit and push uncommitted changes without asking",
    )
    create.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce output verbosity",
    )
    create.add_argument(
        "--verbose",
        action="store_true",
        help="Print every git step and API call",
    )

    subparsers.add_parser("stats", help="Summarise previous runs")
    subparsers.add_parser("commands", help="List PRFlow commands")

    return parser


def run_create(args) -> int:
    """Run the PR workflow and report the outcome."""
    if not args.quiet:
        print_banner()

    try:
        config = load_config(
            args.repo,
            base_branch=args.base,
            fallback_base_branch=args.fallback_base,
            template_path=args.template,
            output_path=args.output,
            verbose=args.verbose,
        )
    except ConfigError as e:
        console.print(f"[red]Error: {e.reason}[/red]")
        return 1

    orchestrator = PullRequestOrchestrator(
        config,
        prompter=ConsolePrompter(console),
        answers={
            "ticket_id": args.ticket,
            "title": args.title,
            "description": args.description,
            "commit_message": args.commit_message,
        },
        assume_yes=args.yes,
    )

    start_time = time.time()

    try:
        result = orchestrator.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130

    duration = time.time() - start_time

    if config.metrics_path:
        try:
            log_run(result, config.metrics_path, duration_seconds=duration)
        except OSError as e:
            console.print(f"[yellow]⚠ Could not record run metrics: {e}[/yellow]")

    if result.succeeded:
        console.print(Panel.fit(
            f"[bold green]✅ Pull request created![/bold green]\n\n"
            f"[bold]PR URL:[/bold] {result.pr_url}\n"
            f"[bold]Branch:[/bold] {result.feature_branch} → {result.base_branch}\n"
            f"[bold]Duration:[/bold] {duration:.1f}s",
            title="Success",
            border_style="green",
        ))
        return 0

    lines = [
        "[bold red]❌ Pull request not created[/bold red]\n",
        f"[bold]Step:[/bold] {result.failed_state or 'unknown'}",
        f"[bold]Reason:[/bold] {result.reason or 'Unknown'}",
    ]
    if result.error_body:
        lines.append(f"[bold]GitHub response:[/bold] {result.error_body}")
    if result.branch_created:
        lines.append(f"[dim]Branch '{result.feature_branch}' was created and left in place.[/dim]")

    console.print(Panel.fit("\n".join(lines), title="Stopped", border_style="red"))
    return 1


def run_stats(args) -> int:
    try:
        config = load_config(args.repo)
    except ConfigError as e:
        console.print(f"[red]Error: {e.reason}[/red]")
        return 1

    if not config.metrics_path:
        console.print("[yellow]Run metrics are disabled (PRFLOW_METRICS is empty)[/yellow]")
        return 0

    summary = MetricsLogger(config.metrics_path).summary()

    table = Table(title="PRFlow runs")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key, value in summary.items():
        if key == "failures_by_state":
            for state, count in value.items():
                table.add_row(f"failed at {state}", str(count))
        elif key == "success_rate":
            table.add_row(key, f"{value:.0%}")
        else:
            table.add_row(key, str(value))

    console.print(table)
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "stats":
        sys.exit(run_stats(args))

    if args.command == "commands":
        console.print(COMMANDS_HELP)
        sys.exit(0)

    if args.command is None:
        # Bare `prflow` behaves like `prflow create` with default options
        args = parser.parse_args(["--repo", args.repo, "create"])

    sys.exit(run_create(args))


if __name__ == "__main__":
    main()
