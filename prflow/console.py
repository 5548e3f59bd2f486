"""
Interactive surface for PRFlow.

Wraps rich's prompts so the orchestrator can be driven by a scripted
prompter in tests.
"""

from typing import Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt


class ConsolePrompter:
    """Asks questions and prints status lines on a rich Console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def ask(self, question: str, default: Optional[str] = None, required: bool = True) -> str:
        """Ask for free text; required answers are re-asked until non-empty."""
        while True:
            answer = Prompt.ask(question, default=default, console=self.console) or ""
            answer = answer.strip()
            if answer or not required:
                return answer
            self.console.print("[red]A value is required.[/red]")

    def confirm(self, question: str, default: bool = False) -> bool:
        return Confirm.ask(question, default=default, console=self.console)

    def info(self, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]{message}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")
