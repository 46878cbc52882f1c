"""Terminal rendering for the review session.

Everything the user sees between prompts goes through the shared rich
Console: step headers, the navigation menu, rendered model answers and
error lines.
"""

from __future__ import annotations

from rich.console import Console
from rich.markdown import Markdown
from rich.rule import Rule

console = Console()


def clear_screen() -> None:
    console.clear()


def print_header(title: str, step_number: int | None = None, total_steps: int | None = None) -> None:
    console.print()
    if step_number is not None and total_steps is not None:
        console.print(Rule(f"[bold cyan]Step {step_number}/{total_steps}: {title}[/bold cyan]", style="cyan"))
    else:
        console.print(Rule(f"[bold cyan]{title}[/bold cyan]", style="cyan"))
    console.print()


def print_navigation(next_step_title: str | None, can_skip: bool) -> None:
    console.print()
    console.print(Rule("[bold yellow]Navigation[/bold yellow]", style="dim"))
    if next_step_title:
        console.print(f"  [green]↵[/green]  Continue to {next_step_title}")
    else:
        console.print("  [green]↵[/green]  Finish review")
    console.print("  [cyan]a[/cyan]  Ask a follow-up question")
    if can_skip and next_step_title:
        console.print(f"  [yellow]s[/yellow]  Skip {next_step_title}")
    console.print("  [red]q[/red]  Quit review")
    console.print(Rule(style="dim"))


def print_qa_header() -> None:
    console.print()
    console.print(Rule("[bold magenta]Interactive Q&A[/bold magenta]", style="magenta"))
    console.print("[dim]Ask questions about this review step.[/dim]")
    console.print('[dim]Type "done" or "exit" (or press Enter on an empty line) to return to navigation.[/dim]\n')


def print_ai_response(response: str) -> None:
    console.print(Markdown(response))


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    console.print(f"[red]{message}[/red]")
