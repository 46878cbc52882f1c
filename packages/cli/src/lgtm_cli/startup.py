"""Pre-flight checks and context discovery shared by the review and context commands."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from lgtm_core.utils.code import filter_files
from lgtm_core.utils.context import ReviewContext, build_context, print_context_summary
from lgtm_core.utils.imports import PathResolver
from lgtm_core.vcs.git import (
    GitError,
    branch_exists,
    get_changed_files,
    get_current_branch,
    get_merge_base,
    get_repo_root,
    is_git_repo,
)

console = Console()


class StartupValidationError(click.ClickException):
    """A precondition for starting a review does not hold. Exits with status 1."""


def build_resolver(config: dict, root: Path) -> PathResolver:
    return PathResolver(
        root=root,
        extensions=tuple(config["extensions"]),
        aliases=dict(config["aliases"]),
    )


def prepare_context(config: dict) -> tuple[str, ReviewContext] | None:
    """Validate the repository state and build the review context for HEAD.

    Returns ``(merge_base, context)``, or None when there is nothing to
    review. Raises StartupValidationError when the checkout cannot be
    reviewed at all.
    """
    if not is_git_repo():
        raise StartupValidationError(
            "Not a git repository. Please run this command from within a git repository."
        )

    base = config["base_branch"]
    if not branch_exists(base):
        raise StartupValidationError(
            f"Base branch '{base}' does not exist. Set base_branch in .lgtm.yml or pass --base."
        )

    current = get_current_branch()
    console.print(f"Current branch: [bold]{current}[/bold]")
    if current == base:
        raise StartupValidationError(
            f"You are currently on the {base} branch. Please switch to a feature branch to review changes."
        )

    try:
        merge_base = get_merge_base(base)
    except GitError as e:
        raise StartupValidationError(f"Could not find a merge base with {base}: {e}")
    console.print(f"Merge base: [bold]{merge_base[:7]}[/bold]")

    all_changed = get_changed_files(merge_base)
    if not all_changed:
        console.print(f"\n[green]No changes detected between this branch and {base}.[/green]")
        return None

    changed = filter_files(all_changed, config.get("exclude", []))
    kept = set(changed)
    excluded = [f for f in all_changed if f not in kept]

    console.print(f"\n[bold]Changed files: {len(changed)}[/bold] ({len(excluded)} excluded)")
    console.print("─" * 60)
    for path in changed:
        console.print(f"  {path}")
    if excluded:
        console.print("\n[dim]Excluded files:[/dim]")
        for path in excluded:
            console.print(f"  [dim]{path}[/dim]")

    if not changed:
        console.print("\n[yellow]Every changed file is excluded from review. Nothing to do.[/yellow]")
        return None

    resolver = build_resolver(config, Path(get_repo_root()))
    context = build_context(changed, resolver)
    print_context_summary(context)

    if not context.changed_files:
        console.print("\n[yellow]None of the changed files could be read (deleted files?). Nothing to do.[/yellow]")
        return None

    return merge_base, context
