"""review command: run the interactive AI review of the current branch."""

from __future__ import annotations

import click
from rich.console import Console

from lgtm_cli.auth import resolve_api_key
from lgtm_cli.startup import StartupValidationError, prepare_context
from lgtm_core.config import API_KEY_ENV_VARS, load_config
from lgtm_core.providers.base import validate_api_key
from lgtm_core.reviewer import get_provider, run_interactive_review
from lgtm_core.vcs.git import GitError

console = Console()


@click.command("review")
@click.option(
    "--api-key",
    default=None,
    help="Provider API key. Defaults to ANTHROPIC_API_KEY / OPENAI_API_KEY, then LGTM_API_KEY.",
)
@click.option(
    "--model",
    type=click.Choice(["anthropic", "openai"]),
    default=None,
    help="AI model provider. Overrides config file.",
)
@click.option(
    "--base",
    "base_branch",
    default=None,
    help="Branch to compare against. Overrides config file (default: develop).",
)
@click.option("--yes", "-y", is_flag=True, help="Start the review without asking for confirmation.")
@click.pass_context
def review_cmd(ctx, api_key: str | None, model: str | None, base_branch: str | None, yes: bool):
    """Review the current branch step by step with an AI reviewer.

    Compares HEAD against the base branch, collects the changed files plus the
    local modules they import and their tests, then walks through five review
    steps. Between steps you can continue, ask follow-up questions, skip the
    next step or quit.

    \b
    Environment variables:
      ANTHROPIC_API_KEY    Used with --model anthropic (default)
      OPENAI_API_KEY       Used with --model openai
      LGTM_API_KEY         Fallback for either provider
    """
    config_path = ctx.obj.get("config_path", ".lgtm.yml") if ctx.obj else ".lgtm.yml"
    try:
        config = load_config(config_path, cli_overrides={"model": model, "base_branch": base_branch})
    except ValueError as e:
        raise StartupValidationError(str(e))

    key = resolve_api_key(config["model"], api_key)
    if not key:
        env_var = API_KEY_ENV_VARS.get(config["model"], "LGTM_API_KEY")
        raise StartupValidationError(f"No API key provided. Pass --api-key or set {env_var}.")
    if not validate_api_key(key):
        raise StartupValidationError(f"Invalid API key format. Please check your {config['model']} API key.")

    try:
        prepared = prepare_context(config)
        if prepared is None:
            return
        merge_base, context = prepared

        console.print("\n" + "─" * 60)
        if not yes and not click.confirm("Ready to start AI review?", default=True):
            console.print("[yellow]Review cancelled.[/yellow]")
            return

        try:
            provider = get_provider(config, key)
        except ImportError as e:
            raise StartupValidationError(str(e))

        run_interactive_review(context, merge_base, provider, config)
    except GitError as e:
        raise click.ClickException(str(e))
