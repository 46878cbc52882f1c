"""context command: show the files a review would see, without calling a model."""

from __future__ import annotations

import click

from lgtm_cli.startup import StartupValidationError, prepare_context
from lgtm_core.config import load_config
from lgtm_core.vcs.git import GitError


@click.command("context")
@click.option(
    "--base",
    "base_branch",
    default=None,
    help="Branch to compare against. Overrides config file (default: develop).",
)
@click.pass_context
def context_cmd(ctx, base_branch: str | None):
    """Print the changed files, their local dependencies and related tests.

    Runs the same discovery as `lgtm review` but stops before the AI review,
    so no API key is needed. Useful for checking alias and exclude settings.
    """
    config_path = ctx.obj.get("config_path", ".lgtm.yml") if ctx.obj else ".lgtm.yml"
    try:
        config = load_config(config_path, cli_overrides={"base_branch": base_branch})
    except ValueError as e:
        raise StartupValidationError(str(e))

    try:
        prepare_context(config)
    except GitError as e:
        raise click.ClickException(str(e))
