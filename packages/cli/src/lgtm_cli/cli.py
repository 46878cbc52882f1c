"""CLI entry point for lgtm.

Commands:
  review   interactive, step-by-step AI review of the current branch
  context  show the review context (changed files, dependencies, tests) only
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from lgtm_cli.commands.context import context_cmd
from lgtm_cli.commands.review import review_cmd

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(
    version=importlib.metadata.version("lgtm-review"),
    prog_name="lgtm",
)
@click.option(
    "--config",
    "config_path",
    default=".lgtm.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="LGTM_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """AI-assisted, step-by-step code review of your feature branch."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(review_cmd)
main.add_command(context_cmd)
