"""CLI entry point for prverify.

Commands:
  run          — GitHub Actions entrypoint: handle the current pull_request event
  check-title  — check a PR title locally, without touching GitHub
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prverify_cli.commands.check_title import check_title_cmd
from prverify_cli.commands.run import run_cmd

console = Console()


def _build_plugins(config: dict) -> list:
    """Instantiate the plugins listed under ``plugins`` in .prverify.yml.

    Known plugins:
      pr-type → requires a PR type emoji/shortcode at the start of the title
    """
    from prverify_core.plugin import PRPlugin
    from prverify_core.titles import make_pr_type_verifier

    registry = {
        "pr-type": lambda: PRPlugin(
            name=config["check_name"],
            title=config["check_title"],
            verify=make_pr_type_verifier(config["docs_url"]),
        ),
    }

    plugins = []
    for name in config.get("plugins") or []:
        if name not in registry:
            raise click.UsageError(f"Unknown plugin {name!r} in config. Known plugins: {', '.join(sorted(registry))}")
        plugins.append(registry[name]())
    return plugins


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("prverify"),
    prog_name="prverify",
)
@click.option(
    "--config",
    "config_path",
    default=".prverify.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRVERIFY_CONFIG",
)
@click.option("--debug", is_flag=True, help="Log every Checks API call.")
@click.pass_context
def main(ctx: click.Context, config_path: str, debug: bool):
    """Keep a PR check run in sync with pull request events."""
    from prverify_core.config import load_config

    ctx.ensure_object(dict)

    config = load_config(config_path, cli_overrides={"log_level": "DEBUG" if debug else None})
    _configure_logging(config["log_level"])

    ctx.obj["config"] = config


main.add_command(run_cmd)
main.add_command(check_title_cmd)
