"""run command — handle the pull_request event of the current GitHub Actions run."""

from __future__ import annotations

import click
from rich.console import Console

from prverify_core.errors import PRVerifyError
from prverify_core.events import PREvent
from prverify_core.gh.check_run import get_repo
from prverify_core.plugin import run_plugins

console = Console()


def _annotate_error(message: str) -> None:
    # Workflow commands must be on a single line.
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    console.print(f"::error::{escaped}", markup=False, emoji=False, highlight=False, soft_wrap=True)


@click.command("run")
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    default=None,
    help="Path to the event payload JSON. Defaults to $GITHUB_EVENT_PATH.",
)
@click.option(
    "--repo",
    envvar="GITHUB_REPOSITORY",
    default=None,
    help="GitHub repository in owner/name format. Defaults to $GITHUB_REPOSITORY.",
)
@click.pass_context
def run_cmd(ctx, event_path: str | None, repo: str | None):
    """Create or update the check runs for the current pull request event.

    Meant to run as a step of a workflow triggered by `pull_request` (or
    `pull_request_target`) events. Exits non-zero when any check fails.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token with checks:write (or INPUT_GITHUB_TOKEN, or gh CLI)
      GITHUB_EVENT_PATH    Set by GitHub Actions (or use --event-path)
      GITHUB_REPOSITORY    Set by GitHub Actions (or use --repo)
    """
    from prverify_cli.auth import resolve_github_token
    from prverify_cli.cli import _build_plugins

    config = ctx.obj["config"]

    if not event_path:
        raise click.UsageError("No event payload. Set GITHUB_EVENT_PATH or pass --event-path.")
    if not repo:
        raise click.UsageError("No repository. Set GITHUB_REPOSITORY or pass --repo.")

    token = resolve_github_token()
    if not token:
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")

    plugins = _build_plugins(config)

    try:
        event = PREvent.from_file(event_path)
        console.print(
            f"[cyan]{repo}#{event.pull_request.number}: {event.raw_action or 'unknown'} event, "
            f"{len(plugins)} plugin(s)[/cyan]"
        )
        run_plugins(plugins, event, get_repo(repo, token=token))
    except PRVerifyError as e:
        _annotate_error(str(e))
        ctx.exit(1)

    console.print("[green]All checks passed.[/green]")
