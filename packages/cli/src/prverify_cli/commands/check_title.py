"""check-title command — classify a PR title locally."""

from __future__ import annotations

import click
from rich.console import Console

from prverify_core.events import PullRequest
from prverify_core.verifier import run_verification

console = Console()


@click.command("check-title")
@click.argument("title")
@click.pass_context
def check_title_cmd(ctx, title: str):
    """Check that TITLE starts with a PR type prefix, as the pr-type check would."""
    from prverify_core.titles import make_pr_type_verifier

    config = ctx.obj["config"]
    verify = make_pr_type_verifier(config["docs_url"])

    outcome = run_verification(verify, PullRequest(number=0, title=title, head_sha=""))
    if outcome.failed:
        console.print(f"[red]{outcome.summary}[/red]\n", emoji=False)
        console.print(outcome.text, markup=False, emoji=False, highlight=False, soft_wrap=True)
        ctx.exit(1)

    console.print(outcome.text, markup=False, emoji=False, highlight=False, soft_wrap=True)
