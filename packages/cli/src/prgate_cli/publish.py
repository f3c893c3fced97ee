"""Shared posting step for commands that end in a pull request comment."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from prgate_comments.github import GitHubCommentClient
from prgate_comments.models import with_marker
from prgate_comments.sync import CommentSynchronizer
from prgate_comments.templates import RenderedComment
from prgate_core.config import CommentTarget, resolve_comment_target

console = Console(stderr=True)


def comment_target(repo: str | None, pr_number: int | None) -> CommentTarget:
    """Resolve and validate credentials and the PR before any network call."""
    from prgate_cli.auth import resolve_github_token

    return resolve_comment_target(resolve_github_token(), repo=repo, pr_number=pr_number)


def publish(rendered: RenderedComment, target: CommentTarget | None, timeout: int, shadow: bool = False) -> None:
    """Upsert ``rendered`` on the target PR, or print it when ``shadow`` is set."""
    if shadow:
        console.print(f"[bold]Shadow mode: {escape(rendered.title)} (not posted)[/bold]\n")
        body = with_marker(rendered.body, rendered.identifier)
        click.echo(body, nl=False)
        return

    client = GitHubCommentClient.from_target(target, timeout=timeout)
    try:
        result = CommentSynchronizer(client).upsert(rendered.identifier, rendered.body)
    finally:
        client.close()

    verb = {"created": "Created new", "updated": "Updated existing", "unchanged": "Left unchanged"}[result.action]
    console.print(
        f"[green]✅ {verb} {escape(rendered.title)} comment on {target.repo}#{target.pr_number} "
        f"(id {result.comment.external_id})[/green]"
    )
