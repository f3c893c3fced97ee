"""comment command: create or update a status comment on a pull request."""

from __future__ import annotations

import click

from prgate_comments.templates import COMMENT_TYPES, STATUSES, build_comment


@click.command("comment")
@click.option("--type", "comment_type", type=click.Choice(COMMENT_TYPES), required=True, help="Kind of report.")
@click.option("--status", type=click.Choice(STATUSES), default="success", show_default=True, help="Run outcome.")
@click.option("--title", default=None, help="Comment heading. Overrides the default for --type.")
@click.option("--body", default=None, help="Full comment body in markdown. Overrides the template.")
@click.option("--details", default=None, help='Extra details as JSON, e.g. \'{"buildDetails": "tsc failed"}\'.')
@click.option("--global-coverage", default=None, help="Global coverage percentage (coverage type).")
@click.option("--coverage-details", default=None, help="Changed-files coverage markdown (coverage type).")
@click.option("--threshold", type=click.FloatRange(min=0), default=None, help="Required changed-files coverage.")
@click.option("--repo", default=None, help="GitHub repository (owner/name). [default: $GITHUB_REPOSITORY]")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number. [default: $PR_NUMBER]")
@click.option("--shadow", "-s", is_flag=True, help="Dry-run mode: print the comment without posting it.")
@click.pass_context
def comment_cmd(
    ctx,
    comment_type: str,
    status: str,
    title: str | None,
    body: str | None,
    details: str | None,
    global_coverage: str | None,
    coverage_details: str | None,
    threshold: float | None,
    repo: str | None,
    pr_number: int | None,
    shadow: bool,
):
    """Post or update one comment per report kind on a pull request.

    Each --type owns a hidden marker, so re-running updates the same comment
    instead of adding a new one, and the three kinds never overwrite each other.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token (or use gh CLI)
      GITHUB_REPOSITORY    owner/repo (or --repo)
      PR_NUMBER            Pull request number (or --pr)
    """
    from prgate_core.config import load_config
    from prgate_cli.publish import comment_target, publish

    config_path = ctx.obj.get("config_path", ".prgate.yml") if ctx.obj else ".prgate.yml"
    config = load_config(config_path, cli_overrides={"threshold": threshold})

    rendered = build_comment(
        comment_type,
        status=status,
        title=title,
        body=body,
        details=details,
        global_coverage=global_coverage,
        coverage_details=coverage_details,
        threshold=config.threshold,
    )
    target = None if shadow else comment_target(repo, pr_number)
    publish(rendered, target, timeout=config.request_timeout, shadow=shadow)
