"""coverage command: global or changed-files statement coverage."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from prgate_core.config import DEFAULT_CONFIG
from prgate_core.coverage.aggregate import aggregate_changed, aggregate_global
from prgate_core.coverage.gate import evaluate
from prgate_core.coverage.loader import load_coverage_map
from prgate_core.git.changed_files import resolve_changed_files
from prgate_core.report import format_threshold, render_coverage_report, render_github_output

# stdout carries only machine-readable output; progress goes to stderr.
console = Console(stderr=True)


def _write(path: str, text: str, mode: str = "w") -> None:
    try:
        with open(path, mode, encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise click.FileError(path, hint=e.strerror or str(e)) from e


@click.command("coverage")
@click.option("--global", "global_mode", is_flag=True, help="Print global coverage across every instrumented file.")
@click.option("--changed-files", "changed_mode", is_flag=True, help="Gate coverage of files changed on this branch.")
@click.option(
    "--coverage-file",
    default=None,
    help=f"Path to the coverage JSON file. [default: {DEFAULT_CONFIG['coverage_file']}]",
)
@click.option("--base-branch", default=None, help=f"Branch to diff against. [default: {DEFAULT_CONFIG['base_branch']}]")
@click.option(
    "--file-patterns",
    default=None,
    help=f"Comma-separated extensions to include. [default: {DEFAULT_CONFIG['file_patterns']}]",
)
@click.option("--source-dir", default=None, help=f"Source directory prefix. [default: {DEFAULT_CONFIG['source_dir']}]")
@click.option(
    "--threshold",
    type=click.FloatRange(min=0),
    default=None,
    help=f"Minimum changed-files coverage percentage. [default: {DEFAULT_CONFIG['threshold']}]",
)
@click.option("--root", default=None, help="Directory changed paths are relative to. [default: cwd]")
@click.option("--report-file", default=None, help="Also write the markdown report to this file.")
@click.option(
    "--github-output",
    default=None,
    envvar="GITHUB_OUTPUT",
    help="Append step outputs to this file (set automatically in GitHub Actions).",
)
@click.option("--enforce", is_flag=True, help="Exit with status 1 when the coverage gate fails.")
@click.option("--comment", is_flag=True, help="Create or update the coverage comment on the pull request.")
@click.option("--shadow", "-s", is_flag=True, help="With --comment: print the comment instead of posting it.")
@click.option("--repo", default=None, help="GitHub repository (owner/name). [default: $GITHUB_REPOSITORY]")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number. [default: $PR_NUMBER]")
@click.pass_context
def coverage_cmd(
    ctx,
    global_mode: bool,
    changed_mode: bool,
    coverage_file: str | None,
    base_branch: str | None,
    file_patterns: str | None,
    source_dir: str | None,
    threshold: float | None,
    root: str | None,
    report_file: str | None,
    github_output: str | None,
    enforce: bool,
    comment: bool,
    shadow: bool,
    repo: str | None,
    pr_number: int | None,
):
    """Compute statement coverage from a coverage-final.json file.

    \b
    --global prints the overall percentage (N/A when nothing is instrumented).
    --changed-files diffs against origin/<base-branch>, reports coverage of the
    changed source files and prints GitHub Actions outputs:
      CHANGED_FILES_COVERAGE, CHANGED_FILES_DETAILS, COVERAGE_CHECK_FAILED

    \b
    Environment variables (only with --comment):
      GITHUB_TOKEN         GitHub token (or use gh CLI)
      GITHUB_REPOSITORY    owner/repo
      PR_NUMBER            Pull request number
    """
    from prgate_core.config import load_config
    from prgate_cli.publish import comment_target

    if global_mode == changed_mode:
        raise click.UsageError("Specify exactly one of --global or --changed-files.")
    if comment and not changed_mode:
        raise click.UsageError("--comment requires --changed-files.")

    config_path = ctx.obj.get("config_path", ".prgate.yml") if ctx.obj else ".prgate.yml"
    config = load_config(
        config_path,
        cli_overrides={
            "coverage_file": coverage_file,
            "base_branch": base_branch,
            "file_patterns": file_patterns,
            "source_dir": source_dir,
            "threshold": threshold,
        },
    )

    # Credentials are checked before the coverage file is even read.
    target = comment_target(repo, pr_number) if comment and not shadow else None

    coverage = load_coverage_map(config.coverage_file)

    if global_mode:
        result = aggregate_global(coverage)
        if github_output:
            _write(github_output, f"GLOBAL_COVERAGE={result.display}\n", mode="a")
        click.echo(result.display)
        return

    # A failed diff is logged by the resolver and surfaced in the report.
    changed = resolve_changed_files(config.base_branch, config.file_patterns, config.source_dir, cwd=root)

    if changed.paths:
        console.print("📋 Checking coverage for changed files:")
        for path in changed:
            console.print(f"  - {escape(path)}")

    result = aggregate_changed(coverage, changed, root=root)
    decision = evaluate(result, config.threshold)
    report = render_coverage_report(result, decision, changed, config.file_patterns, config.source_dir)
    outputs = render_github_output(result, decision, report)

    # Nothing reaches stdout until both files are written.
    if report_file:
        _write(report_file, report)
    if github_output:
        _write(github_output, outputs, mode="a")
    click.echo(outputs, nl=False)

    if result.applicable:
        console.print(
            f"Overall coverage for changed files: {result.covered}/{result.total} ({result.display}%), "
            + ("[green]passed[/green]" if decision.passed else "[red]failed[/red]")
        )
    else:
        console.print("[dim]No instrumented changed files; nothing to gate.[/dim]")

    if comment:
        from prgate_cli.publish import publish
        from prgate_comments.templates import COVERAGE, build_comment

        rendered = build_comment(
            COVERAGE,
            global_coverage=aggregate_global(coverage).display,
            coverage_details=report,
            threshold=config.threshold,
        )
        publish(rendered, target, timeout=config.request_timeout, shadow=shadow)

    if enforce and not decision.passed:
        raise click.ClickException(
            f"Changed-files coverage {result.display}% is below the required "
            f"{format_threshold(decision.threshold)}%."
        )
