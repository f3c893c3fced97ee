"""CLI entry point for prgate.

Commands:
  coverage  global or changed-files statement coverage, with an optional gate
  comment   create or update a coverage / build / e2e comment on a pull request

Components raise PrgateError subclasses; GateGroup is the one place that turns
them into an exit status. Every fatal error, usage errors included, exits 1.
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prgate_cli.commands.comment import comment_cmd
from prgate_cli.commands.coverage import coverage_cmd
from prgate_core.errors import PrgateError


class GateGroup(click.Group):
    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise
        except PrgateError as e:
            raise click.ClickException(f"{type(e).__name__}: {e}") from e


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, show_time=False)],
    )


@click.group(cls=GateGroup)
@click.version_option(
    version=importlib.metadata.version("prgate"),
    prog_name="prgate",
)
@click.option(
    "--config",
    "config_path",
    default=".prgate.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRGATE_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Changed-files coverage gate and pull request status comments for CI."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(coverage_cmd)
main.add_command(comment_cmd)
