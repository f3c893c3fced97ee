"""Changed-file resolution against a base branch.

git is the source of truth here, not the GitHub API: CI already has the PR
checked out, and the coverage file refers to paths in that same working tree.
Diff order is preserved because the report lists files in that order.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from prgate_core.errors import GitError

logger = logging.getLogger(__name__)

_GIT_TIMEOUT = 60


@dataclass(frozen=True)
class ChangedFileSet:
    """Repository-relative paths changed on this branch, in diff order.

    An empty set is a normal outcome. ``warning`` is set when the diff could
    not be computed and the set is empty for that reason.
    """

    paths: tuple[str, ...] = ()
    warning: str | None = None

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self):
        return iter(self.paths)


def _run_git(args: list[str], cwd: str | None = None) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            timeout=_GIT_TIMEOUT,
            cwd=cwd,
        )
    except FileNotFoundError:
        raise GitError("git executable not found on PATH.")
    except subprocess.TimeoutExpired:
        raise GitError(f"git {args[0]} timed out after {_GIT_TIMEOUT}s.")
    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit status {result.returncode}"
        raise GitError(f"git {' '.join(args)} failed: {detail}")
    return result.stdout


def fetch_base_branch(base_branch: str, cwd: str | None = None) -> None:
    """Make origin/<base> available on shallow CI checkouts."""
    _run_git(["fetch", "--no-tags", "--", "origin", f"{base_branch}:{base_branch}"], cwd=cwd)


def diff_names(base_branch: str, cwd: str | None = None) -> list[str]:
    """Return paths changed since the merge base with origin/<base>, deletions excluded."""
    output = _run_git(["diff", "--name-only", "--diff-filter=d", f"origin/{base_branch}...HEAD"], cwd=cwd)
    return [line.strip() for line in output.splitlines() if line.strip()]


def matches_extension(path: str, extensions: tuple[str, ...]) -> bool:
    if not extensions:
        return True
    return path.endswith(extensions)


def matches_prefix(path: str, source_dir: str) -> bool:
    if not source_dir:
        return True
    return path.startswith(source_dir)


def filter_changed_files(paths: list[str], extensions: tuple[str, ...], source_dir: str) -> tuple[str, ...]:
    """Apply the extension filter, then the prefix filter, dropping repeats in order."""
    seen: set[str] = set()
    kept = []
    for path in paths:
        if not matches_extension(path, extensions):
            continue
        if not matches_prefix(path, source_dir):
            continue
        if path in seen:
            continue
        seen.add(path)
        kept.append(path)
    return tuple(kept)


def resolve_changed_files(
    base_branch: str,
    extensions: tuple[str, ...],
    source_dir: str,
    cwd: str | None = None,
    fetch: bool = True,
) -> ChangedFileSet:
    """List source files changed relative to ``base_branch``.

    Never raises GitError: a failed diff degrades to an empty set carrying a
    warning so the pipeline can still produce a report.
    """
    if fetch:
        try:
            fetch_base_branch(base_branch, cwd=cwd)
        except GitError as e:
            # The ref may already exist locally; the diff below decides.
            logger.info("Could not fetch origin/%s: %s", base_branch, e)

    try:
        names = diff_names(base_branch, cwd=cwd)
    except GitError as e:
        logger.warning("Failed to get changed files: %s", e)
        return ChangedFileSet(paths=(), warning=str(e))

    paths = filter_changed_files(names, extensions, source_dir)
    logger.debug("%d of %d changed file(s) kept after filtering", len(paths), len(names))
    return ChangedFileSet(paths=paths)
