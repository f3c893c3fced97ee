from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import yaml

from prgate_core.errors import ValidationError

DEFAULT_CONFIG: dict = {
    "coverage_file": "coverage/coverage-final.json",
    "base_branch": "main",
    "file_patterns": ".ts,.tsx,.js,.jsx",
    "source_dir": "src/",
    "threshold": 20,
    "request_timeout": 30,  # seconds, applied to every GitHub API round trip
}


@dataclass(frozen=True)
class GateConfig:
    """Resolved settings for one coverage run.

    Built once at the entry point and passed down explicitly; nothing reads
    options from module state.
    """

    coverage_file: str
    base_branch: str
    file_patterns: tuple[str, ...]
    source_dir: str
    threshold: float
    request_timeout: int


@dataclass(frozen=True)
class CommentTarget:
    """Where comments are posted: a token, an owner/repo slug and a PR number."""

    token: str
    repo: str
    pr_number: int


def parse_patterns(value) -> tuple[str, ...]:
    """Normalise a comma list (or YAML list) of extensions to ('.ts', '.js', ...)."""
    if value is None:
        return ()
    items = value.split(",") if isinstance(value, str) else list(value)
    patterns = []
    for item in items:
        ext = str(item).strip().lstrip("*")
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        if ext not in patterns:
            patterns.append(ext)
    return tuple(patterns)


def load_config(config_path: str = ".prgate.yml", cli_overrides: Optional[dict] = None) -> GateConfig:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prgate.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        try:
            with open(path) as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValidationError(f"Could not parse {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ValidationError(f"{config_path} must contain a mapping of settings.")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    try:
        threshold = float(config["threshold"])
        timeout = int(config["request_timeout"])
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid numeric setting: {e}") from e
    if threshold < 0:
        raise ValidationError(f"threshold must be a non-negative number, got {threshold:g}.")
    if timeout <= 0:
        raise ValidationError(f"request_timeout must be positive, got {timeout}.")
    base_branch = str(config["base_branch"])
    if not base_branch or base_branch.startswith("-"):
        raise ValidationError(f"base_branch must be a branch name, got {base_branch!r}.")

    return GateConfig(
        coverage_file=str(config["coverage_file"]),
        base_branch=base_branch,
        file_patterns=parse_patterns(config["file_patterns"]),
        source_dir=str(config["source_dir"] or ""),
        threshold=threshold,
        request_timeout=timeout,
    )


def _pr_number_from_event(event_path: str | None) -> str | None:
    """Read the PR number from the GitHub Actions event payload, if there is one."""
    if not event_path or not os.path.exists(event_path):
        return None
    try:
        with open(event_path, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    pull_request = payload.get("pull_request")
    number = pull_request.get("number") if isinstance(pull_request, dict) else None
    number = number or payload.get("number")
    return str(number) if number else None


def resolve_comment_target(
    token: str | None,
    repo: str | None = None,
    pr_number: int | None = None,
    env: Mapping[str, str] | None = None,
) -> CommentTarget:
    """Validate everything the comment synchronizer needs before any network call.

    Explicit arguments win over the environment. The PR number falls back to
    PR_NUMBER, then to the pull_request payload GitHub Actions writes to
    GITHUB_EVENT_PATH.
    """
    env = os.environ if env is None else env

    if not token:
        raise ValidationError("Required environment variable GITHUB_TOKEN is not set.")

    repo = repo or env.get("GITHUB_REPOSITORY")
    if not repo:
        raise ValidationError("Required environment variable GITHUB_REPOSITORY is not set.")
    if repo.count("/") != 1 or repo.startswith("/") or repo.endswith("/"):
        raise ValidationError(f"GITHUB_REPOSITORY must look like owner/repo, got {repo!r}.")

    raw_number = pr_number if pr_number is not None else env.get("PR_NUMBER")
    if not raw_number:
        raw_number = _pr_number_from_event(env.get("GITHUB_EVENT_PATH"))
    if not raw_number:
        raise ValidationError("Required environment variable PR_NUMBER is not set.")
    try:
        number = int(raw_number)
    except (TypeError, ValueError):
        raise ValidationError(f"PR_NUMBER must be an integer, got {raw_number!r}.")
    if number <= 0:
        raise ValidationError(f"PR_NUMBER must be positive, got {number}.")

    return CommentTarget(token=token, repo=repo, pr_number=number)
