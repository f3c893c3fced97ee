"""Comment bodies for the three report kinds prgate posts.

Each kind has a fixed identifier. The identifier, not the title, is what the
synchronizer matches on, so a custom ``--title`` never causes a second comment.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from prgate_core.errors import ValidationError

COVERAGE = "coverage"
E2E = "e2e"
BUILD = "build"

COMMENT_TYPES = (COVERAGE, E2E, BUILD)
STATUSES = ("success", "failure", "warning")

_IDENTIFIERS = {
    COVERAGE: "test-coverage",
    E2E: "e2e-tests",
    BUILD: "build-lint",
}

_DEFAULT_TITLES = {
    COVERAGE: "📊 Test Coverage Report",
    E2E: "🎭 E2E Test Results",
    BUILD: "🏗️ Build & Lint Results",
}


@dataclass(frozen=True)
class RenderedComment:
    identifier: str
    title: str
    body: str


def identifier_for(comment_type: str) -> str:
    try:
        return _IDENTIFIERS[comment_type]
    except KeyError:
        raise ValidationError(f"--type must be one of: {', '.join(COMMENT_TYPES)}")


def parse_details(details: str | None) -> dict:
    """Decode the --details JSON object. Empty input means no details."""
    if not details:
        return {}
    try:
        parsed = json.loads(details)
    except json.JSONDecodeError as e:
        raise ValidationError(f"--details is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ValidationError("--details must be a JSON object.")
    return parsed


def _status_line(status: str, success_text: str) -> str:
    if status == "failure":
        return "❌ Failed"
    if status == "warning":
        return "⚠️ Warning"
    return f"✅ {success_text}"


def _environment_lines(heading: str, environment) -> list[str]:
    if not environment:
        return []
    if not isinstance(environment, dict):
        raise ValidationError("--details 'environment' must be a JSON object.")
    lines = ["", f"### {heading}"]
    for name, value in environment.items():
        lines.append(f"- **{name}:** {value}")
    return lines


def coverage_body(
    title: str,
    global_coverage: str | None,
    coverage_details: str | None,
    threshold: float = 20,
) -> str:
    global_text = f"{global_coverage}%" if global_coverage and global_coverage != "N/A" else "N/A"
    lines = [
        f"## {title}",
        "",
        "### Global Coverage",
        f"Coverage after merging this PR will be **{global_text}**",
        "",
        "### Changed Files Coverage",
        (coverage_details or "No coverage details available").strip(),
        "",
        "---",
        "",
        f"> 💡 **Note:** The build requires {threshold:g}% coverage for changed files only, not global coverage.",
    ]
    return "\n".join(lines) + "\n"


def e2e_body(title: str, status: str, details: dict) -> str:
    lines = [
        f"## {title}",
        "",
        f"**Status:** {_status_line(status, 'Passed')}",
        f"**Details:** {details.get('testDetails') or 'All E2E tests passed successfully!'}",
    ]
    lines += _environment_lines("Test Environment", details.get("environment"))
    if status == "failure":
        lines += ["", "### 📹 Test artifacts available in the Actions tab for debugging"]
    lines += ["", "---", "", "> 🤖 Automated end-to-end test run"]
    return "\n".join(lines) + "\n"


def build_body(title: str, status: str, details: dict) -> str:
    lines = [
        f"## {title}",
        "",
        f"**Status:** {_status_line(status, 'Success')}",
        f"**Details:** {details.get('buildDetails') or 'Build and linting completed successfully!'}",
    ]
    lines += _environment_lines("Build Environment", details.get("environment"))
    lines += ["", "---", "", "> 🔧 Automated build and code quality checks"]
    return "\n".join(lines) + "\n"


def build_comment(
    comment_type: str,
    status: str = "success",
    title: str | None = None,
    body: str | None = None,
    details: str | None = None,
    global_coverage: str | None = None,
    coverage_details: str | None = None,
    threshold: float = 20,
) -> RenderedComment:
    """Render the comment for ``comment_type``.

    ``title`` replaces the heading; ``body`` replaces the whole rendered body.
    Validation happens here, before anything touches the network.
    """
    identifier = identifier_for(comment_type)
    if status not in STATUSES:
        raise ValidationError(f"--status must be one of: {', '.join(STATUSES)}")
    parsed = parse_details(details)
    heading = title or _DEFAULT_TITLES[comment_type]

    if body:
        text = body
    elif comment_type == COVERAGE:
        text = coverage_body(heading, global_coverage, coverage_details, threshold)
    elif comment_type == E2E:
        text = e2e_body(heading, status, parsed)
    else:
        text = build_body(heading, status, parsed)

    return RenderedComment(identifier=identifier, title=heading, body=text)
