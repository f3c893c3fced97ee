"""Markdown rendering for coverage results.

Everything here is a pure function of its inputs. The comment synchronizer
compares rendered bodies byte for byte to skip no-op edits, so nothing
time- or environment-dependent may leak into the output.
"""

from __future__ import annotations

from prgate_core.coverage.aggregate import AggregationResult, format_percentage
from prgate_core.coverage.gate import GateDecision
from prgate_core.git.changed_files import ChangedFileSet

_OUTPUT_DELIMITER = "EOF"


def format_threshold(threshold: float) -> str:
    return f"{threshold:g}"


def status_label(decision: GateDecision) -> str:
    return "✅ Passed" if decision.passed else "❌ Failed"


def _describe_scope(extensions: tuple[str, ...], source_dir: str) -> str:
    kinds = ", ".join(extensions) if extensions else "source"
    where = f" in {source_dir}" if source_dir else ""
    return f"{kinds} files{where}"


def render_coverage_report(
    result: AggregationResult,
    decision: GateDecision,
    changed: ChangedFileSet | None = None,
    extensions: tuple[str, ...] = (),
    source_dir: str = "",
) -> str:
    """Render the changed-files coverage section posted on the pull request."""
    actual = format_percentage(result.percentage)
    suffix = "%" if result.applicable else ""
    lines = [
        "## 📊 Coverage Report",
        "",
        f"### Changed Files Coverage: {actual}{suffix}",
        f"- **Required:** {format_threshold(decision.threshold)}%",
        f"- **Actual:** {actual}{suffix}",
        f"- **Status:** {status_label(decision)}",
        "",
    ]

    if changed is not None and changed.warning:
        lines.append(f"> ⚠️ Could not compute changed files: {' '.join(changed.warning.split())}")
        lines.append("")

    if result.files:
        lines.append(f"**{result.covered}/{result.total}** statement(s) covered across changed files.")
        lines.append("")
        lines.append("| File | Covered | Total | Coverage |")
        lines.append("|------|:-------:|:-----:|:--------:|")
        for f in result.files:
            pct = format_percentage(f.percentage)
            lines.append(f"| `{f.path}` | {f.covered} | {f.total} | {pct}{'%' if f.percentage is not None else ''} |")
    elif not result.missing:
        lines.append(f"#### No relevant files changed ({_describe_scope(extensions, source_dir)})")

    if result.missing:
        if result.files:
            lines.append("")
        lines.append("**No coverage data:**")
        for path in result.missing:
            lines.append(f"- `{path}`")

    return "\n".join(lines) + "\n"


def render_github_output(result: AggregationResult, decision: GateDecision, report: str) -> str:
    """Render the step outputs a GitHub Actions workflow reads from $GITHUB_OUTPUT."""
    return "\n".join(
        [
            f"CHANGED_FILES_COVERAGE={format_percentage(result.percentage)}",
            f"CHANGED_FILES_DETAILS<<{_OUTPUT_DELIMITER}",
            report.rstrip("\n"),
            _OUTPUT_DELIMITER,
            f"COVERAGE_CHECK_FAILED={'false' if decision.passed else 'true'}",
        ]
    ) + "\n"
