"""Reduce a coverage map to statement coverage percentages."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from prgate_core.coverage.loader import CoverageMap

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def percentage(covered: int, total: int) -> Decimal | None:
    """covered / total * 100 rounded half-up to two places, or None when total is 0."""
    if total == 0:
        return None
    return (Decimal(covered) * 100 / Decimal(total)).quantize(_CENT, rounding=ROUND_HALF_UP)


def format_percentage(value: Decimal | None) -> str:
    return "N/A" if value is None else f"{value}"


@dataclass(frozen=True)
class FileCoverage:
    path: str
    covered: int
    total: int
    percentage: Decimal | None


@dataclass(frozen=True)
class AggregationResult:
    """Statement totals for a set of files.

    ``percentage`` is None when there was nothing to measure ("not
    applicable"). ``missing`` lists changed files with no coverage entry; they
    are left out of ``covered`` and ``total`` rather than counted as 0%.
    """

    percentage: Decimal | None
    covered: int = 0
    total: int = 0
    files: tuple[FileCoverage, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)

    @property
    def applicable(self) -> bool:
        return self.percentage is not None

    @property
    def display(self) -> str:
        return format_percentage(self.percentage)


def _count(counts: tuple[int, ...]) -> tuple[int, int]:
    return sum(1 for c in counts if c > 0), len(counts)


def aggregate_global(coverage: CoverageMap) -> AggregationResult:
    covered = total = 0
    for counts in coverage.values():
        file_covered, file_total = _count(counts)
        covered += file_covered
        total += file_total
    return AggregationResult(percentage=percentage(covered, total), covered=covered, total=total)


def _normalise(path: str) -> str:
    return path.replace("\\", "/")


def find_coverage_key(coverage: CoverageMap, path: str, root: str | None = None) -> str | None:
    """Locate the coverage entry for a repository-relative path.

    Exact absolute-path match first. Otherwise fall back to a suffix match on
    a path-segment boundary, which absorbs differences between the checkout
    root git reports against and the one the test runner saw.
    """
    absolute = os.path.abspath(os.path.join(root or os.getcwd(), path))
    if absolute in coverage:
        return absolute

    wanted = _normalise(path).lstrip("/")
    if wanted.startswith("./"):
        wanted = wanted[2:]
    for key in coverage:
        candidate = _normalise(key)
        if candidate == wanted or candidate.endswith("/" + wanted):
            return key
    return None


def aggregate_changed(coverage: CoverageMap, changed: Iterable[str], root: str | None = None) -> AggregationResult:
    paths = list(changed)
    if not paths:
        # Nothing changed: the coverage map is deliberately not inspected.
        return AggregationResult(percentage=None)

    covered = total = 0
    files: list[FileCoverage] = []
    missing: list[str] = []

    for path in paths:
        key = find_coverage_key(coverage, path, root)
        if key is None:
            logger.info("%s: no coverage data found", path)
            missing.append(path)
            continue
        file_covered, file_total = _count(coverage[key])
        covered += file_covered
        total += file_total
        entry = FileCoverage(path, file_covered, file_total, percentage(file_covered, file_total))
        files.append(entry)
        logger.info("%s: %d/%d (%s%%)", path, file_covered, file_total, format_percentage(entry.percentage))

    return AggregationResult(
        percentage=percentage(covered, total),
        covered=covered,
        total=total,
        files=tuple(files),
        missing=tuple(missing),
    )
