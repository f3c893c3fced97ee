"""Read a statement coverage map from disk.

The file is a JSON object keyed by absolute source path. Each value holds a
``statements`` mapping from statement index to execution count. Istanbul's
coverage-final.json (what Jest writes) stores the same mapping under ``s``,
so both spellings are accepted.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from prgate_core.errors import DataError

logger = logging.getLogger(__name__)

CoverageMap = dict[str, tuple[int, ...]]

_STATEMENT_KEYS = ("statements", "s")


def _parse_counts(file_path: str, statements) -> tuple[int, ...]:
    if not isinstance(statements, dict):
        raise DataError(f"Statement counts for {file_path} must be an object.")
    try:
        ordered = sorted(statements.items(), key=lambda item: int(item[0]))
    except ValueError:
        raise DataError(f"Statement indexes for {file_path} must be integers.")

    counts = []
    for index, count in ordered:
        # bool is an int subclass; JSON true/false is never a valid count.
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise DataError(f"Statement {index} in {file_path} has invalid count {count!r}.")
        counts.append(count)
    return tuple(counts)


def parse_coverage_map(raw) -> CoverageMap:
    """Validate an already-decoded coverage document and return a CoverageMap."""
    if not isinstance(raw, dict):
        raise DataError("Coverage data must be a JSON object keyed by file path.")

    coverage: CoverageMap = {}
    for file_path, entry in raw.items():
        if not isinstance(entry, dict):
            raise DataError(f"Coverage entry for {file_path} must be an object.")
        key = next((k for k in _STATEMENT_KEYS if k in entry), None)
        if key is None:
            raise DataError(f"Coverage entry for {file_path} has no statement counts.")
        coverage[file_path] = _parse_counts(file_path, entry[key])
    return coverage


def load_coverage_map(path: str) -> CoverageMap:
    p = Path(path)
    if not p.is_file():
        raise DataError(f"Coverage file not found: {path}")
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DataError(f"Failed to parse coverage file {path}: {e}") from e

    coverage = parse_coverage_map(raw)
    logger.debug("Loaded coverage for %d file(s) from %s", len(coverage), path)
    return coverage
