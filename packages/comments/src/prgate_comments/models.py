"""Comment data models and the identifier marker format.

A tracked comment is recognised across runs by a marker embedded in its body:

    <!-- prgate-comment: test-coverage -->

The closing ``-->`` delimits the identifier, so ``test-coverage`` can never
match a comment tagged ``test-coverage-nightly``. Markers are invisible in
rendered markdown.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from prgate_core.errors import ValidationError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")

CREATED = "created"
UPDATED = "updated"
UNCHANGED = "unchanged"


def marker_for(identifier: str) -> str:
    if not _IDENTIFIER_RE.match(identifier or ""):
        raise ValidationError(
            f"Invalid comment identifier {identifier!r}: use letters, digits, '.', '_' or '-'."
        )
    return f"<!-- prgate-comment: {identifier} -->"


def with_marker(body: str, identifier: str) -> str:
    """Return ``body`` with the identifier marker appended exactly once."""
    marker = marker_for(identifier)
    if marker in body:
        return body
    return f"{body.rstrip()}\n\n{marker}\n"


@dataclass(frozen=True)
class RemoteComment:
    """A comment as the hosting API reports it."""

    external_id: int
    body: str


@dataclass(frozen=True)
class TrackedComment:
    """A comment owned by prgate: one per (pull request, identifier)."""

    identifier: str
    body: str
    external_id: int


@dataclass(frozen=True)
class UpsertResult:
    action: str  # "created" | "updated" | "unchanged"
    comment: TrackedComment
