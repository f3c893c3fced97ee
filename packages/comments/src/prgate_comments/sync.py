"""Idempotent create-or-update of marker-tagged pull request comments.

One primitive serves every report kind (coverage, build, e2e). Each kind owns a
distinct identifier, so their comments never overwrite each other.

Two runs for the same PR and identifier executing at the same time can both
see no existing comment and both create one. Serial runs never do.
"""

from __future__ import annotations

import logging

from prgate_comments.base import BaseCommentClient
from prgate_comments.models import (
    CREATED,
    UNCHANGED,
    UPDATED,
    RemoteComment,
    TrackedComment,
    UpsertResult,
    marker_for,
    with_marker,
)

logger = logging.getLogger(__name__)


def _same_text(a: str, b: str) -> bool:
    # GitHub normalises line endings and trailing whitespace on save.
    return a.replace("\r\n", "\n").strip() == b.replace("\r\n", "\n").strip()


class CommentSynchronizer:
    def __init__(self, client: BaseCommentClient):
        self._client = client

    def find(self, identifier: str) -> RemoteComment | None:
        """Return the first comment carrying ``identifier``'s marker, or None."""
        marker = marker_for(identifier)
        for comment in self._client.list_comments():
            if marker in comment.body:
                return comment
        return None

    def upsert(self, identifier: str, body: str) -> UpsertResult:
        """Update the comment tagged ``identifier`` to ``body``, creating it if absent."""
        full_body = with_marker(body, identifier)
        existing = self.find(identifier)

        if existing is None:
            created = self._client.create_comment(full_body)
            logger.info("Created comment %s (%s)", created.external_id, identifier)
            return UpsertResult(CREATED, TrackedComment(identifier, full_body, created.external_id))

        if _same_text(existing.body, full_body):
            logger.info("Comment %s (%s) already up to date", existing.external_id, identifier)
            return UpsertResult(UNCHANGED, TrackedComment(identifier, full_body, existing.external_id))

        self._client.update_comment(existing.external_id, full_body)
        logger.info("Updated comment %s (%s)", existing.external_id, identifier)
        return UpsertResult(UPDATED, TrackedComment(identifier, full_body, existing.external_id))
