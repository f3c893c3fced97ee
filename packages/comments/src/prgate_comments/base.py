"""Abstract comment API interface.

The synchronizer depends on BaseCommentClient, not on PyGithub, so tests can
drive it with an in-memory client and another forge could be added without
touching the upsert logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prgate_comments.models import RemoteComment


class BaseCommentClient(ABC):
    """Comment operations on a single pull request.

    Implementations raise ApiError for any failed call; they never retry.
    """

    @abstractmethod
    def list_comments(self) -> list[RemoteComment]:
        """Return every comment on the pull request, oldest first."""

    @abstractmethod
    def create_comment(self, body: str) -> RemoteComment:
        """Post a new comment and return it with its assigned id."""

    @abstractmethod
    def update_comment(self, external_id: int, body: str) -> RemoteComment:
        """Replace the body of an existing comment."""

    def close(self) -> None:
        """Release any held connections. Default is a no-op."""
