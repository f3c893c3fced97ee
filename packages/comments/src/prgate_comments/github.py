"""GitHub implementation of the comment client, built on PyGithub.

Pull request conversation comments are issue comments in the REST API:

    GET   /repos/{owner}/{repo}/issues/{number}/comments
    POST  /repos/{owner}/{repo}/issues/{number}/comments
    PATCH /repos/{owner}/{repo}/issues/comments/{id}
"""

from __future__ import annotations

import logging

import requests
from github import Auth, Github, GithubException

from prgate_comments.base import BaseCommentClient
from prgate_comments.models import RemoteComment
from prgate_core.errors import ApiError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def _describe(e: Exception, action: str, repo: str, pr_number: int) -> str:
    if isinstance(e, GithubException):
        status = e.status
        message = e.data.get("message") if isinstance(e.data, dict) else None
        if status in (401, 403):
            return f"GitHub rejected the token while trying to {action} ({status}: {message or 'forbidden'})."
        if status == 404:
            return f"Pull request #{pr_number} not found in {repo}, or the token cannot see it."
        return f"GitHub API error while trying to {action}: {status} {message or e}"
    return f"Request to GitHub failed while trying to {action}: {e}"


class GitHubCommentClient(BaseCommentClient):
    """Issue-comment operations on one pull request."""

    def __init__(self, token: str, repo: str, pr_number: int, timeout: int = DEFAULT_TIMEOUT):
        self._repo_name = repo
        self._pr_number = pr_number
        self._gh = Github(auth=Auth.Token(token), timeout=timeout, retry=None)
        self._issue = None
        # Comment objects seen by list_comments(), so an update needs no extra GET.
        self._loaded: dict[int, object] = {}

    @classmethod
    def from_target(cls, target, timeout: int = DEFAULT_TIMEOUT) -> GitHubCommentClient:
        return cls(token=target.token, repo=target.repo, pr_number=target.pr_number, timeout=timeout)

    def _call(self, action: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (GithubException, requests.RequestException) as e:
            raise ApiError(_describe(e, action, self._repo_name, self._pr_number)) from e

    def _get_issue(self):
        if self._issue is None:
            repo = self._call("load the repository", self._gh.get_repo, self._repo_name, lazy=True)
            self._issue = self._call("load the pull request", repo.get_issue, self._pr_number)
        return self._issue

    def list_comments(self) -> list[RemoteComment]:
        issue = self._get_issue()
        comments = self._call("list comments", lambda: list(issue.get_comments()))
        self._loaded = {c.id: c for c in comments}
        logger.debug("Fetched %d comment(s) on %s#%d", len(comments), self._repo_name, self._pr_number)
        return [RemoteComment(external_id=c.id, body=c.body or "") for c in comments]

    def create_comment(self, body: str) -> RemoteComment:
        issue = self._get_issue()
        comment = self._call("create a comment", issue.create_comment, body)
        self._loaded[comment.id] = comment
        return RemoteComment(external_id=comment.id, body=comment.body or body)

    def update_comment(self, external_id: int, body: str) -> RemoteComment:
        comment = self._loaded.get(external_id)
        if comment is None:
            comment = self._call("load a comment", self._get_issue().get_comment, external_id)
        self._call("update a comment", comment.edit, body)
        return RemoteComment(external_id=external_id, body=body)

    def close(self) -> None:
        self._gh.close()
