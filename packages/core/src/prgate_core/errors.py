"""Error taxonomy shared by every prgate component.

Components raise these; the CLI group is the only place that turns them into
an exit status. GitError is the one non-fatal kind: the changed-file resolver
catches it and degrades to an empty file set.
"""

from __future__ import annotations


class PrgateError(Exception):
    """Base class for all errors prgate reports to the user."""


class DataError(PrgateError):
    """The coverage file is missing or does not match the expected schema."""


class GitError(PrgateError):
    """Computing the diff against the base branch failed."""


class ApiError(PrgateError):
    """The GitHub API returned a non-2xx status or could not be reached."""


class ValidationError(PrgateError):
    """A required option or environment variable is missing or malformed."""
