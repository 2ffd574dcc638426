"""
Error Types

Errors raised by the diff provider, the comment aggregator and the
Gerrit client.
"""

from typing import Optional


class GerritReviewerError(Exception):
    """Base class for gerrit_reviewer errors"""


class WorkdirError(GerritReviewerError):
    """Working directory cannot be resolved relative to the repository root,
    or the git binary is missing from the environment."""


class DiffExecutionError(GerritReviewerError):
    """The git diff subprocess could not be started or exited non-zero"""
    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class SubmissionError(GerritReviewerError):
    """The batched review submission failed"""


class CommentContractError(GerritReviewerError, ValueError):
    """A posted comment is missing a required field"""


class PendingCommentsError(GerritReviewerError):
    """A session still holds comments from a failed submission"""
