"""
Gerrit Reviewer

Posts analysis diagnostics to Gerrit changes as batched robot comments
"""

__version__ = "1.0.0"

from .api import ReviewSession, SessionResult
from .gerrit.client import GerritClient
from .git.diff import ChangeDiff
from .review.commenter import ChangeReviewCommenter

__all__ = ["ReviewSession", "SessionResult", "GerritClient", "ChangeDiff", "ChangeReviewCommenter"]
