"""
Data Models

Diagnostics, diff structure and Gerrit review payload models
"""

from .diagnostic import (
    Comment,
    Diagnostic,
    Location,
    Position,
    Range,
    Severity,
    Source,
    Suggestion,
)
from .diff import DiffLine, FileDiff, Hunk
from .review import (
    CommentRange,
    FixReplacementInfo,
    FixSuggestionInfo,
    ReviewInput,
    RobotCommentInput,
)

__all__ = [
    "Comment",
    "Diagnostic",
    "Location",
    "Position",
    "Range",
    "Severity",
    "Source",
    "Suggestion",
    "DiffLine",
    "FileDiff",
    "Hunk",
    "CommentRange",
    "FixReplacementInfo",
    "FixSuggestionInfo",
    "ReviewInput",
    "RobotCommentInput",
]
