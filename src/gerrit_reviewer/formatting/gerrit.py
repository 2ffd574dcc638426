"""
Gerrit Comment Formatter

Builds the message text of robot comments.
"""

import logging

from ..models.diagnostic import Comment


logger = logging.getLogger(__name__)

# Gerrit's default change.commentSizeLimit
MAX_COMMENT_LENGTH = 16 * 1024
TRUNCATION_NOTICE = "\n\n[comment truncated]"


class GerritCommentFormatter:
    """
    Formats diagnostics as Gerrit robot comment messages.

    Messages read "[tool] message", followed by the rule code (and its
    documentation URL when known) on a separate line.
    """

    def __init__(self, max_comment_length: int = MAX_COMMENT_LENGTH):
        self.max_comment_length = max_comment_length

    def format_comment(self, comment: Comment) -> str:
        diagnostic = comment.diagnostic
        tool = comment.tool_name or (diagnostic.source.name if diagnostic.source else "")

        body = f"[{tool}] {diagnostic.message}" if tool else diagnostic.message

        if diagnostic.code:
            rule = f"Rule: {diagnostic.code}"
            if diagnostic.source and diagnostic.source.url:
                rule += f" ({diagnostic.source.url})"
            body = f"{body}\n\n{rule}"

        if len(body) > self.max_comment_length:
            body = self._truncate_comment(body)
        return body

    def _truncate_comment(self, body: str) -> str:
        logger.info(f"Truncating comment of {len(body)} characters to {self.max_comment_length}")
        keep = self.max_comment_length - len(TRUNCATION_NOTICE)
        return body[:keep] + TRUNCATION_NOTICE


_default_formatter = GerritCommentFormatter()


def gerrit_comment(comment: Comment) -> str:
    """Format a comment with the default formatter."""
    return _default_formatter.format_comment(comment)
