"""
Change Review Commenter

Buffers comments from concurrent producers and posts them to Gerrit as
robot comments in a single set-review call:
    https://gerrit-review.googlesource.com/Documentation/rest-api-changes.html#set-review
    POST /changes/{change-id}/revisions/{revision-id}/review
"""

import logging
import threading
from typing import List, Optional

from ..config import RobotConfig
from ..exceptions import CommentContractError, WorkdirError
from ..formatting.gerrit import gerrit_comment
from ..gerrit.client import GerritClient
from ..git.workdir import git_rel_workdir, join_workdir
from ..models.diagnostic import Comment, Suggestion
from ..models.review import (
    CommentRange,
    FixReplacementInfo,
    FixSuggestionInfo,
    ReviewInput,
    RobotCommentInput,
)


logger = logging.getLogger(__name__)


def build_comment_range(suggestion: Suggestion) -> CommentRange:
    """Map a suggestion range to Gerrit's 0-based character offsets."""
    r = suggestion.range
    return CommentRange(
        start_line=r.start.line,
        start_character=r.start.column - 1,
        end_line=r.end.line,
        end_character=r.end.column - 1,
    )


def build_fix_suggestion(comment: Comment, suggestion: Suggestion) -> FixSuggestionInfo:
    return FixSuggestionInfo(
        description="suggestion",
        replacements=[
            FixReplacementInfo(
                path=comment.path,
                replacement=suggestion.text,
                range=build_comment_range(suggestion),
            )
        ],
    )


def comment_anchor(comment: Comment) -> dict:
    """
    Anchor of a robot comment: the first suggestion's range when it is the
    part of the comment inside the diff, otherwise the diagnostic's start line.
    """
    suggestions = comment.diagnostic.suggestions
    if comment.first_suggestion_in_diff_context and suggestions:
        return {'range': build_comment_range(suggestions[0])}
    return {'line': comment.diagnostic.start_line}


def build_robot_comment(comment: Comment, run_info: RobotConfig) -> RobotCommentInput:
    return RobotCommentInput(
        message=gerrit_comment(comment),
        robot_id=run_info.robot_id,
        robot_run_id=run_info.run_id,
        url=run_info.run_url,
        fix_suggestions=[build_fix_suggestion(comment, s) for s in comment.diagnostic.suggestions],
        **comment_anchor(comment),
    )


def build_review(comments: List[Comment], run_info: RobotConfig) -> ReviewInput:
    """
    Build the batched review for comments in posting order.

    Comments outside the diff and comments that should not be reported
    are left out.
    """
    review = ReviewInput()
    for c in comments:
        if not c.in_diff_file:
            logger.debug(f"Skipping comment outside diff: {c.path}:{c.diagnostic.start_line}")
            continue
        if not c.should_report:
            logger.debug(f"Skipping unreported comment: {c.path}:{c.diagnostic.start_line}")
            continue

        review.robot_comments.setdefault(c.path, []).append(build_robot_comment(c, run_info))
    return review


class ChangeReviewCommenter:
    """
    Comment service for the Gerrit change review API.

    post() may be called from many threads. flush() holds the same lock
    while it builds and submits the review, so no post interleaves with a
    flush. Needs the git command in $PATH.
    """

    def __init__(
        self,
        client: GerritClient,
        change_id: str,
        revision_id: str,
        run_info: Optional[RobotConfig] = None,
    ):
        """
        Initialize change review commenter.

        Args:
            client: Gerrit API client
            change_id: Gerrit change identifier
            revision_id: Revision the comments are posted to
            run_info: Robot identity and run metadata; read from the
                environment at each flush when omitted

        Raises:
            WorkdirError: If the working directory cannot be resolved
        """
        try:
            workdir = git_rel_workdir()
        except WorkdirError as e:
            raise WorkdirError(f"ChangeReviewCommenter needs 'git' command: {e}") from e

        self.client = client
        self.change_id = change_id
        self.revision_id = revision_id
        self.run_info = run_info
        self.workdir = workdir

        self._lock = threading.Lock()
        self._post_comments: List[Comment] = []

    def post(self, comment: Comment) -> None:
        """
        Hold a comment until flush().

        The comment's location path is rewritten in place to be relative to
        the repository root; the aggregator owns that field afterwards.

        Raises:
            CommentContractError: If the comment has no location or path
        """
        if comment is None or comment.diagnostic is None:
            raise CommentContractError("post: comment has no diagnostic")
        location = comment.diagnostic.location
        if location is None or location.range is None:
            raise CommentContractError("post: diagnostic has no location")
        if not location.path:
            raise CommentContractError("post: diagnostic location has no path")

        location.path = join_workdir(self.workdir, location.path)
        with self._lock:
            self._post_comments.append(comment)

    def pending(self) -> int:
        with self._lock:
            return len(self._post_comments)

    def flush(self, timeout: Optional[float] = None) -> ReviewInput:
        """
        Post all held comments as one review.

        The buffer is cleared only after a successful submission; on failure
        the comments stay held so flush() can be called again.

        Args:
            timeout: Seconds to wait for the submission before abandoning it

        Returns:
            The submitted review

        Raises:
            SubmissionError: If the submission fails
        """
        with self._lock:
            run_info = self.run_info or RobotConfig.from_env()
            review = build_review(self._post_comments, run_info)
            logger.info(
                f"Flushing {len(self._post_comments)} comments, "
                f"{review.total_comments} in diff and reportable"
            )
            self.client.set_review(self.change_id, self.revision_id, review, timeout=timeout)
            self._post_comments = []
            return review
