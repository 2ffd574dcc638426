"""
Main Reviewer API

Runs one review session for a Gerrit revision: diffs the revision,
classifies diagnostics against the diff, posts them concurrently and
flushes them as a single review.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from .config import AppConfig
from .exceptions import PendingCommentsError
from .gerrit.client import GerritClient
from .git.diff import ChangeDiff
from .git.parser import DiffParser
from .models.diagnostic import Comment, Diagnostic, Severity
from .review.commenter import ChangeReviewCommenter
from .review.filter import DiffFilter


logger = logging.getLogger(__name__)


@dataclass
class SessionResult:
    """Outcome of one review session."""
    change_id: str
    revision_id: str
    posted: int
    submitted: int
    skipped: int
    processing_time: float
    created_at: datetime


class ReviewSession:
    """
    Composes ChangeDiff, DiffParser, DiffFilter and ChangeReviewCommenter
    for one revision.
    """

    def __init__(
        self,
        client: GerritClient,
        change_id: str,
        revision_id: str,
        config: Optional[AppConfig] = None,
    ):
        """
        Initialize review session.

        Args:
            client: Gerrit API client
            change_id: Gerrit change identifier
            revision_id: Revision under review
            config: Optional configuration object

        Raises:
            WorkdirError: If the working directory cannot be resolved
        """
        self.config = config or AppConfig()
        self.change_id = change_id
        self.revision_id = revision_id

        self.diff_service = ChangeDiff(change_id, revision_id)
        self.diff_parser = DiffParser()
        self.commenter = ChangeReviewCommenter(
            client, change_id, revision_id, run_info=self.config.robot
        )

    def build_filter(self) -> DiffFilter:
        """
        Diff the revision and build the classifier for it.

        Raises:
            DiffExecutionError: If git diff fails
        """
        files = self.diff_parser.parse(self.diff_service.diff(), strip=self.diff_service.strip())
        min_severity = self.config.review.min_severity
        return DiffFilter(
            files,
            workdir=self.diff_service.workdir,
            min_severity=Severity(min_severity.upper()) if min_severity else None,
        )


    def run(self, diagnostics: Iterable[Diagnostic], tool_name: str = "") -> SessionResult:
        """
        Classify, post and flush diagnostics.

        Args:
            diagnostics: Findings with analysis-relative paths
            tool_name: Name of the producing tool

        Returns:
            SessionResult with comment counts

        Raises:
            PendingCommentsError: If comments from a failed submission are
                still held; resubmit them with retry_flush()
            DiffExecutionError: If git diff fails
            SubmissionError: If the review submission fails
        """
        # Posting rewrites diagnostic paths, so held comments must not be re-posted
        held = self.commenter.pending()
        if held:
            raise PendingCommentsError(
                f"{held} comments from a failed submission are pending; call retry_flush()"
            )

        start_time = datetime.now()
        logger.info(f"Starting review of change {self.change_id} revision {self.revision_id}")

        diff_filter = self.build_filter()
        diagnostics = list(diagnostics)

        def post(diagnostic: Diagnostic) -> Comment:
            comment = diff_filter.classify(diagnostic, tool_name)
            self.commenter.post(comment)
            return comment

        with ThreadPoolExecutor(max_workers=self.config.review.max_workers) as executor:
            comments: List[Comment] = list(executor.map(post, diagnostics))

        return self._flush(start_time, posted=len(comments))

    def retry_flush(self) -> SessionResult:
        """
        Resubmit the comments held after a failed submission.

        Returns:
            SessionResult; posted is 0 since nothing new is posted

        Raises:
            SubmissionError: If the review submission fails again
        """
        start_time = datetime.now()
        logger.info(
            f"Retrying submission of {self.commenter.pending()} comments "
            f"for change {self.change_id} revision {self.revision_id}"
        )
        return self._flush(start_time, posted=0)

    def _flush(self, start_time: datetime, posted: int) -> SessionResult:
        buffered = self.commenter.pending()
        review = self.commenter.flush(timeout=self.config.review.submit_timeout_seconds)

        processing_time = (datetime.now() - start_time).total_seconds()
        result = SessionResult(
            change_id=self.change_id,
            revision_id=self.revision_id,
            posted=posted,
            submitted=review.total_comments,
            skipped=buffered - review.total_comments,
            processing_time=processing_time,
            created_at=start_time,
        )

        logger.info(
            f"Review completed: {result.submitted} submitted, {result.skipped} skipped "
            f"({processing_time:.2f}s)"
        )
        return result
