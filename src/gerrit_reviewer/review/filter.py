"""
Diff Filter

Classifies diagnostics against the revision diff before they are posted.
Gerrit only accepts robot comments anchored to lines of the diff.
"""

import logging
from typing import Dict, List, Optional, Set

from ..git.workdir import join_workdir
from ..models.diagnostic import Comment, Diagnostic, Severity
from ..models.diff import FileDiff


logger = logging.getLogger(__name__)


class DiffFilter:
    """
    Marks diagnostics as in-diff, suggestion-in-diff-context and reportable.

    A diagnostic is in the diff when its start line was added by the
    revision. When it is not, its first suggestion may still be anchored if
    every line of the suggestion's range is visible in the diff (added or
    context lines).
    """

    def __init__(
        self,
        files: List[FileDiff],
        workdir: str = "",
        min_severity: Optional[Severity] = None,
    ):
        """
        Initialize diff filter.

        Args:
            files: Parsed diff of the revision
            workdir: Analysis directory relative to the repository root
            min_severity: Lowest severity that is reported; None reports all
        """
        self.workdir = workdir
        self.min_severity = min_severity
        self._added: Dict[str, Set[int]] = {}
        self._visible: Dict[str, Set[int]] = {}

        for file_diff in files:
            if file_diff.change_type == 'deleted' or file_diff.is_binary:
                continue
            added = self._added.setdefault(file_diff.path, set())
            visible = self._visible.setdefault(file_diff.path, set())
            for hunk in file_diff.hunks:
                for line in hunk.lines:
                    if line.new_line is None:
                        continue
                    visible.add(line.new_line)
                    if line.kind == 'added':
                        added.add(line.new_line)

        logger.debug(f"Diff filter covers {len(self._added)} files")

    def _repo_path(self, diagnostic: Diagnostic) -> str:
        return join_workdir(self.workdir, diagnostic.location.path)

    def in_diff(self, diagnostic: Diagnostic) -> bool:
        added = self._added.get(self._repo_path(diagnostic), set())
        return diagnostic.start_line in added

    def first_suggestion_in_diff_context(self, diagnostic: Diagnostic) -> bool:
        if not diagnostic.suggestions:
            return False
        visible = self._visible.get(self._repo_path(diagnostic), set())
        r = diagnostic.suggestions[0].range
        # Lines are 1-based; an unset or inverted range cannot be anchored
        if r.start.line == 0 or r.end.line < r.start.line:
            return False
        return all(line in visible for line in range(r.start.line, r.end.line + 1))

    def should_report(self, diagnostic: Diagnostic) -> bool:
        # Findings without a severity cannot be ranked and are always reported
        if self.min_severity is None or diagnostic.severity == Severity.UNKNOWN_SEVERITY:
            return True
        return diagnostic.severity.rank() >= self.min_severity.rank()

    def classify(self, diagnostic: Diagnostic, tool_name: str = "") -> Comment:
        """
        Wrap a diagnostic in a classified Comment.

        Args:
            diagnostic: Finding with an analysis-relative path
            tool_name: Name of the producing tool

        Returns:
            Comment ready to be posted
        """
        line_in_diff = self.in_diff(diagnostic)
        suggestion_in_context = not line_in_diff and self.first_suggestion_in_diff_context(diagnostic)

        return Comment(
            diagnostic=diagnostic,
            in_diff_file=line_in_diff or suggestion_in_context,
            first_suggestion_in_diff_context=suggestion_in_context,
            should_report=self.should_report(diagnostic),
            tool_name=tool_name,
        )
