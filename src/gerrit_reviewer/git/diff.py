"""
Change Diff

Produces the diff of a Gerrit revision against its parent by running
`git diff` locally.
"""

import logging
import subprocess
from typing import List

from ..exceptions import DiffExecutionError, WorkdirError
from .workdir import git_rel_workdir


logger = logging.getLogger(__name__)

STRIP_DIFF_RESULT = 1


class ChangeDiff:
    """
    Diff service for a Gerrit change revision.

    The diff is computed with `git diff --find-renames` rather than fetched
    from Gerrit, whose web diff does not detect renames. Needs the git
    command in $PATH.
    """

    def __init__(self, change_id: str, revision_id: str):
        """
        Initialize change diff.

        Args:
            change_id: Gerrit change identifier
            revision_id: Revision (commit) to diff against its parent

        Raises:
            WorkdirError: If the working directory cannot be resolved
        """
        try:
            workdir = git_rel_workdir()
        except WorkdirError as e:
            raise WorkdirError(f"ChangeDiff needs 'git' command: {e}") from e

        self.change_id = change_id
        self.revision_id = revision_id
        self.workdir = workdir

    def command(self) -> List[str]:
        return ["git", "diff", "--find-renames", f"{self.revision_id}~1", self.revision_id]

    def diff(self) -> bytes:
        """
        Run git diff between the revision's parent and the revision.

        Returns:
            Raw diff bytes

        Raises:
            DiffExecutionError: If git cannot be started or exits non-zero
        """
        args = self.command()
        logger.info(f"Running {' '.join(args)}")

        try:
            result = subprocess.run(args, capture_output=True)
        except OSError as e:
            raise DiffExecutionError(f"failed to run git diff: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise DiffExecutionError(
                f"failed to run git diff: exit status {result.returncode}: {stderr}",
                returncode=result.returncode,
                stderr=stderr,
            )

        logger.debug(f"git diff produced {len(result.stdout)} bytes")
        return result.stdout

    def strip(self) -> int:
        """Number of leading path components to strip from diff paths"""
        return STRIP_DIFF_RESULT
