"""
Working Directory Discovery

Resolves the current directory relative to the root of the enclosing git
repository.
"""

import logging
import posixpath
import subprocess
from typing import Optional

from ..exceptions import WorkdirError


logger = logging.getLogger(__name__)


def git_rel_workdir(cwd: Optional[str] = None) -> str:
    """
    Return the working directory relative to the repository root.

    Args:
        cwd: Directory to resolve (default: process working directory)

    Returns:
        Relative path without trailing slash, "" at the repository root

    Raises:
        WorkdirError: If git is missing or cwd is not inside a repository
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-prefix"],
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
        )
    except FileNotFoundError as e:
        raise WorkdirError(f"git command not found: {e}") from e
    except OSError as e:
        raise WorkdirError(f"failed to run git rev-parse: {e}") from e

    if result.returncode != 0:
        raise WorkdirError(
            f"git rev-parse --show-prefix failed: {result.stderr.strip() or result.stdout.strip()}"
        )

    workdir = result.stdout.strip().rstrip('/')
    logger.debug(f"Resolved working directory prefix: {workdir!r}")
    return workdir


def join_workdir(workdir: str, path: str) -> str:
    """
    Make an analysis-relative path repository-root-relative.

    The path is returned unchanged when workdir is empty.
    """
    if not workdir:
        return path
    return posixpath.normpath(posixpath.join(workdir, path))
