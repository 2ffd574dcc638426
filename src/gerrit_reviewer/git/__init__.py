"""
Git Integration Layer

Working directory discovery, local diff generation and diff parsing.
"""

from .diff import ChangeDiff
from .parser import DiffParser
from .workdir import git_rel_workdir, join_workdir

__all__ = ['ChangeDiff', 'DiffParser', 'git_rel_workdir', 'join_workdir']
