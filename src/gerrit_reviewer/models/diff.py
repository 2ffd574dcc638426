"""
Diff Data Models

Structured form of `git diff` output
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set


@dataclass
class DiffLine:
    """A single line inside a hunk"""
    kind: str  # 'added', 'deleted', 'context'
    old_line: Optional[int]
    new_line: Optional[int]
    content: str

    def __post_init__(self):
        valid_kinds = {'added', 'deleted', 'context'}
        if self.kind not in valid_kinds:
            raise ValueError(f"Invalid kind: {self.kind}")


@dataclass
class Hunk:
    """One @@ section of a file diff"""
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    section: str = ""
    lines: List[DiffLine] = field(default_factory=list)

    def __post_init__(self):
        if self.old_start < 0 or self.new_start < 0:
            raise ValueError("Line numbers must be non-negative")
        if self.old_lines < 0 or self.new_lines < 0:
            raise ValueError("Line counts must be non-negative")


@dataclass
class FileDiff:
    """Changes to one file. Paths are already stripped of the diff prefix."""
    old_path: str
    new_path: str
    change_type: str  # 'added', 'modified', 'deleted', 'renamed', 'copied'
    hunks: List[Hunk] = field(default_factory=list)
    is_binary: bool = False

    def __post_init__(self):
        valid_types = {'added', 'modified', 'deleted', 'renamed', 'copied'}
        if self.change_type not in valid_types:
            raise ValueError(f"Invalid change_type: {self.change_type}")

    @property
    def path(self) -> str:
        """Path on the new side, falling back to the old one for deletions"""
        if self.change_type == 'deleted':
            return self.old_path
        return self.new_path

    def added_lines(self) -> Set[int]:
        """New-side line numbers of added lines"""
        return {
            line.new_line
            for hunk in self.hunks
            for line in hunk.lines
            if line.kind == 'added'
        }

    def contains_line(self, line: int) -> bool:
        return line in self.added_lines()
