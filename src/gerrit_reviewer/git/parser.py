"""
Diff Parser

Parses `git diff` output into FileDiff objects so diagnostics can be
matched against the lines a revision touched.
"""

import logging
import re
from typing import List, Optional, Tuple, Union

from ..models.diff import DiffLine, FileDiff, Hunk


logger = logging.getLogger(__name__)

DEV_NULL = '/dev/null'
FILE_HEADER = 'diff --git '

_C_ESCAPES = {
    'a': 0x07, 'b': 0x08, 'f': 0x0c, 'n': 0x0a,
    'r': 0x0d, 't': 0x09, 'v': 0x0b, '"': 0x22, '\\': 0x5c,
}


def unquote_path(path: str) -> str:
    """
    Decode a path git wrote in C-style quotes (e.g. "a/\\303\\251.go").

    Unquoted paths are returned as is.
    """
    if len(path) < 2 or path[0] != '"' or path[-1] != '"':
        return path

    body = path[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != '\\' or i + 1 == len(body):
            out += ch.encode('utf-8')
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in '01234567':
            digits = re.match(r'[0-7]{1,3}', body[i + 1:]).group(0)
            out.append(int(digits, 8) & 0xff)
            i += 1 + len(digits)
        else:
            out.append(_C_ESCAPES.get(nxt, ord(nxt)))
            i += 2
    return out.decode('utf-8', errors='replace')


def strip_path(path: str, strip: int) -> str:
    """
    Drop `strip` leading components from a diff path.

    Args:
        path: Path as written by git (e.g. 'a/src/main.py'), possibly quoted
        strip: Number of leading components to remove

    Returns:
        Stripped path; /dev/null is returned as is
    """
    path = unquote_path(path.strip())
    if path == DEV_NULL or strip <= 0:
        return path
    parts = path.split('/')
    return '/'.join(parts[strip:]) if len(parts) > strip else parts[-1]


def _quoted_end(text: str) -> int:
    """Index of the closing quote of a quoted path starting at text[0]."""
    i = 1
    while i < len(text):
        if text[i] == '\\':
            i += 2
            continue
        if text[i] == '"':
            return i
        i += 1
    return len(text) - 1


def split_header_paths(rest: str) -> Tuple[str, str]:
    """
    Split the 'a/... b/...' part of a `diff --git` line into both paths.

    Paths may be quoted or contain spaces. For unquoted paths with spaces
    the split is taken where both sides name the same file, which holds
    for every header git writes except renames; those are corrected by
    the rename and ---/+++ lines that follow.
    """
    if rest.startswith('"'):
        end = _quoted_end(rest)
        return rest[:end + 1], rest[end + 1:].lstrip(' ')
    if rest.endswith('"'):
        start = rest.rfind(' "')
        if start >= 0:
            return rest[:start], rest[start + 1:]

    spaces = [i for i, ch in enumerate(rest) if ch == ' ']
    for i in spaces:
        left, right = rest[:i], rest[i + 1:]
        if left.split('/', 1)[-1] == right.split('/', 1)[-1]:
            return left, right

    marker = rest.find(' b/')
    if marker >= 0:
        return rest[:marker], rest[marker + 1:]
    if spaces:
        return rest[:spaces[0]], rest[spaces[0] + 1:]
    return rest, rest


class DiffParser:
    """
    Parser for unified diffs produced by `git diff`.

    Handles renames, copies, new and deleted files, binary files, quoted
    paths and the '\\ No newline at end of file' marker.
    """

    def __init__(self):
        """Initialize diff parser."""
        self.hunk_header_pattern = re.compile(r'^@@\s*-(\d+)(?:,(\d+))?\s*\+(\d+)(?:,(\d+))?\s*@@(.*)$')
        self.binary_file_pattern = re.compile(r'^Binary files? .* differ')

    def parse(self, diff: Union[bytes, str], strip: int = 1) -> List[FileDiff]:
        """
        Parse a unified diff.

        Args:
            diff: Raw `git diff` output
            strip: Leading path components to remove from ---/+++ paths

        Returns:
            FileDiff objects in diff order
        """
        if isinstance(diff, bytes):
            diff = diff.decode('utf-8', errors='replace')

        files: List[FileDiff] = []
        current: Optional[FileDiff] = None
        hunk: Optional[Hunk] = None
        old_line = new_line = 0
        old_left = new_left = 0

        for line in diff.split('\n'):
            if old_left > 0 or new_left > 0:
                # Some tools strip the single space from empty context lines
                if line.startswith('+'):
                    hunk.lines.append(DiffLine('added', None, new_line, line[1:]))
                    new_line += 1
                    new_left -= 1
                elif line.startswith('-'):
                    hunk.lines.append(DiffLine('deleted', old_line, None, line[1:]))
                    old_line += 1
                    old_left -= 1
                elif line.startswith('\\'):
                    continue
                else:
                    hunk.lines.append(DiffLine('context', old_line, new_line, line[1:]))
                    old_line += 1
                    new_line += 1
                    old_left -= 1
                    new_left -= 1
                continue

            if line.startswith(FILE_HEADER):
                old_path, new_path = split_header_paths(line[len(FILE_HEADER):])
                current = FileDiff(
                    old_path=strip_path(old_path, strip),
                    new_path=strip_path(new_path, strip),
                    change_type='modified',
                )
                files.append(current)
                continue

            # Plain unified diff without git headers
            if line.startswith('--- ') and (current is None or current.hunks):
                current = FileDiff(old_path='', new_path='', change_type='modified')
                files.append(current)

            if current is None:
                continue

            hunk_match = self.hunk_header_pattern.match(line)
            if hunk_match:
                hunk = Hunk(
                    old_start=int(hunk_match.group(1)),
                    old_lines=int(hunk_match.group(2) or 1),
                    new_start=int(hunk_match.group(3)),
                    new_lines=int(hunk_match.group(4) or 1),
                    section=hunk_match.group(5).strip(),
                )
                current.hunks.append(hunk)
                old_line, new_line = hunk.old_start, hunk.new_start
                old_left, new_left = hunk.old_lines, hunk.new_lines
                continue

            self._parse_extended_header(line, current, strip)

        logger.debug(f"Parsed {len(files)} file diffs")
        return files

    def _parse_extended_header(self, line: str, current: FileDiff, strip: int) -> None:
        """Apply one git extended header line to the current file."""
        if line.startswith('rename from '):
            current.old_path = unquote_path(line[len('rename from '):])
            current.change_type = 'renamed'
        elif line.startswith('rename to '):
            current.new_path = unquote_path(line[len('rename to '):])
            current.change_type = 'renamed'
        elif line.startswith('copy from '):
            current.old_path = unquote_path(line[len('copy from '):])
            current.change_type = 'copied'
        elif line.startswith('copy to '):
            current.new_path = unquote_path(line[len('copy to '):])
            current.change_type = 'copied'
        elif line.startswith('new file mode'):
            current.change_type = 'added'
        elif line.startswith('deleted file mode'):
            current.change_type = 'deleted'
        elif self.binary_file_pattern.match(line):
            current.is_binary = True
        elif line.startswith('--- '):
            path = strip_path(line[4:].split('\t')[0], strip)
            if path == DEV_NULL:
                current.change_type = 'added'
            else:
                current.old_path = path
        elif line.startswith('+++ '):
            path = strip_path(line[4:].split('\t')[0], strip)
            if path == DEV_NULL:
                current.change_type = 'deleted'
            else:
                current.new_path = path
