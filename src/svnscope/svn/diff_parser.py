"""Unified diff parser for ``svn diff`` output.

Walks the text line by line through three states (idle, file header,
hunk). ``Index:`` opens a file record, ``@@`` opens a hunk whose header
seeds the old/new line counters, and each ``+``/``-``/context line
advances the counters it applies to.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

from svnscope.svn.models import DiffFile, DiffHunk, DiffLine, DiffResult, LineType

BINARY_MARKER = "Cannot display: file marked as a binary type."

_INDEX_PREFIX = "Index: "
_SEPARATOR_PREFIX = "==="
_OLD_HEADER_PREFIX = "--- "
_NEW_HEADER_PREFIX = "+++ "
_PROPERTY_CHANGES_PREFIX = "Property changes on: "
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_NO_NEWLINE_RE = re.compile(r"^\\ No newline at end of file$")


class _State(Enum):
    IDLE = "idle"
    FILE_HEADER = "file_header"
    HUNK = "hunk"


def _normalise(line: str) -> str:
    """Strip a trailing CR (CRLF → LF)."""
    return line.rstrip("\r")


def _split_lines(text: str) -> List[str]:
    """Split on LF only; form feeds and other Unicode breaks stay in the line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [_normalise(line) for line in lines]


def _header_path(line: str, prefix: str) -> str:
    """Path from a ---/+++ header, without svn's tab-separated revision label."""
    return line[len(prefix):].split("\t", 1)[0].strip()


class DiffParser:
    """Parse ``svn diff`` text into a DiffResult.

    Usage::

        result = DiffParser(diff_text).parse()
        for f in result.files:
            for hunk in f.hunks:
                ...
    """

    def __init__(self, diff_text: str) -> None:
        self._text = diff_text or ""
        self._files: List[DiffFile] = []
        self._file: Optional[DiffFile] = None
        self._hunk: Optional[DiffHunk] = None
        self._state = _State.IDLE
        self._old_no = 0
        self._new_no = 0
        self._old_left = 0
        self._new_left = 0

    def parse(self) -> DiffResult:
        if not self._text.strip():
            return DiffResult(files=[], has_changes=False)

        if BINARY_MARKER in self._text:
            return DiffResult(files=[], has_changes=True, is_binary=True, raw_diff=self._text)

        for line in _split_lines(self._text):
            self._feed(line)
        self._flush_file()

        return DiffResult(files=self._files, has_changes=bool(self._files))

    # --- state transitions ---

    def _feed(self, line: str) -> None:
        if line.startswith(_INDEX_PREFIX):
            self._flush_file()
            self._file = DiffFile()
            self._state = _State.FILE_HEADER
            return

        if line.startswith(_PROPERTY_CHANGES_PREFIX):
            # Property deltas follow; they are not file content
            self._flush_hunk()
            self._state = _State.IDLE
            return

        hm = _HUNK_HEADER_RE.match(line)
        if hm and self._file is not None:
            self._start_hunk(line, hm)
            return

        if self._state is _State.HUNK and self._hunk_has_lines_left():
            self._content(line)
            return

        if line.startswith(_OLD_HEADER_PREFIX) and self._file is not None:
            self._file.old_path = _header_path(line, _OLD_HEADER_PREFIX)
            self._close_hunk_state()
            return
        if line.startswith(_NEW_HEADER_PREFIX) and self._file is not None:
            self._file.new_path = _header_path(line, _NEW_HEADER_PREFIX)
            self._close_hunk_state()
            return
        if line.startswith(_SEPARATOR_PREFIX):
            return

        if self._state is _State.HUNK:
            # Counts are used up; keep classifying marked lines but drop blanks
            if line:
                self._content(line)

    def _start_hunk(self, line: str, hm: re.Match[str]) -> None:
        self._flush_hunk()
        old_start = int(hm.group(1))
        new_start = int(hm.group(3))
        old_lines = int(hm.group(2)) if hm.group(2) is not None else 1
        new_lines = int(hm.group(4)) if hm.group(4) is not None else 1
        self._hunk = DiffHunk(
            old_start=old_start,
            old_lines=old_lines,
            new_start=new_start,
            new_lines=new_lines,
        )
        self._hunk.lines.append(DiffLine(type=LineType.HUNK_HEADER, content=line))
        self._old_no, self._new_no = old_start, new_start
        self._old_left, self._new_left = old_lines, new_lines
        self._state = _State.HUNK

    def _content(self, line: str) -> None:
        assert self._hunk is not None
        if _NO_NEWLINE_RE.match(line):
            return
        if line.startswith("+"):
            self._hunk.lines.append(
                DiffLine(type=LineType.ADDED, content=line[1:], new_line_number=self._new_no)
            )
            self._new_no += 1
            self._new_left -= 1
        elif line.startswith("-"):
            self._hunk.lines.append(
                DiffLine(type=LineType.REMOVED, content=line[1:], old_line_number=self._old_no)
            )
            self._old_no += 1
            self._old_left -= 1
        elif line.startswith(" ") or line == "":
            self._hunk.lines.append(
                DiffLine(
                    type=LineType.CONTEXT,
                    content=line[1:],
                    old_line_number=self._old_no,
                    new_line_number=self._new_no,
                )
            )
            self._old_no += 1
            self._new_no += 1
            self._old_left -= 1
            self._new_left -= 1
        # any other leading character is not diff content

    # --- helpers ---

    def _hunk_has_lines_left(self) -> bool:
        return self._hunk is not None and (self._old_left > 0 or self._new_left > 0)

    def _close_hunk_state(self) -> None:
        self._flush_hunk()
        self._state = _State.FILE_HEADER

    def _flush_hunk(self) -> None:
        if self._hunk is not None and self._file is not None:
            self._file.hunks.append(self._hunk)
        self._hunk = None
        self._old_left = self._new_left = 0

    def _flush_file(self) -> None:
        self._flush_hunk()
        if self._file is not None:
            self._files.append(self._file)
        self._file = None
        self._state = _State.IDLE


def parse_diff(text: str) -> DiffResult:
    """Parse unified diff text. See :class:`DiffParser`."""
    return DiffParser(text).parse()
