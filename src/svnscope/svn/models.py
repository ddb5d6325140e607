"""Typed models for everything parsed out of svn output."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class StatusChar(str, Enum):
    """Working-copy item status, valued by svn's one-letter code."""

    NORMAL = " "
    ADDED = "A"
    CONFLICTED = "C"
    DELETED = "D"
    IGNORED = "I"
    MODIFIED = "M"
    REPLACED = "R"
    EXTERNAL = "X"
    UNVERSIONED = "?"
    MISSING = "!"
    OBSTRUCTED = "~"


# wc-status item attribute values as emitted by ``svn status --xml``
ITEM_TO_STATUS: dict[str, StatusChar] = {
    "normal": StatusChar.NORMAL,
    "added": StatusChar.ADDED,
    "conflicted": StatusChar.CONFLICTED,
    "deleted": StatusChar.DELETED,
    "ignored": StatusChar.IGNORED,
    "modified": StatusChar.MODIFIED,
    "replaced": StatusChar.REPLACED,
    "external": StatusChar.EXTERNAL,
    "unversioned": StatusChar.UNVERSIONED,
    "missing": StatusChar.MISSING,
    "obstructed": StatusChar.OBSTRUCTED,
    "incomplete": StatusChar.MISSING,
}


def status_from_item(item: Optional[str]) -> StatusChar:
    """Map a wc-status ``item``/``props`` value; unknown values are NORMAL."""
    if not item:
        return StatusChar.NORMAL
    return ITEM_TO_STATUS.get(item.strip().lower(), StatusChar.NORMAL)


# --- status ---


@dataclass(frozen=True)
class LockInfo:
    owner: str
    comment: str = ""
    date: str = ""


@dataclass(frozen=True)
class StatusEntry:
    """One path reported by ``svn status``."""

    path: str
    status: StatusChar
    revision: Optional[int] = None
    author: Optional[str] = None
    date: Optional[str] = None
    is_directory: bool = False
    props_status: Optional[StatusChar] = None  # only set when not NORMAL
    lock: Optional[LockInfo] = None


@dataclass(frozen=True)
class StatusResult:
    path: str
    entries: List[StatusEntry] = field(default_factory=list)
    revision: int = 0


# --- log ---


class LogAction(str, Enum):
    ADDED = "A"
    DELETED = "D"
    MODIFIED = "M"
    REPLACED = "R"
    NONE = ""


@dataclass(frozen=True)
class LogPath:
    path: str
    action: LogAction = LogAction.NONE
    kind: str = ""
    copyfrom_path: Optional[str] = None
    copyfrom_rev: Optional[int] = None


@dataclass(frozen=True)
class LogEntry:
    revision: int
    author: str
    date: str
    message: str
    paths: List[LogPath] = field(default_factory=list)


@dataclass(frozen=True)
class LogResult:
    entries: List[LogEntry] = field(default_factory=list)
    start_revision: int = 0
    end_revision: int = 0


# --- info ---


@dataclass(frozen=True)
class InfoResult:
    path: str = ""
    url: str = ""
    relative_url: str = ""
    repository_root: str = ""
    repository_uuid: str = ""
    revision: int = 0
    node_kind: str = "dir"
    last_changed_author: str = ""
    last_changed_revision: int = 0
    last_changed_date: str = ""
    working_copy_root: Optional[str] = None


# --- blame ---


@dataclass(frozen=True)
class BlameLine:
    line_number: int
    revision: int
    author: str
    date: str
    content: str


@dataclass(frozen=True)
class BlameResult:
    path: str
    lines: List[BlameLine] = field(default_factory=list)
    start_revision: int = 0
    end_revision: int = 0


# --- list ---


class RepoKind(str, Enum):
    FILE = "file"
    DIR = "dir"


@dataclass(frozen=True)
class RepoEntry:
    name: str
    path: str
    url: str
    kind: RepoKind
    size: Optional[int] = None
    revision: int = 0
    author: str = ""
    date: str = ""
    lock_owner: Optional[str] = None


@dataclass(frozen=True)
class ListResult:
    path: str
    entries: List[RepoEntry] = field(default_factory=list)


# --- externals ---


@dataclass(frozen=True)
class ExternalDef:
    """One ``svn:externals`` definition."""

    name: str  # local path relative to the directory carrying the property
    url: str
    path: str  # owning directory joined with *name*
    revision: Optional[int] = None
    peg_revision: Optional[int] = None


# --- diff ---


class LineType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"
    HUNK_HEADER = "hunk"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single classified line inside a hunk."""

    type: LineType
    content: str
    old_line_number: Optional[int] = None
    new_line_number: Optional[int] = None


@dataclass
class DiffHunk:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: List[DiffLine] = field(default_factory=list)


@dataclass
class DiffFile:
    old_path: str = ""
    new_path: str = ""
    hunks: List[DiffHunk] = field(default_factory=list)


@dataclass
class DiffResult:
    files: List[DiffFile] = field(default_factory=list)
    has_changes: bool = False
    is_binary: bool = False
    raw_diff: Optional[str] = None
