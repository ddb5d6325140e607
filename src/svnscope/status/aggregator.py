"""Directory status rollups from a flat list of status entries."""

from __future__ import annotations

import os
from typing import Dict, Iterable, Mapping

from svnscope.svn.models import StatusChar, StatusEntry

# Higher wins when a folder's descendants disagree.
SEVERITY_ORDER: Dict[StatusChar, int] = {
    StatusChar.CONFLICTED: 100,
    StatusChar.MISSING: 90,
    StatusChar.OBSTRUCTED: 85,
    StatusChar.MODIFIED: 80,
    StatusChar.DELETED: 70,
    StatusChar.REPLACED: 60,
    StatusChar.ADDED: 50,
    StatusChar.EXTERNAL: 40,
    StatusChar.UNVERSIONED: 30,
    StatusChar.IGNORED: 20,
    StatusChar.NORMAL: 0,
}

_SEPARATORS = ("/", "\\")


def severity(status: StatusChar) -> int:
    return SEVERITY_ORDER.get(status, 0)


def worst_status(a: StatusChar, b: StatusChar) -> StatusChar:
    """Return the more severe of *a* and *b* (*a* on a tie)."""
    return a if severity(a) >= severity(b) else b


def normalize_path(path: str) -> str:
    """Normalise separators and trailing slashes for prefix comparisons."""
    return os.path.normpath(path)


def _parent(path: str) -> str:
    return normalize_path(os.path.dirname(normalize_path(path)))


def _basename(path: str) -> str:
    return os.path.basename(normalize_path(path))


def _is_descendant(path: str, folder: str) -> bool:
    # A root folder ("/", "C:\\") already ends with its separator
    stem = folder.rstrip("/\\")
    return path != folder and any(path.startswith(stem + sep) for sep in _SEPARATORS)


def direct_status(entries: Iterable[StatusEntry], base_path: str) -> Dict[str, StatusChar]:
    """Map file name → status for the immediate children of *base_path*."""
    base = normalize_path(base_path)
    result: Dict[str, StatusChar] = {}
    for entry in entries:
        if _parent(entry.path) == base:
            result[_basename(entry.path)] = entry.status
    return result


def folder_status(
    folder_path: str,
    entries: Iterable[StatusEntry],
    direct: Mapping[str, StatusChar],
) -> StatusChar:
    """Return the rollup status for one folder.

    A non-normal direct status on the folder itself (added, missing, ...)
    wins outright; otherwise the most severe descendant status is used.
    Scans every entry, so batch callers should prefer :func:`folder_statuses`.
    """
    own = direct.get(_basename(folder_path))
    if own is not None and own is not StatusChar.NORMAL:
        return own

    folder = normalize_path(folder_path)
    worst = StatusChar.NORMAL
    for entry in entries:
        if _is_descendant(normalize_path(entry.path), folder):
            worst = worst_status(worst, entry.status)
    return worst


def _descendant_rollups(entries: Iterable[StatusEntry]) -> Dict[str, StatusChar]:
    """Worst descendant status for every ancestor directory of every entry."""
    rollups: Dict[str, StatusChar] = {}
    for entry in entries:
        if entry.status is StatusChar.NORMAL:
            continue
        current = normalize_path(entry.path)
        while True:
            parent = _parent(current)
            if parent == current:
                break
            rollups[parent] = worst_status(rollups.get(parent, StatusChar.NORMAL), entry.status)
            current = parent
    return rollups


def folder_statuses(
    folder_paths: Iterable[str],
    entries: Iterable[StatusEntry],
    direct: Mapping[str, StatusChar],
) -> Dict[str, StatusChar]:
    """Rollup status for many folders from one pass over *entries*.

    Gives the same answer as calling :func:`folder_status` per folder, but
    costs O(entries × depth) instead of O(folders × entries).
    """
    rollups = _descendant_rollups(entries)
    result: Dict[str, StatusChar] = {}
    for folder_path in folder_paths:
        own = direct.get(_basename(folder_path))
        if own is not None and own is not StatusChar.NORMAL:
            result[folder_path] = own
        else:
            result[folder_path] = rollups.get(normalize_path(folder_path), StatusChar.NORMAL)
    return result

