"""Working-copy directory listing decorated with svn status."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from svnscope.status.aggregator import folder_statuses
from svnscope.svn.models import StatusChar, StatusEntry


@dataclass(frozen=True)
class FileInfo:
    name: str
    path: str
    is_directory: bool
    size: int = 0
    modified_time: str = ""
    status: Optional[StatusEntry] = None


def list_directory(path: str) -> List[FileInfo]:
    """List *path* from the filesystem only: dot-files hidden, directories first."""
    files: List[FileInfo] = []
    with os.scandir(path) as it:
        for entry in it:
            if entry.name.startswith("."):
                continue
            try:
                is_dir = entry.is_dir()
                st = entry.stat()
            except OSError:
                continue
            files.append(
                FileInfo(
                    name=entry.name,
                    path=str(Path(path) / entry.name),
                    is_directory=is_dir,
                    size=0 if is_dir else st.st_size,
                    modified_time=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc).isoformat(),
                )
            )
    files.sort(key=lambda f: (not f.is_directory, f.name.lower()))
    return files


def apply_status(
    files: Iterable[FileInfo],
    direct: Mapping[str, StatusChar],
    entries: List[StatusEntry],
) -> List[FileInfo]:
    """Attach status to a listing.

    Files get their direct status (with commit details when the entry list
    has them); directories get their rollup, omitted when it is NORMAL.
    """
    files = list(files)
    by_path = {os.path.normpath(e.path): e for e in entries}
    rollups = folder_statuses([f.path for f in files if f.is_directory], entries, direct)

    decorated: List[FileInfo] = []
    for info in files:
        status: Optional[StatusEntry] = None
        if info.is_directory:
            rollup = rollups[info.path]
            if rollup is not StatusChar.NORMAL:
                status = StatusEntry(path=info.path, status=rollup, is_directory=True)
        elif info.name in direct:
            known = by_path.get(os.path.normpath(info.path))
            status = StatusEntry(
                path=info.path,
                status=direct[info.name],
                revision=known.revision if known else None,
                author=known.author if known else None,
                date=known.date if known else None,
            )
        decorated.append(replace(info, status=status))
    return decorated
