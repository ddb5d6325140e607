"""Parser for ``svn status --xml``."""

from __future__ import annotations

from typing import List, Optional

import structlog

from svnscope.svn._xml import (
    Node,
    XmlShapeError,
    attr_int,
    child_text,
    children,
    optional_int,
    parse_document,
)
from svnscope.svn.models import (
    LockInfo,
    StatusChar,
    StatusEntry,
    StatusResult,
    status_from_item,
)

logger = structlog.get_logger(__name__)


def _parse_lock(wc_status: Node) -> Optional[LockInfo]:
    lock = wc_status.find("lock")
    if lock is None:
        return None
    return LockInfo(
        owner=child_text(lock, "owner"),
        comment=child_text(lock, "comment"),
        date=child_text(lock, "created"),
    )


def _parse_entry(entry: Node) -> StatusEntry:
    wc_status = entry.find("wc-status")
    if wc_status is None:
        return StatusEntry(path=entry.get("path", ""), status=StatusChar.NORMAL)

    status = status_from_item(wc_status.get("item"))
    props = status_from_item(wc_status.get("props"))

    commit = wc_status.find("commit")
    revision = optional_int(commit.get("revision")) if commit is not None else None
    if revision is None:
        wc_revision = optional_int(wc_status.get("revision"))
        if wc_revision is not None and wc_revision >= 0:
            revision = wc_revision

    return StatusEntry(
        path=entry.get("path", ""),
        status=status,
        revision=revision,
        author=child_text(commit, "author") or None,
        date=child_text(commit, "date") or None,
        props_status=props if props is not StatusChar.NORMAL else None,
        lock=_parse_lock(wc_status),
    )


def parse_status(xml: str, base_path: str) -> StatusResult:
    """Parse status XML into a StatusResult for *base_path*.

    Never raises: unparseable input is logged and yields no entries.
    """
    if not xml or not xml.strip():
        return StatusResult(path=base_path)

    try:
        root = parse_document(xml, "status")
        entries: List[StatusEntry] = []
        revision = 0
        # Entries live under <target>, or under <changelist> when changelists exist
        for group in children(root, "target") + children(root, "changelist"):
            for entry in children(group, "entry"):
                entries.append(_parse_entry(entry))
            against = group.find("against")
            if against is not None:
                revision = max(revision, attr_int(against, "revision"))
    except XmlShapeError as exc:
        logger.warning("status_xml_unparseable", base_path=base_path, error=str(exc))
        return StatusResult(path=base_path)

    return StatusResult(path=base_path, entries=entries, revision=revision)
