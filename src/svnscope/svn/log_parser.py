"""Parser for ``svn log --xml [--verbose]``."""

from __future__ import annotations

from typing import List

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
from svnscope.svn.models import LogAction, LogEntry, LogPath, LogResult

logger = structlog.get_logger(__name__)


def _parse_action(value: str) -> LogAction:
    try:
        return LogAction(value.strip().upper())
    except ValueError:
        return LogAction.NONE


def _parse_path(node: Node) -> LogPath:
    return LogPath(
        path=(node.text or "").strip(),
        action=_parse_action(node.get("action", "")),
        kind=node.get("kind", ""),
        copyfrom_path=node.get("copyfrom-path"),
        copyfrom_rev=optional_int(node.get("copyfrom-rev")),
    )


def _parse_logentry(node: Node) -> LogEntry:
    paths: List[LogPath] = []
    for group in children(node, "paths"):
        paths.extend(_parse_path(p) for p in children(group, "path"))
    return LogEntry(
        revision=attr_int(node, "revision"),
        author=child_text(node, "author", "unknown"),
        date=child_text(node, "date"),
        message=child_text(node, "msg"),
        paths=paths,
    )


def parse_log(xml: str) -> LogResult:
    """Parse log XML into entries newest first.

    The revision range is computed from the entries, so the result is the
    same whichever direction the ``-r`` range was requested in.
    """
    if not xml or not xml.strip():
        return LogResult()

    try:
        root = parse_document(xml, "log")
        entries = [_parse_logentry(e) for e in children(root, "logentry")]
        entries.sort(key=lambda e: e.revision, reverse=True)
    except XmlShapeError as exc:
        logger.warning("log_xml_unparseable", error=str(exc))
        return LogResult()

    if not entries:
        return LogResult()

    revisions = [e.revision for e in entries]
    return LogResult(
        entries=entries,
        start_revision=min(revisions),
        end_revision=max(revisions),
    )
