"""Parser for ``svn info --xml``."""

from __future__ import annotations

import structlog

from svnscope.svn._xml import XmlShapeError, attr_int, child_text, parse_document
from svnscope.svn.models import InfoResult

logger = structlog.get_logger(__name__)


def parse_info(xml: str) -> InfoResult:
    """Parse the first ``<entry>`` of an info document.

    Missing or malformed input yields an all-default InfoResult.
    """
    if not xml or not xml.strip():
        return InfoResult()

    try:
        root = parse_document(xml, "info")
    except XmlShapeError as exc:
        logger.warning("info_xml_unparseable", error=str(exc))
        return InfoResult()

    entry = root.find("entry")
    if entry is None:
        logger.warning("info_xml_no_entry")
        return InfoResult()

    repository = entry.find("repository")
    commit = entry.find("commit")
    wc_info = entry.find("wc-info")
    kind = entry.get("kind", "dir")

    return InfoResult(
        path=entry.get("path", ""),
        url=child_text(entry, "url"),
        relative_url=child_text(entry, "relative-url"),
        repository_root=child_text(repository, "root"),
        repository_uuid=child_text(repository, "uuid"),
        revision=attr_int(entry, "revision"),
        node_kind=kind if kind in ("file", "dir") else "dir",
        last_changed_author=child_text(commit, "author"),
        last_changed_revision=attr_int(commit, "revision"),
        last_changed_date=child_text(commit, "date"),
        working_copy_root=child_text(wc_info, "wcroot-abspath") or None,
    )
