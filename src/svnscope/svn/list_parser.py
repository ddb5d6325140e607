"""Parser for ``svn list --xml -v`` (repository browser)."""

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
from svnscope.svn.models import ListResult, RepoEntry, RepoKind

logger = structlog.get_logger(__name__)


def join_url(base_url: str, name: str) -> str:
    """Join a repository URL and a child name, dropping a directory's trailing slash."""
    return f"{base_url.rstrip('/')}/{name.rstrip('/')}"


def _parse_entry(entry: Node, base_url: str) -> RepoEntry:
    name = child_text(entry, "name")
    url = join_url(base_url, name)
    commit = entry.find("commit")
    lock = entry.find("lock")
    size = entry.find("size")
    kind = RepoKind.DIR if entry.get("kind") == "dir" else RepoKind.FILE
    return RepoEntry(
        name=name,
        path=url,
        url=url,
        kind=kind,
        size=optional_int(size.text) if size is not None else None,
        revision=attr_int(commit, "revision"),
        author=child_text(commit, "author"),
        date=child_text(commit, "date"),
        lock_owner=child_text(lock, "owner") or None,
    )


def parse_list(xml: str, base_url: str) -> ListResult:
    """Parse list XML; every entry's url is *base_url* joined with its name."""
    if not xml or not xml.strip():
        return ListResult(path=base_url)

    try:
        root = parse_document(xml, "lists")
        entries: List[RepoEntry] = [
            _parse_entry(entry, base_url)
            for group in children(root, "list")
            for entry in children(group, "entry")
        ]
    except XmlShapeError as exc:
        logger.warning("list_xml_unparseable", url=base_url, error=str(exc))
        return ListResult(path=base_url)

    return ListResult(path=base_url, entries=entries)
