"""Parsers for ``svn blame --xml`` and plain ``svn blame [-v]`` output."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import List

import structlog

from svnscope.svn._xml import (
    Node,
    XmlShapeError,
    attr_int,
    child_text,
    children,
    parse_document,
    to_int,
)
from svnscope.svn.models import BlameLine, BlameResult

logger = structlog.get_logger(__name__)

UNKNOWN_AUTHOR = "unknown"

_VERBOSE_LINE_RE = re.compile(
    r"^\s*(?P<rev>\d+|-)\s+(?P<author>\S+)\s"
    r"(?P<date>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} [+-]\d{4} \([^)]*\)) ?"
    r"(?P<content>.*)$"
)
_PLAIN_LINE_RE = re.compile(r"^\s*(?P<rev>\d+|-)\s+(?P<author>\S+) ?(?P<content>.*)$")


def _source_lines(text: str) -> List[str]:
    """Split on LF only, dropping a CR before it and the empty tail after a final LF."""
    lines = [line.rstrip("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _with_range(path: str, lines: List[BlameLine]) -> BlameResult:
    lines.sort(key=lambda bl: bl.line_number)
    revisions = [bl.revision for bl in lines if bl.revision > 0]
    return BlameResult(
        path=path,
        lines=lines,
        start_revision=min(revisions) if revisions else 0,
        end_revision=max(revisions) if revisions else 0,
    )


def _parse_entry(entry: Node) -> BlameLine:
    # The first commit is the line's own; a later one may sit inside <merged>
    commit = entry.find(".//commit")
    return BlameLine(
        line_number=attr_int(entry, "line-number"),
        revision=attr_int(commit, "revision"),
        author=child_text(commit, "author", UNKNOWN_AUTHOR) or UNKNOWN_AUTHOR,
        date=child_text(commit, "date"),
        content=child_text(entry, "text"),
    )


def parse_blame(xml: str, path: str) -> BlameResult:
    """Parse blame XML for *path*; degrades to an empty result."""
    if not xml or not xml.strip():
        return BlameResult(path=path)

    try:
        root = parse_document(xml, "blame")
        lines = [
            _parse_entry(entry)
            for target in children(root, "target")
            for entry in children(target, "entry")
        ]
    except XmlShapeError as exc:
        logger.warning("blame_xml_unparseable", path=path, error=str(exc))
        return BlameResult(path=path)

    return _with_range(path, lines)


def parse_blame_text(text: str, path: str) -> BlameResult:
    """Parse the plain-text output of ``svn blame`` or ``svn blame -v``.

    Line numbers are positional; lines that match neither layout are
    logged and skipped.
    """
    lines: List[BlameLine] = []
    for number, raw in enumerate(_source_lines(text), 1):
        m = _VERBOSE_LINE_RE.match(raw)
        date = ""
        if m:
            date = m.group("date")
        else:
            m = _PLAIN_LINE_RE.match(raw)
        if m is None:
            logger.debug("blame_text_line_skipped", path=path, line_number=number)
            continue
        rev = m.group("rev")
        author = m.group("author")
        lines.append(
            BlameLine(
                line_number=number,
                revision=0 if rev == "-" else to_int(rev),
                author=UNKNOWN_AUTHOR if author == "-" else author,
                date=date,
                content=m.group("content"),
            )
        )
    return _with_range(path, lines)


def fill_content(result: BlameResult, file_text: str) -> BlameResult:
    """Fill empty line content from the blamed file's text (e.g. ``svn cat``)."""
    source = _source_lines(file_text)
    lines = [
        replace(bl, content=source[bl.line_number - 1])
        if not bl.content and 0 < bl.line_number <= len(source)
        else bl
        for bl in result.lines
    ]
    return replace(result, lines=lines)
