"""Parser for ``svn:externals`` property values.

Accepted line shapes (``svn propget svn:externals [-R]`` output)::

    PATH - DEFINITION          # recursive output, owner directory first
    DEFINITION                 # inherits the last PATH seen (or the base path)

    DEFINITION := [-rREV | -r REV] URL[@PEG] [LOCAL_PATH]
                | LOCAL_PATH [-rREV] URL     # pre-1.5 layout

A missing LOCAL_PATH defaults to the URL's last path segment.
"""

from __future__ import annotations

import re
import shlex
from typing import List, Optional, Tuple

import structlog

from svnscope.svn.models import ExternalDef

logger = structlog.get_logger(__name__)

_OWNER_RE = re.compile(r"^(\S.*?) - (.+)$")
_REV_RE = re.compile(r"^-r(\d+)$")
_PEG_RE = re.compile(r"^(.*)@(\d+)$")
_URL_PREFIXES = ("^/", "//", "/", "../")
_QUOTES = ('"', "'")
_NOT_OWNER_PREFIXES = ("^/", "//", "-r")


def _looks_like_url(token: str) -> bool:
    return "://" in token or token.startswith(_URL_PREFIXES)


def _split_owner(line: str) -> Tuple[Optional[str], str]:
    """Split ``PATH - DEFINITION``; (None, line) when *line* has no owner prefix.

    A left side holding quotes or URL text means the " - " is part of
    the definition itself.
    """
    m = _OWNER_RE.match(line)
    if m is None:
        return None, line
    owner = m.group(1).strip()
    if any(c in owner for c in _QUOTES) or "://" in owner or owner.startswith(_NOT_OWNER_PREFIXES):
        return None, line
    return owner, m.group(2)


def _split(definition: str) -> List[str]:
    try:
        return shlex.split(definition)
    except ValueError:
        return definition.split()


def _take_revision(tokens: List[str]) -> Tuple[Optional[int], List[str]]:
    """Pop a leading ``-rN`` / ``-r N`` from *tokens*."""
    if not tokens:
        return None, tokens
    m = _REV_RE.match(tokens[0])
    if m:
        return int(m.group(1)), tokens[1:]
    if tokens[0] == "-r" and len(tokens) > 1 and tokens[1].isdigit():
        return int(tokens[1]), tokens[2:]
    return None, tokens


def _default_name(url: str) -> str:
    return url.rstrip("/").split("/")[-1] or "external"


def parse_definition(definition: str, owner: str) -> Optional[ExternalDef]:
    """Parse one DEFINITION owned by directory *owner*; None if it is empty."""
    tokens = _split(definition.strip())
    if not tokens:
        return None

    revision, rest = _take_revision(tokens)
    if revision is None and len(rest) >= 2 and not _looks_like_url(rest[0]):
        # Old layout: LOCAL_PATH [-rREV] URL
        local = rest[0]
        revision, tail = _take_revision(rest[1:])
        if not tail:
            return None
        url, name = tail[0], local
    else:
        if not rest:
            return None
        url = rest[0]
        name = rest[-1] if len(rest) > 1 else ""

    peg: Optional[int] = None
    m = _PEG_RE.match(url)
    if m and m.group(1):
        url, peg = m.group(1), int(m.group(2))

    if not name:
        name = _default_name(url)

    return ExternalDef(
        name=name,
        url=url,
        path=f"{owner.rstrip('/')}/{name}" if owner else name,
        revision=revision,
        peg_revision=peg,
    )


def parse_externals(text: str, base_path: str) -> List[ExternalDef]:
    """Parse a whole property value (or recursive propget output)."""
    externals: List[ExternalDef] = []
    owner = base_path

    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        prefix, definition = _split_owner(line)
        if prefix is not None:
            owner = prefix
        parsed = parse_definition(definition, owner)
        if parsed is None:
            logger.debug("externals_line_skipped", line=line)
            continue
        externals.append(parsed)

    return externals


def format_external(url: str, name: str = "", revision: Optional[int] = None) -> str:
    """Render a definition line in the modern ``[-rREV] URL LOCAL_PATH`` layout."""
    local = name or _default_name(url)
    if any(c.isspace() for c in local):
        local = f'"{local}"'
    prefix = f"-r{revision} " if revision else ""
    return f"{prefix}{url} {local}"


def remove_external(value: str, name: str) -> str:
    """Return *value* without the definitions whose local path is *name*."""
    kept = []
    for raw in value.splitlines():
        parsed = parse_definition(raw, "") if raw.strip() and not raw.strip().startswith("#") else None
        if parsed is not None and parsed.name == name:
            continue
        kept.append(raw)
    return "\n".join(kept).strip("\n")
