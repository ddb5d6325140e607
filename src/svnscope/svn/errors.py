"""svn invocation errors and stderr classification."""

from __future__ import annotations

import re
from typing import List, Optional


class SvnError(Exception):
    """Base class for every failure surfaced by an svn invocation."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.stderr = stderr


class SvnNotFoundError(SvnError):
    """The svn executable could not be found or spawned."""


class SvnCommandError(SvnError):
    """svn ran and exited non-zero."""


class SvnTimeoutError(SvnError):
    """svn was killed after exceeding its timeout."""


class SvnCancelledError(SvnError):
    """svn was killed because its scan was superseded."""


class AuthenticationError(SvnCommandError):
    def __init__(self, message: str, *, realm: Optional[str] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.realm = realm


class ConflictError(SvnCommandError):
    def __init__(self, message: str, *, paths: Optional[List[str]] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.paths = paths or []


class NetworkError(SvnCommandError):
    def __init__(self, message: str, *, url: Optional[str] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.url = url


class WorkingCopyError(SvnCommandError):
    def __init__(self, message: str, *, path: str = "", **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.path = path


_REALM_RE = re.compile(r"realm:\s*(.+)", re.IGNORECASE)
_URL_RE = re.compile(r"(https?://[^\s'\"]+|svn(?:\+ssh)?://[^\s'\"]+)", re.IGNORECASE)
_PATH_LABEL_RE = re.compile(r"path:\s*(.+)", re.IGNORECASE)
_QUOTED_PATH_RE = re.compile(r"""['"]([A-Za-z]:\\[^'"]+|/[^'"]+)['"]""")


def _extract_paths(text: str) -> List[str]:
    """Return unique quoted absolute paths, in order of appearance."""
    seen: List[str] = []
    for m in _QUOTED_PATH_RE.finditer(text):
        if m.group(1) not in seen:
            seen.append(m.group(1))
    return seen


def classify_error(stderr: str, exit_code: Optional[int] = None) -> SvnCommandError:
    """Turn a non-zero exit's stderr into the most specific SvnCommandError."""
    text = stderr.strip()
    if not text:
        return SvnCommandError(
            f"svn exited with code {exit_code}", exit_code=exit_code, stderr=stderr
        )

    lower = text.lower()
    first_line = text.splitlines()[0]
    kwargs = {"exit_code": exit_code, "stderr": stderr}

    if any(k in lower for k in ("authentication", "authorization", "access forbidden")):
        m = _REALM_RE.search(text)
        return AuthenticationError(
            f"Authentication failed: {first_line}",
            realm=m.group(1).strip() if m else None,
            **kwargs,
        )
    if "conflict" in lower:
        return ConflictError(
            f"Conflicts detected: {first_line}", paths=_extract_paths(text), **kwargs
        )
    if any(k in lower for k in ("connection", "network", "timed out", "unable to connect", "host")):
        m = _URL_RE.search(text)
        return NetworkError(
            f"Network error: {first_line}", url=m.group(1) if m else None, **kwargs
        )
    if any(k in lower for k in ("working copy", "locked", "cleanup")):
        m = _PATH_LABEL_RE.search(text)
        if m:
            path = m.group(1).strip()
        else:
            paths = _extract_paths(text)
            path = paths[0] if paths else ""
        return WorkingCopyError(f"Working copy error: {first_line}", path=path, **kwargs)

    return SvnCommandError(first_line, **kwargs)
