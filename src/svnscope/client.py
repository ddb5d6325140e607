"""High-level svn operations: build arguments, run svn, parse the output."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence

import structlog

from svnscope.config.schema import SvnScopeConfig
from svnscope.status.coordinator import (
    ScanCoordinator,
    ScanRegistry,
    StatusSnapshot,
    shallow_scan,
)
from svnscope.svn.blame_parser import fill_content, parse_blame
from svnscope.svn.diff_parser import parse_diff
from svnscope.svn.errors import SvnCommandError, SvnError
from svnscope.svn.externals_parser import format_external, parse_externals, remove_external
from svnscope.svn.info_parser import parse_info
from svnscope.svn.invoker import SvnInvoker
from svnscope.svn.list_parser import parse_list
from svnscope.svn.log_parser import parse_log
from svnscope.svn.models import (
    BlameResult,
    DiffResult,
    ExternalDef,
    InfoResult,
    ListResult,
    LogResult,
    StatusResult,
)
from svnscope.svn.status_parser import parse_status

logger = structlog.get_logger(__name__)

_UPDATED_RE = re.compile(r"(?:Updated to|At) revision (\d+)\.")
_COMMITTED_RE = re.compile(r"Committed revision (\d+)\.")

EXTERNALS_PROP = "svn:externals"


def _revision_from(pattern: re.Pattern[str], output: str) -> int:
    m = pattern.search(output)
    return int(m.group(1)) if m else 0


def _cwd_for(target: str) -> str:
    """Working directory for a target: itself if a directory, else its parent."""
    if "://" in target:
        return str(Path.cwd())
    p = Path(target)
    if p.is_dir():
        return str(p)
    parent = p.parent
    return str(parent) if parent.is_dir() else str(Path.cwd())


class SvnClient:
    """Facade over SvnInvoker, the parsers, and the scan coordinator."""

    def __init__(
        self,
        config: Optional[SvnScopeConfig] = None,
        *,
        invoker: Optional[SvnInvoker] = None,
        registry: Optional[ScanRegistry] = None,
    ) -> None:
        self.config = config or SvnScopeConfig()
        self.invoker = invoker or SvnInvoker(self.config)
        self.scans = ScanCoordinator(self.invoker, registry)

    def _run(self, args: Sequence[str], target: str) -> str:
        return self.invoker.run(list(args), cwd=_cwd_for(target))

    # --- status ---

    def status(self, path: str, depth: Optional[str] = None) -> StatusResult:
        """Status of *path* (recursive unless *depth* says otherwise).

        Unlike the scan methods this raises SvnError when svn fails.
        """
        args = ["status", "--xml"]
        if depth:
            args.append(f"--depth={depth}")
        args.append(path)
        return parse_status(self._run(args, path), path)

    def shallow_status(self, path: str) -> StatusSnapshot:
        return shallow_scan(self.invoker, path)

    def deep_status(self, path: str) -> StatusSnapshot:
        return self.scans.deep_scan(path)

    def cancel_scan(self, path: str) -> bool:
        return self.scans.cancel(path)

    def is_versioned(self, path: str) -> bool:
        try:
            self._run(["info", "--xml", path], path)
        except SvnError:
            return False
        return True

    # --- history & content ---

    def log(
        self,
        path: str,
        limit: Optional[int] = None,
        start_revision: Optional[int] = None,
        end_revision: Optional[int] = None,
        verbose: bool = True,
    ) -> LogResult:
        args = ["log", "--xml", "-l", str(limit or self.config.svn.log_limit)]
        if verbose:
            args.append("--verbose")
        if start_revision is not None and end_revision is not None:
            args += ["-r", f"{start_revision}:{end_revision}"]
        elif start_revision is not None:
            args += ["-r", f"{start_revision}:HEAD"]
        args.append(path)
        return parse_log(self._run(args, path))

    def info(self, path: str) -> InfoResult:
        return parse_info(self._run(["info", "--xml", path], path))

    def diff(self, path: str, change: Optional[str] = None) -> DiffResult:
        args = ["diff"]
        if change:
            args += ["-c", change]
        args.append(path)
        return parse_diff(self._run(args, path))

    def blame(
        self,
        path: str,
        start_revision: Optional[int] = None,
        end_revision: Optional[int] = None,
    ) -> BlameResult:
        """Blame *path*; line text comes from ``svn cat`` at the same revision.

        The two invocations are timed out independently.
        """
        args = ["blame", "--xml"]
        if start_revision is not None and end_revision is not None:
            args += ["-r", f"{start_revision}:{end_revision}"]
        args.append(path)
        result = parse_blame(self._run(args, path), path)
        if not result.lines or all(bl.content for bl in result.lines):
            return result

        cat_args = ["cat"]
        if end_revision is not None:
            cat_args += ["-r", str(end_revision)]
        cat_args.append(path)
        try:
            text = self._run(cat_args, path)
        except SvnError as exc:
            logger.warning("blame_content_unavailable", path=path, error=exc.message)
            return result
        return fill_content(result, text)

    def list(
        self,
        url: str,
        revision: Optional[str] = None,
        depth: Optional[str] = None,
    ) -> ListResult:
        args = ["list", "--xml", "-v"]
        if revision:
            args += ["-r", revision]
        if depth:
            args += ["--depth", depth]
        args.append(url)
        return parse_list(self._run(args, url), url)

    # --- externals ---

    def externals(self, path: str) -> List[ExternalDef]:
        output = self._run(["propget", EXTERNALS_PROP, "-R", path], path)
        return parse_externals(output, path)

    def _externals_value(self, path: str) -> str:
        try:
            return self._run(["propget", EXTERNALS_PROP, path], path)
        except SvnCommandError:
            # svn exits non-zero when the property is not set
            return ""

    def add_external(
        self,
        path: str,
        url: str,
        name: str = "",
        revision: Optional[int] = None,
    ) -> None:
        current = self._externals_value(path).strip()
        line = format_external(url, name, revision)
        value = f"{current}\n{line}" if current else line
        self._run(["propset", EXTERNALS_PROP, value, path], path)

    def remove_external(self, path: str, name: str) -> None:
        value = remove_external(self._externals_value(path), name)
        if value.strip():
            self._run(["propset", EXTERNALS_PROP, value, path], path)
        else:
            self._run(["propdel", EXTERNALS_PROP, path], path)

    # --- working copy changes ---

    def update(self, path: str) -> int:
        """Update *path*; returns the new revision (0 if not reported)."""
        return _revision_from(_UPDATED_RE, self._run(["update", path], path))

    def commit(self, paths: Sequence[str], message: str) -> int:
        """Commit *paths*; returns the committed revision (0 if nothing was committed)."""
        output = self._run(["commit", "-m", message, *paths], paths[0] if paths else ".")
        return _revision_from(_COMMITTED_RE, output)

    def revert(self, paths: Sequence[str]) -> None:
        self._run(["revert", *paths], paths[0] if paths else ".")

    def add(self, paths: Sequence[str]) -> None:
        self._run(["add", *paths], paths[0] if paths else ".")

    def delete(self, paths: Sequence[str]) -> None:
        self._run(["delete", *paths], paths[0] if paths else ".")

    def cleanup(self, path: str) -> None:
        self._run(["cleanup", path], path)
