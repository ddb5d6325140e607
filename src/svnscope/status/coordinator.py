"""Shallow and deep status scans, with one deep scan per working-copy path.

Starting a deep scan for a path kills any deep scan already running for
that path. The superseded caller gets an empty snapshot, never the newer
scan's data and never an exception.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Dict, List, Optional

import structlog

from svnscope.status.aggregator import direct_status, normalize_path
from svnscope.svn.errors import SvnCancelledError, SvnError
from svnscope.svn.invoker import SvnInvoker, SvnProcess
from svnscope.svn.models import StatusChar, StatusEntry
from svnscope.svn.status_parser import parse_status

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StatusSnapshot:
    """Entries from one status scan plus the direct-children map."""

    path: str
    entries: List[StatusEntry] = field(default_factory=list)
    direct: Dict[str, StatusChar] = field(default_factory=dict)

    @classmethod
    def empty(cls, path: str) -> "StatusSnapshot":
        return cls(path=path)

    @classmethod
    def from_xml(cls, xml: str, path: str) -> "StatusSnapshot":
        result = parse_status(xml, path)
        return cls(path=path, entries=result.entries, direct=direct_status(result.entries, path))


@dataclass(eq=False)
class ScanHandle:
    """The registry's record of one in-flight deep scan."""

    path: str
    process: SvnProcess


class ScanRegistry:
    """Working-copy path → in-flight ScanHandle, guarded by a single lock."""

    _shared: ClassVar[Optional["ScanRegistry"]] = None
    _shared_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: Dict[str, ScanHandle] = {}

    @classmethod
    def shared(cls) -> "ScanRegistry":
        """The process-wide registry."""
        with cls._shared_lock:
            if cls._shared is None:
                cls._shared = cls()
            return cls._shared

    def start(self, path: str, spawn: Callable[[], SvnProcess]) -> ScanHandle:
        """Cancel any scan for *path*, spawn a new one, and record it.

        Check, cancel, spawn and replace happen under one lock so two
        near-simultaneous starts cannot both own the slot.
        """
        key = normalize_path(path)
        with self._lock:
            previous = self._active.pop(key, None)
            if previous is not None:
                logger.info("deep_scan_superseded", path=key, pid=previous.process.pid)
                previous.process.cancel()
            handle = ScanHandle(path=key, process=spawn())
            self._active[key] = handle
            return handle

    def cancel(self, path: str) -> bool:
        """Kill and forget the scan for *path*. Returns False if none was running."""
        key = normalize_path(path)
        with self._lock:
            handle = self._active.pop(key, None)
        if handle is None:
            return False
        handle.process.cancel()
        return True

    def is_active(self, path: str) -> bool:
        with self._lock:
            return normalize_path(path) in self._active

    def finish(self, handle: ScanHandle) -> bool:
        """Drop *handle* if it still owns its slot. Returns whether it did."""
        with self._lock:
            if self._active.get(handle.path) is handle:
                del self._active[handle.path]
                return True
            return False


def shallow_scan(invoker: SvnInvoker, path: str) -> StatusSnapshot:
    """Status of *path* and its immediate children. Not cancellable."""
    try:
        xml = invoker.run(["status", "--xml", "--depth=immediates", path], cwd=path)
    except SvnError as exc:
        logger.warning("shallow_scan_failed", path=path, error=exc.message)
        return StatusSnapshot.empty(path)
    return StatusSnapshot.from_xml(xml, path)


class ScanCoordinator:
    """Run deep (recursive) status scans through a ScanRegistry."""

    def __init__(self, invoker: SvnInvoker, registry: Optional[ScanRegistry] = None) -> None:
        self.invoker = invoker
        self.registry = registry or ScanRegistry.shared()

    def deep_scan(self, path: str) -> StatusSnapshot:
        """Recursive status of *path*; empty if superseded or svn fails."""
        try:
            handle = self.registry.start(
                path,
                lambda: self.invoker.start(
                    ["status", "--xml", "--depth=infinity", path], cwd=path
                ),
            )
        except SvnError as exc:
            logger.warning("deep_scan_failed", path=path, error=exc.message)
            return StatusSnapshot.empty(path)

        try:
            xml = handle.process.wait()
        except SvnCancelledError:
            self.registry.finish(handle)
            logger.debug("deep_scan_discarded", path=path)
            return StatusSnapshot.empty(path)
        except SvnError as exc:
            self.registry.finish(handle)
            logger.warning("deep_scan_failed", path=path, error=exc.message)
            return StatusSnapshot.empty(path)

        if not self.registry.finish(handle):
            # Superseded after svn exited; the newer scan owns the result
            logger.debug("deep_scan_discarded", path=path)
            return StatusSnapshot.empty(path)
        return StatusSnapshot.from_xml(xml, path)

    def cancel(self, path: str) -> bool:
        return self.registry.cancel(path)

    def is_active(self, path: str) -> bool:
        return self.registry.is_active(path)
