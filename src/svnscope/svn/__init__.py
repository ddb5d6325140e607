"""svn interface layer: invoker, output parsers and models."""

from svnscope.svn.diff_parser import DiffParser, parse_diff
from svnscope.svn.errors import (
    AuthenticationError,
    ConflictError,
    NetworkError,
    SvnCancelledError,
    SvnCommandError,
    SvnError,
    SvnNotFoundError,
    SvnTimeoutError,
    WorkingCopyError,
    classify_error,
)
from svnscope.svn.invoker import SvnInvoker, SvnProcess
from svnscope.svn.models import StatusChar, StatusEntry, StatusResult

__all__ = [
    "AuthenticationError",
    "ConflictError",
    "DiffParser",
    "NetworkError",
    "StatusChar",
    "StatusEntry",
    "StatusResult",
    "SvnCancelledError",
    "SvnCommandError",
    "SvnError",
    "SvnInvoker",
    "SvnNotFoundError",
    "SvnProcess",
    "SvnTimeoutError",
    "WorkingCopyError",
    "classify_error",
    "parse_diff",
]
