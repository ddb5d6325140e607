"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal, Optional

LogLevel = Literal["debug", "info", "warning", "error"]
LogFormat = Literal["console", "json"]

LOG_LEVELS = ("debug", "info", "warning", "error")


def default_executable() -> str:
    """Return the platform's svn executable name."""
    return "svn.exe" if os.name == "nt" else "svn"


@dataclass
class SvnConfig:
    executable: str = field(default_factory=default_executable)
    locale: str = "en_US.UTF-8"  # pinned so output is parseable and not localised
    timeout: int = 0  # seconds per invocation; 0 disables the timeout
    log_limit: int = 100


@dataclass
class ProxyConfig:
    enabled: bool = False
    host: str = ""
    port: int = 0
    username: str = ""
    password: str = ""
    bypass_for_local: bool = False

    @property
    def is_usable(self) -> bool:
        return self.enabled and bool(self.host) and self.port > 0


@dataclass
class SSLConfig:
    verify: bool = True


@dataclass
class LoggingConfig:
    level: LogLevel = "warning"
    format: LogFormat = "console"


@dataclass
class SvnScopeConfig:
    version: str = "1.0"
    svn: SvnConfig = field(default_factory=SvnConfig)
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    ssl: SSLConfig = field(default_factory=SSLConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def timeout_seconds(self) -> Optional[float]:
        """Per-invocation timeout, or None when disabled."""
        return float(self.svn.timeout) if self.svn.timeout > 0 else None
