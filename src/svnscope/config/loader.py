"""Load and merge configuration from .svnscope.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from svnscope.config.schema import (
    LOG_LEVELS,
    LoggingConfig,
    ProxyConfig,
    SSLConfig,
    SvnConfig,
    SvnScopeConfig,
)

CONFIG_FILENAME = ".svnscope.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: SvnScopeConfig) -> None:
    """Apply SVNSCOPE_* environment variable overrides."""
    if val := os.environ.get("SVNSCOPE_SVN"):
        cfg.svn.executable = val
    if val := os.environ.get("SVNSCOPE_TIMEOUT"):
        try:
            timeout = int(val)
        except ValueError:
            timeout = -1
        if timeout >= 0:
            cfg.svn.timeout = timeout
    if val := os.environ.get("SVNSCOPE_LOG_LEVEL"):
        if val.lower() in LOG_LEVELS:
            cfg.logging.level = val.lower()  # type: ignore[assignment]
    if val := os.environ.get("SVNSCOPE_PROXY_PASSWORD"):
        cfg.proxy.password = val


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def load_config(
    root: Path,
    config_override: Optional[str] = None,
) -> SvnScopeConfig:
    """Load, validate, and return a SvnScopeConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = SvnScopeConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = SvnScopeConfig(
            version=raw.get("version", "1.0"),
            svn=_build_section(raw, SvnConfig, "svn"),
            proxy=_build_section(raw, ProxyConfig, "proxy"),
            ssl=_build_section(raw, SSLConfig, "ssl"),
            logging=_build_section(raw, LoggingConfig, "logging"),
        )
        if cfg.logging.level not in LOG_LEVELS:
            raise ConfigError(f"Invalid logging level: {cfg.logging.level}")

    _merge_env_overrides(cfg)
    return cfg
