"""Configuration loading, schema, and defaults."""

from svnscope.config.loader import ConfigError, load_config
from svnscope.config.schema import ProxyConfig, SvnScopeConfig

__all__ = [
    "ConfigError",
    "ProxyConfig",
    "SvnScopeConfig",
    "load_config",
]
