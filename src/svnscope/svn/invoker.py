"""svn subprocess wrapper: spawning, timeouts, cancellation and proxy config dirs."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import structlog

from svnscope.config.schema import ProxyConfig, SvnScopeConfig
from svnscope.svn.errors import (
    SvnCancelledError,
    SvnNotFoundError,
    SvnTimeoutError,
    classify_error,
)

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]

ALLOWED_SSL_FAILURES = ("unknown-ca", "hostname-mismatch", "expired", "not-yet-valid")


def write_proxy_config(proxy: ProxyConfig) -> Optional[Path]:
    """Write a temporary svn config dir holding a ``servers`` file.

    Returns None when *proxy* is not usable. The caller owns the
    directory and must remove it once svn exits.
    """
    if not proxy.is_usable:
        return None

    config_dir = Path(tempfile.mkdtemp(prefix="svn-config-"))
    lines = [
        "[global]",
        f"http-proxy-host = {proxy.host}",
        f"http-proxy-port = {proxy.port}",
    ]
    if proxy.username:
        lines.append(f"http-proxy-username = {proxy.username}")
    if proxy.password:
        lines.append(f"http-proxy-password = {proxy.password}")
    if proxy.bypass_for_local:
        lines.append("http-proxy-exceptions = localhost, 127.0.0.1")

    servers = config_dir / "servers"
    try:
        fd = os.open(servers, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
    except OSError:
        remove_config_dir(config_dir)
        raise
    return config_dir


def remove_config_dir(config_dir: Optional[Path]) -> None:
    if config_dir is None:
        return
    try:
        shutil.rmtree(config_dir)
    except OSError as exc:
        logger.warning("svn_config_cleanup_failed", config_dir=str(config_dir), error=str(exc))


class SvnProcess:
    """One running svn invocation.

    ``wait()`` may be called once, from any thread; ``cancel()`` may be
    called from another thread while ``wait()`` is blocked.
    """

    def __init__(
        self,
        popen: subprocess.Popen,
        argv: Sequence[str],
        *,
        timeout: Optional[float] = None,
        config_dir: Optional[Path] = None,
    ) -> None:
        self._popen = popen
        self.argv = list(argv)
        self.timeout = timeout
        self._config_dir = config_dir
        self._cancelled = threading.Event()

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Kill the process. Best effort: termination failures are swallowed."""
        self._cancelled.set()
        try:
            self._popen.kill()
        except OSError as exc:
            logger.debug("svn_kill_failed", pid=self._popen.pid, error=str(exc))

    def wait(self) -> str:
        """Block until exit and return stdout. Raises SvnError on failure."""
        try:
            try:
                out, err = self._popen.communicate(timeout=self.timeout)
            except subprocess.TimeoutExpired:
                self._popen.kill()
                self._popen.communicate()
                logger.warning("svn_timeout", argv=self.argv, timeout=self.timeout)
                raise SvnTimeoutError(
                    f"svn operation timed out after {self.timeout:g} seconds"
                )
        finally:
            remove_config_dir(self._config_dir)

        code = self._popen.returncode
        logger.debug("svn_exit", argv=self.argv, exit_code=code)

        if self.cancelled:
            raise SvnCancelledError("svn operation was cancelled", exit_code=code, stderr=err)
        if code != 0:
            raise classify_error(err, code)
        return out


class SvnInvoker:
    """Spawn the svn executable with an argument vector (never a shell string)."""

    def __init__(self, config: Optional[SvnScopeConfig] = None) -> None:
        self.config = config or SvnScopeConfig()

    def _environment(self) -> Dict[str, str]:
        env = dict(os.environ)
        env["LANG"] = self.config.svn.locale
        env["LC_ALL"] = self.config.svn.locale
        return env

    def _global_options(self, config_dir: Optional[Path]) -> List[str]:
        opts: List[str] = []
        if config_dir is not None:
            opts += ["--config-dir", str(config_dir)]
        if not self.config.ssl.verify:
            opts += [
                "--non-interactive",
                "--trust-server-cert-failures",
                ",".join(ALLOWED_SSL_FAILURES),
            ]
        return opts

    def start(
        self,
        args: Sequence[str],
        cwd: PathLike,
        timeout: Optional[float] = None,
    ) -> SvnProcess:
        """Spawn svn and return the running process without waiting."""
        if timeout is None:
            timeout = self.config.timeout_seconds
        elif timeout <= 0:
            timeout = None

        config_dir = write_proxy_config(self.config.proxy)
        argv = [self.config.svn.executable, *self._global_options(config_dir), *args]

        if not self.config.ssl.verify:
            logger.warning("svn_ssl_verification_bypassed", cwd=str(cwd))
        logger.debug("svn_command", args=list(args), cwd=str(cwd))

        kwargs: dict = {}
        if os.name == "nt":
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

        try:
            popen = subprocess.Popen(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self._environment(),
                text=True,
                encoding="utf-8",
                errors="replace",
                **kwargs,
            )
        except FileNotFoundError as exc:
            remove_config_dir(config_dir)
            if not Path(cwd).is_dir():
                raise SvnNotFoundError(f"working directory does not exist: {cwd}") from exc
            raise SvnNotFoundError(
                f"{self.config.svn.executable} is not installed or not on PATH"
            ) from exc
        except OSError as exc:
            remove_config_dir(config_dir)
            raise SvnNotFoundError(f"failed to start {self.config.svn.executable}: {exc}") from exc

        return SvnProcess(popen, argv, timeout=timeout, config_dir=config_dir)

    def run(
        self,
        args: Sequence[str],
        cwd: PathLike,
        timeout: Optional[float] = None,
    ) -> str:
        """Run svn to completion and return stdout. Raises SvnError on failure."""
        return self.start(args, cwd, timeout).wait()

