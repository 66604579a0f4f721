"""
System collaborators: Apache modules, packages, services and the clock.

The orchestration in fixer.py only talks to the SystemManager protocol, so
tests can substitute a fake and the file-patching code never spawns a
process.
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional, Protocol

from wp_limit_fixer.errors import ServiceError

logger = logging.getLogger("wp_limit_fixer")

OPERATION_TIMEOUT: int = 300  # seconds
INIT_D_DIR: str = "/etc/init.d"


class SystemManager(Protocol):
    """Capabilities the run needs from the host."""

    def query_enabled_modules(self) -> List[str]: ...

    def disable_module(self, name: str) -> None: ...

    def ensure_package(self, name: str) -> None: ...

    def enable_service(self, name: str) -> None: ...

    def restart_service(self, name: str) -> None: ...

    def clock_synchronized(self) -> bool: ...


# ----------------------------------------------------------------
# Command Execution Helper
# ----------------------------------------------------------------
def run_command(
    cmd: List[str],
    env: Optional[Dict[str, str]] = None,
    check: bool = True,
    capture_output: bool = True,
    timeout: Optional[int] = OPERATION_TIMEOUT,
) -> subprocess.CompletedProcess:
    """
    Execute a system command and return the CompletedProcess.

    Args:
        cmd: Command and arguments as a list
        env: Environment variables for the command
        check: Whether to check the return code
        capture_output: Whether to capture stdout/stderr
        timeout: Command timeout in seconds

    Returns:
        CompletedProcess instance with command results

    Raises:
        ServiceError: If the command is missing, fails or times out.
    """
    logger.debug(f"Running command: {' '.join(cmd)}")
    try:
        return subprocess.run(
            cmd,
            env=env or os.environ.copy(),
            check=check,
            text=True,
            capture_output=capture_output,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        logger.debug(f"Command failed ({e.returncode}): {' '.join(cmd)}: {stderr}")
        raise ServiceError(
            f"Command failed: {' '.join(cmd)}" + (f": {stderr}" if stderr else "")
        ) from e
    except subprocess.TimeoutExpired as e:
        raise ServiceError(f"Command timed out after {timeout} seconds: {' '.join(cmd)}") from e
    except OSError as e:
        raise ServiceError(f"Error executing {cmd[0]}: {e}") from e


def parse_apache_modules(output: str) -> List[str]:
    """Extract module names from ``apachectl -M`` output."""
    modules = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line.endswith(":"):
            continue
        name = line.split()[0]
        if name.endswith("_module"):
            modules.append(name)
    return modules


class SubprocessSystemManager:
    """SystemManager backed by apachectl, a2dismod, apt-get, systemctl and friends."""

    def __init__(self, runner=run_command, which=shutil.which):
        self.run = runner
        self.which = which

    def query_enabled_modules(self) -> List[str]:
        try:
            result = self.run(["apachectl", "-M"])
        except ServiceError as e:
            logger.debug(f"Could not list Apache modules: {e}")
            return []
        return parse_apache_modules(result.stdout or "")

    def disable_module(self, name: str) -> None:
        self.run(["a2dismod", name])

    def ensure_package(self, name: str) -> None:
        if not self.which("apt-get"):
            raise ServiceError(f"No supported package manager found to install {name}")
        env = os.environ.copy()
        env["DEBIAN_FRONTEND"] = "noninteractive"
        self.run(["apt-get", "update"], env=env)
        self.run(["apt-get", "install", "-y", name], env=env)

    def enable_service(self, name: str) -> None:
        self.run(["systemctl", "enable", name])
        self.run(["systemctl", "start", name])

    def restart_service(self, name: str) -> None:
        """Restart via systemctl, then service(8), then the init.d script."""
        if self.which("systemctl"):
            cmd = ["systemctl", "restart", name]
        elif self.which("service"):
            cmd = ["service", name, "restart"]
        else:
            cmd = [os.path.join(INIT_D_DIR, name), "restart"]
        self.run(cmd)

    def clock_synchronized(self) -> bool:
        """
        Ask timedatectl whether NTP reports the clock as synchronized.

        When timedatectl is unavailable there is nothing to compare against,
        so the clock is taken to be correct.
        """
        if not self.which("timedatectl"):
            logger.debug("timedatectl not available; skipping clock check")
            return True
        try:
            result = self.run(["timedatectl", "show", "-p", "NTPSynchronized", "--value"])
        except ServiceError as e:
            logger.debug(f"Clock check failed: {e}")
            return True
        return (result.stdout or "").strip().lower() == "yes"
