"""
Host route installation via the OS route command
"""

import subprocess
import threading
from ipaddress import IPv4Address
from typing import List, Sequence, Union

from .constants import DEFAULT_ROUTE_COMMAND, DEFAULT_ROUTE_TIMEOUT
from .exceptions import RouteInstallError
from .utils.logger import get_logger


class RouteInstaller:
    """Runs ``route add`` (or a configured equivalent) for each route intent.

    The command is a sequence of arguments where ``{address}`` and
    ``{gateway}`` are substituted. Routes are never retried or removed.
    """

    def __init__(self, gateway: Union[str, IPv4Address],
                 command: Sequence[str] = DEFAULT_ROUTE_COMMAND,
                 timeout: float = DEFAULT_ROUTE_TIMEOUT,
                 dry_run: bool = False):
        self.gateway = IPv4Address(str(gateway))
        self.command = tuple(command)
        self.timeout = timeout
        self.dry_run = dry_run
        self.logger = get_logger(__name__)
        self.stats_lock = threading.Lock()
        self.installed = 0
        self.failed = 0

        if not any("{address}" in arg for arg in self.command):
            raise ValueError("Route command must contain an {address} placeholder")

    def build_command(self, address: Union[str, IPv4Address]) -> List[str]:
        return [arg.format(address=address, gateway=self.gateway) for arg in self.command]

    def install(self, address: Union[str, IPv4Address]) -> None:
        """Install a host route for ``address``; raises RouteInstallError"""
        cmd = self.build_command(address)
        if self.dry_run:
            self.logger.info(f"[dry-run] {' '.join(cmd)}")
            return
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as e:
            raise RouteInstallError(str(address), f"could not run {cmd[0]}: {e}")
        if result.returncode != 0:
            stderr = (result.stderr or result.stdout or "").strip()
            raise RouteInstallError(str(address), f"exit {result.returncode}: {stderr}")
        self.logger.info(f"Route added: {address} via {self.gateway}")

    def add_route(self, address: Union[str, IPv4Address]) -> bool:
        """Best-effort install; failures are logged, never raised"""
        try:
            self.install(address)
        except RouteInstallError as e:
            with self.stats_lock:
                self.failed += 1
            if e.message.startswith("could not run"):
                self.logger.error(f"Failed to add route: {e}")
            else:
                self.logger.warning(f"Failed to add route: {e}")
            return False
        with self.stats_lock:
            self.installed += 1
        return True

    def get_stats(self) -> dict:
        with self.stats_lock:
            return {'installed': self.installed, 'failed': self.failed}
