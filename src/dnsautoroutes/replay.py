"""
Startup replay of recently seen corporate hosts

Replay only warms the path: it resolves each host so that the resulting DNS
round-trip passes the capture loop, which then re-installs the route. If that
lookup is answered from a local cache or over another interface, nothing is
routed until the next observed query.
"""

import socket
import threading
from typing import Callable, List, Optional, Sequence

from .constants import DEFAULT_REPLAY_DELAY, DEFAULT_REPLAY_PORT
from .exceptions import ResolutionError
from .store import LogEntry
from .utils.logger import get_logger

Resolver = Callable[[str, int], object]


def resolve_host(host: str, port: int) -> object:
    """Forward-resolve ``host``; the addresses themselves are not used"""
    try:
        return socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(host, str(e))


class ReplayScheduler:
    """Resolves logged hosts once, after a short delay, on a daemon timer"""

    def __init__(self, entries: Sequence[LogEntry],
                 resolve: Resolver = resolve_host,
                 delay: float = DEFAULT_REPLAY_DELAY,
                 port: int = DEFAULT_REPLAY_PORT):
        self.entries = list(entries)
        self.resolve = resolve
        self.delay = delay
        self.port = port
        self.logger = get_logger(__name__)
        self.timer: Optional[threading.Timer] = None
        self.resolved: List[str] = []
        self.failed: List[str] = []

    def start(self) -> Optional[threading.Timer]:
        """Schedule the replay; returns the timer, or None when there is nothing to do"""
        if not self.entries:
            self.logger.debug("No recent hosts to replay")
            return None
        self.logger.info(f"Replaying {len(self.entries)} recent host(s) in {self.delay:.1f}s")
        self.timer = threading.Timer(self.delay, self.run)
        self.timer.name = "ReplayScheduler"
        self.timer.daemon = True
        self.timer.start()
        return self.timer

    def run(self) -> List[str]:
        for entry in self.entries:
            try:
                self.resolve(entry.host, self.port)
            except (ResolutionError, OSError) as e:
                self.failed.append(entry.host)
                self.logger.warning(f"Failed to resolve {entry.host}: {e}")
                continue
            self.resolved.append(entry.host)
            self.logger.debug(f"Resolved {entry.host}")
        self.logger.info(f"Replay finished: {len(self.resolved)} resolved, {len(self.failed)} failed")
        return list(self.resolved)

    def join(self, timeout: Optional[float] = None) -> None:
        if self.timer is not None:
            self.timer.join(timeout)
