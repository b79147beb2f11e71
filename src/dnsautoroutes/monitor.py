"""
DNS Auto Routes daemon - wires capture, matching, routing, query log and replay
"""

import signal
import time
from datetime import datetime
from typing import Optional

from .config import AppConfig
from .exceptions import CaptureError, StoreError
from .matcher import Matcher, RoutingContext
from .names import DomainName
from .packet import DNSMessage
from .replay import ReplayScheduler, Resolver, resolve_host
from .routes import RouteInstaller
from .store import QueryLogStore
from .traffic import DNSCapture
from .utils.logger import get_logger, log_system_info
from .utils import Colors, colorize, format_duration


class AutoRouteMonitor:
    """Owns one routing context and runs the capture loop against it.

    Startup order: open the query log (fatal on failure), open the capture
    device (fatal on failure), schedule the replay, then block in the
    capture loop.
    """

    def __init__(self, config: AppConfig,
                 capture: Optional[DNSCapture] = None,
                 installer: Optional[RouteInstaller] = None,
                 store: Optional[QueryLogStore] = None,
                 resolve: Resolver = resolve_host):
        config.validate()
        self.config = config
        self.logger = get_logger(__name__)

        self.context = RoutingContext.create(
            config.route.target, config.route.zones, config.alias_capacity
        )
        self.installer = installer or RouteInstaller(
            self.context.target,
            command=config.route.route_command,
            timeout=config.route.route_timeout,
            dry_run=config.route.dry_run,
        )
        self.store = store
        if self.store is None and config.query_log.db_path:
            self.store = QueryLogStore(config.query_log.db_path)

        self.matcher = Matcher(
            self.context,
            on_route=self.installer.add_route,
            on_query=self._record_query if self.store is not None else None,
        )
        self.capture = capture or DNSCapture(config.capture)
        self.resolve = resolve
        self.replay: Optional[ReplayScheduler] = None
        self.start_time: Optional[float] = None

    def _record_query(self, host: DomainName) -> None:
        self.store.upsert(str(host))

    def handle_message(self, message: DNSMessage) -> None:
        self.matcher.process_response(message)

    def schedule_replay(self, now: Optional[int] = None) -> Optional[ReplayScheduler]:
        """Load recent hosts and start the delayed replay; no-op without a store"""
        if self.store is None:
            return None
        try:
            entries = self.store.load_recent(now, window=self.config.query_log.window)
        except StoreError as e:
            self.logger.warning(f"Skipping replay: {e}")
            return None
        self.replay = ReplayScheduler(
            entries,
            resolve=self.resolve,
            delay=self.config.query_log.replay_delay,
            port=self.config.query_log.replay_port,
        )
        self.replay.start()
        return self.replay

    def start(self) -> None:
        log_system_info(self.logger)
        self.logger.info(f"Domain Suffices: {self.context.zones}")
        self.logger.info(f"Target IP: {self.context.target}")

        try:
            self.capture.open()
        except CaptureError:
            self.stop()
            raise
        self._startup()
        self.start_time = time.time()
        signal.signal(signal.SIGTERM, self._signal_handler)

        self.schedule_replay()
        try:
            self.capture.run(self.handle_message)
        except KeyboardInterrupt:
            self.logger.info("Monitoring interrupted by user")
        finally:
            self.stop()

    def stop(self) -> None:
        self.capture.close()
        if self.store is not None:
            self.store.close()
        self._final()

    def _signal_handler(self, signum, frame):
        self.logger.info(f"Received signal {signum}, shutting down...")
        self.capture.stop()

    def _startup(self) -> None:
        """Print startup banner with configuration info"""
        print(f"\n{colorize('DNS Auto Routes', Colors.BOLD + Colors.CYAN)}")
        print(colorize('=' * 60, Colors.CYAN))
        print(f"Start time: {colorize(datetime.now().strftime('%Y-%m-%d %H:%M:%S'), Colors.GREEN)}")
        print(f"  {colorize('✓', Colors.GREEN)} Capture on {self.capture.interface}")
        print(f"  {colorize('✓', Colors.GREEN)} Routing {self.context.zones} via {self.context.target}")
        if self.store is not None:
            print(f"  {colorize('✓', Colors.GREEN)} Query log: {self.store.db_path}")
        else:
            print(f"  {colorize('-', Colors.YELLOW)} Query log disabled")
        print(colorize('=' * 60, Colors.CYAN) + "\n")

    def _final(self):
        if not self.start_time:
            return
        uptime = time.time() - self.start_time
        matcher_stats = self.matcher.get_stats()
        route_stats = self.installer.get_stats()
        capture_stats = self.capture.get_stats()
        self.logger.info(
            f"Stopped after {format_duration(uptime)}: "
            f"{capture_stats['dns_packets']} DNS packets, "
            f"{matcher_stats['route_intents']} route intents "
            f"({route_stats['installed']} installed, {route_stats['failed']} failed), "
            f"{matcher_stats['aliases']} aliases"
        )
