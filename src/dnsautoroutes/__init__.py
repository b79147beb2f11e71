"""
DNS Auto Routes - route corporate DNS answers via a VPN gateway

This package watches DNS responses on a network interface and installs
host routes toward a VPN gateway for:
- addresses of names under configured corporate zones
- addresses of CNAME targets of those names
It keeps a query log of corporate hosts and replays it on startup.
"""

__version__ = "0.1.0"

from .monitor import AutoRouteMonitor
from .matcher import Matcher, RoutingContext
from .names import DomainName, ZoneSet
from .store import QueryLogStore, LogEntry
from .replay import ReplayScheduler

__all__ = [
    "AutoRouteMonitor",
    "Matcher",
    "RoutingContext",
    "DomainName",
    "ZoneSet",
    "QueryLogStore",
    "LogEntry",
    "ReplayScheduler",
]
