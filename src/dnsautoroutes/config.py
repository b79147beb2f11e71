"""
Configuration management for DNS Auto Routes
"""

import ipaddress
import yaml
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path

from .names import DomainName
from .utils.network import validate_cidr
from .constants import (
    DEFAULT_BPF_FILTER, DEFAULT_SNAPLEN, DEFAULT_CAPTURE_TIMEOUT,
    DEFAULT_ROUTE_COMMAND, DEFAULT_ROUTE_TIMEOUT,
    DEFAULT_REPLAY_DELAY, DEFAULT_REPLAY_PORT, DEFAULT_WINDOW_DAYS,
)


@dataclass
class CaptureConfig:
    """DNS capture configuration"""
    interface: Optional[str] = None
    cidr: Optional[str] = None
    bpf_filter: str = DEFAULT_BPF_FILTER
    snaplen: int = DEFAULT_SNAPLEN
    promiscuous: bool = True
    capture_timeout_ms: int = DEFAULT_CAPTURE_TIMEOUT


@dataclass
class RouteConfig:
    """Route target and corporate zones"""
    target: Optional[str] = None
    zones: List[str] = field(default_factory=list)
    route_command: List[str] = field(default_factory=lambda: list(DEFAULT_ROUTE_COMMAND))
    route_timeout: float = DEFAULT_ROUTE_TIMEOUT
    dry_run: bool = False


@dataclass
class QueryLogConfig:
    """Persistent query log; no db_path disables logging and replay"""
    db_path: Optional[str] = None
    window_days: int = DEFAULT_WINDOW_DAYS
    replay_delay: float = DEFAULT_REPLAY_DELAY
    replay_port: int = DEFAULT_REPLAY_PORT

    @property
    def window(self) -> int:
        return int(self.window_days) * 86400


@dataclass
class AppConfig:
    """Main configuration"""
    route: RouteConfig = field(default_factory=RouteConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    query_log: QueryLogConfig = field(default_factory=QueryLogConfig)
    alias_capacity: Optional[int] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot be run"""
        if not self.route.target:
            raise ValueError("Route target IP is required")
        try:
            ipaddress.IPv4Address(self.route.target)
        except ValueError:
            raise ValueError(f"Route target must be an IPv4 address: {self.route.target}")
        if not self.route.zones:
            raise ValueError("At least one domain zone is required")
        for zone in self.route.zones:
            DomainName.from_text(zone)
        if not any("{address}" in str(arg) for arg in self.route.route_command):
            raise ValueError("route_command must contain an {address} placeholder")
        if self.alias_capacity is not None and self.alias_capacity <= 0:
            raise ValueError("alias_capacity must be positive")
        if self.query_log.window_days <= 0:
            raise ValueError("window_days must be positive")
        if self.capture.cidr and not validate_cidr(self.capture.cidr):
            raise ValueError(f"Invalid CIDR: {self.capture.cidr}")


def _section(cls, data: Any, name: str):
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")
    return cls(**data)


class ConfigManager:
    """Configuration manager for DNS Auto Routes"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file
        self.config = AppConfig()

        if config_file and Path(config_file).exists():
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str) -> None:
        """Load configuration from YAML file."""
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError("top level must be a mapping")

            top_level = {'route', 'capture', 'query_log', 'alias_capacity', 'log_level', 'log_file'}
            unknown = set(data) - top_level
            if unknown:
                raise ValueError(f"Unknown keys: {', '.join(sorted(unknown))}")

            self.config.route = _section(RouteConfig, data.get('route'), 'route')
            self.config.capture = _section(CaptureConfig, data.get('capture'), 'capture')
            self.config.query_log = _section(QueryLogConfig, data.get('query_log'), 'query_log')
            if self.config.route.zones and not isinstance(self.config.route.zones, list):
                raise ValueError("'route.zones' must be a list")
            if 'alias_capacity' in data: self.config.alias_capacity = data['alias_capacity']
            if 'log_level' in data: self.config.log_level = data['log_level']
            if 'log_file' in data: self.config.log_file = data['log_file']

        except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
            raise ValueError(f"Failed to load config from {config_file}: {e}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'route': asdict(self.config.route),
            'capture': asdict(self.config.capture),
            'query_log': asdict(self.config.query_log),
            'alias_capacity': self.config.alias_capacity,
            'log_level': self.config.log_level,
            'log_file': self.config.log_file,
        }

    def save_to_file(self, config_file: str) -> None:
        """Save current configuration to YAML file."""
        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def get_config(self) -> AppConfig:
        """Get the current configuration"""
        return self.config
