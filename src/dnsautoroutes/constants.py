"""Constants for DNS Auto Routes."""

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "monitor": "dnsautoroutes.monitor",
    "traffic": "dnsautoroutes.traffic",
    "capture": "dnsautoroutes.traffic",
    "packet": "dnsautoroutes.packet",
    "matcher": "dnsautoroutes.matcher",
    "match": "dnsautoroutes.matcher",
    "store": "dnsautoroutes.store",
    "replay": "dnsautoroutes.replay",
    "routes": "dnsautoroutes.routes",
    "config": "dnsautoroutes.config",
    "conf": "dnsautoroutes.config",
    "cli": "dnsautoroutes.cli",
    "utils": "dnsautoroutes.utils",
}

# Top-level modules within dnsautoroutes for auto-prefixing
KNOWN_TOP_MODULES = {
    "monitor",
    "traffic",
    "packet",
    "matcher",
    "names",
    "store",
    "replay",
    "routes",
    "config",
    "utils",
    "exceptions",
    "cli",
}

LOG_LEVELS_ENV = "DNSAR_LOG_LEVELS"

# --- Capture ---
DEFAULT_BPF_FILTER = "udp port 53"
DEFAULT_SNAPLEN = 65535
DEFAULT_CAPTURE_TIMEOUT = 100  # milliseconds

# --- Routes ---
DEFAULT_ROUTE_COMMAND = ("route", "-n", "add", "-host", "{address}", "{gateway}")
DEFAULT_ROUTE_TIMEOUT = 5.0  # seconds

# --- Query log ---
QUERY_LOG_TABLE = "dns_log"
DEFAULT_WINDOW_DAYS = 7
DEFAULT_LOG_WINDOW = 86400 * DEFAULT_WINDOW_DAYS  # seconds

# --- Replay ---
DEFAULT_REPLAY_DELAY = 1.0  # seconds, lets the capture filter come up first
DEFAULT_REPLAY_PORT = 80
