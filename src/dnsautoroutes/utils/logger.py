"""Logger utilities for DNS Auto Routes."""

import logging
import platform
import sys
import os
from typing import Dict, Optional, Union
from pathlib import Path

import colorlog
import psutil

from .. import constants


def setup_logger(
    debug: bool = False,
    module_levels: Optional[Dict[str, str]] = None,
    log_file: Optional[Union[str, Path]] = None,
    log_format: Optional[str] = None
):
    """
    Configures the root logger with colored console output.

    Args:
        debug: If True, sets logging level to DEBUG, otherwise INFO
        module_levels: Dictionary mapping module names to log levels
        log_file: Optional file path to write logs to
        log_format: Custom log format string
    """
    logger = logging.getLogger()
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    # Prevent duplicate handlers if this function is called multiple times
    if logger.handlers:
        _apply_module_levels(module_levels)
        return

    _setup_console_handler(logger, log_format)

    if log_file:
        _setup_file_handler(logger, log_file, log_format)

    _apply_module_levels(module_levels)


def _setup_console_handler(logger: logging.Logger, log_format: Optional[str] = None):
    """Setup console handler with color support."""
    # Respect NO_COLOR env var (https://no-color.org/)
    use_colors = sys.stderr.isatty() and not os.environ.get("NO_COLOR")

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.NOTSET)

    if use_colors:
        if log_format is None:
            log_format = '%(log_color)s[%(levelname).4s]%(reset)s %(cyan)s%(name)s%(reset)s: %(message)s'

        formatter = colorlog.ColoredFormatter(
            log_format,
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            },
            reset=True,
            style='%'
        )
    else:
        if log_format is None:
            log_format = '[%(levelname).4s] %(name)s: %(message)s'
        formatter = logging.Formatter(log_format)

    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _setup_file_handler(logger: logging.Logger, log_file: Union[str, Path], log_format: Optional[str] = None):
    """Setup file handler for logging to file."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_path, encoding='utf-8')
    handler.setLevel(logging.NOTSET)

    if log_format is None or '%(log_color)s' in log_format:
        log_format = '%(asctime)s [%(levelname).4s] %(name)s: %(message)s'

    formatter = logging.Formatter(log_format, datefmt='%Y-%m-%d %H:%M:%S')
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def parse_module_levels(spec: str) -> Dict[str, str]:
    """Parse ``"matcher=DEBUG,store=INFO"`` into a mapping"""
    module_levels = {}
    for pair in spec.split(','):
        pair = pair.strip()
        if not pair or '=' not in pair:
            continue
        name, lvl = pair.split('=', 1)
        module_levels[name.strip()] = lvl.strip().upper()
    return module_levels


def _apply_module_levels(module_levels: Optional[Dict[str, str]]):
    """Apply per-module logger levels from mapping or env var DNSAR_LOG_LEVELS.

    module_levels format: {"dnsautoroutes.matcher": "DEBUG", "dnsautoroutes.store": "INFO"}
    Env var example: DNSAR_LOG_LEVELS="matcher=DEBUG,store=INFO"
    """
    if module_levels is None:
        env = os.environ.get(constants.LOG_LEVELS_ENV)
        if env:
            module_levels = parse_module_levels(env)

    if not module_levels:
        return

    for name, lvl_str in module_levels.items():
        lvl = getattr(logging, lvl_str.upper(), None)
        if not isinstance(lvl, int):
            logging.getLogger(__name__).warning(f"Ignoring invalid log level '{lvl_str}' for {name}")
            continue
        logging.getLogger(normalize_module_name(name)).setLevel(lvl)


def normalize_module_name(name: str) -> str:
    """Normalize provided module name with alias and auto-prefix.

    - If name is an alias, expand to full module path.
    - If name ends with '.*', treat it as base logger (strip the wildcard).
    - If name does not start with 'dnsautoroutes.' and begins with a known top module, prefix it.
    """
    if name in constants.LOG_ALIAS_MAP:
        return constants.LOG_ALIAS_MAP[name]
    if name.endswith('.*'):
        name = name[:-2]
    if not name.startswith('dnsautoroutes.'):
        first = name.split('.', 1)[0]
        if first in constants.KNOWN_TOP_MODULES:
            name = f'dnsautoroutes.{name}'
    return name


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance for the given name.

    Args:
        name: Logger name, typically __name__ from the calling module

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_system_info(logger: logging.Logger):
    """Log system information for debugging purposes."""
    logger.info(f"System: {platform.system()} {platform.release()}")
    logger.info(f"Python: {platform.python_version()}")
    logger.info(f"CPU cores: {psutil.cpu_count()}")
    logger.info(f"Memory: {psutil.virtual_memory().total // (1024**3)} GB")
