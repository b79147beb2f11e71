"""
DNS Auto Routes Utilities Package

- colors: Terminal color output utilities
- logger: Logging system
- network: Interface lookup
"""

from .colors import (
    Colors,
    colorize,
    print_header,
    print_info,
    print_warning,
    print_error,
    print_success,
    format_duration,
    format_timestamp,
)

from .logger import (
    setup_logger,
    get_logger,
    log_system_info,
)

from .network import get_iface, validate_cidr

__all__ = [
    'Colors',
    'colorize',
    'print_header',
    'print_info',
    'print_warning',
    'print_error',
    'print_success',
    'format_duration',
    'format_timestamp',

    'setup_logger',
    'get_logger',
    'log_system_info',

    'get_iface',
    'validate_cidr',
]
