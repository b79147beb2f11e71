"""
Color utilities for DNS Auto Routes terminal output
"""

import os
import sys
from datetime import datetime


class Colors:
    """ANSI color codes for terminal output"""
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


def _use_colors() -> bool:
    return sys.stdout.isatty() and not os.environ.get("NO_COLOR")


def colorize(text: str, color: str) -> str:
    """Colorize text for terminal output"""
    if not _use_colors():
        return text
    return f"{color}{text}{Colors.RESET}"


def print_header(title: str) -> None:
    """Print a formatted header"""
    rule = colorize('=' * 60, Colors.BOLD + Colors.CYAN)
    print(f"\n{rule}")
    print(colorize(title.center(60), Colors.BOLD + Colors.CYAN))
    print(f"{rule}\n")


def print_info(message: str) -> None:
    print(f"{colorize('[INFO]', Colors.BLUE)} {message}")


def print_warning(message: str) -> None:
    print(f"{colorize('[WARNING]', Colors.YELLOW)} {message}")


def print_error(message: str) -> None:
    print(f"{colorize('[ERROR]', Colors.RED)} {message}", file=sys.stderr)


def print_success(message: str) -> None:
    print(f"{colorize('[SUCCESS]', Colors.GREEN)} {message}")


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable string"""
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        return f"{seconds / 60:.1f}m"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m"


def format_timestamp(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).strftime('%Y-%m-%d %H:%M:%S')
