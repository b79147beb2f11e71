"""
Command Line Interface for DNS Auto Routes
"""

import click
import sys
import time
from typing import Optional, Tuple

from .config import ConfigManager
from .constants import DEFAULT_WINDOW_DAYS
from .exceptions import DNSAutoRoutesError
from .monitor import AutoRouteMonitor
from .store import QueryLogStore
from .utils.logger import setup_logger, get_logger
from .utils import print_header, print_info, print_warning, print_error, print_success, format_timestamp, Colors


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Configuration file path')
@click.option('--log-level', '-l', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              default=None, help='Log level')
@click.option('--log-file', type=click.Path(), help='Log file path')
@click.pass_context
def cli(ctx, config: Optional[str], log_level: Optional[str], log_file: Optional[str]):
    """DNS Auto Routes - route corporate DNS answers via a VPN gateway"""
    ctx.ensure_object(dict)

    try:
        config_manager = ConfigManager(config)
    except ValueError as e:
        print_error(f"Failed to load configuration: {e}")
        sys.exit(1)
    app_config = config_manager.get_config()
    if log_level:
        app_config.log_level = log_level
    if log_file:
        app_config.log_file = log_file

    setup_logger(
        debug=(app_config.log_level.upper() == 'DEBUG'),
        log_file=app_config.log_file
    )
    ctx.obj['logger'] = get_logger(__name__)
    ctx.obj['config_manager'] = config_manager
    ctx.obj['config'] = app_config


@cli.command()
@click.argument('target', required=False)
@click.argument('zones', nargs=-1)
@click.option('--interface', '-i', help='Network interface to capture DNS traffic on')
@click.option('--cidr', help='Pick the interface that owns this CIDR')
@click.option('--db', 'db_path', type=click.Path(), help='Query log database path')
@click.option('--alias-capacity', type=int, help='Maximum number of remembered CNAME aliases')
@click.option('--dry-run', is_flag=True, help='Log route commands instead of running them')
@click.pass_context
def run(ctx, target: Optional[str], zones: Tuple[str, ...], interface: Optional[str],
        cidr: Optional[str], db_path: Optional[str], alias_capacity: Optional[int], dry_run: bool):
    """Route answers for ZONES via TARGET"""
    config = ctx.obj['config']
    logger = ctx.obj['logger']

    # Override config with command line options
    if target:
        config.route.target = target
    if zones:
        config.route.zones = list(zones)
    if interface:
        config.capture.interface = interface
    if cidr:
        config.capture.cidr = cidr
    if db_path:
        config.query_log.db_path = db_path
    if alias_capacity is not None:
        config.alias_capacity = alias_capacity
    if dry_run:
        config.route.dry_run = True

    try:
        config.validate()
    except ValueError as e:
        print_error(str(e))
        sys.exit(2)

    print_header("DNS Auto Routes Starting")
    print_info(f"Target: {config.route.target}")
    print_info(f"Zones: {', '.join(config.route.zones)}")
    print_info(f"Interface: {config.capture.interface or config.capture.cidr or 'first available'}")
    print_info(f"Query log: {config.query_log.db_path or 'disabled'}")
    if config.route.dry_run:
        print_warning("Dry run: route commands will be logged, not executed")

    try:
        monitor = AutoRouteMonitor(config)
        monitor.start()
    except DNSAutoRoutesError as e:
        print_error(f"Monitoring failed: {e}")
        logger.debug("Monitoring error", exc_info=True)
        sys.exit(1)


@cli.command()
@click.option('--db', 'db_path', type=click.Path(), help='Query log database path')
@click.option('--days', type=int, default=DEFAULT_WINDOW_DAYS, show_default=True,
              help='Only show hosts seen within this many days')
@click.pass_context
def history(ctx, db_path: Optional[str], days: int):
    """Show recently seen corporate hosts"""
    config = ctx.obj['config']
    db_path = db_path or config.query_log.db_path
    if not db_path:
        print_error("No query log configured (use --db)")
        sys.exit(2)

    try:
        with QueryLogStore(db_path) as store:
            entries = store.load_recent(window=days * 86400)
    except DNSAutoRoutesError as e:
        print_error(str(e))
        sys.exit(1)

    for entry in entries:
        print(f"{format_timestamp(entry.last_seen)}  {entry.host}")
    print_info(f"{len(entries)} host(s) seen in the last {days} day(s)")


@cli.command()
@click.option('--db', 'db_path', type=click.Path(), help='Query log database path')
@click.option('--days', type=int, required=True, help='Delete hosts not seen for this many days')
@click.pass_context
def prune(ctx, db_path: Optional[str], days: int):
    """Delete old entries from the query log"""
    config = ctx.obj['config']
    db_path = db_path or config.query_log.db_path
    if not db_path:
        print_error("No query log configured (use --db)")
        sys.exit(2)

    try:
        with QueryLogStore(db_path) as store:
            removed = store.purge(int(time.time()) - days * 86400)
            remaining = store.count()
    except DNSAutoRoutesError as e:
        print_error(str(e))
        sys.exit(1)
    print_success(f"Removed {removed} host(s), {remaining} remaining")


@cli.command()
@click.option('--output', '-o', type=click.Path(),
              default='dnsautoroutes.yaml',
              help='Output configuration file path')
@click.pass_context
def generate_config(ctx, output: str):
    """Generate sample configuration file"""
    config_manager = ctx.obj['config_manager']

    try:
        config_manager.save_to_file(output)
        print_info(f"Configuration file generated: {output}")
    except OSError as e:
        print_error(f"Failed to generate configuration: {e}")
        sys.exit(1)


@cli.command()
def version():
    """Show version information"""
    from . import __version__
    print(f"{Colors.BOLD}DNS Auto Routes{Colors.RESET} version {Colors.GREEN}{__version__}{Colors.RESET}")


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
