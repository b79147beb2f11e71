"""
Network utility functions for DNS Auto Routes
"""
import socket
import ipaddress
from typing import Optional, Dict, Any
import logging

import psutil

logger = logging.getLogger(__name__)


def get_iface(cidr: str) -> Optional[str]:
    """
        Get Interface Name by CIDR
    """
    try:
        network = ipaddress.ip_network(cidr, strict=False)
    except ValueError as e:
        logger.error(f"Invalid CIDR format '{cidr}': {e}")
        return None

    for interface_name, interface_info in _get_ifaces().items():
        if not interface_info['is_up']:
            continue
        for addr_info in interface_info['addresses']:
            if addr_info['family'] != 'inet':
                continue
            ip = addr_info['addr']
            netmask = addr_info['netmask']
            if not ip or not netmask:
                continue
            try:
                interface_ip = ipaddress.ip_address(ip)
                interface_network = ipaddress.ip_network(f"{ip}/{netmask}", strict=False)
            except ValueError as e:
                logger.debug(f"Error processing interface {interface_name}: {e}")
                continue
            if interface_ip in network or network.overlaps(interface_network):
                logger.info(f"Found interface {interface_name} for CIDR {cidr}")
                return interface_name

    logger.warning(f"No interface found for CIDR {cidr}")
    return None


def _get_ifaces() -> Dict[str, Dict[str, Any]]:
    interfaces = {}
    net_if_addrs = psutil.net_if_addrs()
    net_if_stats = psutil.net_if_stats()

    for interface_name, addresses in net_if_addrs.items():
        stats = net_if_stats.get(interface_name)
        interfaces[interface_name] = {
            'is_up': bool(stats and stats.isup),
            'addresses': [
                {
                    'family': 'inet' if addr.family == socket.AF_INET
                    else 'inet6' if addr.family == socket.AF_INET6 else 'other',
                    'addr': addr.address,
                    'netmask': addr.netmask,
                }
                for addr in addresses
            ],
        }
    return interfaces


def validate_cidr(cidr: str) -> bool:
    """
    Validate CIDR format
    """
    if '/' not in cidr:
        return False
    try:
        ipaddress.ip_network(cidr, strict=False)
        return True
    except ValueError:
        return False
