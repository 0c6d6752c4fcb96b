"""
Local interface discovery.
"""
import ipaddress
import logging
import socket
from typing import List

import psutil

logger = logging.getLogger(__name__)


def discover_addresses() -> List[str]:
    """
    Returns the non-loopback IPv4 addresses of all local interfaces,
    in interface order. An empty list means there is nothing to scan.
    """
    addresses = []
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, psutil.Error) as e:
        logger.error("It was not possible to identify all interfaces. (%s)", e)
        return addresses

    for name, snics in interfaces.items():
        for snic in snics:
            if snic.family != socket.AF_INET:
                continue
            try:
                ip = ipaddress.ip_address(snic.address)
            except ValueError:
                logger.debug("Skipping unparsable address %r on %s", snic.address, name)
                continue
            if ip.version != 4 or ip.is_loopback:
                continue
            addresses.append(str(ip))
    return addresses


def get_hostname() -> str:
    return socket.gethostname()
