# netinfo.py
import ipaddress
import logging
import socket

logger = logging.getLogger(__name__)

# any routable destination works; connect() on a UDP socket sends nothing
_PROBE_ADDR = ("10.255.255.255", 1)


class AddressDiscoveryError(OSError):
    """The host's own addresses could not be enumerated."""


def interface_addresses():
    """Return every address string the host reports for itself, in resolver order."""
    try:
        hostname = socket.gethostname()
    except OSError as e:
        raise AddressDiscoveryError(f"cannot read host name: {e}") from e

    found = []
    try:
        for info in socket.getaddrinfo(hostname, None):
            if info[0] in (socket.AF_INET, socket.AF_INET6):
                found.append(info[4][0])
    except socket.gaierror as e:
        logger.debug("host name %s does not resolve: %s", hostname, e)

    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(_PROBE_ADDR)
        found.append(s.getsockname()[0])
    except OSError as e:
        logger.debug("no outbound IPv4 route: %s", e)
    finally:
        s.close()
    return found


def list_local_ipv4_addresses(addresses=None):
    """Non-loopback IPv4 addresses of this host, first-seen order, no duplicates.

    ``addresses`` defaults to :func:`interface_addresses`; an empty list is a
    valid answer on hosts with only a loopback interface.
    """
    if addresses is None:
        addresses = interface_addresses()

    result = []
    for raw in addresses:
        # strip IPv6 zone ids such as fe80::1%eth0
        text = str(raw).split("%", 1)[0]
        try:
            ip = ipaddress.ip_address(text)
        except ValueError:
            continue
        if ip.version == 6:
            if ip.ipv4_mapped is None:
                continue
            ip = ip.ipv4_mapped
        if ip.is_loopback or ip.is_unspecified:
            continue
        s = str(ip)
        if s not in result:
            result.append(s)
    return result
