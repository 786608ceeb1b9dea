"""
Network checks: port availability, hostname resolution and proxy detection.
"""

import ipaddress
import logging
import re
import socket
from typing import Optional

from requests.utils import get_environ_proxies

from ..core.checker import Checker, LabeledChecker
from ..core.models import PreflightFinding

logger = logging.getLogger(__name__)

# DNS-1123 subdomain, as required for node names
DNS1123_SUBDOMAIN_MAX_LENGTH = 253
_DNS1123_SUBDOMAIN_RE = re.compile(
    r'^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$'
)


def validate_node_name(name: str):
    """Return a list of reasons why name is not a valid DNS-1123 subdomain."""
    problems = []
    if len(name) > DNS1123_SUBDOMAIN_MAX_LENGTH:
        problems.append(f"must be no more than {DNS1123_SUBDOMAIN_MAX_LENGTH} characters")
    if not _DNS1123_SUBDOMAIN_RE.match(name):
        problems.append(
            "a lowercase RFC 1123 subdomain must consist of lower case alphanumeric "
            "characters, '-' or '.', and must start and end with an alphanumeric character"
        )
    return problems


class PortOpenCheck(LabeledChecker):
    """Checks that a TCP port is free to listen on."""

    def __init__(self, port: int, label: Optional[str] = None):
        super().__init__(label)
        self.port = port

    def default_name(self) -> str:
        return f"Port-{self.port}"

    def check(self):
        logger.debug(f"validating availability of port {self.port}")
        warnings, errors = [], []

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(('', self.port))
            sock.listen(1)
        except OSError:
            errors.append(PreflightFinding(f"Port {self.port} is in use"))
        finally:
            try:
                sock.close()
            except OSError as e:
                warnings.append(PreflightFinding(
                    f"when closing port {self.port}, encountered {e}"))

        return warnings, errors


class HostnameCheck(Checker):
    """Checks that the node name is valid and resolvable."""

    def __init__(self, node_name: str):
        self.node_name = node_name

    def name(self) -> str:
        return "Hostname"

    def check(self):
        logger.debug("checking whether the given node name is valid and reachable")
        warnings = []
        for msg in validate_node_name(self.node_name):
            warnings.append(PreflightFinding(
                f'invalid node name format "{self.node_name}": {msg}'))

        try:
            addresses = socket.getaddrinfo(self.node_name, None)
        except (socket.gaierror, UnicodeError) as e:
            warnings.append(PreflightFinding(
                f'hostname "{self.node_name}" could not be reached'))
            warnings.append(PreflightFinding(f'hostname "{self.node_name}"', e))
        else:
            if not addresses:
                warnings.append(PreflightFinding(
                    f'hostname "{self.node_name}" could not be reached'))
        return warnings, []


def _host_for_url(host: str) -> str:
    """Wrap bare IPv6 addresses so they can be used in a URL."""
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return host
    if ip.version == 6:
        return f"[{host}]:1234"
    return host


def _proxy_for(url: str) -> Optional[str]:
    """Return the proxy the environment would use for url, if any."""
    proxies = get_environ_proxies(url)
    scheme = url.split('://', 1)[0]
    return proxies.get(scheme) or proxies.get('all')


class HTTPProxyCheck(Checker):
    """Warns if connections to a host would go through a proxy."""

    def __init__(self, proto: str, host: str):
        self.proto = proto
        self.host = host

    def name(self) -> str:
        return "HTTPProxy"

    def check(self):
        logger.debug("validating if the connectivity type is via proxy or direct")
        url = f"{self.proto}://{_host_for_url(self.host)}"

        proxy = _proxy_for(url)
        if proxy:
            return [PreflightFinding(
                f'Connection to "{url}" uses proxy "{proxy}". '
                f'If that is not intended, adjust your proxy settings')], []
        return [], []


class HTTPProxyCIDRCheck(Checker):
    """
    Warns if connections into a service/pod subnet would go through a proxy.

    Probes the first host address of the CIDR the way the API server
    would reach cluster services.
    """

    def __init__(self, proto: str, cidr: str):
        self.proto = proto
        self.cidr = cidr

    def name(self) -> str:
        return "HTTPProxyCIDR"

    def check(self):
        logger.debug("validating http connectivity to first IP address in the CIDR")
        if not self.cidr:
            return [], []

        try:
            network = ipaddress.ip_network(self.cidr, strict=False)
        except ValueError as e:
            return [], [PreflightFinding(f'error parsing CIDR "{self.cidr}"', e)]

        if network.num_addresses < 2:
            return [], [PreflightFinding(
                f"unable to get first IP address from the given CIDR ({network})")]
        test_ip = network.network_address + 1

        if test_ip.version == 6:
            url = f"{self.proto}://[{test_ip}]:1234/"
        else:
            url = f"{self.proto}://{test_ip}/"

        proxy = _proxy_for(url)
        if proxy:
            return [PreflightFinding(
                f'connection to "{self.cidr}" uses proxy "{proxy}". This may lead to '
                f'malfunctional cluster setup. Make sure that Pod and Services IP ranges '
                f'specified correctly as exceptions in proxy configuration')], []
        return [], []
