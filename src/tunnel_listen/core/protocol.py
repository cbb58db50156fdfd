"""Transport protocol values.

A protocol combines a transport kind (UDP, TCP or a local socket kind) with
an address family. It is parsed from configuration tokens such as ``udp``,
``tcp6`` or ``unix`` and rendered back with ``str()`` in a canonical form
that ``Protocol.parse`` accepts again.

The legacy ``proto`` option also allows ``-server`` and ``-client`` suffixes
(``tcp-server``, ``tcp6-client``). Directive lines do not.

Example:
    proto = Protocol.parse("udp4")
    proto = proto.mod_addr_version(ipaddress.ip_address("2001:db8::1"))
    print(proto)  # UDPv6
"""

import ipaddress
from dataclasses import dataclass, replace
from enum import Enum
from typing import Final

from tunnel_listen.core.exceptions import MalformedField


class Transport(Enum):
    UDP = "UDP"
    TCP = "TCP"
    UNIX_STREAM = "UnixStream"
    UNIX_DGRAM = "UnixDGram"
    NAMED_PIPE = "NamedPipe"


class AddressFamily(Enum):
    UNSPEC = ""
    V4 = "v4"
    V6 = "v6"


LOCAL_TRANSPORTS: Final = frozenset(
    {Transport.UNIX_STREAM, Transport.UNIX_DGRAM, Transport.NAMED_PIPE}
)
SERVER_SUFFIXES: Final = ("-server", "-client")

# Lowercase token -> (transport, family)
_TOKENS: Final = {
    "udp": (Transport.UDP, AddressFamily.UNSPEC),
    "udp4": (Transport.UDP, AddressFamily.V4),
    "udp6": (Transport.UDP, AddressFamily.V6),
    "udpv4": (Transport.UDP, AddressFamily.V4),
    "udpv6": (Transport.UDP, AddressFamily.V6),
    "tcp": (Transport.TCP, AddressFamily.UNSPEC),
    "tcp4": (Transport.TCP, AddressFamily.V4),
    "tcp6": (Transport.TCP, AddressFamily.V6),
    "tcpv4": (Transport.TCP, AddressFamily.V4),
    "tcpv6": (Transport.TCP, AddressFamily.V6),
    "unix": (Transport.UNIX_STREAM, AddressFamily.UNSPEC),
    "unix-stream": (Transport.UNIX_STREAM, AddressFamily.UNSPEC),
    "unixstream": (Transport.UNIX_STREAM, AddressFamily.UNSPEC),
    "unix-dgram": (Transport.UNIX_DGRAM, AddressFamily.UNSPEC),
    "unixdgram": (Transport.UNIX_DGRAM, AddressFamily.UNSPEC),
    "named-pipe": (Transport.NAMED_PIPE, AddressFamily.UNSPEC),
    "namedpipe": (Transport.NAMED_PIPE, AddressFamily.UNSPEC),
}


@dataclass(frozen=True)
class Protocol:
    """Transport kind plus address family."""

    transport: Transport = Transport.UDP
    family: AddressFamily = AddressFamily.V4

    @classmethod
    def parse(cls, token: str, allow_suffix: bool = False, title: str = "protocol") -> "Protocol":
        """Parse a protocol token.

        Args:
            token: Configuration token, e.g. ``udp``, ``tcp6`` or ``unix``
            allow_suffix: Accept ``-server`` / ``-client`` on IP transports
            title: Prefix for the error message

        Raises:
            MalformedField: If the token is not a known protocol
        """
        name = token.lower()
        if allow_suffix and name.endswith(SERVER_SUFFIXES):
            name = name.rsplit("-", 1)[0]
            entry = _TOKENS.get(name)
            if entry and entry[0] in LOCAL_TRANSPORTS:
                entry = None
        else:
            entry = _TOKENS.get(name)
        if entry is None:
            raise MalformedField(f"{title}: unknown protocol: {token}")
        return cls(*entry)

    @staticmethod
    def is_local_type(token: str) -> bool:
        """Return True if ``token`` names a local socket kind."""
        entry = _TOKENS.get(token.lower())
        return entry is not None and entry[0] in LOCAL_TRANSPORTS

    @property
    def is_local(self) -> bool:
        return self.transport in LOCAL_TRANSPORTS

    @property
    def is_ipv6(self) -> bool:
        return self.family is AddressFamily.V6

    @property
    def is_udp(self) -> bool:
        return self.transport is Transport.UDP

    @property
    def is_tcp(self) -> bool:
        return self.transport is Transport.TCP

    def mod_addr_version(self, addr: ipaddress.IPv4Address | ipaddress.IPv6Address) -> "Protocol":
        """Return a copy whose family matches ``addr``; local kinds are unchanged."""
        if self.is_local:
            return self
        family = AddressFamily.V6 if addr.version == 6 else AddressFamily.V4
        return replace(self, family=family)

    def __str__(self) -> str:
        return f"{self.transport.value}{self.family.value}"


def parse_ip_addr(address: str, title: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    """Parse an IP literal, raising MalformedField with ``title`` on failure."""
    try:
        return ipaddress.ip_address(address)
    except ValueError as e:
        raise MalformedField(f"{title}: invalid IP address: {address}") from e


UDPv4: Final = Protocol(Transport.UDP, AddressFamily.V4)
