"""Conversion of a matched directive option into a listen specification.

Directive lines have the form::

    <directive> <address> <port|local-marker> [<protocol>] [<threads>] [ssl|!ssl]

When the port field holds a local socket marker (``unix``, ``unix-stream``,
``unix-dgram``, ``named-pipe``) the endpoint is local: the marker doubles as
the protocol token and every later field moves one position to the left.

The optional thread spec is told apart from the SSL qualifier by its first
character being a digit. A future qualifier starting with a digit would be
read as a thread spec.
"""

import string
import sys
from dataclasses import dataclass
from typing import Final

from loguru import logger

from tunnel_listen.core.exceptions import (
    InvalidThreadCount,
    UnrecognizedQualifier,
    UnsupportedMultiThreadLocal,
    UnsupportedSSLOnLocal,
)
from tunnel_listen.core.lib.listen_spec import ListenSpec, SSLMode
from tunnel_listen.core.options import Option
from tunnel_listen.core.protocol import Protocol, parse_ip_addr
from tunnel_listen.core.utils.utils import parse_number_validate, validate_port

# Field positions for an IP endpoint
DIRECTIVE_INDEX: Final = 0
ADDRESS_INDEX: Final = 1
PORT_INDEX: Final = 2
PROTOCOL_INDEX: Final = 3
THREADS_INDEX: Final = 4

# Maximum field lengths
DIRECTIVE_MAX_LEN: Final = 64
ADDRESS_MAX_LEN: Final = 128
FIELD_MAX_LEN: Final = 16

# Thread spec grammar
CORES_SUFFIX: Final = "*N"
THREADS_MAX_DIGITS: Final = 3
THREADS_MIN: Final = 1
THREADS_MAX: Final = 100

# Only Windows named pipes accept several threads on one pathname
LOCAL_MULTITHREAD: Final = sys.platform == "win32"


@dataclass(frozen=True)
class FieldLayout:
    """Positions of the fields that follow the port."""

    protocol: int
    threads: int

    def qualifier(self, has_threads: bool) -> int:
        return self.threads + int(has_threads)


def field_offset(is_local: bool) -> int:
    """Number of positions later fields shift left for a local endpoint."""
    return 1 if is_local else 0


def field_layout(is_local: bool) -> FieldLayout:
    offset = field_offset(is_local)
    return FieldLayout(protocol=PROTOCOL_INDEX - offset, threads=THREADS_INDEX - offset)


def parse_threads(spec: str, directive: str, n_cores: int) -> tuple[int, int]:
    """Parse a thread spec into its base count and multiplier.

    ``4`` gives ``(4, 1)``, ``4*N`` gives ``(4, n_cores)``.

    Raises:
        InvalidThreadCount: If the base count is not a number in 1-100
    """
    multiplier = 1
    if spec.endswith(CORES_SUFFIX):
        multiplier = n_cores
        spec = spec[: -len(CORES_SUFFIX)]
    base = parse_number_validate(spec, THREADS_MAX_DIGITS, THREADS_MIN, THREADS_MAX)
    if base is None:
        raise InvalidThreadCount(f"{directive}: bad num threads: {spec}")
    return base, multiplier


def parse_ssl(qualifier: str, directive: str, is_local: bool) -> SSLMode:
    """Parse the trailing ``ssl`` / ``!ssl`` qualifier."""
    if qualifier == "ssl":
        if is_local:
            raise UnsupportedSSLOnLocal(f"{directive}: SSL not supported on local sockets")
        return SSLMode.ON
    if qualifier == "!ssl":
        return SSLMode.OFF
    raise UnrecognizedQualifier(f"{directive}: unrecognized SSL qualifier: {qualifier}")


def build_item(option: Option, n_cores: int, local_multithread: bool = LOCAL_MULTITHREAD) -> ListenSpec:
    """Build a listen specification from a matched directive option.

    Args:
        option: Option whose first field matched the directive
        n_cores: Core count used to expand the ``*N`` suffix
        local_multithread: Whether local sockets accept several threads

    Returns:
        ListenSpec: The validated record

    Raises:
        ListenError: If any field is missing or invalid
    """
    option.touch()

    directive = option.get(DIRECTIVE_INDEX, DIRECTIVE_MAX_LEN)
    address = option.get(ADDRESS_INDEX, ADDRESS_MAX_LEN)

    port = option.get(PORT_INDEX, FIELD_MAX_LEN)
    is_local = Protocol.is_local_type(port)
    if is_local:
        port = ""
    else:
        validate_port(port, directive)

    layout = field_layout(is_local)
    protocol = Protocol.parse(option.get(layout.protocol, FIELD_MAX_LEN), title=f"{directive} protocol")
    if not is_local:
        # The address literal decides the family, whatever the token said
        protocol = protocol.mod_addr_version(parse_ip_addr(address, f"{directive} addr"))

    n_threads = 1
    threads_spec = option.get_optional(layout.threads, FIELD_MAX_LEN)
    has_threads = bool(threads_spec) and threads_spec[0] in string.digits
    if has_threads:
        base, multiplier = parse_threads(threads_spec, directive, n_cores)
        n_threads = base * multiplier
        if is_local and n_threads != 1 and not local_multithread:
            raise UnsupportedMultiThreadLocal(
                f"{directive}: local socket only supports one thread per pathname (not {threads_spec})"
            )

    ssl = SSLMode.UNSPECIFIED
    qualifier_index = layout.qualifier(has_threads)
    if option.size() > qualifier_index:
        ssl = parse_ssl(option.get(qualifier_index, FIELD_MAX_LEN), directive, is_local)

    spec = ListenSpec(
        directive=directive,
        address=address,
        port=port,
        protocol=protocol,
        ssl=ssl,
        n_threads=n_threads,
    )
    logger.debug(f"Built listen entry: {spec}")
    return spec
