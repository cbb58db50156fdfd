"""Default listen entry built from legacy scalar options.

Older configurations describe a single endpoint with independent options
instead of a listen directive::

    proto tcp6-server
    lport 443
    local 2001:db8::1

Any of them may be missing; the defaults are UDP over IPv4 on port 1194,
bound to every address of the protocol's family.
"""

from typing import Final

from loguru import logger

from tunnel_listen.core.exceptions import MalformedField
from tunnel_listen.core.lib.listen_spec import ListenSpec
from tunnel_listen.core.options import OptionList
from tunnel_listen.core.protocol import Protocol, UDPv4, parse_ip_addr
from tunnel_listen.core.utils.utils import validate_port

DEFAULT_PORT: Final = "1194"
ANY_ADDR_V4: Final = "0.0.0.0"
ANY_ADDR_V6: Final = "::0"

VALUE_INDEX: Final = 1
VALUE_MAX_LEN: Final = 16
ADDRESS_MAX_LEN: Final = 128


def build_default(options: OptionList) -> ListenSpec:
    """Build the single listen entry implied by ``proto``, ``lport``/``port`` and ``local``."""
    proto_option = options.get_ptr("proto")
    if proto_option:
        proto_option.touch()
        protocol = Protocol.parse(proto_option.get(VALUE_INDEX, VALUE_MAX_LEN), allow_suffix=True)
        if protocol.is_local:
            raise MalformedField(f"proto: local socket {protocol} requires a listen directive")
    else:
        protocol = UDPv4

    port_option = options.get_ptr("lport") or options.get_ptr("port")
    if port_option:
        port_option.touch()
        port = port_option.get(VALUE_INDEX, VALUE_MAX_LEN)
        validate_port(port, "listen")
    else:
        port = DEFAULT_PORT

    local_option = options.get_ptr("local")
    if local_option:
        local_option.touch()
        address = local_option.get(VALUE_INDEX, ADDRESS_MAX_LEN)
    elif protocol.is_ipv6:
        address = ANY_ADDR_V6
    else:
        address = ANY_ADDR_V4
    protocol = protocol.mod_addr_version(parse_ip_addr(address, "local addr"))

    spec = ListenSpec(address=address, port=port, protocol=protocol, n_threads=1)
    logger.debug(f"Using default listen entry: {spec}")
    return spec
