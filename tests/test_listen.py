"""Tests for loading listen lists and the legacy defaults."""

import pytest

from tunnel_listen.core.exceptions import (
    InvalidPort,
    InvalidThreadCount,
    MalformedField,
    NoDirectivesFound,
)
from tunnel_listen.core.lib import ListenSpec, SSLMode, build_default
from tunnel_listen.core.listen import ListenList, LoadMode
from tunnel_listen.core.protocol import AddressFamily, Transport, UDPv4

CONFIG = """\
# server endpoints
port 443
listen 0.0.0.0 1194 udp 2 ssl
listen /run/tun.sock unix 1
listen 2001:db8::1 7000 tcp6 4*N !ssl
"""


class TestDefaults:
    """Test cases for the legacy default entry."""

    def test_no_options(self, parse):
        spec = build_default(parse(""))
        assert spec == ListenSpec(address="0.0.0.0", port="1194", protocol=UDPv4)
        assert spec.n_threads == 1
        assert spec.ssl is SSLMode.UNSPECIFIED

    def test_proto_ipv6(self, parse):
        spec = build_default(parse("proto udp6\n"))
        assert spec.address == "::0"
        assert str(spec.protocol) == "UDPv6"

    def test_proto_server_suffix(self, parse):
        spec = build_default(parse("proto tcp-server\n"))
        assert spec.protocol.transport is Transport.TCP
        assert spec.protocol.family is AddressFamily.V4
        assert spec.address == "0.0.0.0"

    def test_proto_local_rejected(self, parse):
        with pytest.raises(MalformedField, match="proto"):
            build_default(parse("proto unix\n"))

    def test_port(self, parse):
        assert build_default(parse("port 443\n")).port == "443"

    def test_lport_preferred_over_port(self, parse):
        assert build_default(parse("lport 8443\nport 443\n")).port == "8443"

    def test_bad_port(self, parse):
        with pytest.raises(InvalidPort, match="listen: bad port number: 0"):
            build_default(parse("port 0\n"))

    def test_local_reconciles_family(self, parse):
        spec = build_default(parse("local ::1\n"))
        assert spec.address == "::1"
        assert str(spec.protocol) == "UDPv6"

    def test_local_overrides_proto_family(self, parse):
        spec = build_default(parse("proto tcp6\nlocal 192.0.2.10\n"))
        assert str(spec.protocol) == "TCPv4"

    def test_local_bad_address(self, parse):
        with pytest.raises(MalformedField, match="local addr"):
            build_default(parse("local vpn.example.com\n"))

    def test_legacy_options_touched(self, parse):
        options = parse("proto udp\nport 443\nlocal 10.0.0.1\nverb 3\n")
        build_default(options)
        assert [option.name for option in options.untouched()] == ["verb"]


class TestListenListLoad:
    """Test cases for ListenList.load."""

    def test_entries_in_order(self, parse):
        listen = ListenList.load(parse(CONFIG), "listen", LoadMode.NOMINAL, n_cores=3)
        assert [spec.address for spec in listen] == ["0.0.0.0", "/run/tun.sock", "2001:db8::1"]
        assert [spec.n_threads for spec in listen] == [2, 1, 12]
        assert listen.total_threads() == 15

    def test_nominal_without_directives(self, parse):
        with pytest.raises(NoDirectivesFound, match="no listen directives found"):
            ListenList.load(parse("port 443\n"), "listen", LoadMode.NOMINAL, n_cores=1)

    def test_allow_default_without_directives(self, parse):
        listen = ListenList.load(parse(""), "listen", LoadMode.ALLOW_DEFAULT, n_cores=4)
        assert len(listen) == 1
        spec = listen[0]
        assert (spec.address, spec.port, spec.protocol, spec.n_threads) == ("0.0.0.0", "1194", UDPv4, 1)
        assert spec.ssl is SSLMode.UNSPECIFIED

    def test_allow_default_uses_legacy_options(self, parse):
        listen = ListenList.load(parse("proto tcp\nport 443\n"), "listen", LoadMode.ALLOW_DEFAULT, n_cores=1)
        assert str(listen[0]) == " 0.0.0.0 443 TCPv4 1"

    def test_allow_default_ignores_legacy_with_directives(self, parse):
        options = parse(CONFIG)
        listen = ListenList.load(options, "listen", LoadMode.ALLOW_DEFAULT, n_cores=1)
        assert len(listen) == 3
        assert [option.name for option in options.untouched()] == ["port"]

    def test_allow_empty_without_directives(self, parse):
        listen = ListenList.load(parse("port 443\n"), "listen", LoadMode.ALLOW_EMPTY, n_cores=1)
        assert len(listen) == 0
        assert listen.total_threads() == 0

    def test_prefix_directive(self, parse):
        text = "listen-udp 0.0.0.0 1194 udp\nlisten 0.0.0.0 1 udp\nlisten-tcp 0.0.0.0 443 tcp 3\n"
        listen = ListenList.load(parse(text), "listen-", LoadMode.NOMINAL, n_cores=1)
        assert [spec.directive for spec in listen] == ["listen-udp", "listen-tcp"]
        assert listen.total_threads() == 4

    def test_duplicates_kept(self, parse):
        text = "listen 0.0.0.0 1194 udp\nlisten 0.0.0.0 1194 udp\n"
        listen = ListenList.load(parse(text), "listen", LoadMode.NOMINAL, n_cores=1)
        assert len(listen) == 2
        assert listen[0] == listen[1]

    def test_error_aborts_load(self, parse):
        text = "listen 0.0.0.0 1194 udp\nlisten 0.0.0.0 1195 udp 200\n"
        with pytest.raises(InvalidThreadCount):
            ListenList.load(parse(text), "listen", LoadMode.ALLOW_EMPTY, n_cores=1)

    def test_local_multithread_override(self, parse):
        text = "listen /run/tun.sock unix 4\n"
        listen = ListenList.load(parse(text), "listen", LoadMode.NOMINAL, n_cores=1, local_multithread=True)
        assert listen.total_threads() == 4

    def test_invalid_core_count(self, parse):
        with pytest.raises(ValueError):
            ListenList.load(parse(CONFIG), "listen", LoadMode.NOMINAL, n_cores=0)


class TestListenList:
    """Test cases for the list container."""

    def test_from_item(self):
        spec = ListenSpec("listen", "0.0.0.0", "1194", UDPv4, n_threads=3)
        listen = ListenList.from_item(spec)
        assert list(listen) == [spec]
        assert listen.total_threads() == 3

    def test_total_threads_is_sum(self):
        specs = [ListenSpec("listen", "0.0.0.0", str(1194 + i), UDPv4, n_threads=i + 1) for i in range(5)]
        assert ListenList(specs).total_threads() == sum(spec.n_threads for spec in specs)

    def test_equality(self):
        spec = ListenSpec("listen", "0.0.0.0", "1194", UDPv4)
        assert ListenList([spec]) == ListenList.from_item(spec)
        assert ListenList() != ListenList([spec])

    def test_slice_is_listen_list(self):
        specs = [ListenSpec("listen", "0.0.0.0", str(1194 + i), UDPv4, n_threads=2) for i in range(3)]
        head = ListenList(specs)[:2]
        assert isinstance(head, ListenList)
        assert list(head) == specs[:2]
        assert head.total_threads() == 4
