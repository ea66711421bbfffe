"""Tests for local IP detection (adapters.network)."""
import ipaddress

import pytest

from adapters import network
from adapters.network import FALLBACK_HOST, PsutilAddressResolver, resolve_local_ip
from conftest import LAN, LOOPBACK_ONLY, ipv4, ipv6
from core.interfaces.resolver import AddressResolver


def test_returns_first_non_loopback_ipv4():
    ip = resolve_local_ip(LAN)
    assert ip == "192.168.1.50"
    assert isinstance(ipaddress.ip_address(ip), ipaddress.IPv4Address)


def test_loopback_only_host_falls_back_to_localhost():
    assert resolve_local_ip(LOOPBACK_ONLY) == FALLBACK_HOST == "localhost"


def test_no_interfaces_falls_back():
    assert resolve_local_ip({}) == "localhost"


def test_ipv6_only_interface_is_ignored():
    assert resolve_local_ip({"eth0": [ipv6("2001:db8::10")]}) == "localhost"


def test_skips_whole_loopback_range_and_garbage():
    interfaces = {
        "lo": [ipv4("127.0.1.1")],
        "weird": [ipv4("not-an-ip")],
        "wlan0": [ipv4("10.0.0.7")],
    }
    assert resolve_local_ip(interfaces) == "10.0.0.7"


def test_custom_fallback():
    assert resolve_local_ip(LOOPBACK_ONLY, fallback="127.0.0.1") == "127.0.0.1"


def test_reads_host_interfaces_when_none_given(monkeypatch):
    monkeypatch.setattr(network.psutil, "net_if_addrs", lambda: LAN)
    assert resolve_local_ip() == "192.168.1.50"


def test_enumeration_error_degrades_to_fallback(monkeypatch):
    def boom():
        raise OSError("no netlink")

    monkeypatch.setattr(network.psutil, "net_if_addrs", boom)
    assert resolve_local_ip() == "localhost"


def test_resolver_recomputes_on_every_call():
    tables = iter([LAN, LOOPBACK_ONLY])
    resolver = PsutilAddressResolver(source=lambda: next(tables))
    assert isinstance(resolver, AddressResolver)
    assert resolver.resolve() == "192.168.1.50"
    assert resolver.resolve() == "localhost"


@pytest.mark.parametrize("address", ["172.16.5.4", "100.64.0.1"])
def test_private_and_cgnat_addresses_qualify(address):
    assert resolve_local_ip({"eth0": [ipv4(address)]}) == address
