"""
Shared fixtures: a temp project root and fake psutil interface tables.
Nothing here touches the real network configuration or spawns npm.
"""
import socket
from collections import namedtuple

import pytest
from loguru import logger

# Same shape as psutil._common.snicaddr.
Snicaddr = namedtuple("Snicaddr", "family address netmask broadcast ptp")


def ipv4(address):
    return Snicaddr(socket.AF_INET, address, "255.255.255.0", None, None)


def ipv6(address):
    return Snicaddr(socket.AF_INET6, address, None, None, None)


LOOPBACK_ONLY = {"lo": [ipv4("127.0.0.1"), ipv6("::1")]}
LAN = {
    "lo": [ipv4("127.0.0.1")],
    "eth0": [ipv6("fe80::1"), ipv4("192.168.1.50")],
}


@pytest.fixture(autouse=True)
def _reset_loguru():
    # The CLI swaps loguru sinks onto CliRunner's temporary stderr.
    yield
    logger.remove()


@pytest.fixture
def project_root(tmp_path, monkeypatch):
    for var in ("LAN_SETUP_PROJECT_ROOT", "LAN_SETUP_STEPS", "LAN_SETUP_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
