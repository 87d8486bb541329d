import socket
from types import SimpleNamespace
from unittest.mock import patch

import psutil
import pytest

from deepnet.interfaces import (
    ChannelError,
    InterfaceError,
    NetworkInterface,
    default_interface,
    find_interface,
    list_interfaces,
    open_channel,
)


def _addr(family, address):
    return SimpleNamespace(family=family, address=address, netmask=None, broadcast=None, ptp=None)


ADDRS = {
    "lo": [_addr(socket.AF_INET, "127.0.0.1"), _addr(psutil.AF_LINK, "00:00:00:00:00:00")],
    "down0": [_addr(socket.AF_INET, "198.51.100.4"), _addr(psutil.AF_LINK, "02:00:00:00:00:09")],
    "eth0": [
        _addr(socket.AF_INET, "192.0.2.10"),
        _addr(socket.AF_INET6, "fe80::1%eth0"),
        _addr(psutil.AF_LINK, "02:00:00:00:00:01"),
    ],
    "wlan0": [_addr(psutil.AF_LINK, "02-00-00-00-00-0A")],
}

STATS = {
    "lo": SimpleNamespace(isup=True, flags="up,loopback,running"),
    "down0": SimpleNamespace(isup=False, flags="broadcast"),
    "eth0": SimpleNamespace(isup=True, flags="up,broadcast,running"),
    "wlan0": SimpleNamespace(isup=True, flags="up,broadcast"),
}


@pytest.fixture
def fake_host():
    with patch("psutil.net_if_addrs", return_value=ADDRS), patch(
        "psutil.net_if_stats", return_value=STATS
    ):
        yield


class FakeChannel:
    def __init__(self, fail_bind=False):
        self.fail_bind = fail_bind
        self.bound = None
        self.closed = False

    def bind(self, address):
        if self.fail_bind:
            raise OSError("no such device")
        self.bound = address

    def close(self):
        self.closed = True


def test_list_interfaces_names(fake_host):
    assert {iface.name for iface in list_interfaces()} == set(ADDRS)


def test_interface_details(fake_host):
    eth0 = find_interface("eth0")
    assert eth0.mac == "02:00:00:00:00:01"
    assert eth0.ips == ("192.0.2.10", "fe80::1%eth0")
    assert eth0.is_up
    assert not eth0.is_loopback


def test_loopback_is_flagged(fake_host):
    assert find_interface("lo").is_loopback


def test_loopback_detected_from_address_without_flags():
    addrs = {"lo0": [_addr(socket.AF_INET, "127.0.0.1")]}
    stats = {"lo0": SimpleNamespace(isup=True)}
    with patch("psutil.net_if_addrs", return_value=addrs), patch(
        "psutil.net_if_stats", return_value=stats
    ):
        assert find_interface("lo0").is_loopback


def test_mac_is_normalised(fake_host):
    assert find_interface("wlan0").mac == "02:00:00:00:00:0a"


def test_interface_without_stats_is_down():
    addrs = {"tun0": [_addr(socket.AF_INET, "10.8.0.2")]}
    with patch("psutil.net_if_addrs", return_value=addrs), patch(
        "psutil.net_if_stats", return_value={}
    ):
        assert find_interface("tun0").is_up is False


def test_default_interface_skips_loopback_down_and_addressless(fake_host):
    assert default_interface().name == "eth0"


def test_default_interface_raises_when_none_suitable():
    addrs = {"lo": ADDRS["lo"], "wlan0": ADDRS["wlan0"]}
    with patch("psutil.net_if_addrs", return_value=addrs), patch(
        "psutil.net_if_stats", return_value=STATS
    ):
        with pytest.raises(InterfaceError, match="No suitable interface found"):
            default_interface()


def test_find_interface_missing_raises(fake_host):
    with pytest.raises(InterfaceError):
        find_interface("nope0")


def test_open_channel_unsupported(monkeypatch):
    monkeypatch.delattr(socket, "AF_PACKET", raising=False)
    with pytest.raises(ChannelError, match="Unsupported channel type"):
        open_channel(NetworkInterface(name="eth0"))


def test_open_channel_creation_error(monkeypatch):
    monkeypatch.setattr(socket, "AF_PACKET", 17, raising=False)
    with patch("socket.socket", side_effect=PermissionError("denied")):
        with pytest.raises(ChannelError, match="Error creating channel"):
            open_channel("eth0")


def test_open_channel_binds_to_interface(monkeypatch):
    monkeypatch.setattr(socket, "AF_PACKET", 17, raising=False)
    channel = FakeChannel()
    with patch("socket.socket", return_value=channel):
        assert open_channel(NetworkInterface(name="eth0")) is channel
    assert channel.bound == ("eth0", 0)


def test_open_channel_bind_failure_closes(monkeypatch):
    monkeypatch.setattr(socket, "AF_PACKET", 17, raising=False)
    channel = FakeChannel(fail_bind=True)
    with patch("socket.socket", return_value=channel):
        with pytest.raises(ChannelError):
            open_channel("eth9")
    assert channel.closed