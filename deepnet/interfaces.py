"""Discovery of network interfaces and raw link-layer channels."""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass

import psutil

ETH_P_ALL = 0x0003


class InterfaceError(LookupError):
    """Raised when no matching network interface exists."""


class ChannelError(OSError):
    """Raised when a link-layer channel cannot be opened."""


@dataclass(frozen=True)
class NetworkInterface:
    """A host network interface."""

    name: str
    mac: str | None = None
    ips: tuple[str, ...] = ()
    is_up: bool = False
    is_loopback: bool = False


def _normalise_mac(address: str) -> str:
    return address.replace("-", ":").lower()


def _is_loopback_address(address: str) -> bool:
    try:
        return ipaddress.ip_address(address.split("%", 1)[0]).is_loopback
    except ValueError:
        return False


def _build_interface(name, entries, stats) -> NetworkInterface:
    mac = None
    ips = []
    for entry in entries:
        if entry.family == psutil.AF_LINK:
            mac = _normalise_mac(entry.address)
        elif entry.family in (socket.AF_INET, socket.AF_INET6):
            ips.append(entry.address)
    flags = (getattr(stats, "flags", "") or "").split(",")
    loopback = "loopback" in flags or any(_is_loopback_address(ip) for ip in ips)
    return NetworkInterface(
        name=name,
        mac=mac,
        ips=tuple(ips),
        is_up=bool(stats is not None and stats.isup),
        is_loopback=loopback,
    )


def list_interfaces() -> list[NetworkInterface]:
    """Return every interface known to the host."""
    addresses = psutil.net_if_addrs()
    stats = psutil.net_if_stats()
    return [
        _build_interface(name, entries, stats.get(name))
        for name, entries in addresses.items()
    ]


def default_interface() -> NetworkInterface:
    """Return the first interface that is up, not loopback and has addresses."""
    for interface in list_interfaces():
        if interface.is_up and not interface.is_loopback and interface.ips:
            return interface
    raise InterfaceError("No suitable interface found")


def find_interface(name: str) -> NetworkInterface:
    """Return the interface called ``name``."""
    for interface in list_interfaces():
        if interface.name == name:
            return interface
    raise InterfaceError(f"Interface not found: {name}")


def open_channel(interface: NetworkInterface | str) -> socket.socket:
    """Open a raw Ethernet socket bound to ``interface``."""
    family = getattr(socket, "AF_PACKET", None)
    if family is None:
        raise ChannelError("Unsupported channel type")
    name = interface.name if isinstance(interface, NetworkInterface) else str(interface)
    try:
        channel = socket.socket(family, socket.SOCK_RAW, socket.htons(ETH_P_ALL))
    except OSError as exc:
        raise ChannelError(f"Error creating channel: {exc}") from exc
    try:
        channel.bind((name, 0))
    except OSError as exc:
        channel.close()
        raise ChannelError(f"Error creating channel: {exc}") from exc
    return channel