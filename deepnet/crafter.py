"""Building and sending hand-crafted IPv4 packets."""

from __future__ import annotations

import ipaddress
import struct
from enum import Enum

from deepnet.checksum import calculate_checksum
from deepnet.interfaces import InterfaceError, default_interface, open_channel

ETHERTYPE_IPV4 = 0x0800
IPV4_HEADER_LEN = 20
DEFAULT_TTL = 64
IP_PROTO_ICMP = 1
IP_PROTO_TCP = 6
IP_PROTO_UDP = 17
TCP_SYN = 0x02
TCP_SEQUENCE = 12345
TCP_WINDOW = 64240
ICMP_ECHO_REQUEST = 8
ICMP_IDENTIFIER = 1234
ICMP_SEQUENCE = 1
MAX_IPV4_LENGTH = 0xFFFF


class Protocol(Enum):
    """Transport carried by a crafted packet."""

    TCP = "Tcp"
    UDP = "Udp"
    ICMP = "Icmp"
    RAW = "Raw"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Human-readable name for menus."""
        return "Raw" if self is Protocol.RAW else self.name


def _parse_mac(mac: str | bytes) -> bytes:
    if isinstance(mac, (bytes, bytearray)):
        raw = bytes(mac)
    else:
        parts = mac.replace("-", ":").split(":")
        try:
            raw = bytes(int(part, 16) for part in parts)
        except ValueError as exc:
            raise ValueError(f"invalid MAC address: {mac!r}") from exc
    if len(raw) != 6:
        raise ValueError(f"invalid MAC address: {mac!r}")
    return raw


def _with_checksum(data: bytes, offset: int, checksum: int) -> bytes:
    return data[:offset] + struct.pack("!H", checksum) + data[offset + 2 :]


def _check_port(name: str, port: int) -> int:
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"{name} out of range: {port}")
    return port


class PacketCrafter:
    """Crafts IPv4 packets of one protocol and sends them on the default interface."""

    def __init__(self, source_ip, dest_ip, source_port, dest_port, protocol, payload, count, delay):
        self.source_ip = ipaddress.IPv4Address(source_ip)
        self.dest_ip = ipaddress.IPv4Address(dest_ip)
        self.source_port = _check_port("source port", source_port)
        self.dest_port = _check_port("destination port", dest_port)
        self.protocol = Protocol(protocol)
        self.payload = payload
        if count < 0:
            raise ValueError(f"count must not be negative: {count}")
        if delay < 0:
            raise ValueError(f"delay must not be negative: {delay}")
        self.count = count
        self.delay = delay

    def _tcp_segment(self) -> bytes:
        segment = struct.pack(
            "!HHIIBBHHH",
            self.source_port,
            self.dest_port,
            TCP_SEQUENCE,
            0,
            5 << 4,
            TCP_SYN,
            TCP_WINDOW,
            0,
            0,
        )
        pseudo = (
            self.source_ip.packed
            + self.dest_ip.packed
            + struct.pack("!BBH", 0, IP_PROTO_TCP, len(segment))
        )
        return _with_checksum(segment, 16, calculate_checksum(pseudo + segment))

    def _udp_datagram(self) -> bytes:
        return struct.pack("!HHHH", self.source_port, self.dest_port, 8, 0)

    def _icmp_echo(self) -> bytes:
        message = struct.pack("!BBHHH", ICMP_ECHO_REQUEST, 0, 0, ICMP_IDENTIFIER, ICMP_SEQUENCE)
        return _with_checksum(message, 2, calculate_checksum(message))

    def _transport(self) -> tuple[int, bytes]:
        if self.protocol is Protocol.TCP:
            return IP_PROTO_TCP, self._tcp_segment()
        if self.protocol is Protocol.UDP:
            return IP_PROTO_UDP, self._udp_datagram()
        if self.protocol is Protocol.ICMP:
            return IP_PROTO_ICMP, self._icmp_echo()
        return IP_PROTO_TCP, self.payload.encode("utf-8")

    def build_ip_packet(self) -> bytes:
        """Return the IPv4 packet, header checksum included."""
        proto, transport = self._transport()
        total = IPV4_HEADER_LEN + len(transport)
        if total > MAX_IPV4_LENGTH:
            raise ValueError(f"packet too large: {total} bytes")
        header = struct.pack(
            "!BBHHHBBH4s4s",
            0x45,
            0,
            total,
            0,
            0,
            DEFAULT_TTL,
            proto,
            0,
            self.source_ip.packed,
            self.dest_ip.packed,
        )
        return _with_checksum(header, 10, calculate_checksum(header)) + transport

    def build_frame(self, mac) -> bytes:
        """Return an Ethernet frame from and to ``mac`` carrying the IPv4 packet."""
        address = _parse_mac(mac)
        return address + address + struct.pack("!H", ETHERTYPE_IPV4) + self.build_ip_packet()

    def craft_and_send(self) -> int:
        """Send ``count`` frames on the default interface and return how many were sent."""
        interface = default_interface()
        if interface.mac is None:
            raise InterfaceError(f"Interface {interface.name} has no hardware address")
        frame = self.build_frame(interface.mac)
        with open_channel(interface) as channel:
            for _ in range(self.count):
                channel.send(frame)
        return self.count