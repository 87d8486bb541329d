"""Decoding captured Ethernet frames into packet summaries."""

from __future__ import annotations

import ipaddress
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from deepnet.interfaces import find_interface, open_channel

ETHERTYPE_IPV4 = 0x0800
ETHERTYPE_ARP = 0x0806
ETHERTYPE_IPV6 = 0x86DD
ETHERNET_HEADER_LEN = 14
IPV4_MIN_HEADER = 20
IPV6_HEADER_LEN = 40
TCP_MIN_HEADER = 20
UDP_HEADER_LEN = 8
ICMP_MIN_LEN = 4
_SNAPLEN = 65535

_TCP_FLAGS = (
    (0x01, "F"),
    (0x02, "S"),
    (0x04, "R"),
    (0x08, "P"),
    (0x10, "A"),
    (0x20, "U"),
    (0x40, "E"),
    (0x80, "C"),
)

_ICMP_TYPES = {
    0: "Echo Reply",
    8: "Echo Request",
    3: "Destination Unreachable",
}


@dataclass
class PacketInfo:
    """Summary of one captured frame."""

    timestamp: str = ""
    source: str = ""
    destination: str = ""
    protocol: str = ""
    length: int = 0
    info: str = ""


def tcp_flags_to_str(flags: int) -> str:
    """Return the one-letter names of the TCP flags set in ``flags``."""
    return "".join(letter for bit, letter in _TCP_FLAGS if flags & bit)


def _ipv4_payload(data: bytes) -> bytes:
    header_len = (data[0] & 0x0F) * 4
    total = int.from_bytes(data[2:4], "big")
    start = max(header_len, IPV4_MIN_HEADER)
    return data[start : start + max(total - header_len, 0)]


def _describe_tcp(segment: bytes) -> str:
    offset = max((segment[12] >> 4) * 4, TCP_MIN_HEADER)
    return "{} → {} [{}] Seq={} Ack={} Win={} Len={}".format(
        int.from_bytes(segment[0:2], "big"),
        int.from_bytes(segment[2:4], "big"),
        tcp_flags_to_str(segment[13]),
        int.from_bytes(segment[4:8], "big"),
        int.from_bytes(segment[8:12], "big"),
        int.from_bytes(segment[14:16], "big"),
        max(len(segment) - offset, 0),
    )


def _describe_ipv4(data: bytes, info: PacketInfo) -> None:
    info.source = str(ipaddress.IPv4Address(data[12:16]))
    info.destination = str(ipaddress.IPv4Address(data[16:20]))
    proto = data[9]
    payload = _ipv4_payload(data)
    if proto == 6:
        info.protocol = "TCP"
        if len(payload) >= TCP_MIN_HEADER:
            info.info = _describe_tcp(payload)
    elif proto == 17:
        info.protocol = "UDP"
        if len(payload) >= UDP_HEADER_LEN:
            info.info = "{} → {} Len={}".format(
                int.from_bytes(payload[0:2], "big"),
                int.from_bytes(payload[2:4], "big"),
                int.from_bytes(payload[4:6], "big"),
            )
    elif proto == 1:
        info.protocol = "ICMP"
        if len(payload) >= ICMP_MIN_LEN:
            info.info = _ICMP_TYPES.get(payload[0], "Other ICMP")
    else:
        info.protocol = f"IPv4 Protocol {proto}"


def process_packet(packet: bytes) -> PacketInfo | None:
    """Decode an Ethernet frame; return None if it is too short to parse."""
    data = bytes(packet)
    if len(data) < ETHERNET_HEADER_LEN:
        return None
    info = PacketInfo(timestamp=datetime.now().isoformat(), length=len(data))
    ethertype = int.from_bytes(data[12:14], "big")
    payload = data[ETHERNET_HEADER_LEN:]
    if ethertype == ETHERTYPE_IPV4:
        if len(payload) < IPV4_MIN_HEADER:
            return None
        _describe_ipv4(payload, info)
    elif ethertype == ETHERTYPE_IPV6:
        if len(payload) < IPV6_HEADER_LEN:
            return None
        info.source = str(ipaddress.IPv6Address(payload[8:24]))
        info.destination = str(ipaddress.IPv6Address(payload[24:40]))
        info.protocol = "IPv6"
    elif ethertype == ETHERTYPE_ARP:
        info.protocol = "ARP"
    else:
        info.protocol = f"EtherType 0x{ethertype:04x}"
    return info


class PacketSniffer:
    """Captures frames on one interface and hands their summaries to a sink."""

    def __init__(self, interface_name, filter):
        self.interface = find_interface(interface_name)
        self.filter = filter

    def start(self, sink: Callable[[PacketInfo], object]) -> int:
        """Capture until the channel fails; return how many summaries were delivered."""
        delivered = 0
        with open_channel(self.interface) as channel:
            while True:
                try:
                    frame = channel.recv(_SNAPLEN)
                except OSError as exc:
                    print(f"Error: {exc}", file=sys.stderr)
                    break
                info = process_packet(frame)
                if info is not None:
                    sink(info)
                    delivered += 1
        return delivered