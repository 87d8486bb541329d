"""Internet checksum and IPv4 address helpers."""

from __future__ import annotations

import ipaddress
import struct


def calculate_checksum(data: bytes | bytearray | memoryview) -> int:
    """Return the 16-bit ones' complement checksum of ``data``.

    Bytes are summed as big-endian words; a trailing odd byte is treated as
    the high byte of a final word.
    """
    padded = bytes(data)
    if len(padded) % 2:
        padded += b"\x00"
    total = sum(word for (word,) in struct.iter_unpack("!H", padded))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


def ipv4_to_u32(ip: str | int | ipaddress.IPv4Address) -> int:
    """Return an IPv4 address as an unsigned 32-bit integer."""
    return int(ipaddress.IPv4Address(ip))