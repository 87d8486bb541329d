import ipaddress
import struct

import pytest

from deepnet.checksum import calculate_checksum, ipv4_to_u32

IPV4_HEADER = bytes.fromhex("450000730000400040110000c0a80001c0a800c7")


def test_empty_data_checksum_is_all_ones():
    assert calculate_checksum(b"") == 0xFFFF


def test_known_ipv4_header_checksum():
    assert calculate_checksum(IPV4_HEADER) == 0xB861


def test_inserting_checksum_verifies_to_zero():
    checksum = calculate_checksum(IPV4_HEADER)
    filled = IPV4_HEADER[:10] + struct.pack("!H", checksum) + IPV4_HEADER[12:]
    assert calculate_checksum(filled) == 0


def test_odd_length_pads_with_zero_low_byte():
    assert calculate_checksum(b"\x12\x34\x56") == calculate_checksum(b"\x12\x34\x56\x00")


def test_accepts_bytearray_and_memoryview():
    expected = calculate_checksum(IPV4_HEADER)
    assert calculate_checksum(bytearray(IPV4_HEADER)) == expected
    assert calculate_checksum(memoryview(IPV4_HEADER)) == expected


def test_carry_is_folded_back():
    # Two words that overflow 16 bits fold to the same sum as their total mod 0xFFFF.
    assert calculate_checksum(b"\xff\xff\x00\x01") == calculate_checksum(b"\x00\x01")


def test_result_fits_in_sixteen_bits():
    data = bytes(range(256)) * 8
    assert 0 <= calculate_checksum(data) <= 0xFFFF


def test_ipv4_to_u32_value():
    assert ipv4_to_u32("192.168.1.1") == 0xC0A80101


@pytest.mark.parametrize(
    "address, expected",
    [("0.0.0.0", 0), ("255.255.255.255", 0xFFFFFFFF)],
)
def test_ipv4_to_u32_bounds(address, expected):
    assert ipv4_to_u32(address) == expected


@pytest.mark.parametrize("address", ["10.1.2.3", "172.16.254.7", "127.0.0.1"])
def test_ipv4_to_u32_round_trip(address):
    assert ipaddress.IPv4Address(ipv4_to_u32(address)) == ipaddress.IPv4Address(address)


def test_ipv4_to_u32_accepts_address_object():
    address = ipaddress.IPv4Address("10.0.0.1")
    assert ipv4_to_u32(address) == ipv4_to_u32("10.0.0.1")


@pytest.mark.parametrize("address", ["256.0.0.1", "not-an-ip", "::1"])
def test_ipv4_to_u32_rejects_invalid(address):
    with pytest.raises(ValueError):
        ipv4_to_u32(address)