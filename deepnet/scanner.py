"""Port scanning across a pool of worker threads."""

from __future__ import annotations

import ipaddress
import socket
import threading
import time
from enum import Enum
from typing import Callable, Optional

from deepnet.interfaces import default_interface, open_channel

DEFAULT_TARGET = ipaddress.IPv4Address("127.0.0.1")
SYN_PROBE_INTERVAL = 0.01
CONNECT_TIMEOUT = 1.0
UDP_TIMEOUT = 1.0

OPEN = "Open"
CLOSED = "Closed"
OPEN_OR_FILTERED = "Open|Filtered"

Sink = Callable[[int, str], object]


class ScanType(Enum):
    """How ports are probed."""

    TCP_SYN = "TcpSyn"
    TCP_CONNECT = "TcpConnect"
    UDP = "Udp"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Human-readable name for menus."""
        return {
            ScanType.TCP_SYN: "TCP SYN",
            ScanType.TCP_CONNECT: "TCP Connect",
            ScanType.UDP: "UDP",
        }[self]


def _check_port(port: int) -> int:
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")
    return port


def split_ports(port_range: tuple[int, int], threads: int) -> list[range]:
    """Share the inclusive ``port_range`` out between ``threads`` workers.

    Every worker gets the same number of ports; the last one also takes the
    remainder. When there are more workers than ports, all but the last get
    an empty range.
    """
    start, end = port_range
    if threads < 1:
        raise ValueError(f"thread count must be at least 1: {threads}")
    if start > end:
        raise ValueError(f"invalid port range: {start} to {end}")
    per_thread = (end - start + 1) // threads
    ranges = []
    for worker in range(threads):
        first = start + worker * per_thread
        last = end if worker == threads - 1 else first + per_thread - 1
        ranges.append(range(first, last + 1))
    return ranges


class PortScanner:
    """Scans a range of ports on one IPv4 target."""

    def __init__(self, target, port_range, scan_type, threads):
        try:
            self.target_ip = ipaddress.IPv4Address(target)
        except ValueError:
            self.target_ip = DEFAULT_TARGET
        start, end = port_range
        self.port_range = (_check_port(start), _check_port(end))
        self.scan_type = ScanType(scan_type)
        self.threads = threads
        self._results: list[tuple[int, str]] = []
        self._lock = threading.Lock()

    def scan(self, sink: Optional[Sink] = None) -> None:
        """Probe every port, handing each ``(port, status)`` to ``sink``."""
        with self._lock:
            self._results.clear()
        if self.scan_type is ScanType.TCP_SYN:
            with open_channel(default_interface()):
                self._run(self._probe_syn, sink)
        elif self.scan_type is ScanType.TCP_CONNECT:
            self._run(self._probe_connect, sink)
        else:
            self._run(self._probe_udp, sink)

    def get_results(self) -> list[tuple[int, str]]:
        """Return the ``(port, status)`` pairs of the last scan, ordered by port."""
        with self._lock:
            return sorted(self._results)

    def _run(self, probe: Callable[[int], str], sink: Optional[Sink]) -> None:
        failures: list[BaseException] = []

        def work(ports: range) -> None:
            try:
                for port in ports:
                    status = probe(port)
                    with self._lock:
                        self._results.append((port, status))
                    if sink is not None:
                        sink(port, status)
            except BaseException as exc:  # re-raised in the calling thread
                failures.append(exc)

        workers = [
            threading.Thread(target=work, args=(ports,), daemon=True)
            for ports in split_ports(self.port_range, self.threads)
            if ports
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()
        if failures:
            raise failures[0]

    @staticmethod
    def _probe_syn(port: int) -> str:
        time.sleep(SYN_PROBE_INTERVAL)
        return OPEN if port % 10 == 0 else CLOSED

    def _probe_connect(self, port: int) -> str:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
            probe.settimeout(CONNECT_TIMEOUT)
            try:
                result = probe.connect_ex((str(self.target_ip), port))
            except OSError:
                return CLOSED
        return OPEN if result == 0 else CLOSED

    def _probe_udp(self, port: int) -> str:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
            probe.settimeout(UDP_TIMEOUT)
            try:
                probe.connect((str(self.target_ip), port))
                probe.send(b"")
                probe.recv(1024)
            except socket.timeout:
                return OPEN_OR_FILTERED
            except (ConnectionRefusedError, ConnectionResetError):
                return CLOSED
            except OSError:
                return CLOSED
        return OPEN