"""State and actions behind the crafter, scanner and sniffer panels."""

from __future__ import annotations

import ipaddress
import threading
from dataclasses import dataclass, field

from deepnet.crafter import PacketCrafter, Protocol
from deepnet.interfaces import list_interfaces
from deepnet.scanner import PortScanner, ScanType
from deepnet.sniffer import PacketInfo, PacketSniffer

FALLBACK_SOURCE_IP = ipaddress.IPv4Address("192.168.1.100")
FALLBACK_DEST_IP = ipaddress.IPv4Address("192.168.1.1")


def port_category(port: int) -> str:
    """Return how a port number is classed in the results table."""
    return "Well-known" if port < 1024 else "Registered"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _parse_or(text: str, fallback: ipaddress.IPv4Address) -> ipaddress.IPv4Address:
    try:
        return ipaddress.IPv4Address(text)
    except ValueError:
        return fallback


def _available_interface_names() -> list[str]:
    return [iface.name for iface in list_interfaces() if iface.is_up and not iface.is_loopback]


@dataclass
class CrafterForm:
    """Settings and results of the packet crafter panel."""

    source_ip: str = "192.168.1.100"
    dest_ip: str = "192.168.1.1"
    source_port: int = 54321
    dest_port: int = 80
    protocol: Protocol = Protocol.TCP
    payload: str = "DeepNet Packet"
    count: int = 5
    delay: int = 100
    results: list[str] = field(default_factory=list)
    crafting: bool = False

    def start_crafting(self) -> list[str]:
        """Send the configured packets and return the result lines."""
        if self.crafting:
            return list(self.results)
        self.crafting = True
        self.results.clear()
        try:
            self.source_port = _clamp(self.source_port, 1, 65535)
            self.dest_port = _clamp(self.dest_port, 1, 65535)
            self.count = _clamp(self.count, 1, 1000)
            self.delay = _clamp(self.delay, 1, 5000)
            crafter = PacketCrafter(
                _parse_or(self.source_ip, FALLBACK_SOURCE_IP),
                _parse_or(self.dest_ip, FALLBACK_DEST_IP),
                self.source_port,
                self.dest_port,
                self.protocol,
                self.payload,
                self.count,
                self.delay,
            )
            sent = crafter.craft_and_send()
            self.results.extend(
                f"Sent {number} packet to {self.dest_ip}:{self.dest_port}"
                f" - Protocol: {crafter.protocol}"
                for number in range(1, sent + 1)
            )
        finally:
            self.crafting = False
        return list(self.results)


@dataclass
class ScannerForm:
    """Settings, progress and results of the port scanner panel."""

    target: str = "127.0.0.1"
    port_range: tuple[int, int] = (1, 1024)
    scan_type: ScanType = ScanType.TCP_SYN
    threads: int = 100
    results: list[tuple[int, str]] = field(default_factory=list)
    progress: float = 0.0
    status: str = "Ready"
    scanning: bool = False
    error: Exception | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def start_scan(self) -> threading.Thread | None:
        """Start a scan in the background; return its thread, or None if one is running."""
        if self.scanning:
            return None
        start, end = self.port_range
        self.port_range = (_clamp(start, 1, 65535), _clamp(end, 1, 65535))
        self.threads = _clamp(self.threads, 1, 1000)
        scanner = PortScanner(self.target, self.port_range, self.scan_type, self.threads)
        self.scanning = True
        self.status = "Scanning..."
        self.progress = 0.0
        self.error = None
        with self._lock:
            self.results.clear()
        total = max(self.port_range[1] - self.port_range[0] + 1, 0)

        def record(port: int, status: str) -> None:
            with self._lock:
                self.results.append((port, status))
                self.progress = len(self.results) / total if total else 1.0

        def run() -> None:
            try:
                scanner.scan(record)
            except Exception as exc:
                self.error = exc
                self.status = f"Scan failed: {exc}"
            else:
                with self._lock:
                    self.results[:] = scanner.get_results()
                    self.progress = 1.0
                if self.scanning:
                    self.status = "Scan complete"
            finally:
                self.scanning = False

        worker = threading.Thread(target=run, daemon=True)
        worker.start()
        return worker

    def stop_scan(self) -> None:
        """Mark the scan as stopped."""
        self.scanning = False
        self.status = "Scan stopped"


class _SniffingStopped(Exception):
    pass


@dataclass
class SnifferForm:
    """Settings and captured packets of the packet sniffer panel."""

    interfaces: list[str] = field(default_factory=_available_interface_names)
    interface: str = ""
    filter: str = ""
    results: list[PacketInfo] = field(default_factory=list)
    sniffing: bool = False
    packet_count: int = 0
    error: Exception | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.interface and self.interfaces:
            self.interface = self.interfaces[0]

    def start_sniffing(self) -> threading.Thread | None:
        """Start capturing in the background; return its thread, or None if one is running."""
        if self.sniffing:
            return None
        self.sniffing = True
        self.packet_count = 0
        self.error = None
        with self._lock:
            self.results.clear()
        interface, capture_filter = self.interface, self.filter

        def record(info: PacketInfo) -> None:
            if not self.sniffing:
                raise _SniffingStopped
            with self._lock:
                self.results.append(info)
                self.packet_count += 1

        def run() -> None:
            try:
                PacketSniffer(interface, capture_filter).start(record)
            except _SniffingStopped:
                pass
            except Exception as exc:
                self.error = exc
            finally:
                self.sniffing = False

        worker = threading.Thread(target=run, daemon=True)
        worker.start()
        return worker

    def stop_sniffing(self) -> None:
        """Stop delivering captured packets."""
        self.sniffing = False