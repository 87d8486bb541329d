# deepnet

A small network toolkit with three tools behind one Tk window:

- **Port Scanner** – scans an inclusive range of ports on an IPv4 target,
  sharing the range out between worker threads, and lists each port with its
  status and whether it is a well-known (below 1024) or registered port.
- **Packet Crafter** – builds Ethernet/IPv4 frames carrying a TCP SYN, a UDP
  datagram, an ICMP echo request or a raw payload, fills in the checksums and
  sends them out of the first interface that is up, not loopback, and has an
  address.
- **Packet Sniffer** – captures frames on a chosen interface and summarises
  each one: time, source, destination, protocol, length and a one-line
  description (ports, TCP flags, sequence and acknowledgement numbers,
  window, ICMP type and so on).

Sending and capturing raw frames uses Linux packet sockets, so it needs a
Linux system and the privileges to open them (root, or `CAP_NET_RAW`).
Interfaces are discovered with `psutil`.

## Installing

```
pip install .
```

## Running

```
deepnet
```

opens a 1200×800 window with the *Port Scanner*, *Packet Crafter* and
*Packet Sniffer* tabs. Scans and captures run in background threads; the
window refreshes their results every 100 ms.

## Using the pieces from Python

```python
from deepnet.checksum import calculate_checksum, ipv4_to_u32
from deepnet.crafter import PacketCrafter, Protocol
from deepnet.sniffer import process_packet, tcp_flags_to_str
from deepnet.scanner import PortScanner, ScanType, split_ports

calculate_checksum(b"\x45\x00\x00\x1c")   # 16-bit ones' complement checksum
ipv4_to_u32("10.0.0.1")                   # 167772161

crafter = PacketCrafter("192.168.1.100", "192.168.1.1", 54321, 80,
                        Protocol.TCP, "DeepNet Packet", 5, 100)
ip_packet = crafter.build_ip_packet()     # bytes of the IPv4 packet
frame = crafter.build_frame("02:00:00:00:00:01")

tcp_flags_to_str(0x12)                    # "SA"
split_ports((1, 10), 3)                   # [range(1, 4), range(4, 7), range(7, 11)]

scanner = PortScanner("127.0.0.1", (1, 1024), ScanType.TCP_CONNECT, 50)
found = []
scanner.scan(lambda port, status: found.append((port, status)))
scanner.get_results()                     # (port, status) pairs ordered by port
```

### Modules

- `deepnet.checksum` – `calculate_checksum(data)` and `ipv4_to_u32(ip)`.
- `deepnet.interfaces` – `NetworkInterface`, `list_interfaces()`,
  `default_interface()`, `find_interface(name)` and `open_channel(interface)`,
  which opens a raw Ethernet socket bound to the interface. A missing
  interface raises `InterfaceError`; a channel that cannot be opened raises
  `ChannelError`.
- `deepnet.crafter` – `Protocol` and `PacketCrafter`. `build_ip_packet()`
  and `build_frame(mac)` only build bytes; `craft_and_send()` sends `count`
  frames on the default interface and returns how many it sent.
- `deepnet.sniffer` – `PacketInfo`, `tcp_flags_to_str(flags)`,
  `process_packet(frame)` (returns `None` when the frame is too short to
  parse) and `PacketSniffer(interface_name, filter)`, whose `start(sink)`
  captures until the channel fails and hands each `PacketInfo` to `sink`.
- `deepnet.scanner` – `ScanType`, `split_ports(port_range, threads)` and
  `PortScanner`. `scan(sink)` calls `sink(port, status)` for each port.
- `deepnet.controllers` – `CrafterForm`, `ScannerForm` and `SnifferForm`,
  the settings and results behind each tab, usable without a window, and
  `port_category(port)`.
- `deepnet.app` – `Tab`, `DeepNetApp` (pass `root=None` for the state
  without widgets) and `main()`.

## What it does not do

- **TCP SYN scans are simulated.** `ScanType.TCP_SYN` opens a raw channel on
  the default interface but sends no probes: it reports every port divisible
  by 10 as `Open` and the rest as `Closed`, one port per 10 ms per thread.
  `TCP_CONNECT` really connects (`Open` or `Closed`), and `UDP` sends an
  empty datagram (`Open`, `Closed` or `Open|Filtered` on timeout).
- **No name resolution.** A scan target that is not an IPv4 address is
  replaced by `127.0.0.1`.
- **The sniffer's filter is not applied.** The *Filter (BPF)* setting is
  stored, but every frame is captured and summarised. Stopping a capture
  takes effect when the next frame arrives.
- **The crafter's delay is not applied.** Frames are sent back to back; the
  *Delay (ms)* setting is only kept and range-checked. The crafter sends
  every frame to and from the interface's own hardware address.

## Tests

```
pip install .[test]
pytest
```