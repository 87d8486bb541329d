"""Network toolkit: packet crafting, packet sniffing and port scanning behind a Tk window."""

__version__ = "0.1.0"