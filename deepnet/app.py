"""Desktop window that hosts the port scanner, packet crafter and packet sniffer."""

from __future__ import annotations

import argparse
from enum import Enum
from typing import Callable

from deepnet.crafter import Protocol
from deepnet.controllers import CrafterForm, ScannerForm, SnifferForm, port_category
from deepnet.scanner import ScanType

TITLE = "DeepNet - Advanced Network Toolkit"
VERSION = "v0.1.0"
WINDOW_SIZE = (1200, 800)
REFRESH_MS = 100
HEADER_BACKGROUND = "#14141e"


class Tab(Enum):
    """The panels of the main window, in display order."""

    SCANNER = "Port Scanner"
    CRAFTER = "Packet Crafter"
    SNIFFER = "Packet Sniffer"

    @property
    def label(self) -> str:
        """Caption shown on the tab."""
        return self.value


def _read_int(var, fallback: int) -> int:
    try:
        return int(var.get())
    except Exception:
        return fallback


class _ScannerPanel:
    def __init__(self, parent, form: ScannerForm) -> None:
        import tkinter as tk
        from tkinter import ttk

        self.form = form
        self.frame = ttk.Frame(parent, padding=10)
        ttk.Label(self.frame, text="Port Scanner", font=("TkDefaultFont", 14, "bold")).grid(
            row=0, column=0, columnspan=2, sticky="w"
        )
        self.target = tk.StringVar(value=form.target)
        self.start = tk.IntVar(value=form.port_range[0])
        self.end = tk.IntVar(value=form.port_range[1])
        self.scan_type = tk.StringVar(value=form.scan_type.label)
        self.threads = tk.IntVar(value=form.threads)

        grid = ttk.Frame(self.frame)
        grid.grid(row=1, column=0, columnspan=2, sticky="w", pady=5)
        ttk.Label(grid, text="Target:").grid(row=0, column=0, sticky="w", padx=(0, 20), pady=5)
        ttk.Entry(grid, textvariable=self.target).grid(row=0, column=1, sticky="w")
        ttk.Label(grid, text="Port Range:").grid(row=1, column=0, sticky="w", padx=(0, 20), pady=5)
        ports = ttk.Frame(grid)
        ports.grid(row=1, column=1, sticky="w")
        ttk.Spinbox(ports, from_=1, to=65535, textvariable=self.start, width=8).pack(side="left")
        ttk.Label(ports, text="to").pack(side="left", padx=5)
        ttk.Spinbox(ports, from_=1, to=65535, textvariable=self.end, width=8).pack(side="left")
        ttk.Label(grid, text="Scan Type:").grid(row=2, column=0, sticky="w", padx=(0, 20), pady=5)
        ttk.Combobox(
            grid,
            textvariable=self.scan_type,
            values=[kind.label for kind in ScanType],
            state="readonly",
        ).grid(row=2, column=1, sticky="w")
        ttk.Label(grid, text="Threads:").grid(row=3, column=0, sticky="w", padx=(0, 20), pady=5)
        ttk.Spinbox(grid, from_=1, to=1000, textvariable=self.threads, width=8).grid(
            row=3, column=1, sticky="w"
        )

        ttk.Separator(self.frame).grid(row=2, column=0, columnspan=2, sticky="ew", pady=5)
        ttk.Button(self.frame, text="Start Scan", command=self._start).grid(row=3, column=0, sticky="w")
        self.stop_button = ttk.Button(self.frame, text="Stop Scan", command=form.stop_scan)
        self.stop_button.grid(row=3, column=1, sticky="w")
        self.status = ttk.Label(self.frame, text=form.status)
        self.status.grid(row=4, column=0, columnspan=2, sticky="w", pady=5)
        self.progress = ttk.Progressbar(self.frame, maximum=100.0, length=400)
        self.progress.grid(row=5, column=0, columnspan=2, sticky="ew")
        ttk.Separator(self.frame).grid(row=6, column=0, columnspan=2, sticky="ew", pady=5)

        self.tree = ttk.Treeview(self.frame, columns=("port", "protocol", "status"), show="headings")
        for column, heading in (("port", "Port"), ("protocol", "Protocol"), ("status", "Status")):
            self.tree.heading(column, text=heading)
        self.tree.grid(row=7, column=0, columnspan=2, sticky="nsew")
        scroll = ttk.Scrollbar(self.frame, orient="vertical", command=self.tree.yview)
        scroll.grid(row=7, column=2, sticky="ns")
        self.tree.configure(yscrollcommand=scroll.set)
        self.frame.rowconfigure(7, weight=1)
        self.frame.columnconfigure(1, weight=1)
        self._shown: list[tuple[int, str]] = []

    def _start(self) -> None:
        form = self.form
        if form.scanning:
            return
        form.target = self.target.get()
        form.port_range = (
            _read_int(self.start, form.port_range[0]),
            _read_int(self.end, form.port_range[1]),
        )
        labels = {kind.label: kind for kind in ScanType}
        form.scan_type = labels.get(self.scan_type.get(), form.scan_type)
        form.threads = _read_int(self.threads, form.threads)
        form.start_scan()
        self.start.set(form.port_range[0])
        self.end.set(form.port_range[1])
        self.threads.set(form.threads)

    def refresh(self) -> None:
        form = self.form
        self.status.configure(text=form.status)
        self.progress.configure(value=form.progress * 100.0)
        self.stop_button.state(["!disabled"] if form.scanning else ["disabled"])
        rows = list(form.results)
        if rows == self._shown:
            return
        if rows[: len(self._shown)] != self._shown:
            self.tree.delete(*self.tree.get_children())
            self._shown = []
        for port, status in rows[len(self._shown):]:
            self.tree.insert("", "end", values=(port, port_category(port), status))
        self._shown = rows


class _CrafterPanel:
    def __init__(self, parent, form: CrafterForm) -> None:
        import tkinter as tk
        from tkinter import ttk

        self.form = form
        self.frame = ttk.Frame(parent, padding=10)
        ttk.Label(self.frame, text="Packet Crafter", font=("TkDefaultFont", 14, "bold")).grid(
            row=0, column=0, sticky="w"
        )
        self.source_ip = tk.StringVar(value=form.source_ip)
        self.dest_ip = tk.StringVar(value=form.dest_ip)
        self.source_port = tk.IntVar(value=form.source_port)
        self.dest_port = tk.IntVar(value=form.dest_port)
        self.protocol = tk.StringVar(value=form.protocol.label)
        self.count = tk.IntVar(value=form.count)
        self.delay = tk.IntVar(value=form.delay)

        grid = ttk.Frame(self.frame)
        grid.grid(row=1, column=0, sticky="w", pady=5)
        row = 0

        def field_label(text: str) -> None:
            ttk.Label(grid, text=text).grid(row=row, column=0, sticky="nw", padx=(0, 20), pady=5)

        field_label("Source IP:")
        ttk.Entry(grid, textvariable=self.source_ip).grid(row=row, column=1, sticky="w")
        row += 1
        field_label("Destination IP:")
        ttk.Entry(grid, textvariable=self.dest_ip).grid(row=row, column=1, sticky="w")
        row += 1
        field_label("Source Port:")
        ttk.Spinbox(grid, from_=1, to=65535, textvariable=self.source_port, width=8).grid(
            row=row, column=1, sticky="w"
        )
        row += 1
        field_label("Destination Port:")
        ttk.Spinbox(grid, from_=1, to=65535, textvariable=self.dest_port, width=8).grid(
            row=row, column=1, sticky="w"
        )
        row += 1
        field_label("Protocol:")
        ttk.Combobox(
            grid,
            textvariable=self.protocol,
            values=[proto.label for proto in Protocol],
            state="readonly",
        ).grid(row=row, column=1, sticky="w")
        row += 1
        field_label("Payload:")
        self.payload = tk.Text(grid, height=4, width=40)
        self.payload.insert("1.0", form.payload)
        self.payload.grid(row=row, column=1, sticky="w")
        row += 1
        field_label("Packet Count:")
        ttk.Spinbox(grid, from_=1, to=1000, textvariable=self.count, width=8).grid(
            row=row, column=1, sticky="w"
        )
        row += 1
        field_label("Delay (ms):")
        ttk.Spinbox(grid, from_=1, to=5000, textvariable=self.delay, width=8).grid(
            row=row, column=1, sticky="w"
        )

        ttk.Separator(self.frame).grid(row=2, column=0, sticky="ew", pady=5)
        ttk.Button(self.frame, text="Craft and Send", command=self._craft).grid(row=3, column=0, sticky="w")
        ttk.Separator(self.frame).grid(row=4, column=0, sticky="ew", pady=5)
        self.results = tk.Listbox(self.frame)
        self.results.grid(row=5, column=0, sticky="nsew")
        self.frame.rowconfigure(5, weight=1)
        self.frame.columnconfigure(0, weight=1)

    def _craft(self) -> None:
        from tkinter import messagebox

        form = self.form
        if form.crafting:
            return
        form.source_ip = self.source_ip.get()
        form.dest_ip = self.dest_ip.get()
        form.source_port = _read_int(self.source_port, form.source_port)
        form.dest_port = _read_int(self.dest_port, form.dest_port)
        labels = {proto.label: proto for proto in Protocol}
        form.protocol = labels.get(self.protocol.get(), form.protocol)
        form.payload = self.payload.get("1.0", "end-1c")
        form.count = _read_int(self.count, form.count)
        form.delay = _read_int(self.delay, form.delay)
        try:
            form.start_crafting()
        except Exception as exc:
            messagebox.showerror("Packet Crafter", str(exc))
        for var, value in (
            (self.source_port, form.source_port),
            (self.dest_port, form.dest_port),
            (self.count, form.count),
            (self.delay, form.delay),
        ):
            var.set(value)
        self.refresh()

    def refresh(self) -> None:
        shown = list(self.results.get(0, "end"))
        if shown != self.form.results:
            self.results.delete(0, "end")
            for line in self.form.results:
                self.results.insert("end", line)


class _SnifferPanel:
    _COLUMNS = (
        ("timestamp", "Time"),
        ("source", "Source"),
        ("destination", "Destination"),
        ("protocol", "Protocol"),
        ("length", "Length"),
        ("info", "Info"),
    )

    def __init__(self, parent, form: SnifferForm) -> None:
        import tkinter as tk
        from tkinter import ttk

        self.form = form
        self.frame = ttk.Frame(parent, padding=10)
        ttk.Label(self.frame, text="Packet Sniffer", font=("TkDefaultFont", 14, "bold")).grid(
            row=0, column=0, columnspan=2, sticky="w"
        )
        self.interface = tk.StringVar(value=form.interface)
        self.filter = tk.StringVar(value=form.filter)

        grid = ttk.Frame(self.frame)
        grid.grid(row=1, column=0, columnspan=2, sticky="w", pady=5)
        ttk.Label(grid, text="Interface:").grid(row=0, column=0, sticky="w", padx=(0, 20), pady=5)
        ttk.Combobox(grid, textvariable=self.interface, values=form.interfaces, state="readonly").grid(
            row=0, column=1, sticky="w"
        )
        ttk.Label(grid, text="Filter (BPF):").grid(row=1, column=0, sticky="w", padx=(0, 20), pady=5)
        ttk.Entry(grid, textvariable=self.filter).grid(row=1, column=1, sticky="w")

        ttk.Separator(self.frame).grid(row=2, column=0, columnspan=2, sticky="ew", pady=5)
        ttk.Button(self.frame, text="Start Sniffing", command=self._start).grid(row=3, column=0, sticky="w")
        self.stop_button = ttk.Button(self.frame, text="Stop Sniffing", command=form.stop_sniffing)
        self.stop_button.grid(row=3, column=1, sticky="w")
        self.count = ttk.Label(self.frame, text="Packets captured: 0")
        self.count.grid(row=4, column=0, columnspan=2, sticky="w", pady=5)
        self.error = ttk.Label(self.frame, text="", foreground="red")
        self.error.grid(row=5, column=0, columnspan=2, sticky="w")
        ttk.Separator(self.frame).grid(row=6, column=0, columnspan=2, sticky="ew", pady=5)

        self.tree = ttk.Treeview(self.frame, columns=[name for name, _ in self._COLUMNS], show="headings")
        for name, heading in self._COLUMNS:
            self.tree.heading(name, text=heading)
        self.tree.grid(row=7, column=0, columnspan=2, sticky="nsew")
        vertical = ttk.Scrollbar(self.frame, orient="vertical", command=self.tree.yview)
        vertical.grid(row=7, column=2, sticky="ns")
        horizontal = ttk.Scrollbar(self.frame, orient="horizontal", command=self.tree.xview)
        horizontal.grid(row=8, column=0, columnspan=2, sticky="ew")
        self.tree.configure(yscrollcommand=vertical.set, xscrollcommand=horizontal.set)
        self.frame.rowconfigure(7, weight=1)
        self.frame.columnconfigure(1, weight=1)
        self._shown = 0

    def _start(self) -> None:
        form = self.form
        if form.sniffing:
            return
        form.interface = self.interface.get()
        form.filter = self.filter.get()
        form.start_sniffing()

    def refresh(self) -> None:
        form = self.form
        self.count.configure(text=f"Packets captured: {form.packet_count}")
        self.error.configure(text=str(form.error) if form.error else "")
        self.stop_button.state(["!disabled"] if form.sniffing else ["disabled"])
        rows = list(form.results)
        if len(rows) < self._shown:
            self.tree.delete(*self.tree.get_children())
            self._shown = 0
        for packet in rows[self._shown:]:
            self.tree.insert("", "end", values=[getattr(packet, name) for name, _ in self._COLUMNS])
        self._shown = len(rows)


class DeepNetApp:
    """The main window: a header and one tab per tool.

    With ``root`` set to None the application keeps its state without any
    widgets, which is what the tools need when driven from code.
    """

    def __init__(self, root=None):
        self.root = root
        self.scanner = ScannerForm()
        self.crafter = CrafterForm()
        self.sniffer = SnifferForm()
        self.active_tab = Tab.SCANNER
        self._notebook = None
        self._panels: list = []
        if root is not None:
            self._build(root)

    def select_tab(self, tab) -> Tab:
        """Make ``tab`` (a Tab or its caption) the visible one and return it."""
        selected = Tab(tab)
        self.active_tab = selected
        if self._notebook is not None:
            self._notebook.select(list(Tab).index(selected))
        return selected

    def _build(self, root) -> None:
        from tkinter import ttk

        style = ttk.Style(root)
        style.configure("Header.TFrame", background=HEADER_BACKGROUND)
        style.configure("Header.TLabel", background=HEADER_BACKGROUND, foreground="white")

        header = ttk.Frame(root, style="Header.TFrame", padding=8)
        header.pack(side="top", fill="x")
        ttk.Label(header, text=TITLE, style="Header.TLabel", font=("TkDefaultFont", 16, "bold")).pack(
            side="left"
        )
        ttk.Label(header, text=VERSION, style="Header.TLabel").pack(side="right")

        notebook = ttk.Notebook(root)
        notebook.pack(side="top", fill="both", expand=True)
        builders: dict[Tab, Callable] = {
            Tab.SCANNER: lambda: _ScannerPanel(notebook, self.scanner),
            Tab.CRAFTER: lambda: _CrafterPanel(notebook, self.crafter),
            Tab.SNIFFER: lambda: _SnifferPanel(notebook, self.sniffer),
        }
        for tab in Tab:
            panel = builders[tab]()
            notebook.add(panel.frame, text=tab.label)
            self._panels.append(panel)
        notebook.bind("<<NotebookTabChanged>>", self._on_tab_changed)
        self._notebook = notebook
        self.select_tab(self.active_tab)
        root.after(REFRESH_MS, self._tick)

    def _on_tab_changed(self, _event) -> None:
        index = self._notebook.index(self._notebook.select())
        self.active_tab = list(Tab)[index]

    def _tick(self) -> None:
        for panel in self._panels:
            panel.refresh()
        self.root.after(REFRESH_MS, self._tick)


def main(argv=None) -> int:
    """Open the main window and run until it is closed."""
    parser = argparse.ArgumentParser(prog="deepnet", description=TITLE)
    parser.parse_args(argv)

    import tkinter as tk

    root = tk.Tk()
    root.title(TITLE)
    root.geometry(f"{WINDOW_SIZE[0]}x{WINDOW_SIZE[1]}")
    DeepNetApp(root)
    root.mainloop()
    return 0