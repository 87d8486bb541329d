import pytest

from deepnet.app import DeepNetApp, Tab, main
from deepnet.crafter import Protocol
from deepnet.scanner import ScanType


@pytest.fixture
def app():
    return DeepNetApp(None)


def test_tab_captions_follow_display_order(app):
    captions = [app.select_tab(tab).label for tab in Tab]
    assert captions == ["Port Scanner", "Packet Crafter", "Packet Sniffer"]


def test_scanner_tab_is_active_at_start(app):
    assert app.active_tab is Tab.SCANNER


def test_select_tab_by_member(app):
    assert app.select_tab(Tab.SNIFFER) is Tab.SNIFFER
    assert app.active_tab is Tab.SNIFFER


def test_select_tab_by_caption(app):
    assert app.select_tab("Packet Crafter") is Tab.CRAFTER
    assert app.active_tab is Tab.CRAFTER


def test_select_unknown_tab_raises_and_keeps_current(app):
    app.select_tab(Tab.CRAFTER)
    with pytest.raises(ValueError):
        app.select_tab("Firewall")
    assert app.active_tab is Tab.CRAFTER


def test_every_tab_can_be_selected_in_turn(app):
    for tab in Tab:
        assert app.select_tab(tab.label) is tab
        assert app.active_tab is tab


def test_scanner_form_defaults(app):
    assert app.scanner.target == "127.0.0.1"
    assert app.scanner.port_range == (1, 1024)
    assert app.scanner.scan_type is ScanType.TCP_SYN
    assert app.scanner.threads == 100
    assert app.scanner.status == "Ready"
    assert app.scanner.scanning is False


def test_crafter_form_defaults(app):
    assert app.crafter.source_ip == "192.168.1.100"
    assert app.crafter.dest_ip == "192.168.1.1"
    assert app.crafter.source_port == 54321
    assert app.crafter.dest_port == 80
    assert app.crafter.protocol is Protocol.TCP
    assert app.crafter.payload == "DeepNet Packet"
    assert (app.crafter.count, app.crafter.delay) == (5, 100)
    assert app.crafter.results == []


def test_sniffer_form_starts_idle(app):
    assert app.sniffer.sniffing is False
    assert app.sniffer.packet_count == 0
    assert app.sniffer.results == []
    if app.sniffer.interfaces:
        assert app.sniffer.interface == app.sniffer.interfaces[0]
    else:
        assert app.sniffer.interface == ""


def test_apps_do_not_share_forms():
    first = DeepNetApp(None)
    second = DeepNetApp(None)
    first.crafter.results.append("line")
    assert second.crafter.results == []


def test_main_help_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0
    assert "DeepNet - Advanced Network Toolkit" in capsys.readouterr().out


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit) as excinfo:
        main(["--bogus"])
    assert excinfo.value.code == 2