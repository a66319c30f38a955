import asyncio
from types import SimpleNamespace

import pytest
from PIL import ImageFont

from beverage_calc import transport as transport_module
from beverage_calc.models import DeviceDescriptor
from beverage_calc.transport import (
    DEMO_DEVICES,
    DummyTransport,
    EscposSerialTransport,
    build_transport,
    check_printer_dependencies,
    render_receipt_image,
    resolve_printer_font_path,
)


class RecordingPrinter:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def text(self, txt):
        self.calls.append(("text", txt))

    def image(self, img):
        self.calls.append(("image", img))

    def cut(self):
        self.calls.append(("cut",))

    def close(self):
        self.calls.append(("close",))


def _port(device, description="n/a", hwid="n/a", name=None):
    return SimpleNamespace(device=device, description=description, hwid=hwid, name=name or device.rsplit("/", 1)[-1])


def test_dummy_transport_records_escpos_output():
    async def run():
        dummy = DummyTransport()
        await dummy.initialize()
        assert await dummy.list_devices() == list(DEMO_DEVICES)
        await dummy.connect(DEMO_DEVICES[0].device_id)
        await dummy.send_text("Grand Total: PHP 215.00\n")
        await dummy.send_text("second\n")
        await dummy.disconnect()
        return dummy

    dummy = asyncio.run(run())
    assert len(dummy.jobs) == 2
    assert b"PHP 215.00" in dummy.jobs[0]
    assert b"second" in dummy.jobs[1]
    assert b"PHP 215.00" not in dummy.jobs[1]
    assert dummy.device_id is None


def test_dummy_transport_requires_connection():
    with pytest.raises(RuntimeError):
        asyncio.run(DummyTransport().send_text("hello"))


def test_serial_scan_keeps_only_bluetooth_ports(monkeypatch):
    ports = [
        _port("/dev/ttyS0"),
        _port("/dev/rfcomm0"),
        _port("COM7", description="Standard Serial over Bluetooth link (COM7)", hwid="BTHENUM\\{0000}"),
        _port("/dev/ttyUSB0", description="CP2102 USB to UART", hwid="USB VID:PID=10C4:EA60"),
    ]
    from serial.tools import list_ports

    monkeypatch.setattr(list_ports, "comports", lambda: ports)
    devices = asyncio.run(EscposSerialTransport(baudrate=9600, render_mode="text").list_devices())
    assert devices == [
        DeviceDescriptor("/dev/rfcomm0", "rfcomm0"),
        DeviceDescriptor("COM7", "Standard Serial over Bluetooth link (COM7)"),
    ]


def test_serial_send_text_prints_and_cuts():
    serial = EscposSerialTransport(baudrate=9600, render_mode="text")
    printer = RecordingPrinter()
    serial._printer = printer
    asyncio.run(serial.send_text("hello\n"))
    assert printer.calls == [("text", "hello\n"), ("cut",)]


def test_serial_image_mode_rasterizes(monkeypatch):
    serial = EscposSerialTransport(baudrate=9600, render_mode="image")
    serial._font = ImageFont.load_default()
    printer = RecordingPrinter()
    serial._printer = printer
    asyncio.run(serial.send_text("line one\nline two\n"))
    kind, img = printer.calls[0]
    assert kind == "image"
    assert img.mode == "1"
    assert printer.calls[-1] == ("cut",)


def test_serial_disconnect_closes_printer():
    serial = EscposSerialTransport(baudrate=9600, render_mode="text")
    printer = RecordingPrinter()
    serial._printer = printer
    asyncio.run(serial.disconnect())
    asyncio.run(serial.disconnect())
    assert printer.calls == [("close",)]


def test_serial_send_without_connection_fails():
    with pytest.raises(RuntimeError):
        asyncio.run(EscposSerialTransport(baudrate=9600, render_mode="text").send_text("x"))


def test_render_receipt_image_fills_print_head_width():
    img = render_receipt_image("Coke  3  45.00\n\nTotal\n", ImageFont.load_default())
    assert img.size[0] == transport_module.PRINTER_WIDTH_PX
    assert img.size[1] > 0
    # Something was drawn (1-bit images are 0 for black).
    assert img.getextrema()[0] == 0


def test_font_override_env_wins(tmp_path, monkeypatch):
    font_file = tmp_path / "mono.ttf"
    font_file.write_bytes(b"not really a font")
    monkeypatch.setenv("BEVERAGE_CALC_PRINTER_FONT_PATH", str(font_file))
    assert resolve_printer_font_path() == str(font_file)


def test_font_resolution_error_lists_candidates(monkeypatch):
    monkeypatch.delenv("BEVERAGE_CALC_PRINTER_FONT_PATH", raising=False)
    monkeypatch.setattr(transport_module, "PRINTER_FONT_PATH", "/nonexistent/font.ttf")
    monkeypatch.setattr(transport_module, "_MONO_FONT_FALLBACKS", ("/nonexistent/other.ttf",))
    with pytest.raises(RuntimeError, match="BEVERAGE_CALC_PRINTER_FONT_PATH"):
        resolve_printer_font_path()


def test_text_mode_dependencies_available():
    ok, message = check_printer_dependencies("text")
    assert ok, message


def test_build_transport_kinds(monkeypatch):
    assert isinstance(build_transport("dummy"), DummyTransport)
    monkeypatch.setenv("BEVERAGE_CALC_TRANSPORT", "dummy")
    assert isinstance(build_transport(), DummyTransport)
    monkeypatch.setenv("BEVERAGE_CALC_TRANSPORT", "serial")
    assert isinstance(build_transport(), EscposSerialTransport)
