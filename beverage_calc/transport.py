"""Printer transports: the only code that talks to printer hardware."""

from __future__ import annotations

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from beverage_calc.config import (
    FONT_OVERRIDE_ENV,
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_SERIAL_TIMEOUT,
    PRINTER_WIDTH_PX,
    TRANSPORT_DUMMY,
    resolve_baudrate,
    resolve_render_mode,
    resolve_transport_kind,
)
from beverage_calc.models import DeviceDescriptor

log = logging.getLogger(__name__)

_MONO_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/noto/NotoSansMono-Regular.ttf",
    "/System/Library/Fonts/Menlo.ttc",
)
_LINE_SPACING_PX = 4
# Windows exposes paired SPP devices under the BTHENUM bus.
_BLUETOOTH_HWID_MARKERS = ("BTHENUM", "BLUETOOTH")

DEMO_DEVICES: tuple[DeviceDescriptor, ...] = (
    DeviceDescriptor("00:11:22:33:44:55", "Demo Thermal Printer"),
)


class PrinterTransport(ABC):
    """Asynchronous channel to one physical printer at a time."""

    @abstractmethod
    async def initialize(self) -> None:
        """Raise if the radio or driver stack is not ready."""

    @abstractmethod
    async def list_devices(self) -> list[DeviceDescriptor]:
        ...

    @abstractmethod
    async def connect(self, device_id: str) -> None:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

    @abstractmethod
    async def send_text(self, text: str) -> None:
        ...


def resolve_printer_font_path() -> str:
    """
    Resolve a monospace font for image-mode printing.

    Resolution order:
    1. BEVERAGE_CALC_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux/macOS fallbacks
    """
    env_override = os.environ.get(FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_MONO_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {FONT_OVERRIDE_ENV} to a valid monospace .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def render_receipt_image(text: str, font: object) -> object:
    """Rasterize receipt text into a 1-bit image as wide as the print head."""
    from PIL import Image, ImageDraw

    lines = text.rstrip("\n").split("\n")
    probe = Image.new("1", (1, 1), color=1)
    probe_draw = ImageDraw.Draw(probe)
    # "Hg" spans ascender to descender, so every line gets the same slot.
    bbox = probe_draw.textbbox((0, 0), "Hg", font=font)
    line_height = (bbox[3] - bbox[1]) + _LINE_SPACING_PX

    img = Image.new("1", (PRINTER_WIDTH_PX, max(1, line_height * len(lines))), color=1)
    draw = ImageDraw.Draw(img)
    for idx, line in enumerate(lines):
        if line:
            draw.text((PRINTER_LEFT_INDENT_PX, idx * line_height - bbox[1]), line, font=font, fill=0)
    return img


def check_printer_dependencies(render_mode: str | None = None) -> tuple[bool, str]:
    """Check whether printer dependencies are importable."""
    try:
        from escpos.printer import Serial  # noqa: F401
        from serial.tools import list_ports  # noqa: F401

        if (render_mode or resolve_render_mode()) == "image":
            from PIL import ImageFont

            ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def _is_bluetooth_port(port: object) -> bool:
    device = str(getattr(port, "device", "") or "")
    if "rfcomm" in device.lower():
        return True
    description = str(getattr(port, "description", "") or "").lower()
    hwid = str(getattr(port, "hwid", "") or "").upper()
    return "bluetooth" in description or any(marker in hwid for marker in _BLUETOOTH_HWID_MARKERS)


def _port_display_name(port: object) -> str:
    description = str(getattr(port, "description", "") or "").strip()
    if description and description.lower() != "n/a":
        return description
    return str(getattr(port, "name", "") or "")


class EscposSerialTransport(PrinterTransport):
    """Bluetooth SPP printer bound to a serial port, driven with ESC/POS.

    python-escpos and pyserial are blocking, so each call runs in a worker
    thread and the event loop stays responsive while the printer works.
    """

    def __init__(self, baudrate: int | None = None, render_mode: str | None = None) -> None:
        self.baudrate = baudrate or resolve_baudrate()
        self.render_mode = render_mode or resolve_render_mode()
        self._printer = None
        self._font = None

    async def initialize(self) -> None:
        ok, message = check_printer_dependencies(self.render_mode)
        if not ok:
            raise RuntimeError(message)

    async def list_devices(self) -> list[DeviceDescriptor]:
        return await asyncio.to_thread(self._scan_ports)

    async def connect(self, device_id: str) -> None:
        self._printer = await asyncio.to_thread(self._open, device_id)

    async def disconnect(self) -> None:
        printer, self._printer = self._printer, None
        if printer is not None:
            await asyncio.to_thread(printer.close)

    async def send_text(self, text: str) -> None:
        if self._printer is None:
            raise RuntimeError("No printer is bound")
        await asyncio.to_thread(self._print, self._printer, text)

    def _scan_ports(self) -> list[DeviceDescriptor]:
        from serial.tools import list_ports

        devices = [
            DeviceDescriptor(device_id=port.device, display_name=_port_display_name(port))
            for port in sorted(list_ports.comports(), key=lambda p: p.device)
            if _is_bluetooth_port(port)
        ]
        log.debug("scan_ports found=%s", [device.device_id for device in devices])
        return devices

    def _open(self, device_id: str) -> object:
        from escpos.printer import Serial

        printer = Serial(devfile=device_id, baudrate=self.baudrate, timeout=PRINTER_SERIAL_TIMEOUT)
        printer.open()
        log.debug("serial_open devfile=%s baudrate=%d", device_id, self.baudrate)
        return printer

    def _print(self, printer: object, text: str) -> None:
        if self.render_mode == "image":
            printer.image(render_receipt_image(text, self._load_font()))
        else:
            printer.text(text)
        printer.cut()

    def _load_font(self) -> object:
        if self._font is None:
            from PIL import ImageFont

            self._font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
        return self._font


class DummyTransport(PrinterTransport):
    """In-memory ESC/POS printer for demo mode; keeps every printed job."""

    def __init__(self, devices: tuple[DeviceDescriptor, ...] | list[DeviceDescriptor] = DEMO_DEVICES) -> None:
        self.devices = list(devices)
        self.device_id: str | None = None
        self.jobs: list[bytes] = []
        self._printer = None

    async def initialize(self) -> None:
        return None

    async def list_devices(self) -> list[DeviceDescriptor]:
        return list(self.devices)

    async def connect(self, device_id: str) -> None:
        from escpos.printer import Dummy

        self._printer = Dummy()
        self.device_id = device_id

    async def disconnect(self) -> None:
        self._printer = None
        self.device_id = None

    async def send_text(self, text: str) -> None:
        if self._printer is None:
            raise RuntimeError("No printer is bound")
        self._printer.text(text)
        self._printer.cut()
        self.jobs.append(self._printer.output)
        self._printer.clear()


def build_transport(kind: str | None = None) -> PrinterTransport:
    kind = kind or resolve_transport_kind()
    if kind == TRANSPORT_DUMMY:
        return DummyTransport()
    return EscposSerialTransport()
