"""Printer error taxonomy.

Every failure the connection manager reports is one of these. None of them is
fatal; the manager's state is consistent again by the time one is raised.
"""

from __future__ import annotations


class PrinterError(Exception):
    """Base class for recoverable printer failures."""


class PermissionDenied(PrinterError):
    pass


class ScanFailed(PrinterError):
    pass


class ConnectFailed(PrinterError):
    pass


class DisconnectFailed(PrinterError):
    """Logged and swallowed: a failed disconnect still ends disconnected."""


class NotConnected(PrinterError):
    pass


class InvalidState(PrinterError):
    pass


class PrintFailed(PrinterError):
    pass
