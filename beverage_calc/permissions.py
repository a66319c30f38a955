"""Permission gates checked before a printer scan."""

from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod

log = logging.getLogger(__name__)

# Groups that own /dev/ttyS*, /dev/ttyUSB* and /dev/rfcomm* on common distros.
SERIAL_GROUPS = ("dialout", "uucp", "lock")


class PermissionGate(ABC):
    @abstractmethod
    async def request(self) -> bool:
        """Return True when the app may use the Bluetooth serial ports."""


class StaticPermissionGate(PermissionGate):
    def __init__(self, granted: bool = True) -> None:
        self.granted = granted

    async def request(self) -> bool:
        return self.granted


class SerialAccessGate(PermissionGate):
    """Grant access when the current user can open serial devices.

    On POSIX that means root or membership in one of ``SERIAL_GROUPS``.
    Other platforms have no such group and are always granted.
    """

    def __init__(self, groups: tuple[str, ...] = SERIAL_GROUPS) -> None:
        self.groups = groups

    async def request(self) -> bool:
        if sys.platform.startswith("win") or not hasattr(os, "getgroups"):
            return True
        if os.geteuid() == 0:
            return True

        import grp

        member_gids = set(os.getgroups())
        for name in self.groups:
            try:
                if grp.getgrnam(name).gr_gid in member_gids:
                    return True
            except KeyError:
                continue
        log.info("serial access denied groups=%s", ",".join(self.groups))
        return False
