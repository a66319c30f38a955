import asyncio
import os
import sys

import pytest

from beverage_calc.permissions import SerialAccessGate, StaticPermissionGate


def test_static_gate():
    assert asyncio.run(StaticPermissionGate().request()) is True
    assert asyncio.run(StaticPermissionGate(granted=False).request()) is False


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX groups")
def test_serial_gate_grants_root(monkeypatch):
    monkeypatch.setattr(os, "geteuid", lambda: 0)
    assert asyncio.run(SerialAccessGate(groups=("no-such-group-xyz",)).request()) is True


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX groups")
def test_serial_gate_denies_without_group(monkeypatch):
    monkeypatch.setattr(os, "geteuid", lambda: 1000)
    monkeypatch.setattr(os, "getgroups", lambda: [])
    assert asyncio.run(SerialAccessGate(groups=("no-such-group-xyz",)).request()) is False


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX groups")
def test_serial_gate_grants_group_member(monkeypatch):
    import grp

    monkeypatch.setattr(os, "geteuid", lambda: 1000)
    monkeypatch.setattr(os, "getgroups", lambda: [4242])
    monkeypatch.setattr(grp, "getgrnam", lambda name: type("G", (), {"gr_gid": 4242})())
    assert asyncio.run(SerialAccessGate(groups=("dialout",)).request()) is True
