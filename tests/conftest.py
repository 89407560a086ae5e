from __future__ import annotations

import io
import typing

import typing_extensions

import pytest
from serial.tools import list_ports

from antihunter_flash.util_serial_devices import DeviceListerABC


class DeviceListerFake(DeviceListerABC):
    LABEL = "fake"

    def __init__(self, devices: list[str]) -> None:
        super().__init__()
        self.devices = devices
        self.call_count = 0

    @typing_extensions.override
    def list_devices(self) -> list[str]:
        self.call_count += 1
        return list(self.devices)


@pytest.fixture
def stdin(monkeypatch: pytest.MonkeyPatch) -> typing.Callable[[str], None]:
    """
    Feeds the given text to the prompts.
    """

    def feed(text: str) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(text))

    return feed


@pytest.fixture(autouse=True)
def no_comports(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Do not query the serial ports of the machine running the tests.
    """
    monkeypatch.setattr(list_ports, "comports", lambda: [])


@pytest.fixture
def fake_device_lister() -> typing.Callable[[list[str]], DeviceListerFake]:
    return DeviceListerFake
