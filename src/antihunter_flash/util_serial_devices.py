"""
Finds the USB serial devices an ESP32 may be connected to.

Every host type has its own naming conventions, each is
implemented by a DeviceListerABC subclass.
"""

from __future__ import annotations

import abc
import logging
import os
import pathlib
import re
import sys
import typing

import typing_extensions

from serial.tools import list_ports

from .util_baseclasses import NoSerialDeviceException
from .util_constants import RULER_LONG
from .util_menu import prompt_selection, render_menu

logger = logging.getLogger(__file__)

DIRECTORY_DEV = pathlib.Path("/dev")


class DeviceListerABC(abc.ABC):
    LABEL = "dummy"

    def __init__(self, directory_dev: pathlib.Path = DIRECTORY_DEV) -> None:
        assert isinstance(directory_dev, pathlib.Path)
        self.directory_dev = directory_dev

    @abc.abstractmethod
    def list_devices(self) -> list[str]:
        """
        Return the devices, for example ['/dev/ttyUSB0', '/dev/ttyACM0'].
        """


class DeviceListerLinux(DeviceListerABC):
    LABEL = "linux"

    PATTERNS = ("ttyUSB*", "ttyACM*")
    """
    ttyUSB: usb-serial bridges like CP2102 or CH340
    ttyACM: USB CDC ACM, for example the ESP32-S3 native USB
    """

    DIRECTORIES_FALLBACK = ("serial/by-id", "serial/by-path")
    """
    udev aliases, used if no tty is found.
    """

    @typing_extensions.override
    def list_devices(self) -> list[str]:
        devices = sorted(
            device
            for pattern in self.PATTERNS
            for device in _glob_sorted(self.directory_dev, pattern)
        )
        if len(devices) > 0:
            return devices

        for directory_fallback in self.DIRECTORIES_FALLBACK:
            directory = self.directory_dev / directory_fallback
            if not directory.is_dir():
                continue
            devices = _glob_sorted(directory, "*")
            if len(devices) > 0:
                logger.debug(f"Devices found in fallback directory {directory}")
                return devices

        return devices


class DeviceListerDarwin(DeviceListerABC):
    LABEL = "darwin"

    RE_USB_SERIAL = re.compile(r"usb|serial|usbmodem", re.IGNORECASE)
    """
    Examples:
    /dev/cu.usbserial-0001
    /dev/cu.usbmodem14101
    /dev/cu.SLAB_USBtoUART
    """

    @typing_extensions.override
    def list_devices(self) -> list[str]:
        return [
            device
            for device in _glob_sorted(self.directory_dev, "cu.*")
            if self.RE_USB_SERIAL.search(pathlib.Path(device).name) is not None
        ]


class DeviceListerNone(DeviceListerABC):
    """
    Hosts we do not know how to scan.
    """

    LABEL = "none"

    @typing_extensions.override
    def list_devices(self) -> list[str]:
        return []


def _glob_sorted(directory: pathlib.Path, pattern: str) -> list[str]:
    return sorted(str(filename) for filename in directory.glob(pattern))


def get_dict_device_listers() -> dict[str, type[DeviceListerABC]]:
    return {cls.LABEL: cls for cls in (DeviceListerLinux, DeviceListerDarwin)}


def device_lister_factory(platform: str = sys.platform) -> DeviceListerABC:
    """
    Example 'platform': linux, darwin, win32
    """
    for label, cls_device_lister in get_dict_device_listers().items():
        if platform.startswith(label):
            return cls_device_lister()
    logger.debug(f"No device lister for platform '{platform}'")
    return DeviceListerNone()


def get_descriptions() -> dict[str, str]:
    """
    Return the descriptions of the serial ports as known by pyserial.
    Example: {'/dev/ttyUSB0': 'CP2102 USB to UART Bridge Controller'}
    """
    descriptions: dict[str, str] = {}
    for port in list_ports.comports():
        if port.description in (None, "", "n/a"):
            continue
        descriptions[port.device] = port.description
    return descriptions


def device_text(device: str, descriptions: dict[str, str]) -> str:
    """
    Example: /dev/serial/by-id/usb-Silicon_Labs_CP2102-if00 is a symlink to /dev/ttyUSB0.
    The description is looked up for both.
    """
    description = descriptions.get(device)
    if description is None:
        description = descriptions.get(os.path.realpath(device))
    if description is None:
        return device
    return f"{device} ({description})"


def select_device(device_lister: DeviceListerABC) -> str:
    """
    Return the device selected by the operator.
    """
    assert isinstance(device_lister, DeviceListerABC)

    print("")
    print("Searching for USB serial devices...")
    devices = device_lister.list_devices()
    if len(devices) == 0:
        raise NoSerialDeviceException(
            "No USB serial devices found.\nPlease check your connection and try again."
        )

    descriptions = get_descriptions()
    print("")
    print(RULER_LONG)
    print("Found USB serial devices:")
    print(RULER_LONG)
    render_menu([device_text(device, descriptions) for device in devices])
    print("")

    selection = prompt_selection("Select USB serial device number", count=len(devices))
    device = devices[selection - 1]
    print("")
    print(f"Selected USB serial device: {device}")
    return device
