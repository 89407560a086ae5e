from __future__ import annotations

import logging
import pathlib

import click

from ..util_constants import BANNER, RULER_LONG, RULER_SHORT
from ..util_esptool import EsptoolLocator, flash_firmware
from ..util_firmware_spec import resolve_firmware
from ..util_run_config import FlashConfig
from ..util_serial_devices import DeviceListerABC, select_device

logger = logging.getLogger(__file__)


def print_banner() -> None:
    click.clear()
    print(BANNER)
    print("")
    print(RULER_SHORT)
    print("Unified for multiple ESP32S3 configs")
    print(RULER_SHORT)


def do_flash(
    config: FlashConfig,
    custom_file: pathlib.Path | None,
    device_lister: DeviceListerABC,
    directory_work: pathlib.Path,
) -> None:
    """
    Select firmware, select device, erase and flash.

    directory_work: The catalog firmware is downloaded to this directory.
    Raises FlashAppExitException or SubprocessExitCodeException on failure.
    """
    assert isinstance(config, FlashConfig)
    assert isinstance(custom_file, pathlib.Path | None)
    assert isinstance(device_lister, DeviceListerABC)
    assert isinstance(directory_work, pathlib.Path)

    print_banner()

    firmware = resolve_firmware(
        config=config,
        custom_file=custom_file,
        directory=directory_work,
    )
    logger.debug(f"Firmware: {firmware}")

    port = select_device(device_lister=device_lister)

    tool = EsptoolLocator(config=config).locate()
    logger.debug(f"esptool: {' '.join(tool)}")

    flash_firmware(
        tool=tool,
        port=port,
        run_config=config.run,
        firmware=firmware,
        cwd=directory_work,
    )

    print("")
    print(RULER_LONG)
    print("Firmware flashing complete!")
    print(RULER_LONG)

    firmware.cleanup()

    print("Done.")
