"""
The configuration of a flashing run.

All values are constant for a run: 'FlashConfig.factory()' builds them once
and the result is handed to the firmware resolver and to the esptool orchestration.
"""

from __future__ import annotations

import dataclasses
import os
import pathlib
from urllib.parse import urlparse

from .util_constants import (
    BAUD_DEFAULT,
    ENV_ANTIHUNTER_FLASH_ESPTOOL_DIR,
    ENV_ANTIHUNTER_FLASH_ESPTOOL_GIT,
    ESPTOOL_DIRECTORY_DEFAULT,
    ESPTOOL_GIT_SPEC_DEFAULT,
    FLASH_OFFSET_APP,
)


@dataclasses.dataclass(frozen=True, repr=True)
class FirmwareCatalogEntry:
    label: str
    "AntiHunter - v5"
    url: str
    "https://github.com/lukeswitz/AntiHunter/raw/refs/heads/main/Dist/antihunter_v5.bin"

    def __post_init__(self) -> None:
        assert isinstance(self.label, str)
        assert isinstance(self.url, str)

    @property
    def filename(self) -> str:
        """
        The last segment of the url path.
        Example: antihunter_v5.bin
        """
        parse_result = urlparse(self.url)
        _directory, _separator, _filename = parse_result.path.rpartition("/")
        if _filename == "":
            raise ValueError(f"{self.url}: url does not end with a filename!")
        return _filename


FIRMWARE_CATALOG = (
    FirmwareCatalogEntry(
        label="AntiHunter - v5",
        url="https://github.com/lukeswitz/AntiHunter/raw/refs/heads/main/Dist/antihunter_v5.bin",
    ),
)


@dataclasses.dataclass(frozen=True, repr=True)
class RunConfiguration:
    """
    The esptool parameters used for 'erase-flash' and 'write-flash'.
    """

    chip: str = "auto"
    baud: int = BAUD_DEFAULT
    flash_offset: int = FLASH_OFFSET_APP
    "The application partition, 0x10000"
    before: str = "default-reset"
    after: str = "hard-reset"
    flash_size: str = "detect"

    @property
    def flash_offset_text(self) -> str:
        "0x10000"
        return f"0x{self.flash_offset:X}"


@dataclasses.dataclass(frozen=True, repr=True)
class FlashConfig:
    catalog: tuple[FirmwareCatalogEntry, ...]
    run: RunConfiguration
    esptool_git_spec: str
    "https://github.com/alphafox02/esptool"
    directory_esptool: pathlib.Path
    "The local clone of esptool, used if esptool is not installed"

    def __post_init__(self) -> None:
        assert isinstance(self.catalog, tuple)
        assert isinstance(self.run, RunConfiguration)
        assert isinstance(self.esptool_git_spec, str)
        assert isinstance(self.directory_esptool, pathlib.Path)
        labels = [entry.label for entry in self.catalog]
        if len(labels) != len(set(labels)):
            raise ValueError(f"Firmware labels must be unique: {labels}")

    @property
    def labels(self) -> list[str]:
        return [entry.label for entry in self.catalog]

    def get_entry(self, label: str) -> FirmwareCatalogEntry:
        for entry in self.catalog:
            if entry.label == label:
                return entry
        raise ValueError(f"Unknown firmware '{label}'! Expected one of {self.labels}.")

    @staticmethod
    def factory() -> FlashConfig:
        try:
            directory_esptool = pathlib.Path(os.environ[ENV_ANTIHUNTER_FLASH_ESPTOOL_DIR])
        except KeyError:
            directory_esptool = pathlib.Path.cwd() / ESPTOOL_DIRECTORY_DEFAULT

        return FlashConfig(
            catalog=FIRMWARE_CATALOG,
            run=RunConfiguration(),
            esptool_git_spec=os.environ.get(
                ENV_ANTIHUNTER_FLASH_ESPTOOL_GIT, ESPTOOL_GIT_SPEC_DEFAULT
            ),
            directory_esptool=directory_esptool,
        )
