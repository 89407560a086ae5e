"""
Flashing using esptool

esptool is an external collaborator. It is searched in this order:
  * 'esptool' on PATH
  * 'esptool.py' on PATH
  * a local clone of the esptool repo, invoked using this python interpreter.
    The repo is cloned if missing.
"""

from __future__ import annotations

import dataclasses
import logging
import pathlib
import shutil
import subprocess
import sys

from .util_baseclasses import EsptoolNotFoundException
from .util_cached_git_repo import CachedGitRepo
from .util_constants import ESPTOOL_EXECUTABLES, ESPTOOL_SCRIPT
from .util_firmware_spec import ResolvedFirmware
from .util_run_config import FlashConfig, RunConfiguration
from .util_subprocess import SubprocessExitCodeException, subprocess_run

logger = logging.getLogger(__file__)


@dataclasses.dataclass(frozen=True, repr=True)
class EsptoolCommand:
    """
    One invocation of esptool.
    """

    tool: tuple[str, ...]
    """
    Examples:
    ('esptool',)
    ('/usr/bin/python3', 'esptool/esptool.py')
    """
    args: tuple[str, ...]
    "('--chip', 'auto', '--port', '/dev/ttyUSB0', '--baud', '115200', 'erase-flash')"
    success_returncodes: tuple[int, ...] = (0,)

    def __post_init__(self) -> None:
        assert isinstance(self.tool, tuple)
        assert isinstance(self.args, tuple)
        assert len(self.tool) >= 1

    @property
    def argv(self) -> list[str]:
        return [*self.tool, *self.args]

    def run(self, cwd: pathlib.Path) -> None:
        """
        Blocks till esptool terminates.
        The output of esptool goes directly to the terminal.
        Raises SubprocessExitCodeException if esptool fails.
        """
        subprocess_run(
            args=self.argv,
            cwd=cwd,
            timeout_s=None,
            success_returncodes=list(self.success_returncodes),
            capture_output=False,
        )


class EsptoolLocator:
    def __init__(self, config: FlashConfig) -> None:
        assert isinstance(config, FlashConfig)
        self.directory_esptool = config.directory_esptool
        self.git_repo = CachedGitRepo(
            directory=config.directory_esptool,
            git_spec=config.esptool_git_spec,
            filename_marker=ESPTOOL_SCRIPT,
        )

    @staticmethod
    def find_installed() -> str | None:
        for executable in ESPTOOL_EXECUTABLES:
            if shutil.which(executable) is not None:
                return executable
        return None

    def locate(self) -> tuple[str, ...]:
        """
        Return the command prefix to start esptool.
        Clones esptool if it is not installed.
        """
        executable = self.find_installed()
        if executable is not None:
            logger.debug(f"Using installed {executable}")
            return (executable,)

        if not self.git_repo.is_cloned:
            print("Cloning esptool repository...")
            try:
                self.git_repo.clone()
            except (
                SubprocessExitCodeException,
                subprocess.TimeoutExpired,
                ValueError,
            ) as e:
                raise EsptoolNotFoundException(
                    f"esptool is not installed and cloning {self.git_repo.git_spec.git_spec} failed: {e}"
                ) from e

        return (sys.executable, str(self.directory_esptool / ESPTOOL_SCRIPT))


def esptool_erase(
    tool: tuple[str, ...],
    port: str,
    run_config: RunConfiguration,
) -> EsptoolCommand:
    return EsptoolCommand(
        tool=tool,
        args=(
            "--chip",
            run_config.chip,
            "--port",
            port,
            "--baud",
            str(run_config.baud),
            "erase-flash",
        ),
    )


def esptool_write(
    tool: tuple[str, ...],
    port: str,
    run_config: RunConfiguration,
    firmware: ResolvedFirmware,
) -> EsptoolCommand:
    return EsptoolCommand(
        tool=tool,
        args=(
            "--chip",
            run_config.chip,
            "--port",
            port,
            "--baud",
            str(run_config.baud),
            "--before",
            run_config.before,
            "--after",
            run_config.after,
            "write-flash",
            "-z",
            "--flash-size",
            run_config.flash_size,
            run_config.flash_offset_text,
            str(firmware.filename),
        ),
    )


def flash_firmware(
    tool: tuple[str, ...],
    port: str,
    run_config: RunConfiguration,
    firmware: ResolvedFirmware,
    cwd: pathlib.Path,
) -> None:
    """
    Erase the flash and write the firmware.
    The firmware is not written if erasing fails.
    """
    assert isinstance(tool, tuple)
    assert isinstance(port, str)
    assert isinstance(run_config, RunConfiguration)
    assert isinstance(firmware, ResolvedFirmware)

    print("")
    print("Erasing flash memory...")
    esptool_erase(tool=tool, port=port, run_config=run_config).run(cwd=cwd)

    print("")
    print(f"Flashing {firmware.display_name} firmware to the device...")
    esptool_write(
        tool=tool, port=port, run_config=run_config, firmware=firmware
    ).run(cwd=cwd)
