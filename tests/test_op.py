"""
End to end tests of the command line.
Network, serial devices and esptool are replaced by fakes.
"""

from __future__ import annotations

import dataclasses
import pathlib
import shutil
import typing

import pytest
from typer.testing import CliRunner

from antihunter_flash import util_esptool, util_firmware_spec
from antihunter_flash.scripts import op
from antihunter_flash.util_constants import ExitCode
from antihunter_flash.util_subprocess import SubprocessExitCodeException

DEVICES = ["/dev/ttyUSB0", "/dev/ttyUSB1"]
FILENAME_DOWNLOAD = "antihunter_v5.bin"


@dataclasses.dataclass
class Fakes:
    downloads: list[str] = dataclasses.field(default_factory=list)
    esptool_calls: list[list[str]] = dataclasses.field(default_factory=list)
    esptool_fail_on: str | None = None
    device_lister: typing.Any = None

    @property
    def device_scans(self) -> int:
        return self.device_lister.call_count


@pytest.fixture
def fakes(
    tmp_path: pathlib.Path,
    monkeypatch: pytest.MonkeyPatch,
    fake_device_lister,
) -> Fakes:
    monkeypatch.chdir(tmp_path)
    fakes = Fakes()

    def urlretrieve(url: str, filename: pathlib.Path):
        fakes.downloads.append(url)
        pathlib.Path(filename).write_bytes(b"\xe9firmware")
        return str(filename), None

    def subprocess_run(args: list[str], cwd: pathlib.Path, **kwargs) -> None:
        fakes.esptool_calls.append(args)
        if fakes.esptool_fail_on is not None and fakes.esptool_fail_on in args:
            raise SubprocessExitCodeException(
                f"EXEC failed with returncode=2: {' '.join(args)}"
            )

    fakes.device_lister = fake_device_lister(list(DEVICES))

    monkeypatch.setattr(util_firmware_spec, "urlretrieve", urlretrieve)
    monkeypatch.setattr(util_esptool, "subprocess_run", subprocess_run)
    monkeypatch.setattr(op, "device_lister_factory", lambda: fakes.device_lister)
    monkeypatch.setattr(
        shutil, "which", lambda name: "/usr/bin/esptool" if name == "esptool" else None
    )
    return fakes


def _invoke(args: list[str], input_text: str | None = None):
    return CliRunner().invoke(op.app, args, input=input_text)


def _assert_untouched(fakes: Fakes) -> None:
    assert fakes.downloads == []
    assert fakes.esptool_calls == []
    assert fakes.device_scans == 0


@pytest.mark.parametrize("option", ["--list", "-l"])
def test_list(fakes: Fakes, option: str) -> None:
    result = _invoke([option])
    assert result.exit_code == ExitCode.SUCCESS
    assert result.output.splitlines() == ["AntiHunter - v5"]
    _assert_untouched(fakes)


@pytest.mark.parametrize("option", ["--help", "-h"])
def test_help(fakes: Fakes, option: str) -> None:
    result = _invoke([option])
    assert result.exit_code == ExitCode.SUCCESS
    assert "Usage" in result.output
    assert "--file" in result.output
    assert "--list" in result.output
    _assert_untouched(fakes)


def test_list_without_config(fakes: Fakes, monkeypatch: pytest.MonkeyPatch) -> None:
    def factory():
        raise AssertionError("--list must not build the flash configuration")

    monkeypatch.setattr(op.FlashConfig, "factory", staticmethod(factory))
    result = _invoke(["--list"])
    assert result.exit_code == ExitCode.SUCCESS
    assert result.output.splitlines() == ["AntiHunter - v5"]


@dataclasses.dataclass(frozen=True)
class Ttestparam:
    args: list[str]
    exit_code: ExitCode
    expected_output: str

    @property
    def pytest_id(self) -> str:
        return "_".join(self.args)


_TESTPARAMS_LEFT_TO_RIGHT = [
    Ttestparam(["-h", "--bogus"], ExitCode.SUCCESS, "--file"),
    Ttestparam(["--help", "foo"], ExitCode.SUCCESS, "--list"),
    Ttestparam(["-l", "--bogus"], ExitCode.SUCCESS, "AntiHunter - v5"),
    Ttestparam(["--debug", "-l"], ExitCode.SUCCESS, "AntiHunter - v5"),
    Ttestparam(["-f", "x.bin", "-l"], ExitCode.SUCCESS, "AntiHunter - v5"),
    Ttestparam(["-f", "-h", "-l"], ExitCode.SUCCESS, "AntiHunter - v5"),
    Ttestparam(["foo"], ExitCode.FAILURE, "Unknown option: foo"),
    Ttestparam(["--bogus", "-h"], ExitCode.FAILURE, "Unknown option: --bogus"),
    Ttestparam(["-f", "x.bin", "foo", "-l"], ExitCode.FAILURE, "Unknown option: foo"),
    Ttestparam(["-l", "-f"], ExitCode.SUCCESS, "AntiHunter - v5"),
    Ttestparam(["-f"], ExitCode.FAILURE, "Option '-f' requires an argument."),
]


@pytest.mark.parametrize(
    "testparam", _TESTPARAMS_LEFT_TO_RIGHT, ids=lambda t: t.pytest_id
)
def test_arguments_left_to_right(fakes: Fakes, testparam: Ttestparam) -> None:
    result = _invoke(testparam.args)
    assert result.exit_code == testparam.exit_code, result.output
    assert testparam.expected_output in result.output
    if testparam.exit_code == ExitCode.FAILURE:
        assert "Usage" in result.output
    _assert_untouched(fakes)


def test_list_ignores_following(fakes: Fakes) -> None:
    result = _invoke(["-l", "--bogus"])
    assert result.output.splitlines() == ["AntiHunter - v5"]


def test_unknown_option(fakes: Fakes) -> None:
    result = _invoke(["--bogus"])
    assert result.exit_code == ExitCode.FAILURE
    assert "Unknown option: --bogus" in result.output
    assert "Usage" in result.output
    _assert_untouched(fakes)


def test_file_without_value(fakes: Fakes) -> None:
    result = _invoke(["--file"])
    assert result.exit_code == ExitCode.FAILURE
    assert "Usage" in result.output
    _assert_untouched(fakes)


def test_file_not_found(fakes: Fakes) -> None:
    result = _invoke(["--file", "nonexistent.bin"])
    assert result.exit_code == ExitCode.FAILURE
    assert "not found" in result.output
    assert "Unified for multiple ESP32S3 configs" in result.output
    _assert_untouched(fakes)


def test_catalog_firmware(fakes: Fakes, tmp_path: pathlib.Path) -> None:
    result = _invoke([], input_text="abc\n0\n3\n1\n0\n3\n2\n")

    assert result.exit_code == ExitCode.SUCCESS, result.output
    assert fakes.downloads == [
        "https://github.com/lukeswitz/AntiHunter/raw/refs/heads/main/Dist/antihunter_v5.bin"
    ]
    assert [args[:5] for args in fakes.esptool_calls] == [
        ["esptool", "--chip", "auto", "--port", "/dev/ttyUSB1"],
        ["esptool", "--chip", "auto", "--port", "/dev/ttyUSB1"],
    ]
    assert fakes.esptool_calls[0][-1] == "erase-flash"
    assert fakes.esptool_calls[1][-2:] == ["0x10000", str(tmp_path / FILENAME_DOWNLOAD)]
    assert "Firmware flashing complete!" in result.output
    assert not (tmp_path / FILENAME_DOWNLOAD).exists()


def test_custom_file_option(fakes: Fakes, tmp_path: pathlib.Path) -> None:
    custom = tmp_path / "custom.bin"
    custom.write_bytes(b"\xe9custom")

    result = _invoke(["--file", "custom.bin"], input_text="1\n")

    assert result.exit_code == ExitCode.SUCCESS, result.output
    assert fakes.downloads == []
    assert fakes.esptool_calls[1][-1] == "custom.bin"
    assert "Flashing Custom firmware: custom.bin firmware to the device..." in result.output
    assert custom.is_file()


def test_custom_file_interactive(fakes: Fakes, tmp_path: pathlib.Path) -> None:
    custom = tmp_path / "custom.bin"
    custom.write_bytes(b"\xe9custom")

    result = _invoke([], input_text=f"2\n{custom}\n2\n")

    assert result.exit_code == ExitCode.SUCCESS, result.output
    assert fakes.downloads == []
    assert fakes.esptool_calls[1][-1] == str(custom)
    assert custom.is_file()


def test_no_devices(fakes: Fakes, tmp_path: pathlib.Path) -> None:
    fakes.device_lister.devices = []
    custom = tmp_path / "custom.bin"
    custom.write_bytes(b"\xe9custom")

    result = _invoke(["-f", str(custom)])

    assert result.exit_code == ExitCode.FAILURE
    assert "No USB serial devices found." in result.output
    assert fakes.esptool_calls == []


def test_erase_fails(fakes: Fakes, tmp_path: pathlib.Path) -> None:
    fakes.esptool_fail_on = "erase-flash"

    result = _invoke([], input_text="1\n1\n")

    assert result.exit_code == ExitCode.FAILURE
    assert len(fakes.esptool_calls) == 1
    assert fakes.esptool_calls[0][-1] == "erase-flash"
    assert "Firmware flashing complete!" not in result.output


def test_download_fails(
    fakes: Fakes, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def urlretrieve(url: str, filename: pathlib.Path):
        raise OSError("Connection refused")

    monkeypatch.setattr(util_firmware_spec, "urlretrieve", urlretrieve)

    result = _invoke([], input_text="1\n")

    assert result.exit_code == ExitCode.FAILURE
    assert "Error downloading firmware" in result.output
    assert fakes.device_scans == 0
    assert fakes.esptool_calls == []
