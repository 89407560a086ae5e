from __future__ import annotations

import logging
import pathlib
import typing
from typing import Optional

import click
import typer
import typer.core
import typing_extensions

from ..util_baseclasses import FlashAppExitException
from ..util_constants import ExitCode
from ..util_run_config import FIRMWARE_CATALOG, FlashConfig
from ..util_serial_devices import device_lister_factory
from ..util_subprocess import SubprocessExitCodeException
from .op_flash import do_flash
from .op_logging import init_logging

# 'typer' does not work correctly with typing.Annotated
# Required is: typing_extensions.Annotated
TyperAnnotated = typing_extensions.Annotated

# mypy: disable-error-code="valid-type"


OPTIONS_HELP = ("-h", "--help")
OPTIONS_LIST = ("-l", "--list")
OPTIONS_FILE = ("-f", "--file")
OPTIONS_FLAGS = ("--debug", "--no-debug")


def print_catalog() -> None:
    for entry in FIRMWARE_CATALOG:
        print(entry.label)


class FlashCommand(typer.core.TyperCommand):
    """
    The arguments are checked left to right before click parses them.
    -h/--help and -l/--list terminate at once, the following arguments are ignored.
    Any other unknown argument terminates with ExitCode.FAILURE.
    """

    @typing_extensions.override
    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        tokens = iter(args)
        for token in tokens:
            if token in OPTIONS_HELP:
                help_text = ctx.get_help()
                if help_text:
                    # Without rich, the help is returned instead of printed
                    print(help_text)
                raise typer.Exit(code=ExitCode.SUCCESS)
            if token in OPTIONS_LIST:
                print_catalog()
                raise typer.Exit(code=ExitCode.SUCCESS)
            if token in OPTIONS_FILE:
                if next(tokens, None) is None:
                    self._fail(ctx, f"Option '{token}' requires an argument.")
                continue
            if token.startswith("--file=") or token in OPTIONS_FLAGS:
                continue
            self._fail(ctx, f"Unknown option: {token}")

        return super().parse_args(ctx, args)

    @staticmethod
    def _fail(ctx: click.Context, msg: str) -> typing.NoReturn:
        print(msg)
        print(ctx.get_usage())
        print(f"Try '{ctx.command_path} --help' for help.")
        raise typer.Exit(code=ExitCode.FAILURE)


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

app = typer.Typer(
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
)


@app.command(
    cls=FlashCommand,
    context_settings=CONTEXT_SETTINGS,
    help="Flash firmware to ESP32 devices. Without options, the firmware is selected interactively.",
)
def flash(
    file: TyperAnnotated[
        Optional[pathlib.Path],  # noqa: UP045
        typer.Option("--file", "-f", help="Path to custom .bin file to flash"),
    ] = None,
    list_firmware: TyperAnnotated[
        bool,
        typer.Option(
            "--list",
            "-l",
            help="List available firmware options and exit",
        ),
    ] = False,
    debug: TyperAnnotated[
        bool,
        typer.Option(help="Verbose logging"),
    ] = False,
) -> None:
    init_logging(logging.DEBUG if debug else None)

    config = FlashConfig.factory()
    try:
        do_flash(
            config=config,
            custom_file=file,
            device_lister=device_lister_factory(),
            directory_work=pathlib.Path.cwd(),
        )
    except FlashAppExitException as e:
        print(f"ERROR: {e}")
        raise typer.Exit(code=ExitCode.FAILURE) from e
    except SubprocessExitCodeException as e:
        # esptool already reported the details on the terminal
        print(f"ERROR: {e}")
        raise typer.Exit(code=ExitCode.FAILURE) from e


if __name__ == "__main__":
    app()
