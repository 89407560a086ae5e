import logging

from antihunter_flash.scripts.op_logging import init_logging
from antihunter_flash.util_logging_handler_color import ColorFormatter

FORMAT = "%(levelname)-8s - %(message)s"


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=None,
        exc_info=None,
    )


def test_color_tag() -> None:
    record = _record(logging.INFO, "[COLOR_SUCCESS]git clone done")
    text = ColorFormatter(FORMAT).format(record)
    assert text.startswith("\x1b[")
    assert "INFO     - git clone done" in text
    assert "[COLOR_SUCCESS]" not in text
    # The record is restored for other handlers
    assert record.msg == "[COLOR_SUCCESS]git clone done"


def test_plain_info() -> None:
    text = ColorFormatter(FORMAT).format(_record(logging.INFO, "EXEC esptool"))
    assert text == "INFO     - EXEC esptool"


def test_warning_colored_by_level() -> None:
    text = ColorFormatter(FORMAT).format(_record(logging.WARNING, "cleanup failed"))
    assert text.startswith("\x1b[")
    assert "WARNING  - cleanup failed" in text


def test_init_logging() -> None:
    init_logging()
    assert logging.getLogger().level == logging.INFO
    assert isinstance(logging.getLogger().handlers[0].formatter, ColorFormatter)

    init_logging(logging.DEBUG)
    assert logging.getLogger().level == logging.DEBUG
