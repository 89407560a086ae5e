import logging
import re
import typing

import typing_extensions

from rich.style import Style

_STYLE_FALLBACK = Style(color="purple")

_DICT_STYLES = {
    "COLOR_INFO": Style(color="blue"),
    "COLOR_SUCCESS": Style(color="green"),
    "COLOR_WARNING": Style(color="orange1"),
    "COLOR_ERROR": Style(color="red"),
}

_DICT_LEVEL_STYLES = {
    logging.WARNING: _DICT_STYLES["COLOR_WARNING"],
    logging.ERROR: _DICT_STYLES["COLOR_ERROR"],
    logging.CRITICAL: _DICT_STYLES["COLOR_ERROR"],
}


class ColorFormatter(logging.Formatter):
    RE_TAG = re.compile(r"^\[(?P<tag>COLOR_[A-Z]+)\](?P<msg>.*$)", re.DOTALL)
    """
    Example: [COLOR_INFO]This is a message
    tag: COLOR_INFO
    msg: This is a message

    Untagged warnings and errors are colored by their level.
    """

    @typing_extensions.override
    def format(self, record: logging.LogRecord) -> str:
        match = self.RE_TAG.match(str(record.msg))
        if match is None:
            style = _DICT_LEVEL_STYLES.get(record.levelno)
            if style is None:
                return super().format(record)
            return style.render(super().format(record))

        tag = match.group("tag")
        msg = match.group("msg")
        msg_before = record.msg
        try:
            record.msg = msg
            style = _DICT_STYLES.get(tag, _STYLE_FALLBACK)
            return style.render(super().format(record))
        finally:
            record.msg = msg_before
