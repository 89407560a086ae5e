import enum

ENV_ANTIHUNTER_FLASH_ESPTOOL_DIR = "ANTIHUNTER_FLASH_ESPTOOL_DIR"
"""
Directory of the local esptool checkout.
Default: 'esptool' in the current working directory.
"""

ENV_ANTIHUNTER_FLASH_ESPTOOL_GIT = "ANTIHUNTER_FLASH_ESPTOOL_GIT"
"""
Git spec of the esptool repo, for example:
https://github.com/alphafox02/esptool
https://github.com/alphafox02/esptool@master
"""

ESPTOOL_GIT_SPEC_DEFAULT = "https://github.com/alphafox02/esptool"
ESPTOOL_DIRECTORY_DEFAULT = "esptool"
ESPTOOL_SCRIPT = "esptool.py"

ESPTOOL_EXECUTABLES = ("esptool", "esptool.py")
"""
Executables searched on PATH, in this order.
"""

FLASH_OFFSET_APP = 0x10000
BAUD_DEFAULT = 115200

RULER_SHORT = "=" * 37
RULER_LONG = "=" * 51

BANNER = """\
▄▖  ▗ ▘▖▖    ▗
▌▌▛▌▜▘▌▙▌▌▌▛▌▜▘█▌▛▘
▛▌▌▌▐▖▌▌▌▙▌▌▌▐▖▙▖▌
"""


class ExitCode(enum.IntEnum):
    """
    Exit Codes of the 'antihunter-flash' command.
    """

    SUCCESS = 0
    "Flashing succeeded or information (--help, --list) was printed"
    FAILURE = 1
    "Usage, validation, download or esptool error"
