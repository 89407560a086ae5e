class FlashAppExitException(Exception):
    """
    This exception terminates the application.

    The message is meant for the operator and will be printed as is.
    When this exception is caught, the only thing to do is to print
    the message and exit with ExitCode.FAILURE.
    """


class FirmwareNotFoundException(FlashAppExitException):
    """
    A custom firmware file does not exist or is not readable.
    """


class FirmwareDownloadException(FlashAppExitException):
    """
    The firmware could not be downloaded from the catalog url.
    """


class NoSerialDeviceException(FlashAppExitException):
    """
    No USB serial device was found: There is nothing to flash.
    """


class EsptoolNotFoundException(FlashAppExitException):
    """
    esptool is neither installed nor could it be cloned.
    """
