"""
rf95modem - Python library for the rf95modem LoRa firmware.
"""

from .version import __version__
from .modem import RF95Modem
from .core import MockTransport, SerialTransport, Transport

from .types import (
    MAX_MODEM_MODE,
    ModemMode,
    Status,
)

from .exceptions import (
    RF95Error,
    TransportError,
    DeviceDisconnectedError,
    ATTimeoutError,
    ATParseError,
    MalformedLineError,
    UnknownKeyError,
    ExtractFailedError,
    ModeRangeError,
    NumberFormatError,
    IncompleteStatusError,
    ModemNotStartedError,
)

__all__ = [
    "__version__",
    "RF95Modem",
    "MockTransport",
    "SerialTransport",
    "Transport",
    "MAX_MODEM_MODE",
    "ModemMode",
    "Status",
    "RF95Error",
    "TransportError",
    "DeviceDisconnectedError",
    "ATTimeoutError",
    "ATParseError",
    "MalformedLineError",
    "UnknownKeyError",
    "ExtractFailedError",
    "ModeRangeError",
    "NumberFormatError",
    "IncompleteStatusError",
    "ModemNotStartedError",
]
