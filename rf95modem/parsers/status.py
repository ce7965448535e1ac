"""
AT+INFO (status) response parser.

The modem answers AT+INFO with a fixed-length block:

    +STATUS:
    firmware: 0.6.0
    features: rfm95 lora
    modem config: 3 Bw125Cr48Sf4096
    frequency: 868.10
    max pkt size: 255
    BFB: 0
    rx bad: 0
    rx good: 12
    tx good: 8
    rx listener: 0
    GPS: 0
    +OK

Framing and blank lines are skipped; every other line must be a known
``key: value`` pair.
"""

import logging
import math
import re
from typing import Callable, Optional

from .base import ResponseParser
from ..types import ModemMode, Status
from ..exceptions import (
    ATParseError,
    ExtractFailedError,
    IncompleteStatusError,
    MalformedLineError,
    NumberFormatError,
    UnknownKeyError,
)

logger = logging.getLogger(__name__)

STATUS_COMMAND = "AT+INFO"

# Lines per AT+INFO reply, framing included
STATUS_RESPONSE_LINES = 13

_FRAMING_RE = re.compile(r"^(\+STATUS:|\+OK|)\r?\n\Z")
_OK_RE = re.compile(r"^\+OK\r?\n\Z")
_KEY_VALUE_RE = re.compile(r"^(.+?):[ ]+([^\r\n]+)\r?\n\Z")
_MODEM_CONFIG_RE = re.compile(r"^([0-9]+) ")
_INT_RE = re.compile(r"[+-]?[0-9]+")
# Decimal notation only; the firmware prints "%.2f", never inf, nan or hex
_FLOAT_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1
_INT64_DIGITS = len(str(_INT64_MAX))


def _parse_int64(text: str) -> Optional[int]:
    """Parse a signed decimal integer, None if malformed or outside int64."""
    if _INT_RE.fullmatch(text) is None:
        return None

    sign = -1 if text.startswith("-") else 1
    digits = text.lstrip("+-").lstrip("0") or "0"
    # Checked before int() so huge values never hit the str->int digit limit
    if len(digits) > _INT64_DIGITS:
        return None

    number = sign * int(digits)
    if number < _INT64_MIN or number > _INT64_MAX:
        return None
    return number


def is_framing_line(line: str) -> bool:
    """Check if a raw line is "+STATUS:", "+OK" or blank."""
    return _FRAMING_RE.match(line) is not None


def split_status_line(line: str) -> tuple[str, str]:
    """
    Split a raw status line into key and value.

    The key ends at the first colon followed by spaces.

    Raises:
        MalformedLineError: If the line is not ``key: value``
    """
    match = _KEY_VALUE_RE.match(line)
    if match is None:
        raise MalformedLineError(line)
    return match.group(1), match.group(2)


def _as_string(key: str, value: str) -> str:
    return value


def _as_features(key: str, value: str) -> tuple[str, ...]:
    return tuple(token.strip() for token in value.split(" "))


def _as_modem_mode(key: str, value: str) -> ModemMode:
    # e.g. "3 Bw125Cr48Sf4096"
    match = _MODEM_CONFIG_RE.match(value)
    if match is None:
        raise ExtractFailedError(f"Failed to extract modem config from {value!r}")

    number = _parse_int64(match.group(1))
    if number is None:
        raise ExtractFailedError(f"Modem config number is out of range: {value[:32]!r}")
    return ModemMode.from_value(number)


def _as_float(key: str, value: str) -> float:
    if _FLOAT_RE.fullmatch(value) is None:
        raise NumberFormatError(key, value)

    number = float(value)
    # e.g. "1e400"
    if math.isinf(number):
        raise NumberFormatError(key, value)
    return number


def _as_int(key: str, value: str) -> int:
    number = _parse_int64(value)
    if number is None:
        raise NumberFormatError(key, value)
    return number


# key -> (Status field, converter); None marks keys that are read and dropped
STATUS_FIELDS: dict[str, Optional[tuple[str, Callable[[str, str], object]]]] = {
    "firmware": ("firmware", _as_string),
    "features": ("features", _as_features),
    "modem config": ("mode", _as_modem_mode),
    "frequency": ("frequency", _as_float),
    "max pkt size": ("mtu", _as_int),
    "BFB": ("bfb", _as_int),
    "rx bad": ("rx_bad", _as_int),
    "rx good": ("rx_good", _as_int),
    "tx good": ("tx_good", _as_int),
    "rx listener": None,
    "GPS": None,
}


def decode_field(key: str, value: str, fields: dict[str, object]) -> None:
    """
    Decode one status value into ``fields`` (Status field name -> value).

    Raises:
        UnknownKeyError: If key is not in STATUS_FIELDS
        ATParseError: If the value cannot be converted
    """
    if key not in STATUS_FIELDS:
        raise UnknownKeyError(key)

    handler = STATUS_FIELDS[key]
    if handler is None:
        logger.debug(f"Ignoring status key {key!r}")
        return

    field, convert = handler
    fields[field] = convert(key, value)


class StatusParser(ResponseParser[Status]):
    """Parser for the AT+INFO status block."""

    def parse(self, response: list[str]) -> Status:
        """
        Parse a raw AT+INFO response.

        Lines must still carry their terminators. Parsing stops at the
        first bad line; no partial Status is ever built.

        Raises:
            ATParseError: Or one of its subclasses, with command and
                response attached
        """
        try:
            return self._parse(response)
        except ATParseError as e:
            e.command = STATUS_COMMAND
            e.response = list(response)
            logger.debug(f"Status parse failed: {e}")
            raise

    def _parse(self, response: list[str]) -> Status:
        fields: dict[str, object] = {}
        seen_ok = False

        for line in response:
            if is_framing_line(line):
                seen_ok = seen_ok or _OK_RE.match(line) is not None
                continue

            key, value = split_status_line(line)
            decode_field(key, value, fields)

        if not seen_ok:
            raise IncompleteStatusError("Status response has no +OK line")

        missing = [
            key for key, handler in STATUS_FIELDS.items()
            if handler is not None and handler[0] not in fields
        ]
        if missing:
            raise IncompleteStatusError(f"Status response lacks keys: {', '.join(missing)}")

        return Status(**fields)
