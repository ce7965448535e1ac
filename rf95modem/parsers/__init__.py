"""
Response parsers for AT command responses.

Provides type-safe parsing of modem responses into structured data.
"""

from .base import ResponseParser
from .status import (
    STATUS_COMMAND,
    STATUS_FIELDS,
    STATUS_RESPONSE_LINES,
    StatusParser,
    decode_field,
    is_framing_line,
    split_status_line,
)

__all__ = [
    "ResponseParser",
    "STATUS_COMMAND",
    "STATUS_FIELDS",
    "STATUS_RESPONSE_LINES",
    "StatusParser",
    "decode_field",
    "is_framing_line",
    "split_status_line",
]
