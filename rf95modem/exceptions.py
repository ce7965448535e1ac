"""
Exceptions for rf95modem library.

Provides detailed error information for debugging modem communication issues.
"""

from typing import Optional


class RF95Error(Exception):
    """
    Base exception for rf95modem errors.

    All rf95modem exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        response: Optional[list[str]] = None
    ) -> None:
        """
        Initialize exception with context.

        Args:
            message: Error description
            command: AT command that caused the error (if applicable)
            response: Modem response (if applicable)
        """
        self.command = command
        self.response = response
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with context."""
        parts = [super().__str__()]

        if self.command:
            parts.append(f"Command: {self.command}")

        if self.response:
            parts.append(f"Response: {self.response}")

        return " | ".join(parts)


class TransportError(RF95Error):
    """
    Raised when transport layer fails.

    This indicates:
    - Serial port issues
    - Connection lost
    - Hardware communication failure
    """
    pass


class DeviceDisconnectedError(TransportError):
    """
    Raised when device is disconnected during operation.

    This is a fatal error that requires closing and reopening the connection.
    """
    pass


class ATTimeoutError(TransportError):
    """
    Raised when an AT command times out.

    The ``response`` attribute holds whatever lines arrived before the
    deadline, so a short status block can be inspected after the fact.
    """
    pass


class ATParseError(RF95Error):
    """
    Raised when an AT command response cannot be parsed.

    Base class of all status decoding failures.
    """
    pass


class MalformedLineError(ATParseError):
    """Raised when a payload line is not of the form ``key: value``."""

    def __init__(self, line: str, **kwargs) -> None:
        self.line = line
        super().__init__(f"Status line does not match 'key: value': {line!r}", **kwargs)


class UnknownKeyError(ATParseError):
    """
    Raised for a well-formed status line whose key is not known.

    Unknown keys usually mean the firmware changed its status output.
    """

    def __init__(self, key: str, **kwargs) -> None:
        self.key = key
        super().__init__(f"Unknown status key: {key!r}", **kwargs)


class ExtractFailedError(ATParseError):
    """Raised when a composite value (e.g. modem config) lacks its expected part."""
    pass


class ModeRangeError(ATParseError):
    """Raised when a modem config number is outside the known modem modes."""

    def __init__(self, value: int, max_value: int, **kwargs) -> None:
        self.value = value
        self.max_value = max_value
        super().__init__(f"Modem config {value} is not in [0, {max_value}]", **kwargs)


class NumberFormatError(ATParseError):
    """Raised when a numeric status value cannot be converted."""

    def __init__(self, key: str, value: str, **kwargs) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid number for {key!r}: {value!r}", **kwargs)


class IncompleteStatusError(ATParseError):
    """
    Raised when a status block parsed cleanly but is not complete.

    This indicates:
    - Missing +OK sentinel
    - Status fields the firmware did not report
    """
    pass


class ModemNotStartedError(RF95Error):
    """
    Raised when attempting to use modem before starting reader thread.
    """
    pass
