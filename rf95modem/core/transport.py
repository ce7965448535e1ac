"""
Transport layer abstraction for modem communication.

Provides abstractions for serial communication with dependency injection support.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Optional
import serial
from serial import SerialException

from ..exceptions import TransportError, DeviceDisconnectedError

logger = logging.getLogger(__name__)

# Substrings pyserial uses when the device went away
_DISCONNECT_PHRASES = (
    "device disconnected",
    "device reports readiness to read but returned no data",
    "no such device",
    "device not configured",
    "input/output error",
)


class Transport(ABC):
    """Abstract base class for modem transport."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Write data to the transport.

        Args:
            data: Bytes to write

        Returns:
            Number of bytes written

        Raises:
            TransportError: If write fails
        """
        pass

    @abstractmethod
    def read_until(self, terminator: bytes = b"\n", timeout: Optional[float] = None) -> bytes:
        """
        Read from transport until terminator is found.

        Args:
            terminator: Byte sequence marking end of data
            timeout: Optional timeout in seconds

        Returns:
            Bytes read including terminator, or b"" if nothing arrived

        Raises:
            TransportError: If read fails
        """
        pass

    @abstractmethod
    def reset_input_buffer(self) -> None:
        """Clear the input buffer."""
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """Check if transport is open."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the transport."""
        pass


class SerialTransport(Transport):
    """Serial port transport implementation."""

    def __init__(
        self,
        port: str,
        baudrate: int = 115200,
        timeout: float = 1.0
    ) -> None:
        """
        Initialize serial transport.

        Args:
            port: Serial port path (e.g., /dev/ttyUSB0)
            baudrate: Baud rate for serial communication
            timeout: Read timeout in seconds

        Raises:
            TransportError: If serial port cannot be opened
        """
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout

        try:
            self._serial = serial.Serial(
                port=port,
                baudrate=baudrate,
                timeout=timeout
            )
            logger.info(f"Opened serial port {port} at {baudrate} baud")
        except SerialException as e:
            logger.error(f"Failed to open serial port {port}: {e}")
            raise TransportError(f"Failed to open serial port {port}: {e}") from e

    def write(self, data: bytes) -> int:
        """Write data to serial port."""
        try:
            written = self._serial.write(data)
            logger.debug(f"Wrote {written} bytes: {data}")
            return written
        except SerialException as e:
            raise self._translate(e, "write") from e

    def read_until(self, terminator: bytes = b"\n", timeout: Optional[float] = None) -> bytes:
        """Read from serial port until terminator."""
        original_timeout = self._serial.timeout
        try:
            if timeout is not None:
                self._serial.timeout = timeout

            data = self._serial.read_until(terminator)

            if data:
                logger.debug(f"Read {len(data)} bytes: {data}")

            return data
        except SerialException as e:
            raise self._translate(e, "read") from e
        finally:
            if timeout is not None:
                self._serial.timeout = original_timeout

    def reset_input_buffer(self) -> None:
        """Clear the serial input buffer."""
        try:
            self._serial.reset_input_buffer()
            logger.debug("Reset input buffer")
        except SerialException as e:
            raise self._translate(e, "reset input buffer") from e

    def is_open(self) -> bool:
        """Check if serial port is open."""
        return bool(self._serial and self._serial.is_open)

    def close(self) -> None:
        """Close the serial port."""
        if self._serial and self._serial.is_open:
            self._serial.close()
            logger.info(f"Closed serial port {self.port}")

    def _translate(self, error: SerialException, action: str) -> TransportError:
        """Map a pyserial exception onto the library's transport errors."""
        error_str = str(error).lower()

        if any(phrase in error_str for phrase in _DISCONNECT_PHRASES):
            logger.error(f"Device disconnected: {error}")
            return DeviceDisconnectedError(
                f"Serial device disconnected: {error}",
                response=[str(error)]
            )

        logger.error(f"Serial {action} failed: {error}")
        return TransportError(f"Serial {action} failed: {error}")


class MockTransport(Transport):
    """
    Mock transport for testing.

    Simulates modem responses without requiring hardware. Replies queued
    with add_response() are released one per write(), the way a modem only
    answers once a command was sent.
    """

    def __init__(self) -> None:
        """Initialize mock transport."""
        self._open = True
        self._input_buffer: list[bytes] = []
        self._response_queue: list[list[str]] = []
        self._written: list[bytes] = []
        self._lock = threading.Lock()
        logger.info("Initialized MockTransport")

    @staticmethod
    def _encode(line: str) -> bytes:
        if not line.endswith("\n"):
            line += "\r\n"
        return line.encode("utf-8")

    def add_response(self, lines: list[str]) -> None:
        """
        Queue the reply to the next command written.

        Args:
            lines: Response lines (e.g., ["+STATUS:", "firmware: 0.6.0", ...]).
                   Lines without a terminator get "\\r\\n" appended.
        """
        with self._lock:
            self._response_queue.append(list(lines))
            logger.debug(f"Added mock response: {lines}")

    def add_unsolicited(self, lines: list[str]) -> None:
        """
        Make lines readable immediately, without a command.

        Args:
            lines: Unsolicited lines (e.g., ["+RX 5,48656c6c6f,-40,9"])
        """
        with self._lock:
            self._input_buffer.extend(self._encode(line) for line in lines)
            logger.debug(f"Added unsolicited mock lines: {lines}")

    @property
    def written(self) -> list[bytes]:
        """Everything written so far, one entry per write()."""
        with self._lock:
            return list(self._written)

    def write(self, data: bytes) -> int:
        """Simulate writing data."""
        if not self._open:
            raise DeviceDisconnectedError(
                "MockTransport is closed (simulating device disconnection)",
                response=["MockTransport closed"]
            )

        logger.debug(f"Mock write: {data}")
        with self._lock:
            self._written.append(data)
            if self._response_queue:
                reply = self._response_queue.pop(0)
                self._input_buffer.extend(self._encode(line) for line in reply)
        return len(data)

    def read_until(self, terminator: bytes = b"\n", timeout: Optional[float] = None) -> bytes:
        """
        Simulate reading from modem.

        Returns released lines one at a time, b"" when none is available.
        """
        if not self._open:
            raise DeviceDisconnectedError(
                "MockTransport is closed (simulating device disconnection)",
                response=["MockTransport closed"]
            )

        with self._lock:
            if self._input_buffer:
                result = self._input_buffer.pop(0)
                logger.debug(f"Mock read: {result}")
                return result

        # No data available; a real port would block until its timeout
        time.sleep(0.001)
        return b""

    def reset_input_buffer(self) -> None:
        """
        Clear mock input buffer.

        Only drops lines already readable; queued replies are kept.
        """
        with self._lock:
            self._input_buffer.clear()
            logger.debug("Reset mock input buffer")

    def is_open(self) -> bool:
        """Check if mock transport is open."""
        return self._open

    def close(self) -> None:
        """Close mock transport."""
        self._open = False
        logger.info("Closed MockTransport")

    def clear_responses(self) -> None:
        """Clear all queued responses (useful for testing)."""
        with self._lock:
            self._response_queue.clear()
            logger.debug("Cleared mock response queue")
