"""
Core modem class coordinating transport, protocol, and URC handling.

This is the foundation that feature managers build upon.
"""

import logging
import threading
import time
from typing import Callable, Optional

from .transport import Transport
from .protocol import ATProtocol
from .urc import URCHandler, URCCallback
from ..exceptions import DeviceDisconnectedError, ModemNotStartedError

logger = logging.getLogger(__name__)


class ModemCore:
    """
    Core modem functionality.

    Coordinates:
    - Transport layer (serial communication)
    - Protocol layer (AT command execution)
    - URC handling (received frames and other unsolicited lines)
    - Reader thread (continuous modem monitoring)

    This class provides the foundation for feature-specific managers.
    """

    def __init__(
        self,
        transport: Transport,
        timeout: float = 1.0,
        log_urcs: bool = False,
        max_urc_queue_size: int = 1000,
        on_disconnect: Optional[Callable[[Exception], None]] = None
    ) -> None:
        """
        Initialize modem core.

        Args:
            transport: Transport instance for communication
            timeout: Default timeout for AT commands
            log_urcs: Whether to log URCs at INFO level
            max_urc_queue_size: Maximum URCs to queue
            on_disconnect: Optional callback for disconnection events
        """
        self.transport = transport
        self.protocol = ATProtocol(transport, default_timeout=timeout)
        self.urc_handler = URCHandler(
            max_queue_size=max_urc_queue_size,
            log_urcs=log_urcs
        )

        # Reader thread management
        self._reader_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._running = False
        self._on_disconnect = on_disconnect

        # Bytes of a line whose terminator has not arrived yet
        self._partial = bytearray()

        # Error handling
        self._consecutive_errors = 0
        self._max_consecutive_errors = 5
        self._disconnected = False

        logger.info("Initialized ModemCore")

    def start(self) -> None:
        """
        Start the modem reader thread.

        The reader thread continuously reads from the transport and routes
        lines to either the protocol (for solicited responses) or URC handler
        (for unsolicited result codes).
        """
        if self._running:
            logger.warning("ModemCore already started")
            return

        self._disconnected = False
        self._consecutive_errors = 0

        self._stop_event.clear()
        self._reader_thread = threading.Thread(
            target=self._reader_loop,
            daemon=True,
            name="RF95ReaderThread"
        )
        self._running = True
        self._reader_thread.start()
        logger.info("Started modem reader thread")

    def stop(self) -> None:
        """
        Stop the modem reader thread.

        Waits for the thread to terminate gracefully.
        """
        if not self._running:
            return

        logger.info("Stopping modem reader thread...")
        self._stop_event.set()

        if self._reader_thread:
            self._reader_thread.join(timeout=1.0)
            if self._reader_thread.is_alive():
                logger.warning("Reader thread did not terminate in time")

        self._running = False
        logger.info("Stopped modem reader thread")

    def close(self) -> None:
        """
        Close the modem connection.

        Stops the reader thread and closes the transport.
        """
        logger.info("Closing modem connection")
        self.stop()
        self.transport.close()
        logger.info("Modem connection closed")

    def _reader_loop(self) -> None:
        """
        Continuously read from the modem and route complete lines.

        A read that times out mid-line returns a fragment; fragments are
        held back until their "\\n" arrives.
        """
        logger.debug("Reader thread started")
        self._partial = bytearray()

        while not self._stop_event.is_set():
            try:
                chunk = self.transport.read_until(b"\n")

                # Reset error counter on successful read
                self._consecutive_errors = 0

                if chunk:
                    self._feed(chunk)

            except DeviceDisconnectedError as e:
                logger.error("Device disconnected, stopping reader thread")
                self._running = False
                self._disconnected = True

                if self._on_disconnect:
                    self._on_disconnect(e)

                break
            except Exception as e:
                self._consecutive_errors += 1
                logger.error(f"Error in reader loop ({self._consecutive_errors}/{self._max_consecutive_errors}): {e}")

                if self._consecutive_errors >= self._max_consecutive_errors:
                    logger.error(f"Too many consecutive errors ({self._consecutive_errors}), stopping reader thread")
                    self._running = False
                    break

                # Exponential backoff: 0.1s, 0.2s, 0.4s, 0.8s, 1.6s
                backoff_time = 0.1 * (2 ** (self._consecutive_errors - 1))
                time.sleep(backoff_time)

        logger.debug("Reader thread stopped")

    def _feed(self, chunk: bytes) -> None:
        """
        Buffer raw bytes and route every line they complete.

        Lines keep their terminators: fixed-length replies count blank
        lines too.
        """
        self._partial += chunk

        while True:
            end = self._partial.find(b"\n")
            if end < 0:
                if self._partial:
                    logger.debug(f"Holding partial line: {bytes(self._partial)!r}")
                return

            line_bytes = bytes(self._partial[:end + 1])
            del self._partial[:end + 1]

            line = line_bytes.decode("utf-8", errors="ignore")
            logger.debug(f"Reader received: {line!r}")
            self._route_line(line)

    def _route_line(self, line: str) -> None:
        """
        Route a line to either protocol or URC handler.

        Args:
            line: Raw line, terminator included
        """
        if self.protocol.is_response_pending() and not self.protocol.is_urc(line):
            self.protocol.append_response_line(line)
            return

        stripped = line.strip()
        if stripped:
            self.urc_handler.handle_urc(stripped)

    def register_urc_callback(self, prefix: str, callback: URCCallback) -> None:
        """
        Register a callback for URCs matching a prefix.

        Args:
            prefix: URC prefix to match (e.g., "+RX")
            callback: Function to call when URC is received
        """
        self.urc_handler.register_callback(prefix, callback)

    def unregister_urc_callback(self, prefix: str) -> bool:
        """
        Unregister a URC callback.

        Args:
            prefix: URC prefix to unregister

        Returns:
            True if callback was removed
        """
        return self.urc_handler.unregister_callback(prefix)

    def send_at(
        self,
        cmd: str,
        expected_lines: Optional[int] = None,
        timeout: Optional[float] = None
    ) -> list[str]:
        """
        Send an AT command.

        This is a convenience wrapper around protocol.send_command().

        Args:
            cmd: AT command (e.g., "AT+INFO" or "+INFO")
            expected_lines: Exact number of raw lines to collect (None =
                until a terminal line)
            timeout: Command timeout (uses default if None)

        Returns:
            List of response lines

        Raises:
            ModemNotStartedError: If the reader thread is not running
            ATTimeoutError: If command times out
            RF95Error: If command returns ERROR
        """
        if not self._running:
            raise ModemNotStartedError(
                "Modem reader thread is not running; call start() first",
                command=cmd
            )

        return self.protocol.send_command(
            cmd=cmd,
            expected_lines=expected_lines,
            timeout=timeout
        )

    def is_running(self) -> bool:
        """
        Check if the reader thread is running.

        Returns:
            True if running
        """
        return self._running

    def is_disconnected(self) -> bool:
        """
        Check if the device was disconnected during operation.

        Returns:
            True if device was disconnected, False otherwise
        """
        return self._disconnected

    def __enter__(self):
        """Context manager entry."""
        if not self._running:
            self.start()
        return self

    def __exit__(self, *exc):
        """Context manager exit."""
        self.close()
