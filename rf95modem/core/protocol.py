"""
AT command protocol handler.

Manages AT command execution, response collection, and URC detection.

rf95modem replies come in two shapes: fixed-length blocks (AT+INFO answers
with a known number of lines, framing and blank lines included) and
free-form replies ending in a terminal line such as "+OK" or "OK".
"""

import logging
import threading
import time
from typing import Optional

from .transport import Transport
from ..exceptions import ATTimeoutError, RF95Error, TransportError

logger = logging.getLogger(__name__)

# Lines ending a reply when no fixed line count is requested
TERMINAL_LINES = ("OK", "+OK", "ERROR")

# Unsolicited notifications the firmware may emit at any time
DEFAULT_URC_PREFIXES = ("+RX ",)


class ATProtocol:
    """
    AT command protocol handler.

    Manages thread-safe AT command execution and response handling.
    Only one exchange is in flight at a time; the reader thread feeds
    lines in through append_response_line().
    """

    def __init__(
        self,
        transport: Transport,
        default_timeout: float = 1.0,
        urc_prefixes: tuple[str, ...] = DEFAULT_URC_PREFIXES
    ) -> None:
        """
        Initialize AT protocol handler.

        Args:
            transport: Transport instance for communication
            default_timeout: Default timeout for AT commands in seconds
            urc_prefixes: Line prefixes that are always unsolicited
        """
        self.transport = transport
        self.default_timeout = default_timeout
        self.urc_prefixes = urc_prefixes

        # Thread safety for AT commands
        self._at_lock = threading.Lock()

        # Response handling
        self._resp_buffer: list[str] = []
        self._resp_done_event = threading.Event()
        self._pending = False
        self._expected_lines: Optional[int] = None

        # Exact command sent, for echo detection
        self._sent_cmd: Optional[str] = None

        logger.info("Initialized AT protocol handler")

    def send_command(
        self,
        cmd: str = "AT",
        expected_lines: Optional[int] = None,
        timeout: Optional[float] = None
    ) -> list[str]:
        """
        Send an AT command and wait for the solicited response.

        Args:
            cmd: AT command to send (e.g., "AT+INFO" or "+INFO")
            expected_lines: Collect exactly this many raw lines (terminators
                kept, blank lines counted). If None, collect until a terminal
                line and return the lines stripped.
            timeout: Command timeout in seconds (uses default if None)

        Returns:
            List of response lines

        Raises:
            ATTimeoutError: If the response is not complete before the timeout
            RF95Error: If a free-form command returns ERROR
            TransportError: If the command cannot be written
        """
        with self._at_lock:
            cmd = self._normalize_command(cmd)
            self._sent_cmd = cmd.strip()

            # Clear previous response
            self._resp_buffer = []
            self._resp_done_event.clear()
            self._expected_lines = expected_lines
            self._pending = True

            logger.debug(f"Sending AT command: {self._sent_cmd}")

            try:
                self.transport.reset_input_buffer()
                written = self.transport.write(cmd.encode("utf-8"))
                if not written:
                    raise TransportError(f"Failed to write AT command: {self._sent_cmd}")

                timeout_val = timeout if timeout is not None else self.default_timeout
                end_time = time.monotonic() + timeout_val

                while not self._resp_done_event.is_set():
                    if time.monotonic() > end_time:
                        logger.error(f"AT command timed out: {self._sent_cmd}")
                        raise ATTimeoutError(
                            f"AT command timed out after {len(self._resp_buffer)} lines",
                            command=self._sent_cmd,
                            response=list(self._resp_buffer)
                        )
                    time.sleep(0.01)
            finally:
                self._pending = False

            lines = list(self._resp_buffer)
            logger.debug(f"Received response: {lines}")

            if expected_lines is not None:
                return lines

            if lines and lines[-1] == "ERROR":
                logger.error(f"AT command returned ERROR: {self._sent_cmd}")
                raise RF95Error(
                    f"AT command {self._sent_cmd} returned ERROR",
                    command=self._sent_cmd,
                    response=lines
                )

            return lines

    def _normalize_command(self, cmd: str) -> str:
        """
        Normalize AT command format.

        Ensures command starts with "AT" and ends with "\\r\\n".
        """
        cmd = cmd.strip()

        if not cmd.upper().startswith("AT"):
            cmd = "AT" + cmd

        return cmd + "\r\n"

    def is_urc(self, line: str) -> bool:
        """
        Determine if a line is an unsolicited result code.

        Args:
            line: Line to classify (terminator may still be attached)

        Returns:
            True if line is a URC, False if it belongs to the pending response
        """
        if not self._pending:
            return True

        return line.startswith(self.urc_prefixes)

    def append_response_line(self, line: str) -> bool:
        """
        Append a line to the response buffer.

        Args:
            line: Raw response line, terminator included

        Returns:
            True if this completes the response
        """
        if self._resp_done_event.is_set():
            logger.warning(f"Dropping line after complete response: {line!r}")
            return False

        stripped = line.strip()

        # Echo of the command we just sent
        if not self._resp_buffer and self._sent_cmd and stripped == self._sent_cmd:
            logger.debug(f"Stripping echo line: {stripped}")
            return False

        if self._expected_lines is not None:
            self._resp_buffer.append(line)
            done = len(self._resp_buffer) >= self._expected_lines
        else:
            # Free-form replies ignore blank lines
            if not stripped:
                return False
            self._resp_buffer.append(stripped)
            done = stripped in TERMINAL_LINES

        if done:
            self._resp_done_event.set()
        return done

    def is_response_pending(self) -> bool:
        """
        Check if we're currently waiting for a command response.

        Returns:
            True if response is pending
        """
        return self._pending and not self._resp_done_event.is_set()
