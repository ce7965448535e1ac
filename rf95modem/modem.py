"""
Main RF95Modem class.

User-facing API for an rf95modem attached over a serial port.
"""

import logging
from typing import Callable, Optional

from .core import ModemCore, SerialTransport, Transport, URCCallback
from .features import StatusManager
from .parsers.status import STATUS_RESPONSE_LINES
from .types import Status

logger = logging.getLogger(__name__)


class RF95Modem:
    """
    Main interface for rf95modem control.

    Example usage with context manager:

    .. code-block:: python

        with RF95Modem(port="/dev/ttyUSB0") as modem:
            status = modem.fetch_status()
            print(status)
            print(f"MTU: {modem.mtu()} bytes")

            # Received LoRa frames arrive as "+RX" lines
            modem.register_urc_callback("+RX", lambda line: print(line))

    Example usage with manual lifecycle management:

    .. code-block:: python

        modem = RF95Modem(port="/dev/ttyUSB0")
        modem.start()
        # ... use modem ...
        modem.close()
    """

    def __init__(
        self,
        port: Optional[str] = None,
        transport: Optional[Transport] = None,
        baudrate: int = 115200,
        timeout: float = 1.0,
        status_lines: int = STATUS_RESPONSE_LINES,
        log_urcs: bool = False,
        max_urc_queue_size: int = 1000,
        auto_start: bool = False,
        on_disconnect: Optional[Callable[[Exception], None]] = None
    ) -> None:
        """
        Initialize RF95Modem.

        Args:
            port: Serial port path (e.g., "/dev/ttyUSB0"). Either port or transport required.
            transport: Custom transport instance (for testing). Overrides port if provided.
            baudrate: Serial port baud rate (default: 115200)
            timeout: AT command timeout in seconds (default: 1.0)
            status_lines: Lines in the firmware's AT+INFO reply (default: 13)
            log_urcs: Log URCs at INFO level instead of DEBUG (default: False)
            max_urc_queue_size: Maximum URCs to queue (default: 1000)
            auto_start: Automatically start reader thread (default: False)
            on_disconnect: Optional callback function called when device disconnects.
                          Signature: callback(exception: Exception) -> None

        Raises:
            ValueError: If neither port nor transport is provided
            TransportError: If serial port cannot be opened
        """
        if transport is None and port is None:
            raise ValueError("Either 'port' or 'transport' must be provided")

        if transport is None:
            transport = SerialTransport(
                port=port,
                baudrate=baudrate,
                timeout=timeout
            )
            logger.info(f"Created serial transport for {port}")

        self._core = ModemCore(
            transport=transport,
            timeout=timeout,
            log_urcs=log_urcs,
            max_urc_queue_size=max_urc_queue_size,
            on_disconnect=on_disconnect
        )

        self.status = StatusManager(self._core, status_lines=status_lines)

        logger.info("Initialized RF95Modem")

        if auto_start:
            self.start()

    def start(self) -> None:
        """
        Start the modem reader thread.

        Must be called before using the modem (unless auto_start=True or using context manager).
        """
        self._core.start()
        logger.info("Modem started")

    def stop(self) -> None:
        """Stop the modem reader thread."""
        self._core.stop()
        logger.info("Modem stopped")

    def close(self) -> None:
        """
        Close the modem connection.

        Stops the reader thread and closes the transport.
        """
        self._core.close()
        logger.info("Modem closed")

    def fetch_status(self) -> Status:
        """
        Query the modem's status (AT+INFO).

        Either a complete Status is returned or an exception is raised;
        a partially decoded status never reaches the caller.

        Raises:
            TransportError: If the exchange fails or times out
            ATParseError: If the response cannot be decoded
        """
        return self.status.fetch_status()

    def mtu(self) -> int:
        """
        Get the modem's MTU (maximum packet size in bytes).

        The value is fetched once and cached for the lifetime of this
        handle; call update_mtu() to refresh it.
        """
        return self.status.mtu()

    def update_mtu(self) -> int:
        """Refresh the cached MTU from the modem."""
        return self.status.update_mtu()

    def register_urc_callback(self, prefix: str, callback: URCCallback) -> None:
        """
        Register a callback for unsolicited lines.

        Args:
            prefix: Line prefix to match (e.g., "+RX" for received frames)
            callback: Function to call when a matching line arrives.
                     Signature: callback(line: str) -> None
        """
        self._core.register_urc_callback(prefix, callback)

    def unregister_urc_callback(self, prefix: str) -> bool:
        """
        Unregister a URC callback.

        Returns:
            True if callback was removed, False if not found
        """
        return self._core.unregister_urc_callback(prefix)

    def send_raw_at(self, cmd: str, timeout: Optional[float] = None) -> list[str]:
        """
        Send a raw AT command and collect lines up to OK, +OK or ERROR.

        For commands not covered by the managers.

        Args:
            cmd: AT command (e.g., "AT+FREQ=868.1" or "+FREQ=868.1")
            timeout: Command timeout in seconds (uses default if None)

        Returns:
            List of stripped response lines

        Raises:
            ATTimeoutError: If command times out
            RF95Error: If command returns ERROR
        """
        return self._core.send_at(cmd=cmd, timeout=timeout)

    @property
    def is_running(self) -> bool:
        """Check if the modem reader thread is running."""
        return self._core.is_running()

    @property
    def is_disconnected(self) -> bool:
        """Check if the device was disconnected."""
        return self._core.is_disconnected()

    def __enter__(self):
        """
        Context manager entry.

        Automatically starts the modem if not already running.
        """
        if not self.is_running:
            self.start()
        return self

    def __exit__(self, *exc):
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        """String representation of modem."""
        status = "running" if self.is_running else "stopped"
        return f"<RF95Modem status={status}>"
