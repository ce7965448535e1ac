"""
Status manager.

Handles the AT+INFO exchange and the MTU cache derived from it.
"""

import logging
from typing import TYPE_CHECKING, Optional

from ..types import Status
from ..parsers.status import StatusParser, STATUS_COMMAND, STATUS_RESPONSE_LINES

if TYPE_CHECKING:
    from ..core import ModemCore

logger = logging.getLogger(__name__)


class StatusManager:
    """
    Manages modem status queries.

    One AT+INFO exchange runs at a time; the underlying protocol lock
    serializes it with every other command on the same connection.
    """

    def __init__(
        self,
        modem_core: "ModemCore",
        status_lines: int = STATUS_RESPONSE_LINES,
        timeout: Optional[float] = None
    ) -> None:
        """
        Initialize status manager.

        Args:
            modem_core: ModemCore instance for AT command execution
            status_lines: Number of lines the firmware sends for AT+INFO,
                framing and blank lines included
            timeout: AT+INFO timeout in seconds (core default if None)
        """
        if status_lines < 1:
            raise ValueError(f"status_lines must be positive, got {status_lines}")

        self.modem = modem_core
        self.status_lines = status_lines
        self.timeout = timeout

        # 0 means not fetched yet
        self._mtu = 0

        self._parser = StatusParser()

        logger.debug("Initialized StatusManager")

    def fetch_status(self) -> Status:
        """
        Query the modem's status information.

        Returns:
            Status with every field set

        Raises:
            TransportError: If the exchange fails or times out
            ATParseError: If the response cannot be decoded

        Example:

        .. code-block:: python

            status = modem.fetch_status()
            print(f"Firmware {status.firmware} on {status.frequency:.2f} MHz")
        """
        logger.info("Fetching modem status")
        response = self.modem.send_at(
            STATUS_COMMAND,
            expected_lines=self.status_lines,
            timeout=self.timeout
        )
        status = self._parser.parse(response)
        logger.debug(f"Status: {status}")
        return status

    def update_mtu(self) -> int:
        """
        Refresh the cached MTU from the modem's "max pkt size".

        The cache is left untouched if the status fetch fails.

        Returns:
            The new MTU
        """
        status = self.fetch_status()
        self._mtu = status.mtu
        logger.info(f"Updated MTU cache: {self._mtu}")
        return self._mtu

    def mtu(self) -> int:
        """
        Get the modem's MTU, fetching it on first use.

        Returns:
            Maximum packet size in bytes
        """
        if self._mtu == 0:
            self.update_mtu()
        return self._mtu
