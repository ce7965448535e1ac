"""
Unsolicited result code (URC) handler.

rf95modem pushes lines nobody asked for, most notably "+RX" lines for
received LoRa frames. They are queued here and dispatched to callbacks
registered by prefix.
"""

import logging
import threading
from collections import deque
from typing import Callable, Deque, Dict, Optional

logger = logging.getLogger(__name__)

# Type alias for URC callbacks
URCCallback = Callable[[str], None]


class URCHandler:
    """
    Queue and prefix-callback registry for unsolicited lines.

    The queue is bounded; the oldest line is dropped once it is full.
    A failing callback is logged and never stops the reader thread.
    """

    def __init__(
        self,
        max_queue_size: int = 1000,
        log_urcs: bool = False
    ) -> None:
        """
        Initialize URC handler.

        Args:
            max_queue_size: Maximum number of URCs to queue
            log_urcs: Whether to log URCs at INFO level
        """
        self.log_urcs = log_urcs
        self._urc_queue: Deque[str] = deque(maxlen=max_queue_size)
        self._callbacks: Dict[str, URCCallback] = {}
        self._lock = threading.Lock()

        logger.info(f"Initialized URC handler (max_queue_size={max_queue_size})")

    def register_callback(self, prefix: str, callback: URCCallback) -> None:
        """
        Register a callback for URCs matching a prefix.

        Args:
            prefix: URC prefix to match (e.g., "+RX")
            callback: Called with the stripped line
        """
        with self._lock:
            self._callbacks[prefix] = callback
        logger.info(f"Registered URC callback for prefix: {prefix}")

    def unregister_callback(self, prefix: str) -> bool:
        """
        Unregister a URC callback.

        Returns:
            True if callback was removed, False if not found
        """
        with self._lock:
            removed = self._callbacks.pop(prefix, None) is not None
        if removed:
            logger.info(f"Unregistered URC callback for prefix: {prefix}")
        return removed

    def handle_urc(self, line: str) -> None:
        """Queue a URC line and dispatch it to matching callbacks."""
        logger.log(logging.INFO if self.log_urcs else logging.DEBUG, f"URC received: {line}")

        with self._lock:
            self._urc_queue.append(line)
            # Call outside the lock so a slow callback cannot block registration
            matching = [
                (prefix, cb) for prefix, cb in self._callbacks.items()
                if line.startswith(prefix)
            ]

        for prefix, callback in matching:
            try:
                callback(line)
            except Exception as e:
                logger.error(f"URC callback for '{prefix}' failed: {e}", exc_info=True)

    def get_urc_queue(self) -> list[str]:
        """Copy of the queued URCs, oldest first."""
        with self._lock:
            return list(self._urc_queue)

    def pop_urc(self) -> Optional[str]:
        """Pop the oldest URC, or None if the queue is empty."""
        with self._lock:
            return self._urc_queue.popleft() if self._urc_queue else None

    def queue_size(self) -> int:
        with self._lock:
            return len(self._urc_queue)

    def get_callbacks(self) -> Dict[str, URCCallback]:
        """Registered callbacks by prefix (for debugging)."""
        with self._lock:
            return dict(self._callbacks)
