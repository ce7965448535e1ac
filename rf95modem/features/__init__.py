"""
Feature managers for modem functionality.

- StatusManager: AT+INFO status and the cached MTU
"""

from .status import StatusManager

__all__ = [
    "StatusManager",
]
