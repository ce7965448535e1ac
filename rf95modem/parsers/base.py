"""
Base parser classes.

Parsers convert raw AT command responses into typed data structures.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic

T = TypeVar('T')


class ResponseParser(ABC, Generic[T]):
    """Abstract base class for response parsers."""

    @abstractmethod
    def parse(self, response: list[str]) -> T:
        """
        Parse AT command response.

        Args:
            response: List of response lines from modem

        Returns:
            Parsed data structure

        Raises:
            ATParseError: If response cannot be parsed
        """
        pass
