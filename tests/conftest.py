"""
Pytest configuration and fixtures.

Provides shared test fixtures for rf95modem tests.
"""

import pytest
import logging

from rf95modem.core import MockTransport, ModemCore
from rf95modem import RF95Modem


# Enable logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


STATUS_BLOCK = [
    "+STATUS:",
    "firmware: 0.6.0",
    "features: rfm95 lora",
    "modem config: 3 Bw125Cr48Sf4096",
    "frequency: 868.10",
    "max pkt size: 255",
    "BFB: 0",
    "rx bad: 0",
    "rx good: 12",
    "tx good: 8",
    "rx listener: 0",
    "GPS: 0",
    "+OK",
]


@pytest.fixture
def mock_transport():
    """
    Create a MockTransport instance for testing.

    Example:
        def test_something(mock_transport):
            mock_transport.add_response(["OK"])
            # ... test code ...
    """
    transport = MockTransport()
    yield transport
    transport.close()


@pytest.fixture
def modem_core(mock_transport):
    """
    Create a started ModemCore instance with MockTransport.

    Example:
        def test_at_command(modem_core, mock_transport):
            mock_transport.add_response(["+OK"])
            response = modem_core.send_at("AT+FREQ=868.1")
            assert response == ["+OK"]
    """
    core = ModemCore(transport=mock_transport, log_urcs=False)
    core.start()
    yield core
    core.close()


@pytest.fixture
def modem(mock_transport):
    """
    Create an RF95Modem instance with MockTransport.

    Example:
        def test_status(modem, mock_transport, status_response):
            mock_transport.add_response(status_response)
            status = modem.fetch_status()
            assert status.firmware == "0.6.0"
    """
    modem_instance = RF95Modem(transport=mock_transport, timeout=0.5)
    modem_instance.start()
    yield modem_instance
    modem_instance.close()


@pytest.fixture
def status_response():
    """Mock AT+INFO reply: 13 lines, framing included."""
    return list(STATUS_BLOCK)


@pytest.fixture
def raw_status_lines():
    """The AT+INFO reply as the reader thread hands it over (terminators kept)."""
    return [line + "\r\n" for line in STATUS_BLOCK]
