"""
Tests for device disconnection handling.
"""

import time

import pytest

from rf95modem import RF95Modem, MockTransport, DeviceDisconnectedError, ModemNotStartedError


def test_disconnection_callback():
    """Test that disconnection callback is called when device disconnects."""
    errors = []

    transport = MockTransport()
    modem = RF95Modem(transport=transport, on_disconnect=errors.append)
    modem.start()

    assert modem.is_running is True
    assert modem.is_disconnected is False

    # Simulate disconnection
    transport.close()
    time.sleep(0.5)

    assert len(errors) == 1
    assert isinstance(errors[0], DeviceDisconnectedError)
    assert modem.is_disconnected is True
    assert modem.is_running is False

    modem.close()


def test_fetch_status_after_disconnection():
    """Test that a disconnected modem refuses new exchanges."""
    transport = MockTransport()
    modem = RF95Modem(transport=transport)
    modem.start()

    transport.close()
    time.sleep(0.5)

    with pytest.raises(ModemNotStartedError):
        modem.fetch_status()

    modem.close()


def test_no_infinite_loop_on_disconnection():
    """Test that disconnection doesn't cause infinite error loop."""
    errors = []

    transport = MockTransport()
    modem = RF95Modem(transport=transport, on_disconnect=errors.append)
    modem.start()

    transport.close()
    time.sleep(1.0)

    # Callback should only be called once, not looping
    assert len(errors) == 1
    assert modem.is_running is False

    modem.close()


def test_consecutive_error_limit():
    """Test that too many consecutive errors stops the reader thread."""
    class ErrorTransport(MockTransport):
        def __init__(self):
            super().__init__()
            self.read_count = 0

        def read_until(self, terminator=b"\n", timeout=None):
            self.read_count += 1
            raise RuntimeError("Test error")

    transport = ErrorTransport()
    modem = RF95Modem(transport=transport)
    modem.start()

    # Exponential backoff: 0.1s, 0.2s, 0.4s, 0.8s = ~1.5s before the fifth error
    time.sleep(3.0)

    assert modem.is_running is False
    assert transport.read_count >= 5

    modem.close()


def test_successful_reads_keep_reader_running():
    """Test that normal traffic does not trip the error counter."""
    transport = MockTransport()
    modem = RF95Modem(transport=transport)
    modem.start()

    transport.add_unsolicited(["+RX 1,ff,-10,2", "+RX 2,ffff,-11,2"])
    time.sleep(0.3)

    assert modem.is_running is True

    modem.close()
