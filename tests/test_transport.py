"""
Tests for transport layer.
"""

from unittest import mock

import pytest
from serial import SerialException

from rf95modem.core import MockTransport, SerialTransport
from rf95modem.exceptions import RF95Error, TransportError, DeviceDisconnectedError


def test_mock_transport_write():
    """Test MockTransport write operation."""
    transport = MockTransport()

    written = transport.write(b"AT+INFO\r\n")
    assert written == 9
    assert transport.written == [b"AT+INFO\r\n"]

    transport.close()


def test_mock_transport_reply_after_write():
    """Test that a queued reply is only readable once a command was written."""
    transport = MockTransport()
    transport.add_response(["+OK"])

    assert transport.read_until() == b""

    transport.write(b"AT\r\n")
    assert transport.read_until() == b"+OK\r\n"

    transport.close()


def test_mock_transport_one_reply_per_write():
    """Test that each write releases exactly one queued reply."""
    transport = MockTransport()
    transport.add_response(["+STATUS:", "+OK"])
    transport.add_response(["OK"])

    transport.write(b"AT+INFO\r\n")
    assert transport.read_until() == b"+STATUS:\r\n"
    assert transport.read_until() == b"+OK\r\n"
    assert transport.read_until() == b""

    transport.write(b"AT\r\n")
    assert transport.read_until() == b"OK\r\n"

    transport.close()


def test_mock_transport_keeps_explicit_terminator():
    """Test that lines already ending in LF are sent as given."""
    transport = MockTransport()
    transport.add_response(["firmware: 0.6.0\n", ""])

    transport.write(b"AT+INFO\r\n")
    assert transport.read_until() == b"firmware: 0.6.0\n"
    assert transport.read_until() == b"\r\n"

    transport.close()


def test_mock_transport_unsolicited():
    """Test that unsolicited lines are readable without a command."""
    transport = MockTransport()
    transport.add_unsolicited(["+RX 5,48656c6c6f,-40,9"])

    assert transport.read_until() == b"+RX 5,48656c6c6f,-40,9\r\n"

    transport.close()


def test_mock_transport_empty_read():
    """Test MockTransport returns empty when no data."""
    transport = MockTransport()

    assert transport.read_until() == b""

    transport.close()


def test_mock_transport_is_open():
    """Test MockTransport is_open status."""
    transport = MockTransport()

    assert transport.is_open() is True

    transport.close()
    assert transport.is_open() is False


def test_mock_transport_write_when_closed():
    """Test MockTransport raises error when writing to closed transport."""
    transport = MockTransport()
    transport.close()

    with pytest.raises(DeviceDisconnectedError):
        transport.write(b"AT\r\n")


def test_mock_transport_clear_responses():
    """Test MockTransport clear_responses."""
    transport = MockTransport()

    transport.add_response(["Line 1"])
    transport.add_response(["Line 2"])
    transport.clear_responses()

    transport.write(b"AT\r\n")
    assert transport.read_until() == b""

    transport.close()


@mock.patch("rf95modem.core.transport.serial.Serial")
def test_serial_transport_open_failure(serial_cls):
    """Test that a port that cannot be opened raises TransportError."""
    serial_cls.side_effect = SerialException("could not open port /dev/ttyUSB9")

    with pytest.raises(TransportError) as exc_info:
        SerialTransport("/dev/ttyUSB9")

    assert isinstance(exc_info.value, RF95Error)
    assert "/dev/ttyUSB9" in str(exc_info.value)


@mock.patch("rf95modem.core.transport.serial.Serial")
def test_serial_transport_read_restores_timeout(serial_cls):
    """Test that a per-call timeout does not stick to the port."""
    port = serial_cls.return_value
    port.timeout = 1.0
    port.read_until.return_value = b"+OK\r\n"

    transport = SerialTransport("/dev/ttyUSB0")

    assert transport.read_until(b"\n", timeout=0.1) == b"+OK\r\n"
    port.read_until.assert_called_once_with(b"\n")
    assert port.timeout == 1.0


@mock.patch("rf95modem.core.transport.serial.Serial")
def test_serial_transport_disconnect_detection(serial_cls):
    """Test that pyserial disconnect errors become DeviceDisconnectedError."""
    port = serial_cls.return_value
    port.read_until.side_effect = SerialException(
        "device reports readiness to read but returned no data"
    )

    transport = SerialTransport("/dev/ttyUSB0")

    with pytest.raises(DeviceDisconnectedError):
        transport.read_until()


@mock.patch("rf95modem.core.transport.serial.Serial")
def test_serial_transport_write_failure(serial_cls):
    """Test that other write errors become plain TransportError."""
    port = serial_cls.return_value
    port.write.side_effect = SerialException("write timeout")

    transport = SerialTransport("/dev/ttyUSB0")

    with pytest.raises(TransportError) as exc_info:
        transport.write(b"AT\r\n")

    assert not isinstance(exc_info.value, DeviceDisconnectedError)
