"""
Tests for AT command exchange and unsolicited line handling.
"""

import time

import pytest

from rf95modem.core import ModemCore, URCHandler
from rf95modem.exceptions import RF95Error, ATTimeoutError


def _wait_for(predicate, timeout=1.0):
    end = time.monotonic() + timeout
    while time.monotonic() < end:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_send_at_fixed_line_count(modem_core, mock_transport):
    """Test collecting an exact number of raw lines."""
    mock_transport.add_response(["+STATUS:", "firmware: 0.6.0", "", "+OK"])

    lines = modem_core.send_at("AT+INFO", expected_lines=4)

    assert lines == ["+STATUS:\r\n", "firmware: 0.6.0\r\n", "\r\n", "+OK\r\n"]


def test_send_at_until_terminal_line(modem_core, mock_transport):
    """Test free-form replies end at OK or +OK and come back stripped."""
    mock_transport.add_response(["+FREQ: 868.10", "", "+OK"])

    lines = modem_core.send_at("+FREQ=868.1")

    assert lines == ["+FREQ: 868.10", "+OK"]
    assert mock_transport.written == [b"AT+FREQ=868.1\r\n"]


def test_send_at_error(modem_core, mock_transport):
    """Test that ERROR raises with the response attached."""
    mock_transport.add_response(["ERROR"])

    with pytest.raises(RF95Error) as exc_info:
        modem_core.send_at("AT+MODE=9")

    assert exc_info.value.command == "AT+MODE=9"
    assert exc_info.value.response == ["ERROR"]


def test_send_at_timeout(modem_core, mock_transport):
    """Test that no reply at all times out."""
    with pytest.raises(ATTimeoutError) as exc_info:
        modem_core.send_at("AT+INFO", expected_lines=13, timeout=0.2)

    assert exc_info.value.response == []


def test_unsolicited_line_during_exchange(modem_core, mock_transport):
    """Test that a received frame in the middle of a reply is routed to URCs."""
    received = []
    modem_core.register_urc_callback("+RX", received.append)
    mock_transport.add_response(["+STATUS:", "+RX 5,48656c6c6f,-40,9", "+OK"])

    lines = modem_core.send_at("AT+INFO", expected_lines=2)

    assert lines == ["+STATUS:\r\n", "+OK\r\n"]
    assert received == ["+RX 5,48656c6c6f,-40,9"]


def test_unsolicited_line_while_idle(modem_core, mock_transport):
    """Test that lines with no pending command end up in the URC queue."""
    mock_transport.add_unsolicited(["+RX 2,6869,-80,3", ""])

    assert _wait_for(lambda: modem_core.urc_handler.queue_size() == 1)
    assert modem_core.urc_handler.pop_urc() == "+RX 2,6869,-80,3"
    assert modem_core.urc_handler.pop_urc() is None


def test_unregister_urc_callback(modem):
    """Test removing a callback through the facade."""
    modem.register_urc_callback("+RX", lambda line: None)

    assert modem.unregister_urc_callback("+RX") is True
    assert modem.unregister_urc_callback("+RX") is False


def test_send_raw_at(modem, mock_transport):
    """Test the raw AT passthrough."""
    mock_transport.add_response(["OK"])

    assert modem.send_raw_at("AT") == ["OK"]


def test_urc_handler_bounded_queue():
    """Test that the oldest URC is dropped when the queue is full."""
    handler = URCHandler(max_queue_size=2)

    for line in ("+RX 1", "+RX 2", "+RX 3"):
        handler.handle_urc(line)

    assert handler.get_urc_queue() == ["+RX 2", "+RX 3"]


def test_urc_handler_failing_callback():
    """Test that a failing callback does not stop other callbacks."""
    handler = URCHandler()
    seen = []

    def broken(line):
        raise RuntimeError("boom")

    handler.register_callback("+RX", broken)
    handler.register_callback("+RX 1", seen.append)

    handler.handle_urc("+RX 1,ff,-10,2")

    assert seen == ["+RX 1,ff,-10,2"]
    assert set(handler.get_callbacks()) == {"+RX", "+RX 1"}


def test_reader_joins_partial_lines(mock_transport):
    """Test that bytes are held back until their line terminator arrives."""
    core = ModemCore(transport=mock_transport)

    core._feed(b"+RX 3,4142")
    assert core.urc_handler.get_urc_queue() == []

    core._feed(b"43\r\n+RX 1,")
    assert core.urc_handler.get_urc_queue() == ["+RX 3,414243"]

    core._feed(b"44\r\n")
    assert core.urc_handler.get_urc_queue() == ["+RX 3,414243", "+RX 1,44"]
