import pytest

from reportdesk.models import MessageType
from reportdesk.services import MessageBoard


def test_message_expires_after_ttl(clock):
    board = MessageBoard(3.0, clock)

    board.post_success("Report generated successfully! (12 records)")
    clock.advance(2.5)
    assert board.current.type is MessageType.SUCCESS

    clock.advance(0.5)
    assert board.current is None


def test_new_message_restarts_the_timer(clock):
    board = MessageBoard(3.0, clock)

    board.post_error("Export failed. Please try again.")
    clock.advance(2.0)
    board.post_success("Report exported as CSV successfully!")
    clock.advance(2.0)

    assert board.current.text == "Report exported as CSV successfully!"


def test_clear_removes_message(clock):
    board = MessageBoard(3.0, clock)
    board.post_error("Network error. Please try again.")

    board.clear()

    assert board.current is None


def test_ttl_must_be_positive():
    with pytest.raises(ValueError):
        MessageBoard(0)
