# tests/conftest.py
import pytest

from parcomb.Parsec import Ok, ParseResult
from parcomb.Stream import Stream


def assert_result_eq(res1: ParseResult, res2: ParseResult):
    """
    Deep comparison of two ParseResults.
    """
    assert res1.user == res2.user, f"User state mismatch: {res1.user!r} != {res2.user!r}"
    assert res1.stream == res2.stream, f"Stream mismatch: {res1.stream!r} != {res2.stream!r}"

    if isinstance(res1.reply, Ok):
        assert isinstance(res2.reply, Ok), "Reply mismatch: Ok vs Error"
        assert res1.reply.value == res2.reply.value
    else:
        assert not isinstance(res2.reply, Ok), "Reply mismatch: Error vs Ok"
        assert res1.reply.messages == res2.reply.messages


@pytest.fixture
def initial_stream():
    def _make(input_data):
        return Stream.initial(input_data)

    return _make
