from hypothesis import given
from hypothesis import strategies as st

from parcomb.Stream import Location, Stream


def test_initial_stream():
    s = Stream.initial("abc")
    assert s.offset == 0
    assert s.remaining == "abc"
    assert not s.at_end


def test_advance_returns_new_stream():
    s = Stream.initial("abc")
    t = s.advance(2)
    assert s.offset == 0
    assert t.offset == 2
    assert t.remaining == "c"
    assert t.data is s.data
    assert s.advance(0) is s


def test_location_first_line():
    s = Stream("ab\ncd", 0)
    assert s.location() == Location("ab", 1, 0)


def test_location_end_of_line_belongs_to_that_line():
    s = Stream("ab\ncd", 2)
    assert s.location() == Location("ab", 1, 2)


def test_location_after_newline():
    s = Stream("ab\ncd", 3)
    assert s.location() == Location("cd", 2, 0)
    assert s.line == 2
    assert s.column == 0


def test_location_at_end_of_input():
    s = Stream("ab\ncd", 5)
    assert s.at_end
    assert s.location() == Location("cd", 2, 2)


def test_location_empty_input():
    assert Stream.initial("").location() == Location("", 1, 0)


def test_location_crlf_lines():
    text = "ab\r\ncd"
    assert Stream(text, 2).location() == Location("ab", 1, 2)
    # The "\r" is counted in the column but not shown in the line text.
    assert Stream(text, 3).location() == Location("ab", 1, 3)
    assert Stream(text, 4).location() == Location("cd", 2, 0)


def test_location_str():
    assert str(Location("x", 3, 4)) == "line 3, column 4"


@given(st.text(alphabet="ab\n"), st.data())
def test_offset_invariant_and_location(text, data):
    offset = data.draw(st.integers(min_value=0, max_value=len(text)))
    s = Stream(text, offset)

    assert s.offset == len(s.data) - len(s.remaining)
    assert text[offset:] == s.remaining

    loc = s.location()
    assert loc.line == text[:offset].count("\n") + 1
    assert loc.column == offset - (text.rfind("\n", 0, offset) + 1)
    assert loc.source_line == text.split("\n")[loc.line - 1]
