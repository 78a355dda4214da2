from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A line/column view of an offset into the source text."""
    source_line: str
    line: int = 1    # 1-based
    column: int = 0  # 0-based

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


@dataclass(frozen=True)
class Stream:
    """
    Immutable view of the input: the full source text plus how much of it
    has been consumed. Every successful match returns a new Stream; failed
    matches hand back the one they were given.

    The unconsumed part is derived from the offset instead of being sliced
    eagerly, so advancing never copies the source.
    """
    data: str
    offset: int = 0

    @classmethod
    def initial(cls, text: str) -> 'Stream':
        return cls(text, 0)

    @property
    def remaining(self) -> str:
        return self.data[self.offset:]

    @property
    def at_end(self) -> bool:
        return self.offset >= len(self.data)

    def startswith(self, prefix: str) -> bool:
        return self.data.startswith(prefix, self.offset)

    def peek(self) -> str:
        """The next unconsumed character, or '' at end of input."""
        return self.data[self.offset:self.offset + 1]

    def advance(self, n: int) -> 'Stream':
        if n == 0:
            return self
        return Stream(self.data, self.offset + n)

    def location(self) -> Location:
        """
        Recompute line/column from the absolute offset.

        Lines are split on "\n" only; a "\r" before it stays part of the
        line for column counting but is left out of `source_line`.
        """
        previous = 0
        lines = self.data.split("\n")
        for number, text in enumerate(lines, start=1):
            if self.offset <= previous + len(text):
                return Location(text.rstrip("\r"), number, self.offset - previous)
            previous += len(text) + 1
        # Unreachable while offset <= len(data); clamp to the last line.
        last = lines[-1]
        return Location(last.rstrip("\r"), len(lines), len(last))

    @property
    def line(self) -> int:
        return self.location().line

    @property
    def column(self) -> int:
        return self.location().column

    def __repr__(self) -> str:
        rest = self.remaining
        shown = rest[:20] + ("..." if len(rest) > 20 else "")
        return f"Stream(offset={self.offset}, remaining={shown!r})"
