import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar, Union

from .Stream import Location, Stream

logger = logging.getLogger(__name__)

T = TypeVar('T')  # Generic type for parser results
U = TypeVar('U')


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful reply carrying the parsed value."""
    value: T


@dataclass(frozen=True)
class Error:
    """Failed reply carrying the ordered failure messages."""
    messages: List[str] = field(default_factory=list)


Reply = Union[Ok[T], Error]


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """What applying a parser produces: the user state, the stream and the reply."""
    user: Any
    stream: Stream
    reply: Reply

    @classmethod
    def success(cls, value: T, user: Any, stream: Stream) -> 'ParseResult[T]':
        return cls(user, stream, Ok(value))

    @classmethod
    def failure(cls, messages: List[str], user: Any, stream: Stream) -> 'ParseResult[T]':
        return cls(user, stream, Error(list(messages)))

    @property
    def ok(self) -> bool:
        return isinstance(self.reply, Ok)

    @property
    def value(self) -> Optional[T]:
        """The parsed value, or None for a failure."""
        return self.reply.value if isinstance(self.reply, Ok) else None

    @property
    def messages(self) -> List[str]:
        """The failure messages, empty for a success."""
        return self.reply.messages if isinstance(self.reply, Error) else []


@dataclass
class ParseError:
    """Represents a parsing failure: where it stopped and why."""
    location: Location
    messages: List[str]
    name: str = ""

    @classmethod
    def from_result(cls, result: ParseResult, name: str = "") -> 'ParseError':
        return cls(result.stream.location(), list(result.messages), name)

    def __str__(self) -> str:
        where = f"{self.name} {self.location}" if self.name else str(self.location)
        explanation = " or ".join(self.messages) if self.messages else "unknown parse error"
        return f"Parse error at {where}: {explanation}"


ParseFn = Callable[[Any, Stream], ParseResult[T]]


class Parsec(Generic[T]):
    """
    A parser combinator: given a user state and a stream it returns a ParseResult.

    A Parsec is either immediate, wrapping a parse function, or deferred,
    wrapping a zero-argument thunk that builds the real parser. A deferred
    parser forces its thunk on first application and reuses the result.
    """
    def __init__(self, parse_fn: Optional[ParseFn[T]] = None,
                 thunk: Optional[Callable[[], 'Parsec[T]']] = None):
        if (parse_fn is None) == (thunk is None):
            raise TypeError("Parsec needs exactly one of parse_fn or thunk")
        self.parse_fn = parse_fn
        self._thunk = thunk
        self._forced: Optional['Parsec[T]'] = None
        self._forcing = False

    @property
    def is_deferred(self) -> bool:
        return self._thunk is not None

    def force(self) -> 'Parsec[T]':
        """Build (once) and return the parser behind a deferred Parsec."""
        if self._thunk is None:
            return self
        if self._forced is None:
            if self._forcing:
                raise RuntimeError("lazy parser was applied while its own thunk was running")
            self._forcing = True
            try:
                produced = self._thunk()
            finally:
                self._forcing = False
            if not isinstance(produced, Parsec):
                raise TypeError(f"lazy thunk must return a Parsec, got {type(produced).__name__}")
            logger.debug("forced lazy parser %r -> %r", self, produced)
            self._forced = produced
        return self._forced

    def __call__(self, user: Any, stream: Stream) -> ParseResult[T]:
        if self._thunk is not None:
            return self.force()(user, stream)
        return self.parse_fn(user, stream)

    # Monadic bind (>>=)
    def bind(self, f: Callable[[T], 'Parsec[U]']) -> 'Parsec[U]':
        def parse(user: Any, stream: Stream) -> ParseResult[U]:
            res = self(user, stream)
            if not res.ok:
                # The continuation never runs; the failure passes through untouched.
                return res
            return f(res.value)(res.user, res.stream)
        return Parsec(parse)

    # Functor map (<$>)
    def map(self, f: Callable[[T], U]) -> 'Parsec[U]':
        def parse(user: Any, stream: Stream) -> ParseResult[U]:
            res = self(user, stream)
            if not res.ok:
                return res
            return ParseResult.success(f(res.value), res.user, res.stream)
        return Parsec(parse)

    def map_error(self, f: Callable[[List[str]], List[str]]) -> 'Parsec[T]':
        """Transform the message list of a failure; successes pass through."""
        def parse(user: Any, stream: Stream) -> ParseResult[T]:
            res = self(user, stream)
            if res.ok:
                return res
            return ParseResult.failure(f(res.messages), res.user, res.stream)
        return Parsec(parse)

    # Alternative (<|>)
    def __or__(self, other: 'Parsec[T]') -> 'Parsec[T]':
        def parse(user: Any, stream: Stream) -> ParseResult[T]:
            left = self(user, stream)
            if left.ok:
                return left
            # Right starts from the original user state and stream.
            right = other(user, stream)
            if right.ok:
                return right
            return ParseResult.failure(left.messages + right.messages, user, stream)
        return Parsec(parse)

    # Sequence (&)
    # self: Parsec[T], other: Parsec[U] -> result: Parsec[Tuple[T, U]]
    def __and__(self, other: 'Parsec[U]') -> 'Parsec[Tuple[T, U]]':
        return self.bind(lambda x: other.map(lambda y: (x, y)))

    # Sequence (*>)
    def __gt__(self, other: 'Parsec[U]') -> 'Parsec[U]':
        return self.bind(lambda _: other)

    # Sequence (<*)
    def __lt__(self, other: 'Parsec[U]') -> 'Parsec[T]':
        return self.bind(lambda x: other.map(lambda _: x))

    # `p >> f` binds when f is a function and sequences when it is a parser.
    def __rshift__(self, other: Union['Parsec[U]', Callable[[T], 'Parsec[U]']]) -> 'Parsec[U]':
        if isinstance(other, Parsec):
            return self > other
        return self.bind(other)

    # Label (<?>)
    def label(self, name: str) -> 'Parsec[T]':
        """On failure, replace the messages with a single `expected <name>`."""
        return self.map_error(lambda _: [f"expected {name}"])

    def __repr__(self) -> str:
        kind = "deferred" if self._thunk is not None else "immediate"
        return f"<Parsec {kind} at {id(self):#x}>"
