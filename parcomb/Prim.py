import logging
import re
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from .Parsec import Parsec, ParseError, ParseResult, T, U
from .Stream import Stream

logger = logging.getLogger(__name__)

AccType = TypeVar('AccType')

INVALID_PATTERN_MESSAGE = "invalid regular expression"


def pure(value: T) -> Parsec[T]:
    """Return a parser that succeeds with a value without consuming input."""
    def parse(user: Any, stream: Stream) -> ParseResult[T]:
        return ParseResult.success(value, user, stream)
    return Parsec(parse)


def fail(msg: str) -> Parsec[Any]:
    """A parser that always fails with a message."""
    def parse(user: Any, stream: Stream) -> ParseResult[Any]:
        return ParseResult.failure([msg], user, stream)
    return Parsec(parse)


def _fail_silently() -> Parsec[Any]:
    # Identity for `|`: fails without adding any message.
    def parse(user: Any, stream: Stream) -> ParseResult[Any]:
        return ParseResult.failure([], user, stream)
    return Parsec(parse)


def string(s: str) -> Parsec[str]:
    """Parses the exact string s and returns it."""
    expected = f'expected "{s}"'

    def parse(user: Any, stream: Stream) -> ParseResult[str]:
        if stream.startswith(s):
            return ParseResult.success(s, user, stream.advance(len(s)))
        return ParseResult.failure([expected], user, stream)
    return Parsec(parse)


def regex(pattern: str, flags: int = 0) -> Parsec[str]:
    """
    Match `pattern` at the current position and return the matched text.

    The pattern is matched against the unconsumed text only, anchored at its
    start, so it never skips ahead; `^` and lookbehinds see the current
    position as the beginning of the input. An invalid pattern does not
    raise: the returned parser always fails with INVALID_PATTERN_MESSAGE.
    """
    try:
        compiled = re.compile(pattern, flags)
    except re.error as e:
        logger.warning("invalid regular expression %r: %s", pattern, e)
        return fail(INVALID_PATTERN_MESSAGE)

    expected = f'expected pattern "{pattern}"'

    def parse(user: Any, stream: Stream) -> ParseResult[str]:
        m = compiled.match(stream.remaining)
        if m is None:
            return ParseResult.failure([expected], user, stream)
        matched = m.group(0)
        return ParseResult.success(matched, user, stream.advance(len(matched)))
    return Parsec(parse)


def take_while(pred: Callable[[str], bool]) -> Parsec[str]:
    """Consume characters while `pred` holds. Never fails; may return ''."""
    def parse(user: Any, stream: Stream) -> ParseResult[str]:
        data = stream.data
        end = stream.offset
        while end < len(data) and pred(data[end]):
            end += 1
        return ParseResult.success(data[stream.offset:end], user, stream.advance(end - stream.offset))
    return Parsec(parse)


def eof() -> Parsec[None]:
    """Succeeds only if no input remains."""
    def parse(user: Any, stream: Stream) -> ParseResult[None]:
        if stream.at_end:
            return ParseResult.success(None, user, stream)
        return ParseResult.failure(["expected end of input"], user, stream)
    return Parsec(parse)


def look_ahead(parser: Parsec[T]) -> Parsec[T]:
    """Parse without consuming input."""
    def parse(user: Any, stream: Stream) -> ParseResult[T]:
        res = parser(user, stream)
        if not res.ok:
            return res
        # Keep the value and the user state, but rewind the stream.
        return ParseResult(res.user, stream, res.reply)
    return Parsec(parse)


def lazy(thunk: Callable[[], Parsec[T]]) -> Parsec[T]:
    """
    Defer building a parser until it is first applied.

    This is how a rule refers to itself or to a rule defined further down:

        expr = lazy(lambda: term | parens(expr))

    `thunk` runs at most once per `lazy` call; the parser it returns is
    cached and reused for every later application.
    """
    return Parsec(thunk=thunk)


def ap(pf: Parsec[Callable[[T], U]], pv: Parsec[T]) -> Parsec[U]:
    """Run `pf` then `pv` and apply the parsed function to the parsed value."""
    return pf.bind(lambda f: pv.map(f))


def sequence(parsers: List[Parsec[Any]]) -> Parsec[List[Any]]:
    """Run parsers in order, collecting their results; stop at the first failure."""
    def parse(user: Any, stream: Stream) -> ParseResult[List[Any]]:
        results = []
        for p in parsers:
            res = p(user, stream)
            if not res.ok:
                return res
            results.append(res.value)
            user, stream = res.user, res.stream
        return ParseResult.success(results, user, stream)
    return Parsec(parse)


# --- User state ---

def get_state() -> Parsec[Any]:
    """Succeed with the current user state."""
    def parse(user: Any, stream: Stream) -> ParseResult[Any]:
        return ParseResult.success(user, user, stream)
    return Parsec(parse)


def with_state(f: Callable[[Any], Parsec[T]]) -> Parsec[T]:
    """Run the parser that `f` builds from the current user state."""
    def parse(user: Any, stream: Stream) -> ParseResult[T]:
        return f(user)(user, stream)
    return Parsec(parse)


def put_state(new_user: Any) -> Parsec[None]:
    """Replace the user state."""
    def parse(_user: Any, stream: Stream) -> ParseResult[None]:
        return ParseResult.success(None, new_user, stream)
    return Parsec(parse)


def modify_state(f: Callable[[Any], Any]) -> Parsec[None]:
    """Replace the user state with `f(user)`."""
    def parse(user: Any, stream: Stream) -> ParseResult[None]:
        return ParseResult.success(None, f(user), stream)
    return Parsec(parse)


# --- Repetition ---

def _many_accum(
    acc_func: Callable[[T, AccType], AccType],
    p: Parsec[T],
    empty_acc_value: Callable[[], AccType]
) -> Parsec[AccType]:
    def parse_accum(user: Any, stream: Stream) -> ParseResult[AccType]:
        current_acc = empty_acc_value()

        while True:
            res_p = p(user, stream)

            if not res_p.ok:
                # Failure ends the repetition; its messages are dropped.
                return ParseResult.success(current_acc, user, stream)

            if res_p.stream == stream:
                # A match that consumed nothing would repeat forever.
                # Its value is dropped, its user state is kept.
                return ParseResult.success(current_acc, res_p.user, stream)

            current_acc = acc_func(res_p.value, current_acc)
            user, stream = res_p.user, res_p.stream
    return Parsec(parse_accum)


def _append(item: T, lst: List[T]) -> List[T]:
    lst.append(item)
    return lst


def many(p: Parsec[T]) -> Parsec[List[T]]:
    """
    Parse zero or more occurrences of `p`.

    Stops at the first failure of `p`, or at the first success of `p` that
    consumes nothing. In the second case the value of that last application
    is not collected, but the user state it produced is kept.
    """
    return _many_accum(_append, p, list)


def skip_many(parser: Parsec[Any]) -> Parsec[None]:
    """Skips zero or more occurrences of `parser`."""
    return _many_accum(lambda item, acc_val: None, parser, lambda: None)


# --- Running ---

def run_with_state(parser: Parsec[T], input_str: str, user_state: Any) -> ParseResult[T]:
    """Apply `parser` to the whole of `input_str`, starting from `user_state`."""
    return parser(user_state, Stream.initial(input_str))


def run(parser: Parsec[T], input_str: str) -> ParseResult[T]:
    """Apply `parser` to `input_str` with no user state (None)."""
    return run_with_state(parser, input_str, None)


def run_parser(parser: Parsec[T],
               input_str: str,
               user_state: Any = None,
               source_name: str = "") -> Tuple[Optional[T], Optional[ParseError]]:
    res = run_with_state(parser, input_str, user_state)
    if res.ok:
        return res.value, None
    return None, ParseError.from_result(res, source_name)
