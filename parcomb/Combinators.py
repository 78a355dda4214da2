import logging
from dataclasses import dataclass
from typing import Any, Generic, List, Optional

from .Parsec import Parsec, ParseResult, T
from .Prim import _fail_silently, fail, many, pure, skip_many
from .Stream import Stream

logger = logging.getLogger(__name__)


# 1. either / choice: Tries parsers in order until one succeeds
def either(p: Parsec[T], q: Parsec[T]) -> Parsec[T]:
    """Function form of `p | q`."""
    return p | q


def choice(parsers: List[Parsec[T]]) -> Parsec[T]:
    """
    Applies a list of parsers in order until one succeeds.
    If none succeed, fails with all of their messages, in order.
    """
    result = _fail_silently()
    for p in reversed(parsers):
        result = p | result
    return result


# 2. count: Parses n occurrences of a parser
def count(n: int, p: Parsec[T]) -> Parsec[List[T]]:
    if n <= 0:
        return pure([])

    def parse(user: Any, stream: Stream) -> ParseResult[List[T]]:
        results = []
        for _ in range(n):
            res_p = p(user, stream)
            if not res_p.ok:
                return res_p
            results.append(res_p.value)
            user, stream = res_p.user, res_p.stream
        return ParseResult.success(results, user, stream)
    return Parsec(parse)


# 3. between: Parses an opening parser, a main parser, and a closing parser
def between(open: Parsec[Any], close: Parsec[Any], p: Parsec[T]) -> Parsec[T]:
    """
    Parses 'open', then 'p', then 'close', returning the result of 'p'.
    """
    return open.bind(lambda _: p.bind(lambda x: close.bind(lambda _: pure(x))))


# 4. option: Tries a parser, returning a default value on failure
def option(x: T, p: Parsec[T]) -> Parsec[T]:
    """
    Tries parser p; returns its result if successful, else x.
    """
    return p | pure(x)


# 5. optionMaybe: Tries a parser, returning Optional[Just[T]]
@dataclass(frozen=True)
class Just(Generic[T]):
    """A present result of `option_maybe`; absence is None."""
    value: T


def option_maybe(p: Parsec[T]) -> Parsec[Optional[Just[T]]]:
    """
    Tries parser p; returns Just(value) if successful, else None.

    A failure of p is turned into None at the original position and user
    state. Its messages are dropped. Wrapping keeps a successful None
    (e.g. from eof()) apart from absence.
    """
    def parse(user: Any, stream: Stream) -> ParseResult[Optional[Just[T]]]:
        res = p(user, stream)
        if res.ok:
            return ParseResult.success(Just(res.value), res.user, res.stream)
        return ParseResult.success(None, user, stream)
    return Parsec(parse)


# 6. skip / skipMany1: Discard results
def skip(p: Parsec[Any]) -> Parsec[None]:
    """Applies p and discards its result."""
    return p.map(lambda _: None)


def skip_many1(p: Parsec[Any]) -> Parsec[None]:
    """
    Applies parser p one or more times, discarding results.
    """
    return p > skip_many(p)


# 7. many1: Applies a parser one or more times
def many1(p: Parsec[T]) -> Parsec[List[T]]:
    """
    Applies parser p one or more times, returning a list of results.
    """
    return p.bind(lambda x: many(p).map(lambda xs: [x] + xs))


# 8. sepBy: Parses zero or more occurrences separated by a separator
def sep_by(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    """
    Parses zero or more occurrences of p separated by sep, returning a list of p's results.
    """
    return sep_by1(p, sep) | pure([])


def sep_by1(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    """
    Parses one or more occurrences of p separated by sep, returning a list of p's results.
    """
    return p.bind(lambda x: many(sep > p).map(lambda xs: [x] + xs))


# 9. endBy: Each occurrence is followed by a separator
def end_by(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    """
    Parses zero or more occurrences of p, each followed by sep, returning a list of p's results.
    """
    return many(p < sep)


def end_by1(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    """
    Parses one or more occurrences of p, each followed by sep, returning a list of p's results.
    """
    return many1(p < sep)


# 10. sepEndBy: Separated, with an optional trailing separator
def sep_end_by(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    """
    Parses zero or more occurrences of p separated and optionally ended by sep.
    """
    return sep_end_by1(p, sep) | pure([])


def sep_end_by1(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    """
    Parses one or more occurrences of p separated and optionally ended by sep.
    """
    return sep_by1(p, sep) < option_maybe(sep)


# 11. manyTill: Parses p zero or more times until end succeeds
def many_till(p: Parsec[T], end: Parsec[Any]) -> Parsec[List[T]]:
    """
    Applies p zero or more times until end succeeds, returning a list of p's results.

    `end` is tried before every occurrence of p and whatever it consumes is
    kept. If both `end` and p fail, p's failure is the result. Unlike
    `many`, a p that matches without consuming is not detected.
    """
    def parse(user: Any, stream: Stream) -> ParseResult[List[T]]:
        results = []
        while True:
            res_end = end(user, stream)
            if res_end.ok:
                return ParseResult.success(results, res_end.user, res_end.stream)
            res_p = p(user, stream)
            if not res_p.ok:
                return res_p
            results.append(res_p.value)
            user, stream = res_p.user, res_p.stream
    return Parsec(parse)


# 12. notFollowedBy: Succeeds if a parser fails
def not_followed_by(p: Parsec[Any]) -> Parsec[None]:
    def parse(user: Any, stream: Stream) -> ParseResult[None]:
        res = p(user, stream)
        if not res.ok:
            return ParseResult.success(None, user, stream)
        return ParseResult.failure([f"unexpected {res.value!r}"], user, stream)
    return Parsec(parse)


# 13. parserTrace: Debugging parser that logs the remaining input
def parser_trace(label_str: str) -> Parsec[None]:
    def parse(user: Any, stream: Stream) -> ParseResult[None]:
        if logger.isEnabledFor(logging.DEBUG):
            rest = stream.remaining
            logger.debug('%s: "%s%s" at %s', label_str, rest[:30],
                         "..." if len(rest) > 30 else "", stream.location())
        return ParseResult.success(None, user, stream)
    return Parsec(parse)


# 14. parserTraced: Debugging parser that traces execution and backtracking
def parser_traced(label_str: str, p: Parsec[T]) -> Parsec[T]:
    backtracked = parser_trace(f"{label_str} backtracked") > fail(f"{label_str} backtracked and parser failed")
    return parser_trace(label_str) > (p | backtracked)
