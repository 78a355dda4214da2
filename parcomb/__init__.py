import logging

# Core
from .Stream import Stream, Location
from .Parsec import Parsec, ParseResult, ParseError, Ok, Error
from .Prim import (
    run, run_with_state, run_parser,
    pure, fail, string, regex, take_while, eof, look_ahead, lazy,
    ap, sequence, many, skip_many,
    get_state, with_state, put_state, modify_state,
    INVALID_PATTERN_MESSAGE,
)

# Combinators
from .Combinators import (
    either, choice, count, between, option, option_maybe, Just,
    skip, many1, skip_many1, sep_by, sep_by1, end_by, end_by1,
    sep_end_by, sep_end_by1, many_till, not_followed_by,
    parser_trace, parser_traced,
)

# Expression Parsing
from .Expr import (
    chainl, chainl1, chainr, chainr1,
    build_expression_parser, Operator, Infix, Prefix, Postfix, Assoc,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())
