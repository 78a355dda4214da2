"""
Operator-precedence parsing: left/right associative chains and a builder
that turns a precedence table into an expression parser.

None of the chains guard against operators and operands that both match
without consuming input; such a grammar loops forever.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, List, Tuple

from .Combinators import choice
from .Parsec import Parsec, ParseResult, T
from .Prim import pure
from .Stream import Stream

OpFuncType = Callable[[T, T], T]


def _scan_op_chain(
    term_parser: Parsec[T],
    op_parser: Parsec[OpFuncType]
) -> Callable[[Any, Stream], Tuple[ParseResult, List[T], List[OpFuncType]]]:
    """
    Parses `term (op term)*`, returning the terms and the operator functions
    in source order. An operator with no term after it is not part of the
    chain: scanning stops in front of it.
    """
    def scan(user: Any, stream: Stream):
        res_first = term_parser(user, stream)
        if not res_first.ok:
            return res_first, [], []

        terms = [res_first.value]
        ops = []
        user, stream = res_first.user, res_first.stream
        while True:
            res_op = op_parser(user, stream)
            if not res_op.ok:
                break
            res_term = term_parser(res_op.user, res_op.stream)
            if not res_term.ok:
                break
            ops.append(res_op.value)
            terms.append(res_term.value)
            user, stream = res_term.user, res_term.stream
        return ParseResult.success(None, user, stream), terms, ops
    return scan


# chainl1: Left-associative operator chain
def chainl1(p: Parsec[T], op: Parsec[OpFuncType]) -> Parsec[T]:
    """
    Parses one or more p separated by op, applying op left-associatively.
    """
    scan = _scan_op_chain(p, op)

    def parse(user: Any, stream: Stream) -> ParseResult[T]:
        res, terms, ops = scan(user, stream)
        if not res.ok:
            return res
        acc = terms[0]
        for f, y in zip(ops, terms[1:]):
            acc = f(acc, y)
        return ParseResult.success(acc, res.user, res.stream)
    return Parsec(parse)


# chainr1: Right-associative operator chain
def chainr1(p: Parsec[T], op: Parsec[OpFuncType]) -> Parsec[T]:
    """
    Parses one or more p separated by op, applying op right-associatively.
    """
    scan = _scan_op_chain(p, op)

    def parse(user: Any, stream: Stream) -> ParseResult[T]:
        res, terms, ops = scan(user, stream)
        if not res.ok:
            return res
        acc = terms[-1]
        for f, x in zip(reversed(ops), reversed(terms[:-1])):
            acc = f(x, acc)
        return ParseResult.success(acc, res.user, res.stream)
    return Parsec(parse)


# chainl: Left-associative operator chain with a default value
def chainl(p: Parsec[T], op: Parsec[OpFuncType], x: T) -> Parsec[T]:
    """
    Parses zero or more p separated by op, applying op left-associatively; returns x if none parsed.
    """
    return chainl1(p, op) | pure(x)


# chainr: Right-associative operator chain with a default value
def chainr(p: Parsec[T], op: Parsec[OpFuncType], x: T) -> Parsec[T]:
    """
    Parses zero or more p separated by op, applying op right-associatively; returns x if none parsed.
    """
    return chainr1(p, op) | pure(x)


# --- Precedence tables ---

class Assoc(Enum):
    NONE = auto()
    LEFT = auto()
    RIGHT = auto()


@dataclass
class Operator:
    pass


@dataclass
class Infix(Operator):
    parser: Parsec[Callable[[Any, Any], Any]]
    assoc: Assoc


@dataclass
class Prefix(Operator):
    parser: Parsec[Callable[[Any], Any]]


@dataclass
class Postfix(Operator):
    parser: Parsec[Callable[[Any], Any]]


def build_expression_parser(table: List[List[Operator]], simple_term: Parsec[T]) -> Parsec[T]:
    """
    Build an expression parser from `table`, highest precedence first.
    Each row holds the operators of one precedence level.
    """
    term = simple_term
    for ops in table:
        term = _make_level_parser(ops, term)
    return term


def _identity(x):
    return x


def _make_level_parser(ops: List[Operator], term: Parsec[T]) -> Parsec[T]:
    infix_r = []
    infix_l = []
    infix_n = []
    prefix = []
    postfix = []

    for op in ops:
        if isinstance(op, Infix):
            if op.assoc == Assoc.RIGHT:
                infix_r.append(op.parser)
            elif op.assoc == Assoc.LEFT:
                infix_l.append(op.parser)
            else:
                infix_n.append(op.parser)
        elif isinstance(op, Prefix):
            prefix.append(op.parser)
        elif isinstance(op, Postfix):
            postfix.append(op.parser)
        else:
            raise ValueError(f"unknown operator kind: {op!r}")

    # P = (pre <|> id) term (post <|> id)
    pre_parser = choice(prefix) | pure(_identity) if prefix else pure(_identity)
    post_parser = choice(postfix) | pure(_identity) if postfix else pure(_identity)

    term_parser = pre_parser.bind(lambda f:
                  term.bind(lambda x:
                  post_parser.map(lambda g: g(f(x)))))

    result_parser = term_parser

    if infix_l:
        result_parser = chainl1(result_parser, choice(infix_l))

    if infix_r:
        result_parser = chainr1(result_parser, choice(infix_r))

    if infix_n:
        op_n = choice(infix_n)
        operand = result_parser

        def non_assoc_logic(x):
            return op_n.bind(lambda f:
                   operand.map(lambda y: f(x, y))) | pure(x)

        result_parser = operand.bind(non_assoc_logic)

    return result_parser
