from __future__ import annotations

from typing import Callable, FrozenSet, List, Optional, Tuple

from ..runtime import (
    BrkNull,
    BrkNumber,
    BrkValue,
    BrakAssignmentError,
    BrakOperandError,
    Runtime,
    Scope,
)
from ..tree import Expression, Ident, Literal, Node, Op, is_op
from .helpers import apply_arith, expect_number

EvalFunc = Callable[[Node, Runtime], BrkValue]

# strongest first; the rightmost match of the first tier that matches wins
TIERS: Tuple[FrozenSet[str], ...] = (
    frozenset({'**'}),
    frozenset({'*', '/'}),
    frozenset({'+', '-'}),
    frozenset({'<', '>'}),
    frozenset({'='}),
)

def split_chunks(tokens: List[Node]) -> List[List[Node]]:
    """Split a token list on its top-level commas."""
    chunks: List[List[Node]] = [[]]

    for tok in tokens:
        if is_op(tok, ','):
            chunks.append([])
        else:
            chunks[-1].append(tok)

    return chunks

def find_operator(chunk: List[Node]) -> Optional[int]:
    for tier in TIERS:
        for idx in range(len(chunk) - 1, -1, -1):
            tok = chunk[idx]
            if isinstance(tok, Op) and tok.code in tier:
                return idx

    return None

def reduce_chunk(chunk: List[Node], rt: Runtime, eval_func: EvalFunc) -> List[Node]:
    """Collapse every operator in a chunk into a Literal; the input list is not touched."""
    chunk = list(chunk)

    while True:
        idx = find_operator(chunk)
        if idx is None:
            return chunk

        op = chunk[idx]
        assert isinstance(op, Op)

        if idx == 0 or is_op(chunk[idx - 1]):
            raise BrakOperandError(f"No left operand for '{op.code}'")
        if idx == len(chunk) - 1 or is_op(chunk[idx + 1]):
            raise BrakOperandError(f"No right operand for '{op.code}'")

        left, right = chunk[idx - 1], chunk[idx + 1]

        if op.code == '=':
            result = eval_assign(left, right, rt, eval_func)
        else:
            lhs = expect_number(eval_func(left, rt), op.code)
            rhs = expect_number(eval_func(right, rt), op.code)
            result = Literal(apply_arith(op.code, lhs, rhs))

        chunk[idx - 1:idx + 2] = [result]

def eval_assign(target: Node, value_node: Node, rt: Runtime, eval_func: EvalFunc) -> Literal:
    if not isinstance(target, Ident):
        raise BrakAssignmentError("Assignment allowed only to idents")

    value = eval_func(value_node, rt)
    rt.assign(target.name, value)

    # closures have no literal form
    if isinstance(value, BrkNumber):
        return Literal(value.value)
    return Literal(None)

def eval_expression(expr: Expression, rt: Runtime, eval_func: EvalFunc, seed: Optional[Scope]=None) -> BrkValue:
    """Reduce every chunk, then run what is left once; the last value wins."""
    with rt.scope(seed):
        chunks = [reduce_chunk(chunk, rt, eval_func) for chunk in split_chunks(expr.tokens)]
        result: BrkValue = BrkNull()

        for chunk in chunks:
            for tok in chunk:
                result = eval_func(tok, rt)

        return result
