import math
from typing import Sequence

from ...errors import ArityError, ShapeError, UnsupportedInputError
from ...ir.meta import MetaStack, Shape, VariableMeta


def check_arity(op_name: str, metas: MetaStack, *expected: int):
    if len(metas) not in expected:
        want = " or ".join(str(n) for n in expected)
        raise ArityError(f"{op_name}: expected {want} inputs, got {len(metas)}.")


def check_min_arity(op_name: str, metas: MetaStack, minimum: int):
    if len(metas) < minimum:
        raise ArityError(
            f"{op_name}: expected at least {minimum} inputs, got {len(metas)}."
        )


def wrap_dim(dim: int, rank: int) -> int:
    """
    Converts a possibly negative dimension into [0, rank). A 0-d tensor
    accepts dims as if it had rank 1.
    """
    if rank <= 0:
        rank = 1
    if dim < -rank or dim >= rank:
        raise ShapeError(
            f"Dimension out of range (expected to be in range of "
            f"[{-rank}, {rank - 1}], but got {dim})"
        )
    return dim + rank if dim < 0 else dim


def int_arg(meta: VariableMeta, what: str) -> int:
    """Reads a single scalar int (dim, start, chunks, ...) from a record."""
    values = meta.values
    if len(values) != 1:
        raise UnsupportedInputError(f"Expected 1 int for {what}, got {meta}")
    return values[0]


def prod(shape: Sequence[int]) -> int:
    return math.prod(shape)


def same_rank(op_name: str, a: Shape, b: Shape):
    if len(a) != len(b):
        raise ShapeError(
            f"{op_name}: all inputs must have the same number of dimensions, "
            f"got {list(a)} and {list(b)}."
        )
