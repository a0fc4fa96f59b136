from typing import List

from ...errors import ShapeError
from ...ir.meta import MetaStack, Shape
from .utils import check_arity, check_min_arity, int_arg, same_rank, wrap_dim


def _concat_shapes(op_name: str, shapes: List[Shape], dim: int) -> Shape:
    out = list(shapes[0])
    rank = len(out)
    if rank == 0:
        raise ShapeError(f"{op_name}: zero-dimensional tensor cannot be concatenated")
    dim = wrap_dim(dim, rank)

    # Every dimension except the concatenated one must match
    for s in shapes[1:]:
        same_rank(op_name, shapes[0], s)
        for j in range(rank):
            if j != dim and out[j] != s[j]:
                raise ShapeError(
                    f"{op_name}: sizes of tensors must match except in "
                    f"dimension {dim}, got {list(shapes[0])} and {list(s)}."
                )
    for s in shapes[1:]:
        out[dim] += s[dim]
    return tuple(out)


def cat(metas: MetaStack) -> Shape:
    """
    aten::cat(Tensor[] tensors, int dim=0) -> Tensor
    metas: 0: tensors, 1: dim
    """
    check_arity("aten::cat", metas, 2)
    shapes = metas[0].shapes
    if not shapes:
        raise ShapeError("aten::cat: expected a non-empty list of tensors.")

    # Handle the single input case
    if len(shapes) == 1:
        return shapes[0]

    return _concat_shapes("aten::cat", shapes, int_arg(metas[1], "dim"))


def fused_concat(metas: MetaStack, dim: int) -> Shape:
    """prim::FusedConcat[int dim](Tensor self, Tensor mat1, ...) -> Tensor"""
    check_min_arity("prim::FusedConcat", metas, 1)
    if len(metas) == 1:
        return metas[0].shape
    return _concat_shapes("prim::FusedConcat", [m.shape for m in metas], dim)


def _stack_shapes(op_name: str, shapes: List[Shape], dim: int) -> Shape:
    first = shapes[0]
    for s in shapes[1:]:
        if s != first:
            raise ShapeError(
                f"{op_name}: all tensors need to be of the same shape, "
                f"got {list(first)} and {list(s)}."
            )
    out = list(first)
    out.insert(dim, len(shapes))
    return tuple(out)


def stack(metas: MetaStack) -> Shape:
    """
    aten::stack(Tensor[] tensors, int dim) -> Tensor
    metas: 0: tensors, 1: dim

    The dim is wrapped against the rank of the stacked elements.
    """
    check_arity("aten::stack", metas, 2)
    shapes = metas[0].shapes
    if not shapes:
        raise ShapeError("aten::stack: expected a non-empty list of tensors.")

    dim = wrap_dim(int_arg(metas[1], "dim"), len(shapes[0]))
    return _stack_shapes("aten::stack", shapes, dim)


def fused_stack(metas: MetaStack, dim: int) -> Shape:
    """
    glow::fused_stack[int dim](Tensor self, Tensor mat1, ...) -> Tensor

    Stacking adds one dimension, so the dim is wrapped against rank + 1.
    """
    check_min_arity("glow::fused_stack", metas, 1)
    shape = metas[0].shape
    if len(metas) == 1:
        return shape

    dim = wrap_dim(dim, len(shape) + 1)
    return _stack_shapes("glow::fused_stack", [m.shape for m in metas], dim)
