from typing import List

from ...errors import ShapeError
from ...ir.meta import MetaStack, Shape
from .utils import check_arity, int_arg, wrap_dim


def _split_even(op_name: str, shape: Shape, chunks: int, dim: int) -> List[Shape]:
    if chunks <= 0:
        raise ShapeError(f"{op_name}: chunks must be positive, got {chunks}.")

    if not shape:
        raise ShapeError(f"{op_name}: cannot split a 0-dim tensor.")
    dim = wrap_dim(dim, len(shape))
    extent = shape[dim]

    # Every chunk but the last has ceil(extent / chunks) entries
    c = (extent + chunks - 1) // chunks
    r = extent - c * (chunks - 1)
    if r < 0:
        raise ShapeError(
            f"{op_name}: cannot split extent {extent} into {chunks} chunks of "
            f"size {c}."
        )

    out = []
    for i in range(chunks):
        s = list(shape)
        s[dim] = r if i == chunks - 1 else c
        out.append(tuple(s))
    return out


def constant_chunk(metas: MetaStack, chunks: int, dim: int) -> List[Shape]:
    """prim::ConstantChunk[int chunks, int dim](Tensor self) -> Tensor, ..."""
    check_arity("prim::ConstantChunk", metas, 1)
    return _split_even("prim::ConstantChunk", metas[0].shape, chunks, dim)


def chunk(metas: MetaStack) -> List[Shape]:
    """
    aten::chunk(Tensor self, int chunks, int dim) -> Tensor[]
    metas: 0: self, 1: chunks, 2: dim
    """
    check_arity("aten::chunk", metas, 3)
    return _split_even(
        "aten::chunk",
        metas[0].shape,
        int_arg(metas[1], "chunks"),
        int_arg(metas[2], "dim"),
    )


def slice_shape(metas: MetaStack) -> Shape:
    """
    aten::slice(Tensor self, int dim, int start, int end, int step) -> Tensor
    metas: 0: self, 1: dim, 2: start, 3: end, 4: step

    Out-of-range bounds are handled asymmetrically: a start past the end of
    the dimension (or an end before its beginning) empties the slice, while
    an end past the dimension is clamped to it.
    """
    check_arity("aten::slice", metas, 5)
    dim = int_arg(metas[1], "dim")
    start = int_arg(metas[2], "start")
    end = int_arg(metas[3], "end")
    step = int_arg(metas[4], "step")

    if step <= 0:
        raise ShapeError(f"aten::slice: step must be positive, got {step}.")

    shape = list(metas[0].shape)
    if not shape:
        raise ShapeError("aten::slice: cannot slice a 0-dim tensor.")
    dim = wrap_dim(dim, len(shape))
    n = shape[dim]

    # Start or end falls outside the dimension entirely
    if start >= n or end <= -n:
        shape[dim] = 0
        return tuple(shape)

    if start <= -n:
        start = 0
    elif start < 0:
        start += n

    if end > n:
        end = n
    elif end < 0:
        end += n

    if start >= end:
        shape[dim] = 0
        return tuple(shape)

    shape[dim] = -(-(end - start) // step)
    return tuple(shape)
