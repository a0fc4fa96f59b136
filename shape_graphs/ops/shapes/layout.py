from ...errors import ShapeError
from ...ir.meta import MetaStack, Shape
from .utils import check_arity, int_arg, prod, wrap_dim


def t(metas: MetaStack) -> Shape:
    """aten::t(Tensor self) -> Tensor"""
    check_arity("aten::t", metas, 1)
    t0 = metas[0].shape

    # 0-D or 1-D tensor: same shape
    if len(t0) <= 1:
        return t0
    if len(t0) == 2:
        return (t0[1], t0[0])
    raise ShapeError(f"aten::t: expected tensor <= 2-D, got {len(t0)}-D.")


def transpose(metas: MetaStack) -> Shape:
    """
    aten::transpose(Tensor self, int dim0, int dim1) -> Tensor
    metas: 0: self, 1: dim0, 2: dim1
    """
    check_arity("aten::transpose", metas, 3)
    shape = list(metas[0].shape)
    rank = len(shape)

    dim0 = wrap_dim(int_arg(metas[1], "dim0"), rank)
    dim1 = wrap_dim(int_arg(metas[2], "dim1"), rank)
    if rank == 0:
        return ()

    shape[dim0], shape[dim1] = shape[dim1], shape[dim0]
    return tuple(shape)


def flatten(metas: MetaStack) -> Shape:
    """
    aten::flatten(Tensor self, int start_dim, int end_dim) -> Tensor
    metas: 0: self, 1: start_dim, 2: end_dim
    """
    check_arity("aten::flatten", metas, 3)
    t0 = metas[0].shape
    rank = len(t0)

    start_dim = wrap_dim(int_arg(metas[1], "start_dim"), rank)
    end_dim = wrap_dim(int_arg(metas[2], "end_dim"), rank)
    if start_dim > end_dim:
        raise ShapeError(
            "aten::flatten: start dimension should not be larger than end dimension"
        )
    if rank == 0:
        return (1,)

    merged = prod(t0[start_dim : end_dim + 1])
    return tuple(t0[:start_dim]) + (merged,) + tuple(t0[end_dim + 1 :])


def reshape(metas: MetaStack) -> Shape:
    """
    aten::reshape(Tensor self, int[] shape) -> Tensor

    At most one target extent may be -1; it absorbs whatever is left of the
    input's element count. Only divisibility of the element count by the
    known extents is checked.
    """
    check_arity("aten::reshape", metas, 2)
    total = prod(metas[0].shape)
    target = list(metas[1].values)

    known = 1
    neg_index = None
    for i, d in enumerate(target):
        if d == -1:
            if neg_index is not None:
                raise ShapeError("aten::reshape: only one dimension can be inferred")
            neg_index = i
        else:
            known *= d

    if known == 0:
        if neg_index is not None or total != 0:
            raise ShapeError(
                f"aten::reshape: shape {target} is invalid for input of size {total}"
            )
        return tuple(target)

    if total % known != 0:
        raise ShapeError(
            f"aten::reshape: shape {target} is invalid for input of size {total}"
        )

    if neg_index is not None:
        target[neg_index] = total // known
    return tuple(target)


def permute(metas: MetaStack) -> Shape:
    """
    aten::permute(Tensor self, int[] dims) -> Tensor
    metas: 0: self, 1: dims
    """
    check_arity("aten::permute", metas, 2)
    t0 = metas[0].shape
    order = metas[1].values
    rank = len(t0)

    if len(order) != rank:
        raise ShapeError(
            "aten::permute: dims must have the same number of dimensions as "
            f"the input tensor, got {list(order)} for rank {rank}."
        )

    out = []
    for d in order:
        if d < 0:
            raise ShapeError(
                f"aten::permute: negative dimensions are not supported, got {d}."
            )
        if d >= rank:
            raise ShapeError(
                "aten::permute: all dimensions must be less than the rank of "
                f"the input, got {d} for rank {rank}."
            )
        out.append(t0[d])
    return tuple(out)
