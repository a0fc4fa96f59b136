from ...errors import ShapeError
from ...ir.meta import MetaStack, Shape
from .utils import check_arity


def unary_op(metas: MetaStack) -> Shape:
    """aten::tanh / aten::relu / aten::sigmoid (Tensor self) -> Tensor"""
    check_arity("unary op", metas, 1)
    return metas[0].shape


def broadcast_shapes(t0: Shape, t1: Shape) -> Shape:
    """Broadcasts two shapes by aligning their trailing dimensions."""
    d0, d1 = len(t0), len(t1)
    out_ndim = max(d0, d1)
    out = [0] * out_ndim

    for i in range(out_ndim):
        j = -1 - i
        if i >= d0 or t0[j] == 1:
            out[j] = t1[j]
        elif i >= d1 or t1[j] == 1:
            out[j] = t0[j]
        elif t0[j] == t1[j]:
            out[j] = t1[j]
        else:
            raise ShapeError(
                f"The size of tensor a ({t0[j]}) must match the size of "
                f"tensor b ({t1[j]}) at non-singleton dimension {out_ndim + j}."
            )
    return tuple(out)


def binary_op(metas: MetaStack) -> Shape:
    """
    aten::add / sub / mul / pow (Tensor self, Tensor|Scalar other[, Scalar alpha])

    The optional alpha operand never affects the shape. A rank-1 ``other``
    (including a Python scalar, whose placeholder shape is (1,)) leaves
    ``self``'s shape unchanged.
    """
    check_arity("binary op", metas, 2, 3)

    t0 = metas[0].shape
    t1 = metas[1].shape

    # One input is a scalar
    if len(t1) == 1:
        return t0

    return broadcast_shapes(t0, t1)
