from ...errors import ShapeError
from ...ir.meta import MetaStack, Shape, TensorMeta
from .elementwise import binary_op
from .utils import check_arity, check_min_arity


def mm(metas: MetaStack) -> Shape:
    """
    aten::mm(Tensor self, Tensor mat2) -> Tensor
    metas: 0: self, 1: mat2
    """
    check_arity("aten::mm", metas, 2)
    t0 = metas[0].shape
    t1 = metas[1].shape

    if len(t0) != 2 or len(t1) != 2:
        raise ShapeError(
            f"aten::mm: expected 2-dimensional tensors, got {list(t0)} and {list(t1)}."
        )
    if t0[1] != t1[0]:
        raise ShapeError(
            f"The size of tensor a ({t0[1]}) at dimension 1 must match the "
            f"size of tensor b ({t1[0]}) at dimension 0."
        )
    return (t0[0], t1[1])


def bmm(metas: MetaStack) -> Shape:
    """
    aten::bmm(Tensor self, Tensor mat2) -> Tensor
    metas: 0: self, 1: mat2
    """
    check_arity("aten::bmm", metas, 2)
    t0 = metas[0].shape
    t1 = metas[1].shape

    if len(t0) != 3 or len(t1) != 3:
        raise ShapeError(
            f"aten::bmm: expected 3-dimensional tensors, got {list(t0)} and {list(t1)}."
        )
    if t0[0] != t1[0]:
        raise ShapeError(
            f"aten::bmm: expected tensors to have same size at dimension 0, "
            f"got {t0[0]} and {t1[0]}."
        )
    if t0[2] != t1[1]:
        raise ShapeError(
            f"The size of tensor a ({t0[2]}) at dimension 2 must match the "
            f"size of tensor b ({t1[1]}) at dimension 1."
        )
    return (t0[0], t0[1], t1[2])


def addmm(metas: MetaStack) -> Shape:
    """
    aten::addmm(Tensor self, Tensor mat1, Tensor mat2, *, Scalar beta=1,
                Scalar alpha=1) -> Tensor
    metas: 0: self, 1: mat1, 2: mat2
    """
    check_min_arity("aten::addmm", metas, 3)
    t0, t1, t2 = metas[0], metas[1], metas[2]

    # A scalar mat2 has the placeholder shape (1,)
    if len(t2.shape) == 1:
        product = t1
    else:
        product = TensorMeta(mm([t1, t2]))

    return binary_op([t0, product])
