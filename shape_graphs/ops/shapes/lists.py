from typing import List

from ...errors import UnsupportedInputError
from ...ir.meta import IntValuesMeta, MetaStack, Shape
from .utils import check_arity, check_min_arity


def list_construct(metas: MetaStack) -> List[Shape]:
    """
    prim::ListConstruct(Scalar|Bool|Tensor self, v1, v2, ...) -> Scalar[]|Bool[]|Tensor[]

    For scalar elements (detected from the first element) the result is a
    single entry holding the gathered values. For tensors it is one shape per
    element.
    """
    check_min_arity("prim::ListConstruct", metas, 1)

    first = metas[0]
    if isinstance(first, IntValuesMeta) and len(first.values) == 1:
        values = []
        for meta in metas:
            if len(meta.values) != 1:
                raise UnsupportedInputError(
                    f"prim::ListConstruct: expected int type input, got {meta}."
                )
            values.append(meta.values[0])
        return [tuple(values)]

    return [meta.shape for meta in metas]


def list_unpack(metas: MetaStack) -> List[Shape]:
    """prim::ListUnpack(Tensor[] tensors) -> Tensor, ..., Tensor"""
    check_arity("prim::ListUnpack", metas, 1)
    return list(metas[0].shapes)
