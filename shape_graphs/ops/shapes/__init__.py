from .constant import prim_constant
from .elementwise import binary_op, broadcast_shapes, unary_op
from .embedding import (
    embedding_bag,
    embedding_bag_4bit_rowwise_offsets,
    embedding_bag_byte_rowwise_offsets,
)
from .join import cat, fused_concat, fused_stack, stack
from .layout import flatten, permute, reshape, t, transpose
from .linalg import addmm, bmm, mm
from .lists import list_construct, list_unpack
from .split import chunk, constant_chunk, slice_shape
from .utils import wrap_dim

__all__ = [
    "prim_constant",
    "unary_op",
    "binary_op",
    "broadcast_shapes",
    "mm",
    "bmm",
    "addmm",
    "t",
    "transpose",
    "flatten",
    "reshape",
    "permute",
    "cat",
    "fused_concat",
    "stack",
    "fused_stack",
    "chunk",
    "constant_chunk",
    "slice_shape",
    "list_construct",
    "list_unpack",
    "embedding_bag",
    "embedding_bag_byte_rowwise_offsets",
    "embedding_bag_4bit_rowwise_offsets",
    "wrap_dim",
]
