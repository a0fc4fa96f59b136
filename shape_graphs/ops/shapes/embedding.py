"""
Output shapes of the embedding bag family. Only the pooled result tensor is
described; offset2bag / bag_size outputs are never consumed downstream.

``has_end_offset`` means the offsets tensor carries one trailing entry that
marks the end of the last bag, so it holds one more entry than there are bags.
"""

from ...errors import ShapeError
from ...ir.meta import MetaStack, Shape
from .utils import check_arity

# 4-byte fp32 scale + 4-byte fp32 zero offset at the end of every row
BYTE_ROWWISE_HEADER = 8
# 2-byte fp16 scale + 2-byte fp16 zero offset at the end of every row
FOUR_BIT_ROWWISE_HEADER = 4
# Two 4-bit values are packed in each byte
FOUR_BIT_PER_BYTE = 2


def _num_bags(offsets: Shape, has_end_offset: bool) -> int:
    if len(offsets) != 1:
        raise ShapeError(f"Expected 1D offsets, got {len(offsets)}D.")
    return offsets[0] - (1 if has_end_offset else 0)


def _weight_cols(weight: Shape) -> int:
    if len(weight) != 2:
        raise ShapeError(f"Expected 2D weight, got {len(weight)}D.")
    return weight[1]


def embedding_bag(metas: MetaStack, has_end_offset: bool = True) -> Shape:
    """
    aten::embedding_bag(Tensor weight, Tensor indices, Tensor offsets,
                        bool scale_grad_by_freq=False, int mode=0,
                        bool sparse=False, Tensor? per_sample_weights=None,
                        bool include_last_offset=False)
    """
    check_arity("aten::embedding_bag", metas, 8)
    weight = metas[0].shape
    indices = metas[1].shape
    offsets = metas[2].shape

    if len(indices) == 1:
        return (_num_bags(offsets, has_end_offset), _weight_cols(weight))
    if len(indices) == 2:
        # Each row of a 2-D indices tensor is one bag
        return (indices[0], _weight_cols(weight))
    raise ShapeError(
        f"aten::embedding_bag: only 1D and 2D indices are supported, got {len(indices)}D."
    )


def embedding_bag_byte_rowwise_offsets(
    metas: MetaStack, has_end_offset: bool = True
) -> Shape:
    """
    embedding_bag_byte_rowwise_offsets(Tensor weight, Tensor indices,
                                       Tensor offsets, bool scale_grad_by_freq,
                                       int mode, bool pruned_weights,
                                       Tensor? per_sample_weights,
                                       bool include_last_offset) -> Tensor
    """
    check_arity("embedding_bag_byte_rowwise_offsets", metas, 8)
    weight = metas[0].shape
    offsets = metas[2].shape
    return (
        _num_bags(offsets, has_end_offset),
        _weight_cols(weight) - BYTE_ROWWISE_HEADER,
    )


def embedding_bag_4bit_rowwise_offsets(
    metas: MetaStack, has_end_offset: bool = True
) -> Shape:
    """
    quantized::embedding_bag_4bit_rowwise_offsets(Tensor weight, Tensor indices,
        Tensor offsets, bool scale_grad_by_freq, int mode, bool pruned_weights,
        Tensor? per_sample_weights, Tensor? compressed_indices_mapping,
        bool include_last_offset) -> Tensor
    """
    check_arity("embedding_bag_4bit_rowwise_offsets", metas, 9)
    weight = metas[0].shape
    offsets = metas[2].shape
    return (
        _num_bags(offsets, has_end_offset),
        (_weight_cols(weight) - FOUR_BIT_ROWWISE_HEADER) * FOUR_BIT_PER_BYTE,
    )
