from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import HAS_END_OFFSET
from ..errors import ArityError, UnsupportedOperatorError
from ..ir.dtypes import DType, ValueType
from ..ir.graph import Node, Value
from ..ir.meta import (
    IntValuesMeta,
    MetaStack,
    TensorListMeta,
    TensorMeta,
    VariableMeta,
)
from ..ops import shapes
from ..ops.op_types import OpType


class Packing(Enum):
    """How a handler's result is turned into records for the node's outputs."""

    # i-th result -> i-th output
    POSITIONAL = "positional"
    # Tensor literal -> tensor record, anything else -> integer payload
    CONSTANT = "constant"
    # Tensor[] -> list of shapes, Scalar[] / Bool[] -> integer payload
    LIST_CONSTRUCT = "list_construct"
    # Only the first output is described
    FIRST_OUTPUT = "first_output"
    # All result shapes belong to the single Tensor[] output
    LIST_OUTPUT = "list_output"


@dataclass(frozen=True)
class InferenceContext:
    has_end_offset: bool = HAS_END_OFFSET


Handler = Callable[[Node, MetaStack, InferenceContext], Any]


class ShapeInference:
    _handlers: Dict[str, Tuple[Handler, Packing]] = {}

    @classmethod
    def register_handler(cls, op_type: str, packing: Packing = Packing.POSITIONAL):
        def decorator(func):
            cls._handlers[op_type] = (func, packing)
            return func

        return decorator

    @classmethod
    def get_handler(cls, op_type: str) -> Optional[Tuple[Handler, Packing]]:
        return cls._handlers.get(op_type)

    @classmethod
    def supported_ops(cls) -> List[str]:
        return sorted(cls._handlers)

    @classmethod
    def infer_node(
        cls,
        node: Node,
        metas: MetaStack,
        ctx: Optional[InferenceContext] = None,
    ) -> List[Tuple[Value, VariableMeta]]:
        """
        Computes the records of ``node``'s outputs from the records of its
        inputs. Returns (output value, record) pairs; outputs that are not
        described (e.g. embedding bag auxiliaries) are left out.
        """
        entry = cls.get_handler(node.kind)
        if entry is None:
            raise UnsupportedOperatorError(node.kind)

        func, packing = entry
        result = func(node, metas, ctx or InferenceContext())
        return _package(node, result, packing)


def _as_meta(result: Any) -> VariableMeta:
    if isinstance(result, VariableMeta):
        return result
    return TensorMeta(tuple(result))


def _package(
    node: Node, result: Any, packing: Packing
) -> List[Tuple[Value, VariableMeta]]:
    if packing == Packing.CONSTANT:
        out = node.output
        if out.type.is_tensor_like():
            meta = TensorMeta(result, DType.from_value(node.get_attr("value")))
        else:
            meta = IntValuesMeta(result, is_list=out.type == ValueType.LIST)
        return [(out, meta)]

    if packing == Packing.LIST_CONSTRUCT:
        out = node.output
        if out.holds_tensors():
            return [(out, TensorListMeta(tuple(result)))]
        return [(out, IntValuesMeta(result[0], is_list=True))]

    if packing == Packing.FIRST_OUTPUT:
        return [(node.outputs[0], _as_meta(result))]

    if packing == Packing.LIST_OUTPUT:
        return [(node.output, TensorListMeta(tuple(result)))]

    results = result if isinstance(result, list) else [result]
    if len(results) != len(node.outputs):
        raise ArityError(
            f"{node.kind}: produced {len(results)} results for "
            f"{len(node.outputs)} outputs."
        )
    return [(out, _as_meta(r)) for out, r in zip(node.outputs, results)]


# ==============================================================================
# Op Handlers
# ==============================================================================


@ShapeInference.register_handler(OpType.CONSTANT, packing=Packing.CONSTANT)
def handle_constant(node: Node, metas: MetaStack, ctx: InferenceContext):
    value_type = node.output.type
    # None = prim::Constant() carries no value
    value = None if value_type == ValueType.NONE else node.require_attr("value")
    return shapes.prim_constant(value, value_type)


@ShapeInference.register_handler(OpType.LIST_CONSTRUCT, packing=Packing.LIST_CONSTRUCT)
def handle_list_construct(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.list_construct(metas)


@ShapeInference.register_handler(OpType.LIST_UNPACK)
def handle_list_unpack(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.list_unpack(metas)


# --- Elementwise ---
# The element type of the first operand is carried through elementwise ops so
# that fused subgraphs see correctly typed placeholders.


def _handle_unary(node: Node, metas: MetaStack, ctx: InferenceContext):
    shape = shapes.unary_op(metas)
    return TensorMeta(shape, metas[0].dtype)


for op in [OpType.TANH, OpType.RELU, OpType.SIGMOID]:
    ShapeInference.register_handler(op)(_handle_unary)


def _handle_binary(node: Node, metas: MetaStack, ctx: InferenceContext):
    shape = shapes.binary_op(metas)
    return TensorMeta(shape, metas[0].dtype)


for op in [OpType.ADD, OpType.SUB, OpType.MUL, OpType.POW]:
    ShapeInference.register_handler(op)(_handle_binary)


# --- Linear Algebra ---


@ShapeInference.register_handler(OpType.MM)
def handle_mm(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.mm(metas)


@ShapeInference.register_handler(OpType.BMM)
def handle_bmm(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.bmm(metas)


@ShapeInference.register_handler(OpType.ADDMM)
def handle_addmm(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.addmm(metas)


# --- Layout ---


@ShapeInference.register_handler(OpType.T)
def handle_t(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.t(metas)


@ShapeInference.register_handler(OpType.TRANSPOSE)
def handle_transpose(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.transpose(metas)


@ShapeInference.register_handler(OpType.FLATTEN)
def handle_flatten(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.flatten(metas)


@ShapeInference.register_handler(OpType.RESHAPE)
def handle_reshape(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.reshape(metas)


@ShapeInference.register_handler(OpType.PERMUTE)
def handle_permute(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.permute(metas)


# --- Concat / Stack / Split ---


@ShapeInference.register_handler(OpType.CAT)
def handle_cat(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.cat(metas)


@ShapeInference.register_handler(OpType.FUSED_CONCAT)
def handle_fused_concat(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.fused_concat(metas, node.require_attr("dim"))


@ShapeInference.register_handler(OpType.STACK)
def handle_stack(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.stack(metas)


@ShapeInference.register_handler(OpType.FUSED_STACK)
def handle_fused_stack(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.fused_stack(metas, node.require_attr("dim"))


@ShapeInference.register_handler(OpType.CONSTANT_CHUNK)
def handle_constant_chunk(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.constant_chunk(
        metas, node.require_attr("chunks"), node.require_attr("dim")
    )


@ShapeInference.register_handler(OpType.CHUNK, packing=Packing.LIST_OUTPUT)
def handle_chunk(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.chunk(metas)


@ShapeInference.register_handler(OpType.SLICE)
def handle_slice(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.slice_shape(metas)


# --- Embedding ---


@ShapeInference.register_handler(OpType.EMBEDDING_BAG, packing=Packing.FIRST_OUTPUT)
def handle_embedding_bag(node: Node, metas: MetaStack, ctx: InferenceContext):
    return shapes.embedding_bag(metas, ctx.has_end_offset)


@ShapeInference.register_handler(OpType.FB_EMBEDDING_BAG_BYTE_ROWWISE_OFFSETS)
@ShapeInference.register_handler(OpType.EMBEDDING_BAG_BYTE_ROWWISE_OFFSETS)
def handle_embedding_bag_byte_rowwise(
    node: Node, metas: MetaStack, ctx: InferenceContext
):
    return shapes.embedding_bag_byte_rowwise_offsets(metas, ctx.has_end_offset)


@ShapeInference.register_handler(OpType.EMBEDDING_BAG_4BIT_ROWWISE_OFFSETS)
def handle_embedding_bag_4bit_rowwise(
    node: Node, metas: MetaStack, ctx: InferenceContext
):
    return shapes.embedding_bag_4bit_rowwise_offsets(metas, ctx.has_end_offset)
