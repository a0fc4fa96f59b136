from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union
import uuid

import numpy as np

from .dtypes import ValueType
from ..errors import ArityError, GraphLogicError
from ..config import FUSION_NODE_SYMBOL
from ..ops.op_types import OpType


@dataclass(eq=False)
class Value:
    """
    An edge of the graph. Values compare and hash by identity, so a value of a
    fused subgraph never aliases the outer value it mirrors.
    """

    name: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    type: ValueType = ValueType.TENSOR
    # Element type of LIST / OPTIONAL values.
    elem_type: Optional[Union[ValueType, "ElemType"]] = None
    node: Optional["Node"] = field(default=None, repr=False)

    @property
    def debug_name(self) -> str:
        return self.name

    def holds_tensors(self) -> bool:
        """True for Tensor[] and Optional[Tensor][] list values."""
        elem = self.elem_type
        if isinstance(elem, ElemType):
            return elem.type == ValueType.OPTIONAL and elem.inner == ValueType.TENSOR
        return elem == ValueType.TENSOR

    def __repr__(self):
        type_str = self.type.value
        if self.elem_type is not None:
            type_str += f"[{self.elem_type}]"
        return f"%{self.name} : {type_str}"


@dataclass(frozen=True)
class ElemType:
    """Nested element type, used for lists of Optional[Tensor]."""

    type: ValueType
    inner: ValueType

    def __str__(self):
        return f"{self.type.value}[{self.inner.value}]"


@dataclass(eq=False)
class Node:
    kind: str
    inputs: List[Value]
    outputs: List[Value]
    attrs: Dict[str, Any] = field(default_factory=dict)
    subgraph: Optional["Graph"] = None

    def __post_init__(self):
        for out in self.outputs:
            out.node = self

    def get_attr(self, key: str, default: Any = None) -> Any:
        return self.attrs.get(key, default)

    def require_attr(self, key: str) -> Any:
        if key not in self.attrs:
            raise GraphLogicError(f"Node {self.kind} is missing attribute '{key}'")
        return self.attrs[key]

    @property
    def output(self) -> Value:
        if len(self.outputs) != 1:
            raise ArityError(
                f"Node {self.kind} has {len(self.outputs)} outputs, expected exactly 1"
            )
        return self.outputs[0]

    def __repr__(self):
        outs = ", ".join(f"%{v.name}" for v in self.outputs)
        ins = ", ".join(f"%{v.name}" for v in self.inputs)
        attrs_summary = f"[{', '.join(self.attrs)}]" if self.attrs else ""
        return f"{outs} = {self.kind}{attrs_summary}({ins})"


@dataclass(eq=False)
class Graph:
    inputs: List[Value] = field(default_factory=list)
    outputs: List[Value] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)

    def get_details(self) -> str:
        lines = [f"graph({', '.join(repr(v) for v in self.inputs)}):"]
        for node in self.nodes:
            lines.append(f"  {node}")
            if node.subgraph is not None:
                for sub_line in node.subgraph.get_details().splitlines():
                    lines.append(f"    {sub_line}")
        lines.append(f"  return ({', '.join(f'%{v.name}' for v in self.outputs)})")
        return "\n".join(lines)


def _list_elem_type(items: Sequence[Any]) -> ValueType:
    if all(isinstance(v, (bool, np.bool_)) for v in items) and items:
        return ValueType.BOOL
    if all(isinstance(v, (int, np.integer)) for v in items):
        return ValueType.INT
    if all(isinstance(v, (int, float, np.integer, np.floating)) for v in items):
        return ValueType.FLOAT
    if all(isinstance(v, str) for v in items):
        return ValueType.STR
    raise ValueError(f"Could not infer element type for list constant {list(items)}")


class GraphBuilder:
    """
    Builds a Graph node by node in definition order. Every helper returns the
    output Value(s) of the node it appended.
    """

    def __init__(self):
        self.graph = Graph()
        self._count = 0

    def _next_name(self, prefix: str) -> str:
        self._count += 1
        return f"{prefix}.{self._count}"

    # --- Core ---

    def input(
        self,
        name: Optional[str] = None,
        value_type: ValueType = ValueType.TENSOR,
        elem_type: Optional[ValueType] = None,
    ) -> Value:
        value = Value(name or self._next_name("input"), value_type, elem_type)
        self.graph.inputs.append(value)
        return value

    def output(self, *values: Value) -> "GraphBuilder":
        self.graph.outputs.extend(values)
        return self

    def build(self) -> Graph:
        return self.graph

    def op(
        self,
        kind: str,
        inputs: Sequence[Value],
        num_outputs: int = 1,
        attrs: Optional[Dict[str, Any]] = None,
        output_type: ValueType = ValueType.TENSOR,
        elem_type: Optional[Union[ValueType, ElemType]] = None,
    ) -> Union[Value, List[Value]]:
        prefix = kind.split("::")[-1]
        outputs = [
            Value(self._next_name(prefix), output_type, elem_type)
            for _ in range(num_outputs)
        ]
        self.graph.nodes.append(Node(kind, list(inputs), outputs, dict(attrs or {})))
        return outputs[0] if num_outputs == 1 else outputs

    def constant(self, value: Any, value_type: Optional[ValueType] = None) -> Value:
        if value_type is None:
            if value is None:
                value_type = ValueType.NONE
            elif isinstance(value, (bool, np.bool_)):
                value_type = ValueType.BOOL
            elif isinstance(value, (int, np.integer)):
                value_type = ValueType.INT
            elif isinstance(value, (float, np.floating)):
                value_type = ValueType.FLOAT
            elif isinstance(value, str):
                value_type = ValueType.STR
            elif isinstance(value, (list, tuple)):
                value_type = ValueType.LIST
            elif hasattr(value, "shape"):
                value_type = ValueType.TENSOR
            else:
                raise ValueError(
                    f"Could not infer type for constant with type {type(value)}"
                )
        elem_type = _list_elem_type(value) if value_type == ValueType.LIST else None
        return self.op(
            OpType.CONSTANT,
            [],
            attrs={"value": value},
            output_type=value_type,
            elem_type=elem_type,
        )

    def list_construct(
        self,
        items: Sequence[Value],
        elem_type: Optional[Union[ValueType, ElemType]] = None,
    ) -> Value:
        if elem_type is None:
            elem_type = items[0].type if items else ValueType.INT
            if elem_type == ValueType.NONE:
                elem_type = ElemType(ValueType.OPTIONAL, ValueType.TENSOR)
        return self.op(
            OpType.LIST_CONSTRUCT,
            items,
            output_type=ValueType.LIST,
            elem_type=elem_type,
        )

    def list_unpack(self, items: Value, count: int) -> List[Value]:
        outs = self.op(OpType.LIST_UNPACK, [items], num_outputs=count)
        return outs if count > 1 else [outs]

    def fusion_group(
        self, subgraph: Graph, inputs: Sequence[Value], kind: Optional[str] = None
    ) -> Union[Value, List[Value]]:
        """Appends a fusion node whose outer values mirror ``subgraph`` by position."""
        kind = kind or FUSION_NODE_SYMBOL
        outputs = [
            Value(self._next_name("fused"), v.type, v.elem_type)
            for v in subgraph.outputs
        ]
        self.graph.nodes.append(
            Node(kind, list(inputs), outputs, subgraph=subgraph)
        )
        return outputs[0] if len(outputs) == 1 else outputs

    # --- Operators ---

    def unary(self, kind: str, a: Value) -> Value:
        return self.op(kind, [a])

    def relu(self, a: Value) -> Value:
        return self.op(OpType.RELU, [a])

    def add(self, a: Value, b: Value, alpha: Optional[Value] = None) -> Value:
        return self.op(OpType.ADD, [a, b] if alpha is None else [a, b, alpha])

    def mul(self, a: Value, b: Value) -> Value:
        return self.op(OpType.MUL, [a, b])

    def mm(self, a: Value, b: Value) -> Value:
        return self.op(OpType.MM, [a, b])

    def bmm(self, a: Value, b: Value) -> Value:
        return self.op(OpType.BMM, [a, b])

    def addmm(self, bias: Value, mat1: Value, mat2: Value) -> Value:
        return self.op(OpType.ADDMM, [bias, mat1, mat2])

    def t(self, a: Value) -> Value:
        return self.op(OpType.T, [a])

    def transpose(self, a: Value, dim0: int, dim1: int) -> Value:
        return self.op(
            OpType.TRANSPOSE, [a, self.constant(dim0), self.constant(dim1)]
        )

    def flatten(self, a: Value, start_dim: int = 0, end_dim: int = -1) -> Value:
        return self.op(
            OpType.FLATTEN, [a, self.constant(start_dim), self.constant(end_dim)]
        )

    def reshape(self, a: Value, shape: Sequence[int]) -> Value:
        dims = self.list_construct([self.constant(d) for d in shape])
        return self.op(OpType.RESHAPE, [a, dims])

    def permute(self, a: Value, dims: Sequence[int]) -> Value:
        order = self.list_construct([self.constant(d) for d in dims])
        return self.op(OpType.PERMUTE, [a, order])

    def slice(
        self, a: Value, dim: int, start: int, end: int, step: int = 1
    ) -> Value:
        args = [self.constant(v) for v in (dim, start, end, step)]
        return self.op(OpType.SLICE, [a] + args)

    def cat(self, tensors: Sequence[Value], dim: int = 0) -> Value:
        items = self.list_construct(tensors)
        return self.op(OpType.CAT, [items, self.constant(dim)])

    def stack(self, tensors: Sequence[Value], dim: int = 0) -> Value:
        items = self.list_construct(tensors)
        return self.op(OpType.STACK, [items, self.constant(dim)])

    def chunk(self, a: Value, chunks: int, dim: int = 0) -> Value:
        return self.op(
            OpType.CHUNK,
            [a, self.constant(chunks), self.constant(dim)],
            output_type=ValueType.LIST,
            elem_type=ValueType.TENSOR,
        )

    def constant_chunk(self, a: Value, chunks: int, dim: int = 0) -> List[Value]:
        outs = self.op(
            OpType.CONSTANT_CHUNK,
            [a],
            num_outputs=chunks,
            attrs={"chunks": chunks, "dim": dim},
        )
        return outs if chunks > 1 else [outs]

    def fused_concat(self, tensors: Sequence[Value], dim: int = 0) -> Value:
        return self.op(OpType.FUSED_CONCAT, tensors, attrs={"dim": dim})

    def fused_stack(self, tensors: Sequence[Value], dim: int = 0) -> Value:
        return self.op(OpType.FUSED_STACK, tensors, attrs={"dim": dim})
