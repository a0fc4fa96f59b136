from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence

import numpy as np
from tqdm import tqdm

from .compiler.shape_inference import InferenceContext, ShapeInference
from .config import DEBUG_DETAILED, DEBUG_EXECUTION, FUSION_NODE_SYMBOL, HAS_END_OFFSET
from .errors import ArityError, GraphLogicError, UnsupportedInputError
from .ir.dtypes import DType
from .ir.graph import Graph, Node, Value
from .ir.meta import (
    IntValuesMeta,
    MetaStack,
    TensorListMeta,
    TensorMeta,
    VariableMeta,
    make_shape,
)


class ShapeInferenceEngine:
    """
    Propagates shapes (and statically known int values) through a graph,
    starting from one set of example inputs. No tensor data is computed.

    Nodes carrying a fused subgraph are entered recursively: the outer input
    records are turned into zero-filled placeholder tensors, the subgraph is
    walked, and its output records are attached to the fusion node's outputs.
    """

    def __init__(
        self,
        graph: Graph,
        inputs: Sequence[Any],
        fusion_node_symbol: str = FUSION_NODE_SYMBOL,
        has_end_offset: bool = HAS_END_OFFSET,
    ):
        self.graph = graph
        self.inputs = list(inputs)
        self.fusion_node_symbol = fusion_node_symbol
        self.ctx = InferenceContext(has_end_offset=has_end_offset)
        self._shape_map: Dict[Value, VariableMeta] = {}
        self._output_shapes: List[VariableMeta] = []

    # --- Public API ---

    def run(self):
        if len(self.inputs) != len(self.graph.inputs):
            raise ArityError(
                "Number of inputs mismatch between Graph and actual inputs: "
                f"expected {len(self.graph.inputs)}, got {len(self.inputs)}"
            )

        self._shape_map = {}
        self._output_shapes = []

        self._run_recursively(self.graph, self.inputs)

        self._output_shapes = [self._lookup(v) for v in self.graph.outputs]

    def graph_output_shapes(self) -> List[VariableMeta]:
        return list(self._output_shapes)

    def variable_map(self) -> Mapping[Value, VariableMeta]:
        return MappingProxyType(self._shape_map)

    def format_shape_map(self) -> str:
        lines = []
        for value, meta in self._shape_map.items():
            if isinstance(meta, TensorMeta):
                body = "".join(f"{d} " for d in meta.shape)
            elif isinstance(meta, TensorListMeta):
                body = "".join(
                    "[ " + "".join(f"{d} " for d in s) + "]" for s in meta.shapes
                )
            else:
                body = "".join(f"{v} " for v in meta.values)
            lines.append(f"{value.debug_name}:[ {body}]")
        return "\n".join(lines)

    def print_shape_map(self):
        print(self.format_shape_map())

    # --- Traversal ---

    def _run_recursively(self, graph: Graph, inputs: Sequence[Any]):
        self._seed_graph_inputs(graph, inputs)

        for node in tqdm(graph.nodes, disable=not DEBUG_EXECUTION, desc="shape inference"):
            if node.subgraph is not None:
                self._run_fusion_node(node)
            else:
                self._run_node(node)

    def _run_fusion_node(self, node: Node):
        if not node.kind.startswith(self.fusion_node_symbol):
            raise GraphLogicError(
                f"Node {node.kind} carries a subgraph but is not a "
                f"{self.fusion_node_symbol} node"
            )

        # The subgraph's input values are distinct objects from the fusion
        # node's inputs, so the subgraph is re-seeded from placeholders.
        sub_inputs = []
        for value in node.inputs:
            meta = self._lookup(value)
            if not isinstance(meta, TensorMeta):
                raise UnsupportedInputError(
                    f"Only tensor inputs are supported for fused subgraphs, "
                    f"got {meta} for %{value.debug_name}"
                )
            sub_inputs.append(np.zeros(meta.shape, dtype=meta.dtype.to_numpy()))

        subgraph = node.subgraph
        if DEBUG_EXECUTION:
            print(f"[ShapeInference] Entering subgraph of {node.kind}")
        self._run_recursively(subgraph, sub_inputs)

        if len(subgraph.outputs) != len(node.outputs):
            raise ArityError(
                f"{node.kind}: subgraph has {len(subgraph.outputs)} outputs, "
                f"node has {len(node.outputs)}"
            )
        for outer, inner in zip(node.outputs, subgraph.outputs):
            self._store(outer, self._lookup(inner))

    def _run_node(self, node: Node):
        metas = self._get_node_input_metas(node)
        results = ShapeInference.infer_node(node, metas, self.ctx)
        if DEBUG_EXECUTION and DEBUG_DETAILED:
            print(f"[ShapeInference] {node} : {metas} -> {[m for _, m in results]}")
        for value, meta in results:
            self._store(value, meta)

    # --- Value map ---

    def _get_node_input_metas(self, node: Node) -> MetaStack:
        return [self._lookup(value) for value in node.inputs]

    def _lookup(self, value: Value) -> VariableMeta:
        meta = self._shape_map.get(value)
        if meta is None:
            raise GraphLogicError(
                f"Value %{value.debug_name} is used before it is produced"
            )
        return meta

    def _store(self, value: Value, meta: VariableMeta):
        if value in self._shape_map:
            raise GraphLogicError(f"Value %{value.debug_name} is produced twice")
        self._shape_map[value] = meta

    # --- Input seeding ---

    def _seed_graph_inputs(self, graph: Graph, inputs: Sequence[Any]):
        if len(inputs) != len(graph.inputs):
            raise ArityError(
                "Number of inputs mismatch between Graph and actual inputs: "
                f"expected {len(graph.inputs)}, got {len(inputs)}"
            )
        for value, example in zip(graph.inputs, inputs):
            self._store(value, meta_from_example(example))


def meta_from_example(example: Any) -> VariableMeta:
    """
    Classifies one example input:

    - bool / int scalar -> its value, placeholder shape (1,)
    - list of ints -> the list, placeholder shape (len, 1)
    - tensor (numpy array, torch tensor) -> its shape
    """
    if isinstance(example, (bool, np.bool_, int, np.integer)):
        return IntValuesMeta((int(example),))

    if isinstance(example, (list, tuple)) and all(
        isinstance(v, (int, np.integer)) and not isinstance(v, (bool, np.bool_))
        for v in example
    ):
        return IntValuesMeta(tuple(int(v) for v in example), is_list=True)

    is_array_scalar = isinstance(example, np.generic)
    if not is_array_scalar and hasattr(example, "shape") and hasattr(example, "dtype"):
        return TensorMeta(make_shape(example.shape), DType.from_value(example))

    raise UnsupportedInputError(
        f"Input type {type(example).__name__} is not supported yet."
    )
