import unittest

import numpy as np
import pytest

from shape_graphs.compiler.shape_inference import (
    InferenceContext,
    Packing,
    ShapeInference,
)
from shape_graphs.errors import ArityError, GraphLogicError, UnsupportedOperatorError
from shape_graphs.ir.dtypes import DType, ValueType
from shape_graphs.ir.graph import GraphBuilder
from shape_graphs.ir.meta import IntValuesMeta, TensorListMeta, TensorMeta
from shape_graphs.ops.op_types import OpType


def _infer(node, metas=(), ctx=None):
    return ShapeInference.infer_node(node, list(metas), ctx)


class TestConstantPacking(unittest.TestCase):
    def setUp(self):
        self.b = GraphBuilder()

    def _record(self, value):
        out = self.b.constant(value)
        [(value_out, meta)] = _infer(out.node)
        self.assertIs(value_out, out)
        return meta

    def test_int_constant(self):
        self.assertEqual(self._record(3), IntValuesMeta((3,)))

    def test_bool_constant(self):
        self.assertEqual(self._record(True), IntValuesMeta((1,)))

    def test_float_constant(self):
        self.assertEqual(self._record(0.5), IntValuesMeta((1,)))

    def test_none_constant(self):
        meta = self._record(None)
        self.assertEqual(meta.values, ())
        self.assertFalse(meta.is_list)

    def test_int_list_constant(self):
        meta = self._record([1, 2])
        self.assertEqual(meta, IntValuesMeta((1, 2), is_list=True))
        self.assertEqual(meta.shape, (2, 1))

    def test_tensor_constant(self):
        meta = self._record(np.zeros((2, 3), dtype=np.float16))
        self.assertEqual(meta, TensorMeta((2, 3), DType.FP16))


class TestListPacking(unittest.TestCase):
    def test_int_list(self):
        b = GraphBuilder()
        items = [b.constant(2), b.constant(3)]
        out = b.list_construct(items)
        [(_, meta)] = _infer(out.node, [IntValuesMeta((2,)), IntValuesMeta((3,))])
        self.assertEqual(meta, IntValuesMeta((2, 3), is_list=True))

    def test_tensor_list(self):
        b = GraphBuilder()
        out = b.list_construct([b.input("x"), b.input("y")])
        [(_, meta)] = _infer(out.node, [TensorMeta((2, 3)), TensorMeta((4,))])
        self.assertEqual(meta, TensorListMeta(((2, 3), (4,))))

    def test_optional_tensor_list(self):
        b = GraphBuilder()
        out = b.list_construct([b.constant(None), b.constant(None)])
        [(_, meta)] = _infer(out.node, [IntValuesMeta(()), IntValuesMeta(())])
        self.assertIsInstance(meta, TensorListMeta)
        self.assertEqual(len(meta.shapes), 2)

    def test_list_unpack_positional(self):
        b = GraphBuilder()
        items = b.input("items", ValueType.LIST, ValueType.TENSOR)
        outs = b.list_unpack(items, 2)
        results = _infer(outs[0].node, [TensorListMeta(((2, 3), (4,)))])
        self.assertEqual([v for v, _ in results], outs)
        self.assertEqual([m for _, m in results], [TensorMeta((2, 3)), TensorMeta((4,))])

    def test_list_unpack_count_mismatch(self):
        b = GraphBuilder()
        items = b.input("items", ValueType.LIST, ValueType.TENSOR)
        outs = b.list_unpack(items, 2)
        with self.assertRaises(ArityError):
            _infer(outs[0].node, [TensorListMeta(((2,), (3,), (4,)))])


def test_chunk_packs_one_list_output():
    b = GraphBuilder()
    out = b.chunk(b.input("x"), 3, 0)
    metas = [TensorMeta((10, 2)), IntValuesMeta((3,)), IntValuesMeta((0,))]
    [(value, meta)] = _infer(out.node, metas)
    assert value is out
    assert meta == TensorListMeta(((4, 2), (4, 2), (2, 2)))


def test_constant_chunk_packs_each_output():
    b = GraphBuilder()
    outs = b.constant_chunk(b.input("x"), 2, dim=1)
    results = _infer(outs[0].node, [TensorMeta((3, 8))])
    assert [m for _, m in results] == [TensorMeta((3, 4)), TensorMeta((3, 4))]


def test_embedding_bag_records_first_output_only():
    b = GraphBuilder()
    weight, indices, offsets = b.input("w"), b.input("i"), b.input("o")
    flags = [b.constant(0) for _ in range(5)]
    outs = b.op(OpType.EMBEDDING_BAG, [weight, indices, offsets] + flags, num_outputs=4)

    metas = [TensorMeta((100, 16)), TensorMeta((40,)), TensorMeta((9,))]
    metas += [IntValuesMeta((0,))] * 5

    results = _infer(outs[0].node, metas)
    assert len(results) == 1
    assert results[0] == (outs[0], TensorMeta((8, 16)))

    results = _infer(outs[0].node, metas, InferenceContext(has_end_offset=False))
    assert results[0][1] == TensorMeta((9, 16))


@pytest.mark.parametrize(
    "kind",
    [OpType.FB_EMBEDDING_BAG_BYTE_ROWWISE_OFFSETS, OpType.EMBEDDING_BAG_BYTE_ROWWISE_OFFSETS],
)
def test_byte_rowwise_kinds_share_a_handler(kind):
    b = GraphBuilder()
    out = b.op(kind, [b.input() for _ in range(8)])
    metas = [TensorMeta((100, 24)), TensorMeta((40,)), TensorMeta((9,))]
    metas += [IntValuesMeta((0,))] * 5
    assert _infer(out.node, metas) == [(out, TensorMeta((8, 16)))]


def test_elementwise_carries_dtype():
    b = GraphBuilder()
    out = b.add(b.input("x"), b.constant(1))
    [(_, meta)] = _infer(out.node, [TensorMeta((3, 4), DType.FP16), IntValuesMeta((1,))])
    assert meta == TensorMeta((3, 4), DType.FP16)


def test_unknown_operator():
    b = GraphBuilder()
    out = b.op("aten::conv2d", [b.input("x")])
    with pytest.raises(UnsupportedOperatorError, match="aten::conv2d is not supported") as e:
        _infer(out.node, [TensorMeta((1, 3, 8, 8))])
    assert e.value.kind == "aten::conv2d"
    # also a NotImplementedError
    assert isinstance(e.value, NotImplementedError)


@pytest.mark.parametrize(
    "kind, attrs, num_inputs",
    [
        (OpType.FUSED_CONCAT, {}, 2),
        (OpType.FUSED_STACK, {}, 2),
        (OpType.CONSTANT_CHUNK, {"chunks": 2}, 1),
        (OpType.CONSTANT_CHUNK, {"dim": 0}, 1),
    ],
)
def test_missing_static_attribute(kind, attrs, num_inputs):
    b = GraphBuilder()
    out = b.op(kind, [b.input() for _ in range(num_inputs)], attrs=attrs)
    metas = [TensorMeta((2, 4))] * num_inputs
    node = out.node
    with pytest.raises(GraphLogicError, match=f"{kind} is missing attribute"):
        _infer(node, metas)


def test_constant_without_value():
    b = GraphBuilder()
    out = b.op(OpType.CONSTANT, [], output_type=ValueType.INT)
    with pytest.raises(GraphLogicError, match="missing attribute 'value'"):
        _infer(out.node)

    # prim::Constant() is how None is spelled
    out = b.op(OpType.CONSTANT, [], output_type=ValueType.NONE)
    assert _infer(out.node) == [(out, IntValuesMeta(()))]


def test_every_op_type_has_a_handler():
    assert set(OpType.all()) <= set(ShapeInference.supported_ops())


class TestCustomHandler(unittest.TestCase):
    KIND = "custom::double_last"

    def setUp(self):
        @ShapeInference.register_handler(self.KIND)
        def handle_double_last(node, metas, ctx):
            shape = metas[0].shape
            return shape[:-1] + (shape[-1] * 2,)

    def tearDown(self):
        ShapeInference._handlers.pop(self.KIND, None)

    def test_registered_handler_is_dispatched(self):
        b = GraphBuilder()
        out = b.op(self.KIND, [b.input("x")])
        [(_, meta)] = _infer(out.node, [TensorMeta((2, 3))])
        self.assertEqual(meta, TensorMeta((2, 6)))
        self.assertIn(self.KIND, ShapeInference.supported_ops())

    def test_registered_handler_with_packing(self):
        ShapeInference.register_handler(self.KIND, packing=Packing.LIST_OUTPUT)(
            lambda node, metas, ctx: [metas[0].shape, metas[0].shape]
        )
        b = GraphBuilder()
        out = b.op(self.KIND, [b.input("x")], output_type=ValueType.LIST)
        [(_, meta)] = _infer(out.node, [TensorMeta((2, 3))])
        self.assertEqual(meta, TensorListMeta(((2, 3), (2, 3))))


if __name__ == "__main__":
    unittest.main()
