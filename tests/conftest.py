"""Shared pytest fixtures for tensor_image_harness tests.

Models are built with ``onnx.helper`` so runs go through ONNX Runtime
for real. Image tensors use NHWC layout with a batch axis of 1.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import numpy as np
import onnx
import pytest
from onnx import TensorProto, helper, numpy_helper
from PIL import Image

# Input tensor [1, 8, 6, 3]: classified as width 8, height 6, 3 channels.
TENSOR_SHAPE = [1, 8, 6, 3]
IMAGE_SIZE = (8, 6)

Dim = int | str


def save_model(
    path: Path,
    nodes: list[onnx.NodeProto],
    inputs: Sequence[tuple[str, int, Sequence[Dim]]],
    outputs: Sequence[tuple[str, int, Sequence[Dim]]],
    initializers: Sequence[onnx.TensorProto] = (),
) -> Path:
    """Write a single-graph ONNX model that ONNX Runtime can load."""
    graph = helper.make_graph(
        nodes,
        "harness_test",
        [helper.make_tensor_value_info(n, t, list(s)) for n, t, s in inputs],
        [helper.make_tensor_value_info(n, t, list(s)) for n, t, s in outputs],
        initializer=list(initializers),
    )
    model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 17)])
    # Keep the IR version loadable by older runtimes.
    model.ir_version = 8
    onnx.save(model, str(path))
    return path


@pytest.fixture()
def identity_model(tmp_path: Path) -> Path:
    """uint8 [1, 8, 6, 3] -> Identity -> uint8 [1, 8, 6, 3]."""
    return save_model(
        tmp_path / "identity.onnx",
        [helper.make_node("Identity", ["image"], ["result"])],
        [("image", TensorProto.UINT8, TENSOR_SHAPE)],
        [("result", TensorProto.UINT8, TENSOR_SHAPE)],
    )


@pytest.fixture()
def first_channel_model(tmp_path: Path) -> Path:
    """uint8 [1, 8, 6, 3] -> keep channel 0 -> uint8 [1, 8, 6, 1]."""
    initializers = [
        numpy_helper.from_array(np.array([0], dtype=np.int64), "starts"),
        numpy_helper.from_array(np.array([1], dtype=np.int64), "ends"),
        numpy_helper.from_array(np.array([3], dtype=np.int64), "axes"),
    ]
    return save_model(
        tmp_path / "first_channel.onnx",
        [helper.make_node("Slice", ["image", "starts", "ends", "axes"], ["result"])],
        [("image", TensorProto.UINT8, TENSOR_SHAPE)],
        [("result", TensorProto.UINT8, [1, 8, 6, 1])],
        initializers,
    )


@pytest.fixture()
def dynamic_batch_model(tmp_path: Path) -> Path:
    """Identity with a symbolic batch axis on input and output."""
    shape: list[Dim] = ["batch", 8, 6, 3]
    return save_model(
        tmp_path / "dynamic.onnx",
        [helper.make_node("Identity", ["image"], ["result"])],
        [("image", TensorProto.UINT8, shape)],
        [("result", TensorProto.UINT8, shape)],
    )


@pytest.fixture()
def float_model(tmp_path: Path) -> Path:
    """float32 [1, 8, 6, 3] identity; 4 bytes per sample."""
    return save_model(
        tmp_path / "float.onnx",
        [helper.make_node("Identity", ["image"], ["result"])],
        [("image", TensorProto.FLOAT, TENSOR_SHAPE)],
        [("result", TensorProto.FLOAT, TENSOR_SHAPE)],
    )


@pytest.fixture()
def two_output_model(tmp_path: Path) -> Path:
    """One input fanned out to two Identity outputs."""
    return save_model(
        tmp_path / "two_outputs.onnx",
        [
            helper.make_node("Identity", ["image"], ["a"]),
            helper.make_node("Identity", ["image"], ["b"]),
        ],
        [("image", TensorProto.UINT8, TENSOR_SHAPE)],
        [
            ("a", TensorProto.UINT8, TENSOR_SHAPE),
            ("b", TensorProto.UINT8, TENSOR_SHAPE),
        ],
    )


@pytest.fixture()
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a random RGB image of ``size`` (width, height)."""

    def _make(
        size: tuple[int, int] = IMAGE_SIZE, name: str = "input.png", seed: int = 0
    ) -> Path:
        rng = np.random.default_rng(seed)
        width, height = size
        pixels = rng.integers(0, 256, (height, width, 3), dtype=np.uint8)
        path = tmp_path / name
        Image.fromarray(pixels).save(path)
        return path

    return _make


@pytest.fixture()
def uint64_model(tmp_path: Path) -> Path:
    """uint64 [1, 8, 6, 3] identity; 8 bytes per sample."""
    return save_model(
        tmp_path / "uint64.onnx",
        [helper.make_node("Identity", ["image"], ["result"])],
        [("image", TensorProto.UINT64, TENSOR_SHAPE)],
        [("result", TensorProto.UINT64, TENSOR_SHAPE)],
    )


@pytest.fixture()
def string_model(tmp_path: Path) -> Path:
    """string [1, 8, 6, 3] identity; no fixed byte size."""
    return save_model(
        tmp_path / "string.onnx",
        [helper.make_node("Identity", ["image"], ["result"])],
        [("image", TensorProto.STRING, TENSOR_SHAPE)],
        [("result", TensorProto.STRING, TENSOR_SHAPE)],
    )
