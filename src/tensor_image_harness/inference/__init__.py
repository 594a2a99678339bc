"""Interpreter adapters over external inference runtimes."""

from tensor_image_harness.inference.base import BaseTensorInterpreter
from tensor_image_harness.inference.delegate import DelegateConfig
from tensor_image_harness.inference.onnx_interpreter import ONNXTensorInterpreter

__all__ = [
    "BaseTensorInterpreter",
    "DelegateConfig",
    "ONNXTensorInterpreter",
]
