"""Tensor, geometry and run report schemas."""

from tensor_image_harness.schemas.geometry import ImageGeometry
from tensor_image_harness.schemas.report import RunReport
from tensor_image_harness.schemas.tensor import TensorInfo

__all__ = [
    "ImageGeometry",
    "RunReport",
    "TensorInfo",
]
