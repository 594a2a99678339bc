"""Summary of a single harness run."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from tensor_image_harness.schemas.geometry import ImageGeometry
from tensor_image_harness.schemas.tensor import TensorInfo


class RunReport(BaseModel):
    """What was run, on which tensors, and how long the forward pass took."""

    model_path: str
    input_path: str
    output_path: str
    providers: list[str]
    input_tensor: TensorInfo
    output_tensor: TensorInfo
    input_geometry: ImageGeometry
    output_geometry: ImageGeometry
    execution_time_ms: float
    runtime_version: str
    created_at: str = Field(default_factory=lambda: datetime.now(tz=UTC).isoformat())
