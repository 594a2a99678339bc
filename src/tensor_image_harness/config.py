"""Pydantic frozen configuration models for tensor_image_harness."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from tensor_image_harness.inference.delegate import DelegateConfig

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"]


class RunConfig(BaseModel, frozen=True):
    """Everything a single run needs.

    All fields are validated at construction time. Frozen, no mutation after creation.
    """

    model_path: Path
    input_path: Path
    output_path: Path
    delegate: DelegateConfig = Field(default_factory=DelegateConfig)
    report_path: Path | None = None
    log_level: LogLevel = "INFO"
