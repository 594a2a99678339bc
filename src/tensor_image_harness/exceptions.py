"""Exceptions raised while running a model over an image.

Every stage of a run raises its own category so the CLI can report
where a run stopped. All of them are fatal for the run.
"""

from __future__ import annotations

from collections.abc import Sequence


class HarnessError(Exception):
    """Base exception for all tensor_image_harness errors."""


class ModelLoadError(HarnessError):
    """Raised when the model file is missing or cannot be parsed."""


class DelegateError(HarnessError):
    """Raised when the requested execution provider is unknown or unavailable."""


class InterpreterError(HarnessError):
    """Raised when the inference session cannot be created or allocated."""


class InferenceError(HarnessError):
    """Raised when the forward pass fails."""


class ShapeError(HarnessError):
    """Raised when the model's tensors cannot be used as images."""


class TensorCountError(ShapeError):
    """Raised when a model does not have exactly one input and one output."""


class ShapeClassificationError(ShapeError):
    """Raised when a tensor shape has no image interpretation."""

    def __init__(self, shape: Sequence[int], reason: str) -> None:
        self.shape = tuple(shape)
        self.reason = reason
        super().__init__(f"shape {list(self.shape)} is not an image: {reason}")


class ZeroDimensionError(ShapeClassificationError):
    """A dimension of size 0 cannot describe an image axis."""


class TooManyAxesError(ShapeClassificationError):
    """More than three dimensions are larger than 1."""


class TooFewAxesError(ShapeClassificationError):
    """Fewer than two dimensions are larger than 1."""


class TooManyChannelsError(ShapeClassificationError):
    """The channel axis is larger than 4."""


class ImageIOError(HarnessError):
    """Raised when an image cannot be decoded or encoded."""


class ImageDimensionMismatchError(ImageIOError):
    """Raised when a decoded image does not match the input tensor geometry."""


class ByteSizeMismatchError(ImageIOError):
    """Raised when a pixel buffer and a tensor differ in byte size."""


class ReportError(HarnessError):
    """Raised when the run report cannot be written."""
