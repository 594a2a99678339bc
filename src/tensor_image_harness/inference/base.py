"""Abstract base class for tensor interpreters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Self

import numpy as np

from tensor_image_harness.schemas.tensor import TensorInfo


class BaseTensorInterpreter(ABC):
    """A loaded model with allocated input and output tensors.

    Inputs are written as raw bytes, the model is invoked once, and
    outputs are read back as arrays. Interpreters are context managers;
    leaving the ``with`` block releases the runtime handles.
    """

    @abstractmethod
    def input_details(self) -> list[TensorInfo]:
        """Describe every input tensor, in declaration order."""

    @abstractmethod
    def output_details(self) -> list[TensorInfo]:
        """Describe every output tensor, in declaration order."""

    @abstractmethod
    def set_input(self, index: int, data: bytes | bytearray | memoryview) -> None:
        """Copy ``data`` into input tensor ``index``.

        ``data`` must be exactly the tensor's byte size.
        """

    @abstractmethod
    def invoke(self) -> None:
        """Run one forward pass over the current inputs."""

    @abstractmethod
    def get_output(self, index: int) -> np.ndarray:  # type: ignore[type-arg]
        """Return output tensor ``index`` from the last forward pass."""

    @abstractmethod
    def close(self) -> None:
        """Release the runtime handles. Safe to call more than once."""

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
