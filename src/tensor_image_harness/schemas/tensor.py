"""Tensor description reported by an interpreter."""

from __future__ import annotations

from pydantic import BaseModel


class TensorInfo(BaseModel, frozen=True):
    """Name, resolved shape, element type tag and byte size of a tensor.

    ``byte_size`` is ``None`` when the element type has no fixed width.
    """

    name: str
    shape: tuple[int, ...]
    dtype: str
    byte_size: int | None

    @property
    def dims(self) -> str:
        """Shape rendered as ``1x224x224x3``."""
        return "x".join(str(d) for d in self.shape)

    @property
    def size_label(self) -> str:
        """Byte size for display, ``unknown`` when there is none."""
        return "unknown" if self.byte_size is None else str(self.byte_size)
