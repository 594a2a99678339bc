"""Image geometry recovered from a tensor shape."""

from __future__ import annotations

from pydantic import BaseModel, Field

MAX_CHANNELS = 4


class ImageGeometry(BaseModel, frozen=True):
    """Width, height and channel count of a packed 8-bit image.

    ``width`` is the first axis larger than 1 in the tensor shape,
    ``height`` the second and ``channels`` the third (1 when absent).
    """

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    channels: int = Field(default=1, gt=0, le=MAX_CHANNELS)

    @property
    def byte_size(self) -> int:
        """Size in bytes of a packed buffer with one byte per sample."""
        return self.width * self.height * self.channels

    def __str__(self) -> str:
        return f"{self.width}x{self.height}, with {self.channels} channels"
