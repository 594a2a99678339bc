"""Interpret a tensor shape as an image.

Axes of size 1 are treated as batch or broadcast axes and ignored. The
remaining axes are read, in order, as width, height and channels.
"""

from __future__ import annotations

from collections.abc import Sequence

from tensor_image_harness.exceptions import (
    TooFewAxesError,
    TooManyAxesError,
    TooManyChannelsError,
    ZeroDimensionError,
)
from tensor_image_harness.schemas.geometry import MAX_CHANNELS, ImageGeometry

_SLOTS = ("width", "height", "channels")


def classify_shape(shape: Sequence[int]) -> ImageGeometry:
    """Recover the image geometry described by ``shape``.

    Args:
        shape: Declared dimensions of a tensor, outermost first.

    Returns:
        The geometry; channels is 1 when only two axes are larger than 1.

    Raises:
        ValueError: If a dimension is negative.
        ZeroDimensionError: If any dimension is 0.
        TooManyAxesError: If more than three dimensions are larger than 1.
        TooFewAxesError: If fewer than two dimensions are larger than 1.
        TooManyChannelsError: If the channel axis is larger than 4.
    """
    found: dict[str, int] = {}
    for dim in shape:
        if dim < 0:
            raise ValueError(f"negative dimension in shape {list(shape)}")
        if dim == 0:
            raise ZeroDimensionError(shape, "contains a dimension of size 0")
        if dim == 1:
            continue
        if len(found) == len(_SLOTS):
            raise TooManyAxesError(shape, "more than 3 axes larger than 1")
        found[_SLOTS[len(found)]] = dim

    if len(found) < 2:
        raise TooFewAxesError(shape, "width and height are required")

    channels = found.get("channels", 1)
    if channels > MAX_CHANNELS:
        raise TooManyChannelsError(
            shape, f"{channels} channels, at most {MAX_CHANNELS} supported"
        )

    return ImageGeometry(
        width=found["width"], height=found["height"], channels=channels
    )
