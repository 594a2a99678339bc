"""Decode images into packed pixel buffers and encode them back as PNG."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import numpy as np
from loguru import logger
from PIL import Image, UnidentifiedImageError

from tensor_image_harness.exceptions import ByteSizeMismatchError, ImageIOError
from tensor_image_harness.schemas.geometry import ImageGeometry

# Pillow mode for each supported channel count.
CHANNEL_MODES = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}


def load_image(path: str | Path, channels: int) -> np.ndarray:  # type: ignore[type-arg]
    """Decode ``path`` into a uint8 array of shape ``(height, width, channels)``.

    The image is converted to the requested channel count whatever its
    stored mode (e.g. an RGB file read with ``channels=1`` is converted
    to grayscale).

    Raises:
        ImageIOError: If the file is missing or cannot be decoded.
        ValueError: If ``channels`` is not between 1 and 4.
    """
    if channels not in CHANNEL_MODES:
        raise ValueError(f"channels must be between 1 and 4, got {channels}")

    path = Path(path)
    try:
        with Image.open(path) as img:
            converted = img.convert(CHANNEL_MODES[channels])
    except (FileNotFoundError, UnidentifiedImageError) as e:
        raise ImageIOError(f"failed to open image '{path}': {e}") from e
    except Image.DecompressionBombError as e:
        raise ImageIOError(f"refusing to decode image '{path}': {e}") from e
    except OSError as e:
        raise ImageIOError(f"failed to decode image '{path}': {e}") from e

    pixels = np.asarray(converted, dtype=np.uint8)
    return pixels.reshape(converted.height, converted.width, channels)


def save_image(
    path: str | Path,
    buffer: bytes | bytearray | memoryview | np.ndarray,  # type: ignore[type-arg]
    geometry: ImageGeometry,
) -> Path:
    """Encode a packed 8-bit buffer as a PNG at ``path``.

    Rows are ``geometry.width`` pixels of ``geometry.channels`` bytes each.
    The file is written to a temporary sibling and renamed into place,
    so ``path`` either holds a complete image or is left untouched.

    Raises:
        ByteSizeMismatchError: If the buffer size differs from the geometry.
        ImageIOError: If encoding or writing fails.
    """
    path = Path(path)
    if isinstance(buffer, np.ndarray):
        data = np.ascontiguousarray(buffer).view(np.uint8).reshape(-1)
    else:
        data = np.frombuffer(buffer, dtype=np.uint8)
    if data.size != geometry.byte_size:
        raise ByteSizeMismatchError(
            f"expected {geometry.byte_size} bytes for a {geometry} image, "
            f"got {data.size}"
        )

    pixels = data.reshape(geometry.height, geometry.width, geometry.channels)
    if geometry.channels == 1:
        pixels = pixels[:, :, 0]
    image = Image.fromarray(pixels)

    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise ImageIOError(f"failed to write output to '{path}': {e}") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            image.save(f, format="PNG")
        # mkstemp creates the file owner-only
        tmp_path.chmod(0o644)
        os.replace(tmp_path, path)
    except (OSError, ValueError) as e:
        tmp_path.unlink(missing_ok=True)
        raise ImageIOError(f"failed to write output to '{path}': {e}") from e

    logger.debug(f"Encoded {geometry} PNG to {path}")
    return path
