"""Reading and writing RGB images as flat, bottom-up byte buffers."""

from __future__ import annotations

import numpy as np
from PIL import Image


def load_image(filename):
    """Load an image file.

    Returns ``(data, width, height)`` where ``data`` holds ``width * height``
    RGB triples, row by row, starting with the bottom row of the image.
    """
    with Image.open(filename) as img:
        rgb = img.convert("RGB")
        width, height = rgb.size
        pixels = np.asarray(rgb, dtype=np.uint8)[::-1]
    return pixels.tobytes(), width, height


def save_image(filename, data, width, height, image_type=".png", quality=95):
    """Save a bottom-up RGB buffer as ``.png`` or ``.jpg``.

    Any other ``image_type`` writes nothing.
    """
    pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, 3)[::-1]
    image = Image.fromarray(np.ascontiguousarray(pixels), "RGB")
    if image_type == ".jpg":
        image.save(filename, format="JPEG", quality=quality)
    elif image_type == ".png":
        image.save(filename, format="PNG")