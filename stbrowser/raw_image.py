"""Treat arbitrary files as raw RGBA pixel data and back."""

from __future__ import annotations

import math
from itertools import accumulate
from os import PathLike
from pathlib import Path
from typing import Union

from PIL import Image

PathArg = Union[str, "PathLike[str]"]

DEFAULT_DECODED_FILE = "decodedFile.file"


def _square_size(byte_count: int) -> tuple[int, int]:
    """Largest near-square size whose pixels fit in ``byte_count`` RGBA bytes."""
    pixel_count = byte_count // 4
    width = math.isqrt(pixel_count)
    height = pixel_count // width if width else 0
    return width, height


def parse_image_raw(path: PathArg) -> Image.Image | None:
    """Read a file's bytes as RGBA pixels of a near-square image.

    Returns None when the file holds fewer than four bytes.
    """
    content = Path(path).read_bytes()
    width, height = _square_size(len(content))
    if not width:
        return None
    return Image.frombytes("RGBA", (width, height), content[: width * height * 4])


def parse_image(path: PathArg) -> Image.Image | None:
    """Read a file's bytes as running per-channel deltas of RGBA pixels.

    Each channel value is the sum, modulo 256, of that channel's bytes so far.
    Returns None when the file holds fewer than four bytes.
    """
    content = Path(path).read_bytes()
    width, height = _square_size(len(content))
    if not width:
        return None
    pixel_bytes = width * height * 4
    pixels = bytearray(pixel_bytes)
    for channel in range(4):
        deltas = content[channel:pixel_bytes:4]
        pixels[channel::4] = bytes(accumulate(deltas, lambda total, delta: (total + delta) & 0xFF))
    return Image.frombytes("RGBA", (width, height), bytes(pixels))


def decode_raw_file(image_path: PathArg, output_path: PathArg = DEFAULT_DECODED_FILE) -> Path:
    """Write an image's pixels, row by row, as raw RGBA bytes to a file."""
    with Image.open(image_path) as image:
        content = image.convert("RGBA").tobytes()
    output = Path(output_path)
    output.write_bytes(content)
    return output