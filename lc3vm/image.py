"""Loading LC-3 program images: a big-endian origin word followed by program words."""

from __future__ import annotations

import os
import struct

from lc3vm.hardware import MEMORY_SIZE, WORD_MASK


class ImageError(Exception):
    """Raised when an image file cannot be read or is malformed."""


def swap16(value: int) -> int:
    """Swap the two bytes of a 16-bit word."""
    value &= WORD_MASK
    return ((value << 8) | (value >> 8)) & WORD_MASK


def parse_image(data: bytes) -> tuple[int, tuple[int, ...]]:
    """Decode image bytes into ``(origin, words)``.

    Words that would run past the end of memory are dropped, as is a
    trailing odd byte.
    """
    if len(data) < 2:
        raise ImageError("image is too short to hold an origin")
    (origin,) = struct.unpack_from(">H", data)
    body = data[2:]
    count = min(len(body) // 2, MEMORY_SIZE - origin)
    words = struct.unpack_from(f">{count}H", body)
    return origin, words


def read_image(path: str | os.PathLike[str]) -> tuple[int, tuple[int, ...]]:
    """Read and decode the image file at ``path``."""
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise ImageError(f"failed to load image: {path}") from exc
    return parse_image(data)