from __future__ import annotations

from pathlib import Path
from typing import Iterator, Union


SUPPORTED_WIDTHS = (2, 4)


def load_image(path: Union[str, Path]) -> bytes:
    path = Path(path)
    with path.open("rb") as handle:
        return handle.read()


def pad_image(data: bytes, width: int) -> bytes:
    remainder = len(data) % width
    if remainder:
        return bytes(data) + bytes(width - remainder)
    return bytes(data)


def iter_words(data: bytes, width: int) -> Iterator[int]:
    if width not in SUPPORTED_WIDTHS:
        raise ValueError(f"Unsupported instruction width: {width}")
    data = pad_image(data, width)
    for offset in range(0, len(data), width):
        yield int.from_bytes(data[offset : offset + width], "little")
