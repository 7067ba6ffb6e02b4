"""Artifact size reporting.

Computes the brotli-compressed size of build outputs and formats byte
counts for humans.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Union

import brotli

SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")
ARTIFACT_SUFFIXES = (".js", ".cjs")


def bytes_to_size(size: int) -> str:
    """Convert a number of bytes into a human readable string.

    Examples:
        >>> bytes_to_size(0)
        'n/a'
        >>> bytes_to_size(500)
        '500 Bytes'
        >>> bytes_to_size(2048)
        '2.0 KB'
    """
    if size == 0:
        return "n/a"
    index = min(int(math.floor(math.log(size, 1024))), len(SIZE_UNITS) - 1)
    # Float error can put an exact power of 1024 just below its unit
    if index + 1 < len(SIZE_UNITS) and size >= 1024 ** (index + 1):
        index += 1
    if index == 0:
        return f"{size} {SIZE_UNITS[0]}"
    # Halves round up, e.g. 1280 bytes is 1.3 KB
    value = (Decimal(size) / Decimal(1024**index)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{value} {SIZE_UNITS[index]}"


def compressed_size(data: bytes) -> int:
    """Length of data after brotli compression."""
    return len(brotli.compress(data))


def output_size(path: Union[str, Path]) -> str:
    """Formatted compressed size of a file."""
    return bytes_to_size(compressed_size(Path(path).read_bytes()))


def dist_artifacts(dist_dir: Path) -> list[Path]:
    """Top-level JS/CJS files of the output directory, sorted by name.

    Sub-directories are not searched and the suffix match is case-sensitive.
    """
    if not dist_dir.is_dir():
        return []
    return sorted(p for p in dist_dir.iterdir() if p.is_file() and p.name.endswith(ARTIFACT_SUFFIXES))
