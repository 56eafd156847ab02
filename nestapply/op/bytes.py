# nestapply/op/bytes.py
# Canonical encodings (LEB128 varints, exact tagged leaves)

from __future__ import annotations
from typing import Any, Sequence

import numpy as np

from .shape import index_paths


def varu(n: int) -> bytes:
    """
    Encode unsigned integer as LEB128 varint.

    Args:
        n: unsigned integer (must be >= 0)

    Returns:
        bytes: LEB128 varint

    Raises:
        ValueError: if n < 0
        OverflowError: if n too large for LEB128
    """
    if n < 0:
        raise ValueError("varu expects unsigned (n >= 0)")

    if n >= (1 << 63):
        raise OverflowError(f"Integer {n} too large for safe LEB128 encoding")

    out = bytearray()
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            break
    return bytes(out)


def unvaru(b: bytes) -> tuple[int, bytes]:
    """
    Decode LEB128 varint from bytes.

    Returns:
        (value, remaining_bytes): decoded value and unconsumed bytes
    """
    result = 0
    shift = 0
    i = 0

    while i < len(b):
        byte = b[i]
        i += 1
        result |= (byte & 0x7F) << shift
        if not (byte & 0x80):
            return result, b[i:]
        shift += 7

    raise ValueError("Incomplete LEB128 varint")


def frame_params(*ints: int) -> bytes:
    """Frame an integer list as <count><p1>...<pk>, all LEB128."""
    out = bytearray()
    out += varu(len(ints))
    for v in ints:
        out += varu(v)
    return bytes(out)


def unframe_params(b: bytes) -> list[int]:
    """Inverse of frame_params."""
    count, remaining = unvaru(b)
    params = []
    for _ in range(count):
        val, remaining = unvaru(remaining)
        params.append(val)
    return params


def zigzag_encode(i: int) -> bytes:
    """
    Encode signed integer as ZigZag LEB128 varint.

    ZigZag mapping:
      0 → 0, -1 → 1, 1 → 2, -2 → 3, 2 → 4, ...

    Raises:
        OverflowError: if the mapped value does not fit varu
    """
    return varu(i << 1 if i >= 0 else ((-i) << 1) - 1)


# Leaf kind tags; every leaf is encoded as <tag><payload>
TAG_BOOL = b"b"
TAG_INT = b"i"       # ZigZag LEB128
TAG_BIGINT = b"I"    # varu(len) + signed little-endian bytes
TAG_FLOAT = b"f"     # float64_le

_VARINT_LIMIT = 1 << 62


def _leaf(x: Any, path: tuple[int, ...]) -> Any:
    node = x
    for i in path:
        node = node[i]
    return node


def encode_leaf(v: Any) -> bytes:
    """
    Encode one real-number leaf exactly.

    Integers keep full precision (no float64 rounding), so 2**53 and
    2**53 + 1 encode differently. Python and numpy scalars of the same
    value and kind encode identically.

    Raises:
        TypeError: if v is not a bool, integer or float
    """
    if isinstance(v, (bool, np.bool_)):
        return TAG_BOOL + (b"\x01" if v else b"\x00")

    if isinstance(v, (int, np.integer)):
        i = int(v)
        if -_VARINT_LIMIT < i < _VARINT_LIMIT:
            return TAG_INT + zigzag_encode(i)
        n = (i.bit_length() + 8) // 8
        return TAG_BIGINT + varu(n) + i.to_bytes(n, "little", signed=True)

    if isinstance(v, (float, np.floating)):
        return TAG_FLOAT + np.asarray(v, dtype=np.dtype("<f8")).tobytes()

    raise TypeError(f"Leaves must be real numbers, got {type(v).__name__}")


def to_bytes_leaves(x: Any, shape: Sequence[int]) -> bytes:
    """
    Encode the leaves of a nested array as tagged, exact byte records.

    Leaves are gathered in lexicographic index order, the same order the
    traversal visits them, so equal arrays always serialize identically.

    Args:
        x: nested array conforming to `shape`
        shape: five extents

    Returns:
        bytes: concatenated encode_leaf records (empty for zero extents)

    Raises:
        TypeError: if a leaf is not a real number (bool/int/float)
    """
    out = bytearray()
    for p in index_paths(shape):
        out += encode_leaf(_leaf(x, p))
    return bytes(out)
