# nestapply/op/hash.py
# BLAKE3 hashing helpers

from __future__ import annotations
from typing import Any, Sequence

from blake3 import blake3

from .bytes import frame_params, to_bytes_leaves


def hash_bytes(b: bytes) -> str:
    """
    Hash bytes with BLAKE3, return hex digest.

    Returns:
        str: hex digest (64 hex chars = 256 bits)
    """
    return blake3(b).hexdigest()


def hash_nested(x: Any, shape: Sequence[int]) -> str:
    """
    Hash a nested array together with its shape.

    The shape is framed in front of the leaf bytes so that arrays with the
    same leaves but different shapes (e.g. [1,1,1,2,2] vs [1,1,1,1,4])
    hash differently.
    """
    return hash_bytes(frame_params(*shape) + to_bytes_leaves(x, shape))
