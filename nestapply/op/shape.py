# nestapply/op/shape.py
# Shape helpers and the optional conformance check for nested arrays

from __future__ import annotations
import itertools
from collections.abc import Sequence
from typing import Any, Iterator, Tuple

import numpy as np

# Fixed nesting depth of every container handled by this package
NDIMS = 5

# Four inputs plus one output
NARRAYS = 5


def validate_shape(shape: Sequence[int]) -> Tuple[int, ...]:
    """
    Normalize a shape to a tuple of Python ints.

    Contract:
    Exactly NDIMS non-negative integer extents. Zero extents are legal
    (they make a traversal a no-op).

    Args:
        shape: sequence of extents

    Returns:
        tuple[int, ...]: normalized shape

    Raises:
        TypeError: if an extent is not an integer (bool is rejected)
        ValueError: if the length is not NDIMS or an extent is negative
    """
    dims = tuple(shape)
    if len(dims) != NDIMS:
        raise ValueError(f"Shape must have {NDIMS} dimensions, got {len(dims)}")

    out = []
    for k, d in enumerate(dims):
        if isinstance(d, (bool, np.bool_)) or not isinstance(d, (int, np.integer)):
            raise TypeError(f"Shape extent {k} must be an integer, got {type(d).__name__}")
        if d < 0:
            raise ValueError(f"Shape extent {k} must be non-negative, got {d}")
        out.append(int(d))

    return tuple(out)


def numel(shape: Sequence[int]) -> int:
    """Number of leaves (and callback invocations) for `shape`."""
    n = 1
    for d in shape:
        n *= d
    return n


def index_paths(shape: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """
    Iterate index paths in lexicographic order (first index slowest).

    This is the order in which quaternary5d visits leaves.
    """
    return itertools.product(*(range(d) for d in shape))


def _is_level(node: Any) -> bool:
    """True for a nesting level: a non-string sequence or an ndarray with ndim >= 1."""
    if isinstance(node, np.ndarray):
        return node.ndim >= 1
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes))


def shape_of(x: Any) -> Tuple[int, ...]:
    """
    Infer the five extents of a nested array from its first elements.

    An empty level reports 0 for itself and every deeper level.
    Raggedness is not detected here; use assert_conformant for that.
    """
    dims = []
    node = x
    for _ in range(NDIMS):
        if not _is_level(node):
            raise ValueError(f"Expected {NDIMS} nesting levels, found {len(dims)}")
        dims.append(len(node))
        if len(node) == 0:
            dims.extend([0] * (NDIMS - len(dims)))
            break
        node = node[0]

    return tuple(dims)


def _check_level(node: Any, shape: Tuple[int, ...], level: int,
                 prefix: Tuple[int, ...], pos: int) -> None:
    """Recursively verify one container against `shape` from `level` down."""
    if not _is_level(node):
        raise ValueError(
            f"arrays[{pos}] at {list(prefix)}: expected a sequence at level {level}, "
            f"got {type(node).__name__}"
        )
    if len(node) != shape[level]:
        raise ValueError(
            f"arrays[{pos}] at {list(prefix)}: extent {len(node)} != {shape[level]} "
            f"at level {level}"
        )
    if level == NDIMS - 1:
        return
    for i, child in enumerate(node):
        _check_level(child, shape, level + 1, prefix + (i,), pos)


def assert_conformant(arrays: Sequence[Any], shape: Sequence[int]) -> None:
    """
    Verify that five nested arrays all nest exactly to `shape`.

    Contract:
    Every visited level is a sequence whose length equals the declared
    extent. Leaves are not inspected. Ragged or over-long levels are
    rejected even though the traversal itself would tolerate extra entries.

    Args:
        arrays: [x, y, z, w, out]
        shape: five extents (validated first)

    Raises:
        ValueError: on the first mismatch, naming container and index path
    """
    dims = validate_shape(shape)

    if len(arrays) != NARRAYS:
        raise ValueError(f"Expected {NARRAYS} arrays (4 inputs + 1 output), got {len(arrays)}")

    for pos, arr in enumerate(arrays):
        _check_level(arr, dims, 0, (), pos)
