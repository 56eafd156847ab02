# nestapply/op/quaternary5d.py
# Quaternary elementwise apply over five-dimensional nested arrays

from __future__ import annotations
from typing import Any, Callable, Sequence


def quaternary5d(
    arrays: Sequence[Any],
    shape: Sequence[int],
    fcn: Callable[[Any, Any, Any, Any], Any],
) -> None:
    """
    Apply a quaternary callback to elements in four five-dimensional nested
    input arrays and assign results to a five-dimensional nested output array.

    Contract:
    out[i0][i1][i2][i3][i4] = fcn(x[..], y[..], z[..], w[..]) for every
    index path with 0 <= ik < shape[k], visited in lexicographic order
    (i0 varies slowest). Inputs and output are assumed to share `shape`;
    nothing is validated here.

    Args:
        arrays: [x, y, z, w, out] nested arrays, out is written in place
        shape: five extents (d0, d1, d2, d3, d4)
        fcn: callback (v1, v2, v3, v4) -> value

    Example:
        >>> ones = [[[[[1.0, 1.0], [1.0, 1.0]]]]]
        >>> out = [[[[[0.0, 0.0], [0.0, 0.0]]]]]
        >>> quaternary5d([ones, ones, ones, ones, out], [1, 1, 1, 2, 2],
        ...              lambda a, b, c, d: a + b + c + d)
        >>> out
        [[[[[4.0, 4.0], [4.0, 4.0]]]]]
    """
    S0, S1, S2, S3, S4 = shape
    if S0 <= 0 or S1 <= 0 or S2 <= 0 or S3 <= 0 or S4 <= 0:
        return

    x, y, z, w, out = arrays

    # Hoist each level's sub-arrays so the inner loop indexes once per leaf
    for i0 in range(S0):
        x0, y0, z0, w0, o0 = x[i0], y[i0], z[i0], w[i0], out[i0]
        for i1 in range(S1):
            x1, y1, z1, w1, o1 = x0[i1], y0[i1], z0[i1], w0[i1], o0[i1]
            for i2 in range(S2):
                x2, y2, z2, w2, o2 = x1[i2], y1[i2], z1[i2], w1[i2], o1[i2]
                for i3 in range(S3):
                    x3, y3, z3, w3, o3 = x2[i3], y2[i3], z2[i3], w2[i3], o2[i3]
                    for i4 in range(S4):
                        o3[i4] = fcn(x3[i4], y3[i4], z3[i4], w3[i4])
