#!/usr/bin/env python3
"""quaternary5d Traversal Tests"""

import copy
import itertools

from nestapply.op.quaternary5d import quaternary5d


def filled5d(shape, value):
    """Build a nested list of the given shape with every leaf = value."""
    d0, d1, d2, d3, d4 = shape
    return [[[[[value for _ in range(d4)] for _ in range(d3)] for _ in range(d2)]
             for _ in range(d1)] for _ in range(d0)]


def indexed5d(shape, tag):
    """Nested list whose leaves are (tag, index_path) tuples."""
    d0, d1, d2, d3, d4 = shape
    return [[[[[(tag, (i0, i1, i2, i3, i4)) for i4 in range(d4)] for i3 in range(d3)]
              for i2 in range(d2)] for i1 in range(d1)] for i0 in range(d0)]


def add4(a, b, c, d):
    return a + b + c + d


def test_documented_example():
    """ones × 4 summed into zeros gives 4.0 everywhere for [1,1,1,2,2]."""
    print("Testing documented example...")

    shape = [1, 1, 1, 2, 2]
    x = filled5d(shape, 1.0)
    y = filled5d(shape, 1.0)
    z = filled5d(shape, 1.0)
    w = filled5d(shape, 1.0)
    out = filled5d(shape, 0.0)

    result = quaternary5d([x, y, z, w, out], shape, add4)

    assert result is None, f"Expected None, got {result!r}"
    assert out == [[[[[4.0, 4.0], [4.0, 4.0]]]]], f"Unexpected output {out}"

    print("  ✓ Documented example matches")


def test_call_count():
    """Callback runs exactly d0*d1*d2*d3*d4 times."""
    print("Testing call count...")

    for shape in ([1, 1, 1, 1, 1], [2, 3, 1, 2, 2], [3, 2, 2, 1, 4]):
        calls = []
        arrs = [filled5d(shape, 0) for _ in range(5)]
        quaternary5d(arrs, shape, lambda a, b, c, d: calls.append(1) or 0)

        expected = shape[0] * shape[1] * shape[2] * shape[3] * shape[4]
        assert len(calls) == expected, f"{shape}: expected {expected} calls, got {len(calls)}"

    print("  ✓ Call count equals product of extents")


def test_single_element():
    """Shape [1,1,1,1,1] invokes once at (0,0,0,0,0)."""
    print("Testing single element...")

    shape = [1, 1, 1, 1, 1]
    seen = []
    inputs = [indexed5d(shape, t) for t in "xyzw"]
    out = filled5d(shape, None)

    def record(a, b, c, d):
        seen.append(a[1])
        return "done"

    quaternary5d(inputs + [out], shape, record)

    assert seen == [(0, 0, 0, 0, 0)], f"Expected single visit at origin, got {seen}"
    assert out == [[[[["done"]]]]]

    print("  ✓ Single element visited once")


def test_index_correspondence():
    """Each call gets x, y, z, w at the same path, in that order; result lands there."""
    print("Testing index correspondence...")

    shape = [2, 2, 1, 3, 2]
    inputs = [indexed5d(shape, t) for t in "xyzw"]
    out = filled5d(shape, None)

    def pack(a, b, c, d):
        assert a[1] == b[1] == c[1] == d[1], f"Paths disagree: {a}, {b}, {c}, {d}"
        return (a[0] + b[0] + c[0] + d[0], a[1])

    quaternary5d(inputs + [out], shape, pack)

    for path in itertools.product(*(range(n) for n in shape)):
        i0, i1, i2, i3, i4 = path
        assert out[i0][i1][i2][i3][i4] == ("xyzw", path), f"Wrong leaf at {path}"

    print("  ✓ Inputs and output aligned by index path")


def test_lexicographic_order():
    """Visit order is strictly lexicographic ascending."""
    print("Testing traversal order...")

    shape = [2, 3, 2, 2, 3]
    visited = []
    inputs = [indexed5d(shape, t) for t in "xyzw"]
    out = filled5d(shape, None)

    quaternary5d(inputs + [out], shape, lambda a, b, c, d: visited.append(a[1]))

    expected = list(itertools.product(*(range(n) for n in shape)))
    assert visited == expected, "Visit order is not lexicographic"
    assert all(p < q for p, q in zip(visited, visited[1:])), "Order not strictly ascending"

    print("  ✓ Lexicographic order")


def test_zero_dimension_noop():
    """Any zero extent leaves output untouched and never calls back."""
    print("Testing zero-dimension no-op...")

    base = [2, 2, 2, 2, 2]
    for k in range(5):
        shape = list(base)
        shape[k] = 0
        out = filled5d(base, 7)
        before = copy.deepcopy(out)
        inputs = [filled5d(base, 1) for _ in range(4)]

        def boom(a, b, c, d):
            raise AssertionError("callback must not run")

        quaternary5d(inputs + [out], shape, boom)
        assert out == before, f"Output changed for shape {shape}"

    # Zero extent with genuinely empty containers
    quaternary5d([[], [], [], [], []], [0, 3, 3, 3, 3], add4)

    print("  ✓ Zero extent is a no-op")


def test_idempotent_with_pure_callback():
    """Running twice with a pure callback yields identical output."""
    print("Testing idempotence...")

    shape = [2, 1, 2, 2, 3]
    x = filled5d(shape, 1.5)
    y = filled5d(shape, 2)
    z = filled5d(shape, -0.5)
    w = filled5d(shape, 3)
    out = filled5d(shape, 0)

    quaternary5d([x, y, z, w, out], shape, lambda a, b, c, d: a * b + c * d)
    first = copy.deepcopy(out)
    quaternary5d([x, y, z, w, out], shape, lambda a, b, c, d: a * b + c * d)

    assert out == first, "Second application changed output"
    assert first[1][0][1][1][2] == 1.5, f"Unexpected leaf {first[1][0][1][1][2]}"

    print("  ✓ Idempotent")


def test_inputs_not_mutated():
    """Only the fifth array is written."""
    print("Testing inputs are read-only...")

    shape = [1, 2, 1, 2, 1]
    inputs = [filled5d(shape, v) for v in (1, 2, 3, 4)]
    snapshot = copy.deepcopy(inputs)
    out = filled5d(shape, 0)

    quaternary5d(inputs + [out], shape, add4)

    assert inputs == snapshot, "Inputs were modified"
    assert out == filled5d(shape, 10)

    print("  ✓ Inputs untouched")


def test_extra_entries_ignored():
    """Containers longer than the shape are read only up to the shape."""
    print("Testing over-long containers...")

    big = [2, 2, 2, 2, 2]
    shape = [1, 1, 1, 1, 2]
    out = filled5d(big, 0)
    inputs = [filled5d(big, 1) for _ in range(4)]

    quaternary5d(inputs + [out], shape, add4)

    assert out[0][0][0][0] == [4, 4]
    assert out[0][0][0][1] == [0, 0]
    assert out[1] == filled5d(big, 0)[1]

    print("  ✓ Only declared region written")


def test_short_container_fails_naturally():
    """Shorter-than-declared containers fail with the host IndexError."""
    print("Testing short container...")

    shape = [1, 1, 1, 1, 3]
    inputs = [filled5d(shape, 1) for _ in range(3)] + [filled5d([1, 1, 1, 1, 2], 1)]
    out = filled5d(shape, 0)

    try:
        quaternary5d(inputs + [out], shape, add4)
    except IndexError:
        pass
    else:
        raise AssertionError("Expected IndexError for short container")

    # Leaves before the fault were written
    assert out[0][0][0][0][:2] == [4, 4]

    print("  ✓ IndexError from host indexing")


def run_tests():
    """Run all quaternary5d tests."""
    print("\n" + "=" * 60)
    print("quaternary5d Tests")
    print("=" * 60 + "\n")

    test_documented_example()
    test_call_count()
    test_single_element()
    test_index_correspondence()
    test_lexicographic_order()
    test_zero_dimension_noop()
    test_idempotent_with_pure_callback()
    test_inputs_not_mutated()
    test_extra_entries_ignored()
    test_short_container_fails_naturally()

    print("\n" + "=" * 60)
    print("✓ All quaternary5d tests passed")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    run_tests()
