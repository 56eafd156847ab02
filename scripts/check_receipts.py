#!/usr/bin/env python3
# scripts/check_receipts.py
# Receipt comparison tool for determinism verification across runs

from __future__ import annotations
import json
import sys
from typing import Any, List, Optional

from nestapply.op.bytes import unframe_params


def load_jsonl(path: str) -> list[dict]:
    """Load JSONL file as list of records (blank lines skipped)."""
    with open(path) as f:
        return [json.loads(line) for line in f if line.strip()]


def _decode_shape(hex_str: Any) -> Optional[list[int]]:
    """Decode a framed shape_bytes_hex field; None if it is not one."""
    try:
        return unframe_params(bytes.fromhex(hex_str))
    except (TypeError, ValueError):
        return None


def deep_diff(a: Any, b: Any, path: str = "") -> list[str]:
    """
    Recursively find differences between two receipt values.

    Dicts are compared key by key, lists element by element; anything
    else by equality.

    Returns:
        list of difference descriptions
    """
    if isinstance(a, dict) and isinstance(b, dict):
        diffs = []
        a_keys = set(a.keys())
        b_keys = set(b.keys())
        only_a = a_keys - b_keys
        only_b = b_keys - a_keys
        if only_a:
            diffs.append(f"{path}: keys only in A: {sorted(only_a)}")
        if only_b:
            diffs.append(f"{path}: keys only in B: {sorted(only_b)}")
        for key in sorted(a_keys & b_keys):
            new_path = f"{path}.{key}" if path else key
            diffs.extend(deep_diff(a[key], b[key], new_path))
        return diffs

    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return [f"{path}: length {len(a)} != {len(b)}"]
        diffs = []
        for i, (va, vb) in enumerate(zip(a, b)):
            diffs.extend(deep_diff(va, vb, f"{path}[{i}]"))
        return diffs

    if a != b:
        if path.endswith("shape_bytes_hex"):
            return [f"{path}: {a!r} != {b!r} (shape {_decode_shape(a)} vs {_decode_shape(b)})"]
        return [f"{path}: {a!r} != {b!r}"]
    return []


def main(argv: Optional[List[str]] = None) -> int:
    """
    Compare two receipt JSONL files for differences.

    Usage:
        python -m scripts.check_receipts <file1.jsonl> <file2.jsonl>

    Differences under "env" only are reported as NONDETERMINISTIC_ENV
    (warning) and do not fail the comparison.

    Exit codes:
        0: receipts match
        1: receipts differ (or bad usage)
    """
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print("Usage: python -m scripts.check_receipts <file1.jsonl> <file2.jsonl>")
        return 1

    file_a, file_b = args

    print("Comparing receipts:")
    print(f"  A: {file_a}")
    print(f"  B: {file_b}")

    records_a = load_jsonl(file_a)
    records_b = load_jsonl(file_b)

    if len(records_a) != len(records_b):
        print(f"✗ RECEIPTS_DIFFER: record count mismatch ({len(records_a)} vs {len(records_b)})")
        return 1

    all_match = True
    for i, (rec_a, rec_b) in enumerate(zip(records_a, records_b)):
        diffs = deep_diff(rec_a, rec_b, f"record[{i}]")
        env_diffs = [d for d in diffs if d.startswith(f"record[{i}].env")]
        exec_diffs = [d for d in diffs if d not in env_diffs]

        if env_diffs:
            print(f"\n⚠ NONDETERMINISTIC_ENV in record {i} ({len(env_diffs)} fields)")
        if exec_diffs:
            all_match = False
            print(f"\n✗ Differences in record {i}:")
            for diff in exec_diffs[:10]:
                print(f"  {diff}")
            if len(exec_diffs) > 10:
                print(f"  ... and {len(exec_diffs) - 10} more differences")

    if all_match:
        print(f"✓ RECEIPTS_MATCH ({len(records_a)} records)")
        return 0

    print("\n✗ RECEIPTS_DIFFER")
    return 1


if __name__ == "__main__":
    sys.exit(main())
