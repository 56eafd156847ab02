# nestapply/io/save.py
# Compact JSON / JSONL writers for receipts

from __future__ import annotations
import json
import os
from typing import Any

from nestapply.op.receipts import RunRc, aggregate


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_json(path: str, obj: Any) -> None:
    """
    Write object as compact JSON (no whitespace), creating parent dirs.
    """
    _ensure_parent(path)
    with open(path, "w") as f:
        json.dump(obj, f, separators=(",", ":"))


def write_jsonl(path: str, records: list[Any]) -> None:
    """Write one compact JSON object per line."""
    _ensure_parent(path)
    with open(path, "w") as f:
        for record in records:
            f.write(json.dumps(record, separators=(",", ":")) + "\n")


def write_receipts(path: str, runs: list[RunRc]) -> None:
    """
    Persist run receipts as JSONL, one run per line.

    The file can be diffed against another run with scripts/check_receipts.py.
    """
    write_jsonl(path, [aggregate(rc) for rc in runs])
