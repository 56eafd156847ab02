# nestapply/io/load_data.py
# Minimal JSON loader for a shape plus five nested arrays

from __future__ import annotations
import json
from typing import Any

from nestapply.op.shape import NARRAYS, validate_shape


def load_arrays(path: str) -> tuple[list[Any], tuple[int, ...]]:
    """
    Load nested arrays from JSON file.

    Expected format:
    {
        "shape": [d0, d1, d2, d3, d4],
        "arrays": [x, y, z, w, out]
    }

    Args:
        path: path to JSON file

    Returns:
        (arrays, shape): the five nested arrays and the validated shape

    Raises:
        ValueError: if the top level is not an object, or "arrays" is
                    missing or does not hold five entries
    """
    with open(path, "r") as f:
        doc = json.load(f)

    if not isinstance(doc, dict):
        raise ValueError(f"{path}: top level must be a JSON object, got {type(doc).__name__}")

    shape = validate_shape(doc.get("shape", ()))

    arrays = doc.get("arrays")
    if not isinstance(arrays, list) or len(arrays) != NARRAYS:
        raise ValueError(f"{path}: 'arrays' must be a list of {NARRAYS} nested arrays")

    return arrays, shape
