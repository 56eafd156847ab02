# nestapply/op/receipts.py
# Receipts and environment fingerprinting for the determinism harness

from __future__ import annotations
import json
import platform
import sys
from dataclasses import asdict, dataclass, field
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from .hash import hash_bytes


def _pkg_version(name: str) -> str:
    try:
        return version(name)
    except PackageNotFoundError:
        return "unknown"


@dataclass
class EnvRc:
    """
    Environment fingerprint.

    Two runs are only comparable byte-for-byte when their fingerprints
    match; a differing fingerprint marks an environment difference rather
    than nondeterministic execution.
    """
    platform: str
    endian: str
    py_version: str
    blake3_version: str
    numpy_version: str
    compiler_version: str | None
    build_flags_hash: str


def env_fingerprint() -> EnvRc:
    """
    Capture environment fingerprint for determinism checking.

    Returns:
        EnvRc: environment receipt
    """
    build_info = {
        "py_version": sys.version,
        "implementation": platform.python_implementation(),
        "version_info": list(sys.version_info),
    }
    flags = hash_bytes(json.dumps(build_info, sort_keys=True).encode())

    return EnvRc(
        platform=platform.platform(),
        endian=sys.byteorder,
        py_version=platform.python_version(),
        blake3_version=_pkg_version("blake3"),
        numpy_version=_pkg_version("numpy"),
        compiler_version=platform.python_compiler(),
        build_flags_hash=flags,
    )


@dataclass
class ApplyRc:
    """
    Receipt for one elementwise apply pass.

    calls must equal numel(shape) for a completed pass.
    output_hash is None when hashing was disabled.
    """
    op: str                   # "quaternary5d"
    shape: list[int]
    shape_bytes_hex: str      # frame_params(*shape).hex()
    calls: int                # callback invocations during this pass
    checked: bool             # conformance asserted before traversal
    output_hash: str | None


@dataclass
class RunRc:
    """
    Root receipt container for one run (one or more passes).

    hashes: {"pass0": ..., "pass1": ...} output hashes per pass
    table_hash: BLAKE3 over sorted "key:hash" lines of `hashes`
    No timestamps (frozen serialization).
    """
    env: EnvRc
    passes: list[ApplyRc]
    hashes: dict[str, str]
    table_hash: str | None
    notes: dict[str, Any] | None = field(default=None)


def table_hash(hashes: dict[str, str]) -> str | None:
    """BLAKE3 over the sorted key:hash lines, or None when empty."""
    if not hashes:
        return None
    lines = "\n".join(f"{k}:{hashes[k]}" for k in sorted(hashes))
    return hash_bytes(lines.encode())


def aggregate(run: dict | RunRc) -> dict:
    """
    Convert nested receipts (dataclasses or dicts) to JSON-serializable dict.

    Args:
        run: RunRc or dict containing receipts

    Returns:
        dict: plain representation, tuples become lists
    """
    def to_plain(x: Any) -> Any:
        if hasattr(x, "__dataclass_fields__"):
            return {k: to_plain(v) for k, v in asdict(x).items()}
        if isinstance(x, dict):
            return {k: to_plain(v) for k, v in x.items()}
        if isinstance(x, (list, tuple)):
            return [to_plain(v) for v in x]
        return x

    return to_plain(run)
