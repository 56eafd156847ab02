# nestapply/runner.py
# Receipt-producing runner + determinism harness around quaternary5d

"""
Runs quaternary5d one or more times over the same arrays and records
receipts for every pass.

Order per run:
validate_shape → [assert_conformant] → (apply → hash) × passes → compare

Determinism: with a pure callback every pass must leave the output with
the same hash. A mismatch is NONDETERMINISTIC_EXECUTION.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from nestapply.op.bytes import frame_params
from nestapply.op.hash import hash_nested
from nestapply.op.quaternary5d import quaternary5d
from nestapply.op.receipts import ApplyRc, RunRc, env_fingerprint, table_hash
from nestapply.op.shape import assert_conformant, numel, validate_shape

logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
    """
    Run options.

    check: assert container conformance before the first pass
    hash_output: hash the output array after every pass
    passes: number of applications; > 1 enables the determinism check
    """
    check: bool = False
    hash_output: bool = True
    passes: int = 1


class _CountingCallback:
    """Wraps a callback and counts its invocations."""

    def __init__(self, fcn: Callable[[Any, Any, Any, Any], Any]):
        self.fcn = fcn
        self.calls = 0

    def __call__(self, v1, v2, v3, v4):
        self.calls += 1
        return self.fcn(v1, v2, v3, v4)


def run_quaternary5d(
    arrays: Sequence[Any],
    shape: Sequence[int],
    fcn: Callable[[Any, Any, Any, Any], Any],
    config: Optional[RunConfig] = None,
) -> RunRc:
    """
    Apply `fcn` elementwise via quaternary5d and return the run receipt.

    The output array (arrays[4]) is mutated in place exactly as by
    quaternary5d; repeated passes overwrite it with the same values when
    the callback is pure.

    Args:
        arrays: [x, y, z, w, out]
        shape: five extents
        fcn: quaternary callback
        config: run options (defaults to RunConfig())

    Returns:
        RunRc: env fingerprint, per-pass receipts, output hashes, table_hash

    Raises:
        TypeError: bad shape entries, or UNHASHABLE_OUTPUT when passes > 1
                   and the output has non-numeric leaves
        ValueError: bad shape/config, non-conformant arrays (with check),
                    or NONDETERMINISTIC_EXECUTION across passes
    """
    cfg = config or RunConfig()
    if cfg.passes < 1:
        raise ValueError(f"passes must be >= 1, got {cfg.passes}")
    if cfg.passes > 1 and not cfg.hash_output:
        raise ValueError("Determinism check (passes > 1) requires hash_output=True")

    dims = validate_shape(shape)
    if cfg.check:
        assert_conformant(arrays, dims)

    logger.debug(f"quaternary5d run: shape={list(dims)} passes={cfg.passes} check={cfg.check}")

    shape_hex = frame_params(*dims).hex()
    out = arrays[4]
    receipts = []
    hashes = {}
    notes = {}

    for k in range(cfg.passes):
        counter = _CountingCallback(fcn)
        quaternary5d(arrays, dims, counter)

        out_hash = None
        if cfg.hash_output:
            try:
                out_hash = hash_nested(out, dims)
            except TypeError as e:
                # Non-numeric leaves are valid output; only passes > 1 needs hashes
                if cfg.passes > 1:
                    raise TypeError(
                        f"UNHASHABLE_OUTPUT: determinism check needs real-number leaves ({e})"
                    ) from e
                logger.warning(f"Output not hashed: {e}")
                notes["unhashable_output"] = str(e)
        if out_hash is not None:
            hashes[f"pass{k}"] = out_hash

        receipts.append(ApplyRc(
            op="quaternary5d",
            shape=list(dims),
            shape_bytes_hex=shape_hex,
            calls=counter.calls,
            checked=cfg.check,
            output_hash=out_hash,
        ))

    distinct = set(hashes.values())
    if len(distinct) > 1:
        logger.error(f"Output hashes differ across {cfg.passes} passes: {hashes}")
        raise ValueError(
            f"NONDETERMINISTIC_EXECUTION: {len(distinct)} distinct output hashes "
            f"across {cfg.passes} passes"
        )

    logger.info(
        f"quaternary5d done: shape={list(dims)} calls={receipts[-1].calls}/{numel(dims)} "
        f"output_hash={receipts[-1].output_hash}"
    )

    return RunRc(
        env=env_fingerprint(),
        passes=receipts,
        hashes=hashes,
        table_hash=table_hash(hashes),
        notes=notes or None,
    )
