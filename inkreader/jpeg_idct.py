"""Fixed-point inverse DCT (Arai algorithm) for one 8x8 block."""

from __future__ import annotations

from collections.abc import Sequence

__all__ = ["block_idct"]

_M13 = int(1.41421 * 4096)
_M2 = int(1.08239 * 4096)
_M4 = int(2.61313 * 4096)
_M5 = int(1.84776 * 4096)


def _to_int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _butterfly(v: Sequence[int]) -> tuple[int, ...]:
    """One 1-D pass; returns the eight transformed values in natural order."""
    v0, v1, v2, v3 = v[0], v[2], v[4], v[6]
    t10 = v0 + v2
    t12 = v0 - v2
    t11 = (v1 - v3) * _M13 >> 12
    v3 += v1
    t11 -= v3
    v0 = t10 + v3
    v3 = t10 - v3
    v1 = t11 + t12
    v2 = t12 - t11

    v4, v5, v6, v7 = v[7], v[1], v[5], v[3]
    t10 = v5 - v4
    t11 = v5 + v4
    t12 = v6 - v7
    v7 += v6
    v5 = (t11 - v7) * _M13 >> 12
    v7 += t11
    t13 = (t10 + t12) * _M5 >> 12
    v4 = t13 - (t10 * _M2 >> 12)
    v6 = t13 - (t12 * _M4 >> 12) - v7
    v5 -= v6
    v4 -= v5

    return (
        v0 + v7,
        v1 + v6,
        v2 + v5,
        v3 + v4,
        v3 - v4,
        v2 - v5,
        v1 - v6,
        v0 - v7,
    )


def block_idct(block: Sequence[int]) -> list[int]:
    """Apply the inverse DCT to 64 de-quantised, pre-scaled coefficients.

    The input is in raster order and is left untouched. The result holds 64
    samples with the -128 level shift removed, as signed 16-bit values
    (not yet clipped to 0..255).
    """
    if len(block) != 64:
        raise ValueError(f"an IDCT block needs 64 coefficients, got {len(block)}")

    columns = [_butterfly(block[col::8]) for col in range(8)]
    work = [columns[col][row] for row in range(8) for col in range(8)]

    out: list[int] = []
    for row in range(8):
        values = list(work[row * 8:row * 8 + 8])
        values[0] += 128 << 8
        out.extend(_to_int16(v >> 8) for v in _butterfly(values))
    return out