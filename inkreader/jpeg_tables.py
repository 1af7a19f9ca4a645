"""Result codes, clipping and dequantisation tables for the baseline JPEG decoder."""

from __future__ import annotations

import enum

__all__ = [
    "IPSF",
    "ZIGZAG",
    "JResult",
    "JpegError",
    "byteclip",
    "parse_quant_segment",
]


class JResult(enum.IntEnum):
    """Outcome codes of the decoder."""

    OK = 0
    INTR = 1  # interrupted by the output function
    INP = 2  # device error or wrong termination of the input stream
    MEM1 = 3  # insufficient memory pool for the image
    MEM2 = 4  # insufficient stream input buffer
    PAR = 5  # parameter error
    FMT1 = 6  # data format error (possibly broken data)
    FMT2 = 7  # right format but not supported
    FMT3 = 8  # unsupported JPEG standard


class JpegError(Exception):
    """Raised when decoding fails; ``result`` holds the matching ``JResult``."""

    def __init__(self, result: JResult, message: str = "") -> None:
        self.result = JResult(result)
        self.message = message or self.result.name
        super().__init__(f"{self.result.name}: {self.message}")


# Zigzag-order to raster-order conversion table.
ZIGZAG: tuple[int, ...] = (
    0, 1, 8, 16, 9, 2, 3, 10, 17, 24, 32, 25, 18, 11, 4, 5,
    12, 19, 26, 33, 40, 48, 41, 34, 27, 20, 13, 6, 7, 14, 21, 28,
    35, 42, 49, 56, 57, 50, 43, 36, 29, 22, 15, 23, 30, 37, 44, 51,
    58, 59, 52, 45, 38, 31, 39, 46, 53, 60, 61, 54, 47, 55, 62, 63,
)

_IPSF_FACTORS = (
    1.00000, 1.38704, 1.30656, 1.17588, 1.00000, 0.78570, 0.54120, 0.27590,
    1.38704, 1.92388, 1.81226, 1.63099, 1.38704, 1.08979, 0.75066, 0.38268,
    1.30656, 1.81226, 1.70711, 1.53636, 1.30656, 1.02656, 0.70711, 0.36048,
    1.17588, 1.63099, 1.53636, 1.38268, 1.17588, 0.92388, 0.63638, 0.32442,
    1.00000, 1.38704, 1.30656, 1.17588, 1.00000, 0.78570, 0.54120, 0.27590,
    0.78570, 1.08979, 1.02656, 0.92388, 0.78570, 0.61732, 0.42522, 0.21677,
    0.54120, 0.75066, 0.70711, 0.63638, 0.54120, 0.42522, 0.29290, 0.14932,
    0.27590, 0.38268, 0.36048, 0.32442, 0.27590, 0.21678, 0.14932, 0.07612,
)

# Input scale factors of the Arai IDCT, in raster order, scaled by 8192.
IPSF: tuple[int, ...] = tuple(int(f * 8192) for f in _IPSF_FACTORS)

_QT_ENTRY_SIZE = 65


def byteclip(value: int) -> int:
    """Saturate a value to 0..255 the way the 1 KiB clip table does.

    The table is indexed by the low ten bits of the value, so inputs in
    -512..767 clamp to 0..255; anything further out wraps around.
    """
    index = value & 0x3FF
    if index < 256:
        return index
    if index < 512:
        return 255
    return 0


def parse_quant_segment(data: bytes) -> dict[int, list[int]]:
    """Build de-quantisation tables from the body of a DQT segment.

    Returns a mapping of table id (0..3) to 64 pre-scaled coefficients in
    raster order, ready for the Arai IDCT.
    """
    tables: dict[int, list[int]] = {}
    view = memoryview(bytes(data))
    while view:
        if len(view) < _QT_ENTRY_SIZE:
            raise JpegError(JResult.FMT1, "quantisation table size is unaligned")
        entry, view = view[:_QT_ENTRY_SIZE], view[_QT_ENTRY_SIZE:]
        prop = entry[0]
        if prop & 0xF0:
            raise JpegError(JResult.FMT1, "quantisation table is not 8-bit")
        table = [0] * 64
        for raster, quant in zip(ZIGZAG, entry[1:]):
            table[raster] = quant * IPSF[raster]
        tables[prop & 3] = table
    return tables