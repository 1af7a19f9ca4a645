"""Huffman tables of a baseline JPEG stream: DHT parsing and symbol decoding."""

from __future__ import annotations

from dataclasses import dataclass, field

from inkreader.jpeg_bits import BitReader
from inkreader.jpeg_tables import JpegError, JResult

__all__ = ["HuffmanTable", "parse_huffman_segment"]

_MAX_CODE_LENGTH = 16
_DC_MAX_VALUE = 11


@dataclass(frozen=True)
class HuffmanTable:
    """One Huffman table: code counts per length (1..16) and the symbols."""

    table_id: int
    table_class: int  # 0: DC, 1: AC
    counts: tuple[int, ...]
    values: tuple[int, ...]
    _lookup: dict[tuple[int, int], int] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        if len(self.counts) != _MAX_CODE_LENGTH:
            raise ValueError(f"need {_MAX_CODE_LENGTH} code counts, got {len(self.counts)}")
        if sum(self.counts) != len(self.values):
            raise ValueError("number of values does not match the code counts")
        symbols = iter(self.values)
        for (length, code) in self._canonical_codes():
            self._lookup.setdefault((length, code), next(symbols))

    def _canonical_codes(self) -> list[tuple[int, int]]:
        codes = []
        code = 0
        for length, count in enumerate(self.counts, start=1):
            for _ in range(count):
                codes.append((length, code & 0xFFFF))
                code += 1
            code <<= 1
        return codes

    @property
    def codes(self) -> list[tuple[int, int]]:
        """(length, code word) for each symbol, in the order of ``values``."""
        return self._canonical_codes()

    def decode(self, reader: BitReader) -> int:
        """Read one code word from ``reader`` and return its symbol."""
        code = 0
        for length in range(1, _MAX_CODE_LENGTH + 1):
            code = (code << 1) | reader.read_bits(1)
            symbol = self._lookup.get((length, code))
            if symbol is not None:
                return symbol
        raise JpegError(JResult.FMT1, "Huffman code not found (corrupted data?)")


def parse_huffman_segment(data: bytes) -> dict[tuple[int, int], HuffmanTable]:
    """Parse the body of a DHT segment.

    Returns the tables keyed by ``(table_id, table_class)``.
    """
    tables: dict[tuple[int, int], HuffmanTable] = {}
    view = memoryview(bytes(data))
    while view:
        if len(view) < 1 + _MAX_CODE_LENGTH:
            raise JpegError(JResult.FMT1, "Huffman table header is truncated")
        prop = view[0]
        if prop & 0xEE:
            raise JpegError(JResult.FMT1, "invalid Huffman table class or number")
        table_class, table_id = prop >> 4, prop & 0x0F
        counts = tuple(view[1:1 + _MAX_CODE_LENGTH])
        view = view[1 + _MAX_CODE_LENGTH:]

        total = sum(counts)
        if len(view) < total:
            raise JpegError(JResult.FMT1, "Huffman table values are truncated")
        values = tuple(view[:total])
        view = view[total:]
        if table_class == 0 and any(v > _DC_MAX_VALUE for v in values):
            raise JpegError(JResult.FMT1, "DC Huffman symbol out of range")

        tables[(table_id, table_class)] = HuffmanTable(table_id, table_class, counts, values)
    return tables