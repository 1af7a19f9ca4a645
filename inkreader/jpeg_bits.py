"""Bit-level reader for the entropy-coded segment of a baseline JPEG stream."""

from __future__ import annotations

import io
from typing import BinaryIO, Union

from inkreader.jpeg_tables import JpegError, JResult

__all__ = ["BitReader"]

_CHUNK_SIZE = 512
_MAX_BITS = 16

StreamLike = Union[bytes, bytearray, memoryview, BinaryIO]


class BitReader:
    """Reads bits MSB first, undoing 0xFF00 byte stuffing.

    When a marker (0xFF followed by a non-zero byte) turns up in the data,
    the reader remembers it and from then on supplies 1 bits until
    ``restart`` consumes the marker.
    """

    def __init__(self, stream: StreamLike) -> None:
        if isinstance(stream, (bytes, bytearray, memoryview)):
            self._read = io.BytesIO(bytes(stream)).read
        else:
            self._read = stream.read
        self._buffer = b""
        self._pos = 0
        self._register = 0
        self._nbits = 0
        self._marker = 0

    def _next_byte(self) -> int:
        if self._pos >= len(self._buffer):
            self._buffer = self._read(_CHUNK_SIZE) or b""
            self._pos = 0
            if not self._buffer:
                raise JpegError(JResult.INP, "unexpected end of the JPEG stream")
        value = self._buffer[self._pos]
        self._pos += 1
        return value

    def _fill(self, nbits: int) -> None:
        escaped = False
        while self._nbits < nbits:
            if self._marker:
                byte = 0xFF
            else:
                byte = self._next_byte()
                if escaped:
                    escaped = False
                    if byte:
                        self._marker = byte
                    byte = 0xFF
                elif byte == 0xFF:
                    escaped = True
                    continue
            self._register = (self._register << 8) | byte
            self._nbits += 8

    def read_bits(self, nbits: int) -> int:
        """Take the next ``nbits`` (1..16) bits from the stream as an unsigned int."""
        if not 1 <= nbits <= _MAX_BITS:
            raise ValueError(f"can read 1 to {_MAX_BITS} bits at a time, not {nbits}")
        self._fill(nbits)
        self._nbits -= nbits
        value = self._register >> self._nbits
        self._register &= (1 << self._nbits) - 1
        return value

    def restart(self, expected: int) -> None:
        """Consume an RSTn marker whose number matches ``expected`` modulo 8.

        Any bits left over before the marker are discarded.
        """
        if self._marker:
            marker = 0xFF00 | self._marker
            self._marker = 0
        else:
            marker = (self._next_byte() << 8) | self._next_byte()

        if (marker & 0xFFD8) != 0xFFD0 or (marker & 7) != (expected & 7):
            raise JpegError(
                JResult.FMT1, f"expected RST{expected & 7} marker, found 0x{marker:04X}"
            )
        self._register = 0
        self._nbits = 0