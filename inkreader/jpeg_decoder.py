"""Baseline JPEG decoder: header parsing, MCU decoding, colour conversion and scaling."""

from __future__ import annotations

import io
from collections.abc import Callable
from dataclasses import dataclass
from typing import BinaryIO, Union

from inkreader.jpeg_bits import BitReader
from inkreader.jpeg_huffman import HuffmanTable, parse_huffman_segment
from inkreader.jpeg_idct import block_idct
from inkreader.jpeg_tables import ZIGZAG, JpegError, JResult, byteclip, parse_quant_segment

__all__ = ["Rect", "JpegDecoder", "decode_jpeg"]

StreamLike = Union[bytes, bytearray, memoryview, BinaryIO]
OutputFunc = Callable[["Rect", bytes], bool]

_SEGMENT_LIMIT = 512
_MAX_SCALE = 3
_SOI = 0xFFD8

_SOF0 = 0xC0
_DHT = 0xC4
_DQT = 0xDB
_DRI = 0xDD
_SOS = 0xDA
_UNSUPPORTED = frozenset(
    {0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7, 0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF, 0xD9}
)
_LUMA_SAMPLINGS = frozenset({0x11, 0x22, 0x21})

_CVACC = 1024
_CR_TO_R = int(1.402 * _CVACC)
_CB_TO_G = int(0.344 * _CVACC)
_CR_TO_G = int(0.714 * _CVACC)
_CB_TO_B = int(1.772 * _CVACC)


@dataclass(frozen=True)
class Rect:
    """Inclusive pixel rectangle of the output image."""

    left: int
    right: int
    top: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left + 1

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1


def _int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def _extend(value: int, nbits: int) -> int:
    """Restore the sign of an ``nbits`` wide JPEG magnitude value."""
    msb = 1 << (nbits - 1)
    return value if value & msb else value - ((msb << 1) - 1)


def _word(data: bytes, offset: int) -> int:
    return (data[offset] << 8) | data[offset + 1]


class JpegDecoder:
    """Decoder for one baseline JPEG image.

    Constructing the decoder reads and checks the headers up to the start of
    scan; ``decompress`` then decodes the image MCU by MCU.
    """

    def __init__(self, stream: StreamLike) -> None:
        if isinstance(stream, (bytes, bytearray, memoryview)):
            stream = io.BytesIO(bytes(stream))
        self._stream = stream
        self.width = 0
        self.height = 0
        self.components = 0
        self.restart_interval = 0
        self._msx = 0
        self._msy = 0
        self._qtid = [0, 0, 0]
        self._quant: dict[int, list[int]] = {}
        self._huffman: dict[tuple[int, int], HuffmanTable] = {}
        self._dcv = [0, 0, 0]
        self._prepare()
        self._reader = BitReader(self._stream)

    @property
    def mcu_width(self) -> int:
        """Width of one MCU in pixels."""
        return self._msx * 8

    @property
    def mcu_height(self) -> int:
        """Height of one MCU in pixels."""
        return self._msy * 8

    def _read_exact(self, size: int) -> bytes:
        data = self._stream.read(size) or b""
        if len(data) != size:
            raise JpegError(JResult.INP, "unexpected end of the JPEG stream")
        return data

    def _load_segment(self, size: int) -> bytes:
        if size > _SEGMENT_LIMIT:
            raise JpegError(JResult.MEM2, f"segment of {size} bytes exceeds the input buffer")
        return self._read_exact(size)

    def _prepare(self) -> None:
        marker = 0
        while marker != _SOI:
            byte = self._stream.read(1)
            if not byte:
                raise JpegError(JResult.INP, "SOI marker not found")
            marker = ((marker << 8) | byte[0]) & 0xFFFF

        while True:
            header = self._read_exact(4)
            marker = _word(header, 0)
            length = _word(header, 2)
            if length <= 2 or (marker >> 8) != 0xFF:
                raise JpegError(JResult.FMT1, "malformed segment header")
            length -= 2
            kind = marker & 0xFF

            if kind == _SOF0:
                self._parse_frame(self._load_segment(length))
            elif kind == _DRI:
                segment = self._load_segment(length)
                if len(segment) < 2:
                    raise JpegError(JResult.FMT1, "DRI segment is too short")
                self.restart_interval = _word(segment, 0)
            elif kind == _DHT:
                self._huffman.update(parse_huffman_segment(self._load_segment(length)))
            elif kind == _DQT:
                self._quant.update(parse_quant_segment(self._load_segment(length)))
            elif kind == _SOS:
                self._parse_scan(self._load_segment(length))
                return
            elif kind in _UNSUPPORTED:
                raise JpegError(JResult.FMT3, f"unsupported JPEG process (marker 0x{marker:04X})")
            else:
                self._read_exact(length)

    def _parse_frame(self, segment: bytes) -> None:
        if len(segment) < 6:
            raise JpegError(JResult.FMT1, "SOF0 segment is too short")
        self.height = _word(segment, 1)
        self.width = _word(segment, 3)
        self.components = segment[5]
        if self.components not in (1, 3):
            raise JpegError(JResult.FMT3, "only grayscale and Y/Cb/Cr images are supported")
        if len(segment) < 6 + 3 * self.components:
            raise JpegError(JResult.FMT1, "SOF0 segment is too short")
        for index in range(self.components):
            sampling = segment[7 + 3 * index]
            if index == 0:
                if sampling not in _LUMA_SAMPLINGS:
                    raise JpegError(JResult.FMT3, "only 4:4:4, 4:2:0 and 4:2:2 are supported")
                self._msx, self._msy = sampling >> 4, sampling & 0x0F
            elif sampling != 0x11:
                raise JpegError(JResult.FMT3, "chroma sampling factor must be 1")
            qtid = segment[8 + 3 * index]
            if qtid > 3:
                raise JpegError(JResult.FMT3, "invalid quantisation table id")
            self._qtid[index] = qtid

    def _parse_scan(self, segment: bytes) -> None:
        if not self.width or not self.height:
            raise JpegError(JResult.FMT1, "invalid image size")
        if not segment or segment[0] != self.components:
            raise JpegError(JResult.FMT3, "wrong number of scan components")
        if len(segment) < 1 + 2 * self.components:
            raise JpegError(JResult.FMT1, "SOS segment is too short")
        for index in range(self.components):
            tables = segment[2 + 2 * index]
            if tables not in (0x00, 0x11):
                raise JpegError(JResult.FMT3, "DC and AC tables must share a number")
            table_id = 1 if index else 0
            if (table_id, 0) not in self._huffman or (table_id, 1) not in self._huffman:
                raise JpegError(JResult.FMT1, "Huffman table not loaded")
            if self._qtid[index] not in self._quant:
                raise JpegError(JResult.FMT1, "quantisation table not loaded")
        if not self._msx * self._msy:
            raise JpegError(JResult.FMT1, "SOF0 has not been loaded")

    def decompress(self, output: OutputFunc, scale: int = 0) -> None:
        """Decode the image, handing each MCU to ``output(rect, rgb_bytes)``.

        ``scale`` (0..3) shrinks the output by 2**scale. When ``output``
        returns a false value decoding stops with ``JResult.INTR``.
        """
        if not 0 <= scale <= _MAX_SCALE:
            raise JpegError(JResult.PAR, f"scale must be 0..{_MAX_SCALE}, not {scale}")
        mx, my = self.mcu_width, self.mcu_height
        self._dcv = [0, 0, 0]
        rst = 0
        rsc = 0
        for y in range(0, self.height, my):
            for x in range(0, self.width, mx):
                if self.restart_interval:
                    if rst == self.restart_interval:
                        self._reader.restart(rsc)
                        rsc = (rsc + 1) & 0xFFFF
                        self._dcv = [0, 0, 0]
                        rst = 1
                    else:
                        rst += 1
                mcu = self._load_mcu(scale)
                self._output_mcu(mcu, output, x, y, scale)

    def _load_mcu(self, scale: int) -> list[int]:
        nby = self._msx * self._msy
        reader = self._reader
        samples: list[int] = []
        for blk in range(nby + 2):
            cmp = 0 if blk < nby else blk - nby + 1
            if cmp and self.components != 3:
                samples.extend([128] * 64)
                continue

            table_id = 1 if cmp else 0
            dc_table = self._huffman[(table_id, 0)]
            ac_table = self._huffman[(table_id, 1)]

            bits = dc_table.decode(reader)
            dc = self._dcv[cmp]
            if bits:
                dc += _extend(reader.read_bits(bits), bits)
                self._dcv[cmp] = _int16(dc)
            dqf = self._quant[self._qtid[cmp]]
            coeffs = [0] * 64
            coeffs[0] = dc * dqf[0] >> 8

            z = 1
            while True:
                symbol = ac_table.decode(reader)
                if symbol == 0:
                    break
                z += symbol >> 4
                if z >= 64:
                    raise JpegError(JResult.FMT1, "zero run too long")
                size = symbol & 0x0F
                if size:
                    raster = ZIGZAG[z]
                    coeffs[raster] = _extend(reader.read_bits(size), size) * dqf[raster] >> 8
                z += 1
                if z >= 64:
                    break

            if z == 1 or scale == 3:
                samples.extend([_int16(_cdiv(coeffs[0], 256) + 128)] * 64)
            else:
                samples.extend(block_idct(coeffs))
        return samples

    def _output_mcu(
        self, mcu: list[int], output: OutputFunc, x: int, y: int, scale: int
    ) -> None:
        mx, my = self.mcu_width, self.mcu_height
        rx = mx if x + mx <= self.width else self.width - x
        ry = my if y + my <= self.height else self.height - y
        rx >>= scale
        ry >>= scale
        if not rx or not ry:
            return
        x >>= scale
        y >>= scale
        rect = Rect(left=x, right=x + rx - 1, top=y, bottom=y + ry - 1)

        if scale != 3:
            pixels = self._mcu_to_rgb(mcu, mx, my)
            if scale:
                pixels = self._average(pixels, mx, my, scale)
        else:
            pixels = self._dc_to_rgb(mcu, mx, my)

        columns = mx >> scale
        result = bytearray()
        for row in range(ry):
            start = row * columns * 3
            result.extend(pixels[start:start + rx * 3])

        if not output(rect, bytes(result)):
            raise JpegError(JResult.INTR, "decoding interrupted by the output function")

    @staticmethod
    def _rgb(yy: int, cb: int, cr: int) -> tuple[int, int, int]:
        return (
            byteclip(yy + _cdiv(_CR_TO_R * cr, _CVACC)),
            byteclip(yy - _cdiv(_CB_TO_G * cb + _CR_TO_G * cr, _CVACC)),
            byteclip(yy + _cdiv(_CB_TO_B * cb, _CVACC)),
        )

    def _mcu_to_rgb(self, mcu: list[int], mx: int, my: int) -> list[int]:
        pixels: list[int] = []
        for iy in range(my):
            py = 0
            if my == 16:
                pc = 64 * 4 + (iy >> 1) * 8
                if iy >= 8:
                    py += 64
            else:
                pc = mx * 8 + iy * 8
            py += iy * 8
            for ix in range(mx):
                cb = mcu[pc] - 128
                cr = mcu[pc + 64] - 128
                if mx == 16:
                    if ix == 8:
                        py += 64 - 8
                    pc += ix & 1
                else:
                    pc += 1
                yy = mcu[py]
                py += 1
                pixels.extend(self._rgb(yy, cb, cr))
        return pixels

    @staticmethod
    def _average(pixels: list[int], mx: int, my: int, scale: int) -> list[int]:
        shift = scale * 2
        size = 1 << scale
        averaged: list[int] = []
        for iy in range(0, my, size):
            for ix in range(0, mx, size):
                totals = [0, 0, 0]
                for dy in range(size):
                    base = ((iy + dy) * mx + ix) * 3
                    for dx in range(size):
                        offset = base + dx * 3
                        totals[0] += pixels[offset]
                        totals[1] += pixels[offset + 1]
                        totals[2] += pixels[offset + 2]
                averaged.extend((t >> shift) & 0xFF for t in totals)
        return averaged

    def _dc_to_rgb(self, mcu: list[int], mx: int, my: int) -> list[int]:
        pc = mx * my
        cb = mcu[pc] - 128
        cr = mcu[pc + 64] - 128
        pixels: list[int] = []
        for iy in range(0, my, 8):
            py = 64 * 2 if iy == 8 else 0
            for _ in range(0, mx, 8):
                yy = mcu[py]
                py += 64
                pixels.extend(self._rgb(yy, cb, cr))
        return pixels


def decode_jpeg(data: StreamLike, scale: int = 0) -> tuple[int, int, bytes]:
    """Decode a whole baseline JPEG into RGB888.

    Returns ``(width, height, pixels)`` of the image shrunk by 2**scale,
    with pixels stored row by row, three bytes each.
    """
    decoder = JpegDecoder(data)
    pieces: list[tuple[Rect, bytes]] = []

    def collect(rect: Rect, pixels: bytes) -> bool:
        pieces.append((rect, pixels))
        return True

    decoder.decompress(collect, scale)
    out_w = decoder.width >> scale
    out_h = decoder.height >> scale
    canvas = bytearray(out_w * out_h * 3)
    for rect, pixels in pieces:
        stride = rect.width * 3
        for row in range(rect.height):
            start = ((rect.top + row) * out_w + rect.left) * 3
            canvas[start:start + stride] = pixels[row * stride:(row + 1) * stride]
    return out_w, out_h, bytes(canvas)