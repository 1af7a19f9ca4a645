import io

import pytest

from inkreader.jpeg_bits import BitReader
from inkreader.jpeg_tables import JpegError, JResult


def test_reads_nibbles_msb_first():
    reader = BitReader(b"\xA5")
    assert reader.read_bits(4) == 0xA
    assert reader.read_bits(4) == 0x5


def test_reads_across_byte_boundaries():
    reader = BitReader(b"\x12\x34")
    assert reader.read_bits(12) == 0x123
    assert reader.read_bits(4) == 0x4


def test_sixteen_bits_at_once():
    reader = BitReader(b"\xBE\xEF")
    assert reader.read_bits(16) == 0xBEEF


def test_single_bits_reassemble_byte():
    reader = BitReader(b"\x96")
    bits = [reader.read_bits(1) for _ in range(8)]
    assert int("".join(map(str, bits)), 2) == 0x96


def test_stuffed_ff_is_data():
    reader = BitReader(b"\xFF\x00\x12")
    assert reader.read_bits(8) == 0xFF
    assert reader.read_bits(8) == 0x12


def test_file_like_stream():
    reader = BitReader(io.BytesIO(b"\x5A\xC3"))
    assert reader.read_bits(8) == 0x5A
    assert reader.read_bits(8) == 0xC3


def test_large_stream_spans_chunks():
    data = bytes(range(0, 0xFF)) * 5
    reader = BitReader(io.BytesIO(data))
    assert [reader.read_bits(8) for _ in range(len(data))] == list(data)


def test_end_of_stream_raises_inp():
    reader = BitReader(b"")
    with pytest.raises(JpegError) as info:
        reader.read_bits(8)
    assert info.value.result is JResult.INP


@pytest.mark.parametrize("nbits", [0, 17])
def test_bit_count_out_of_range(nbits):
    reader = BitReader(b"\x00\x00\x00")
    with pytest.raises(ValueError):
        reader.read_bits(nbits)


def test_marker_yields_fill_bits_then_restart():
    reader = BitReader(b"\xFF\xD0\x5A")
    assert reader.read_bits(8) == 0xFF
    assert reader.read_bits(8) == 0xFF
    reader.restart(0)
    assert reader.read_bits(8) == 0x5A


def test_restart_number_is_modulo_eight():
    reader = BitReader(b"\xFF\xD0\x77")
    reader.read_bits(8)
    reader.restart(8)
    assert reader.read_bits(8) == 0x77


def test_restart_reads_marker_from_stream():
    reader = BitReader(b"\x00\xFF\xD3\x42")
    assert reader.read_bits(8) == 0x00
    reader.restart(3)
    assert reader.read_bits(8) == 0x42


def test_restart_discards_leftover_bits():
    reader = BitReader(b"\xAB\xFF\xD1\xCD")
    assert reader.read_bits(4) == 0xA
    reader.restart(1)
    assert reader.read_bits(8) == 0xCD


def test_restart_with_wrong_number_raises_fmt1():
    reader = BitReader(b"\xFF\xD2\x00")
    reader.read_bits(8)
    with pytest.raises(JpegError) as info:
        reader.restart(1)
    assert info.value.result is JResult.FMT1


def test_restart_with_non_rst_marker_raises_fmt1():
    reader = BitReader(b"\xFF\xD9")
    with pytest.raises(JpegError) as info:
        reader.restart(1)
    assert info.value.result is JResult.FMT1


def test_restart_at_end_of_stream_raises_inp():
    reader = BitReader(b"\xFF")
    with pytest.raises(JpegError) as info:
        reader.restart(0)
    assert info.value.result is JResult.INP