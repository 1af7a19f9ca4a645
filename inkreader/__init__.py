"""Baseline JPEG decoding, battery, button and touch logic for e-paper readers."""

__version__ = "0.1.0"
__all__ = [
    "actions",
    "battery",
    "buttons",
    "jpeg_bits",
    "jpeg_decoder",
    "jpeg_huffman",
    "jpeg_idct",
    "jpeg_tables",
    "touch",
]