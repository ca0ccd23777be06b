"""Reading of canonical 44-byte-header RIFF WAVE data."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO

_log = logging.getLogger(__name__)

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
_EXPECTED_RATE = 44100


@dataclass
class WavData:
    """Sample data and format of a loaded WAVE file."""

    sample_rate: int
    size: int
    bits_per_sample: int
    num_channels: int
    data: bytes


def load_wav(stream: BinaryIO) -> WavData:
    """Read a WAVE file from stream; 8-bit samples are widened to signed 16-bit."""
    header = stream.read(_HEADER.size)
    if len(header) < _HEADER.size:
        raise ValueError("WAVE header is truncated")
    (
        _chunk_id,
        _chunk_size,
        _format,
        _sub1_id,
        _sub1_size,
        _audio_format,
        num_channels,
        sample_rate,
        _byte_rate,
        _block_align,
        bits_per_sample,
        _sub2_id,
        data_size,
    ) = _HEADER.unpack(header)

    if sample_rate != _EXPECTED_RATE:
        _log.info("rate: %d", sample_rate)
    if num_channels != 1:
        _log.info("channels: %d", num_channels)

    raw = stream.read(data_size)
    if len(raw) < data_size:
        raise ValueError("WAVE sample data is truncated")

    if bits_per_sample == 8:
        widened = struct.pack(f"<{data_size}h", *(((c - 0x80) << 8) for c in raw))
        return WavData(sample_rate, data_size * 2, 16, num_channels, widened)

    return WavData(sample_rate, data_size, bits_per_sample, num_channels, raw)